"""Tempo Payroll Engine - Main Application."""

from fastapi import FastAPI

from app.api.routes import activity, payroll, recipients
from app.core.config import settings
from app.core.database import init_db
from app.core.logging import setup_logging

logger = setup_logging(settings.log_level)

logger.info("Creating database tables...")
init_db()
logger.info("Database tables ready")

tags_metadata = [
    {
        "name": "Health",
        "description": "Service health and readiness checks.",
    },
    {
        "name": "Payroll",
        "description": (
            "Upload ISO 20022 pain.001 payroll files (XML or simplified JSON), "
            "validate them against the available balance, record execution "
            "results as pain.002 status reports, and export stored reports."
        ),
    },
    {
        "name": "Recipients",
        "description": "Saved recipient address book with name and address search.",
    },
    {
        "name": "Activity",
        "description": "Log of on-chain actions taken from the dashboard.",
    },
]


app = FastAPI(
    title="Tempo Payroll Engine",
    description=(
        "## Stablecoin Payroll API\n\n"
        "Turns ISO 20022 pain.001 customer credit transfer files into "
        "stablecoin transfers on the Tempo testnet and reports the outcome "
        "as pain.002 payment status reports.\n\n"
        "### Validation codes\n"
        "- `NO_PAYMENTS` - the file contains no payments\n"
        "- `INSUFFICIENT_BALANCE` - total exceeds the available balance\n"
        "- `DUPLICATE_ADDRESS` - two payments target the same address\n"
        "- `INVALID_AMOUNT` - amount is missing, unreadable, zero or negative\n"
        "- `LARGE_AMOUNT`, `SMALL_AMOUNT`, `MISSING_MEMO` - warnings only\n\n"
        "### Quick Start\n"
        "```bash\n"
        "# 1. Upload and validate a payroll file\n"
        "curl -X POST '/api/v1/payroll/upload?available_balance=10000' "
        "-F file=@data/sample_payroll.xml\n\n"
        "# 2. Record execution results\n"
        "curl -X POST /api/v1/payroll/reports -H 'Content-Type: application/json' -d @results.json\n\n"
        "# 3. Export the status report\n"
        "curl '/api/v1/payroll/reports/<id>/export?format=xml'\n"
        "```\n"
    ),
    version="1.0.0",
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(payroll.router, prefix="/api/v1/payroll", tags=["Payroll"])
app.include_router(recipients.router, prefix="/api/v1/recipients", tags=["Recipients"])
app.include_router(activity.router, prefix="/api/v1/activity", tags=["Activity"])

logger.info("Tempo Payroll Engine API ready - routes registered")


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint.

    Returns a simple JSON object confirming the service is running.
    """
    return {"status": "healthy", "service": "tempo-payroll-engine"}
