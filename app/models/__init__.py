"""SQLAlchemy models for the Tempo payroll engine."""

from app.models.payroll_run import PayrollRun
from app.models.stored_value import StoredValue

__all__ = [
    "PayrollRun",
    "StoredValue",
]
