"""Payroll endpoints.

Handles pain.001 uploads (XML or JSON), validation against the caller's
balance, recording execution results as pain.002 status reports, and
exporting stored reports as XML, CSV or JSON.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.logging import get_logger
from app.models.payroll_run import PayrollRun
from app.schemas.payroll import (
    PayrollRunResponse,
    PayrollRunSummary,
    ReportRequest,
    UploadResponse,
    ValidateRequest,
)
from app.schemas.validation import ValidationResult
from app.services.ingestion.base_parser import ParseError
from app.services.ingestion.pain001 import parse_instruction
from app.services.payroll.exporters import export_report
from app.services.payroll.report import generate_report
from app.services.payroll.runs import get_run, list_runs, report_of, save_run
from app.services.payroll.validator import validate_instruction

logger = get_logger(__name__)

router = APIRouter()


def _load_run(db: Session, run_id: UUID) -> PayrollRun:
    run = get_run(db, run_id)
    if run is None:
        raise HTTPException(status_code=404, detail=f"Payroll run '{run_id}' not found")
    return run


@router.post("/upload", response_model=UploadResponse)
async def upload_payroll_file(
    file: UploadFile = File(...),
    available_balance: str = Query(
        "0", description="Spendable balance of the payment token"
    ),
) -> UploadResponse:
    """Upload a pain.001 XML or simplified JSON payroll file.

    The file is parsed and validated; nothing is executed.  Validation
    errors are returned in the body, only unreadable files are rejected.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    filename = file.filename or "unknown"
    logger.info("Received payroll upload: file=%s size=%d", filename, len(content))

    try:
        instruction = parse_instruction(content)
    except ParseError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    validation = validate_instruction(instruction, available_balance)
    return UploadResponse(instruction=instruction, validation=validation)


@router.post("/validate", response_model=ValidationResult)
def validate_payroll(body: ValidateRequest) -> ValidationResult:
    """Validate an instruction against a (possibly refreshed) balance."""
    return validate_instruction(body.instruction, body.available_balance)


@router.post("/reports", response_model=PayrollRunResponse, status_code=201)
def record_payroll_run(
    body: ReportRequest,
    db: Session = Depends(get_db),
) -> PayrollRunResponse:
    """Build a status report from execution results and store it."""
    report = generate_report(
        body.instruction,
        body.results,
        body.execution_time_ms,
        body.total_fees,
    )
    run = save_run(db, report)
    return PayrollRunResponse(id=run.id, created_at=run.created_at, report=report)


@router.get("/reports", response_model=List[PayrollRunSummary])
def list_payroll_runs(db: Session = Depends(get_db)) -> list[PayrollRun]:
    """List stored payroll runs, newest first."""
    return list_runs(db)


@router.get("/reports/{run_id}", response_model=PayrollRunResponse)
def get_payroll_run(
    run_id: UUID,
    db: Session = Depends(get_db),
) -> PayrollRunResponse:
    """Retrieve a stored run with its full status report."""
    run = _load_run(db, run_id)
    return PayrollRunResponse(id=run.id, created_at=run.created_at, report=report_of(run))


@router.get("/reports/{run_id}/export")
def export_payroll_run(
    run_id: UUID,
    format: str = Query("xml", description="Export format: xml, csv, or json"),
    db: Session = Depends(get_db),
) -> Response:
    """Download a stored report as pain.002 XML, CSV, or JSON."""
    run = _load_run(db, run_id)
    try:
        body, media_type, filename = export_report(report_of(run), format)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    logger.info("Exporting payroll run %s as %s", run_id, format)
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
