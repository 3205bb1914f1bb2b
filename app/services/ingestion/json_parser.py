"""Simplified JSON payment instruction parser."""

from __future__ import annotations

import json

from pydantic import ValidationError as SchemaError

from app.core.logging import get_logger
from app.schemas.instruction import PaymentInstruction
from app.services.ingestion.base_parser import BaseParser, ParseError

logger = get_logger(__name__)


class Pain001JsonParser(BaseParser):
    """Parser for the simplified JSON payroll format.

    Expected JSON structure::

        {
            "messageId": "PAYROLL-2024-01",
            "creationDateTime": "2024-01-31T09:00:00Z",
            "initiator": {"name": "Acme Corp", "id": "ACME"},
            "feeToken": "0x20c0000000000000000000000000000000000001",
            "payments": [
                {
                    "id": "EMP-001",
                    "employee": {"name": "Alice", "address": "0x...", "employeeId": "E1"},
                    "amount": "1500.00",
                    "currency": "USD",
                    "token": "0x20c0000000000000000000000000000000000001",
                    "memo": "January salary"
                }
            ]
        }

    Only ``messageId`` and a ``payments`` array are required; everything
    else falls back to schema defaults.
    """

    format_name: str = "JSON"

    def parse(self, content: str) -> PaymentInstruction:
        """Parse simplified JSON text into a PaymentInstruction."""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Invalid JSON: {exc}") from exc

        if (
            not isinstance(data, dict)
            or not data.get("messageId")
            or not isinstance(data.get("payments"), list)
        ):
            raise ParseError("Invalid JSON payment instruction format")

        try:
            instruction = PaymentInstruction.model_validate(data)
        except SchemaError as exc:
            raise ParseError(
                f"Invalid JSON payment instruction format: {exc.error_count()} "
                f"invalid field(s), first: {exc.errors()[0]['msg']}"
            ) from exc

        logger.info(
            "JSON parse complete: msg=%s payments=%d",
            instruction.message_id,
            len(instruction.payments),
        )
        return instruction
