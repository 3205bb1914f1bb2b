"""Serializers for PaymentStatusReport: pain.002 XML, CSV and JSON.

All exporters are pure and return strings.  Field values come from user
uploads (names, memos, error messages), so XML is built with ElementTree
and CSV with the ``csv`` module: both escape metacharacters for us.
"""

from __future__ import annotations

import csv
import io
import re
import xml.etree.ElementTree as ET

from app.schemas.report import PaymentResult, PaymentStatusReport

PAIN_002_NAMESPACE = "urn:iso:std:iso:20022:tech:xsd:pain.002.001.03"
ORIGINAL_MESSAGE_NAME = "pain.001.001.03"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Report status -> ISO 20022 group status code
GROUP_STATUS_CODES: dict[str, str] = {
    "COMPLETED": "ACCP",
    "PARTIALLY_COMPLETED": "PART",
    "FAILED": "RJCT",
}

CSV_HEADERS: list[str] = [
    "Payment ID",
    "Employee Name",
    "Employee Address",
    "Amount",
    "Status",
    "Transaction Hash",
    "Block Number",
    "Timestamp",
    "Gas Used",
    "Error Message",
    "Explorer URL",
]

MEDIA_TYPES: dict[str, str] = {
    "xml": "application/xml",
    "csv": "text/csv",
    "json": "application/json",
}

# Characters outside the XML 1.0 Char production
_XML_ILLEGAL_RE = re.compile(
    "[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)
_LINE_BREAK_RE = re.compile(r"[\r\n]+")


# ── XML (pain.002) ──────────────────────────────────────────────────


def _sub(parent: ET.Element, tag: str, text: object = None) -> ET.Element:
    el = ET.SubElement(parent, tag)
    if text is not None:
        el.text = _XML_ILLEGAL_RE.sub("", str(text))
    return el


def _transaction_status(parent: ET.Element, payment: PaymentResult) -> None:
    """Append one TxInfAndSts block for a payment."""
    tx = _sub(parent, "TxInfAndSts")
    _sub(tx, "OrgnlEndToEndId", payment.id)

    if payment.status == "COMPLETED":
        _sub(tx, "TxSts", "ACCP")
        _sub(tx, "AccptncDtTm", payment.timestamp or "")
        reason = _sub(tx, "StsRsnInf")
        _sub(reason, "AddtlInf", f"Transaction Hash: {payment.transaction_hash}")
        _sub(reason, "AddtlInf", f"Block Number: {payment.block_number}")
        _sub(reason, "AddtlInf", f"Explorer: {payment.explorer_url}")
    else:
        _sub(tx, "TxSts", "RJCT")
        reason = _sub(tx, "StsRsnInf")
        _sub(_sub(reason, "Rsn"), "Cd", payment.error_code or "")
        _sub(reason, "AddtlInf", payment.error_message or "")


def to_xml(report: PaymentStatusReport) -> str:
    """Render the report as an ISO 20022 pain.002.001.03 document."""
    status_code = GROUP_STATUS_CODES[report.status]

    document = ET.Element("Document", {"xmlns": PAIN_002_NAMESPACE})
    status_report = _sub(document, "CstmrPmtStsRpt")

    grp_hdr = _sub(status_report, "GrpHdr")
    _sub(grp_hdr, "MsgId", report.message_id)
    _sub(grp_hdr, "CreDtTm", report.creation_date_time)

    group = _sub(status_report, "OrgnlGrpInfAndSts")
    _sub(group, "OrgnlMsgId", report.original_message_id)
    _sub(group, "OrgnlMsgNmId", ORIGINAL_MESSAGE_NAME)
    _sub(group, "GrpSts", status_code)

    pmt_inf = _sub(status_report, "OrgnlPmtInfAndSts")
    _sub(pmt_inf, "OrgnlPmtInfId", report.original_message_id)
    _sub(pmt_inf, "PmtInfSts", status_code)
    for count, code in (
        (report.number_of_successful, "ACCP"),
        (report.number_of_failed, "RJCT"),
    ):
        per_status = _sub(pmt_inf, "NbOfTxsPerSts")
        _sub(per_status, "DtldNbOfTxs", count)
        _sub(per_status, "DtldSts", code)

    for payment in report.payments:
        _transaction_status(pmt_inf, payment)

    ET.indent(document, space="  ")
    return XML_DECLARATION + ET.tostring(document, encoding="unicode")


# ── CSV ─────────────────────────────────────────────────────────────


def _one_line(value: str) -> str:
    return _LINE_BREAK_RE.sub(" ", value)


def _csv_row(payment: PaymentResult) -> list[str]:
    """Cells for one payment, each kept on a single physical line."""
    cells = [
        payment.id,
        payment.employee.name,
        payment.employee.address,
        payment.amount,
        payment.status,
        payment.transaction_hash or "",
        str(payment.block_number) if payment.block_number is not None else "",
        payment.timestamp or "",
        payment.gas_used or "",
        payment.error_message or "",
        payment.explorer_url or "",
    ]
    return [_one_line(cell) for cell in cells]


def to_csv(report: PaymentStatusReport) -> str:
    """One header line plus one fully-quoted row per payment."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    writer.writerows(_csv_row(p) for p in report.payments)
    return buffer.getvalue().rstrip("\n")


# ── JSON ────────────────────────────────────────────────────────────


def to_json(report: PaymentStatusReport) -> str:
    """Direct camelCase dump; ``model_validate_json`` reads it back."""
    return report.model_dump_json(by_alias=True, indent=2)


_EXPORTERS = {"xml": to_xml, "csv": to_csv, "json": to_json}


def export_report(report: PaymentStatusReport, fmt: str) -> tuple[str, str, str]:
    """Render ``report`` in ``fmt`` for download.

    Returns:
        ``(body, media_type, filename)``.

    Raises:
        ValueError: If ``fmt`` is not xml, csv or json.
    """
    key = fmt.strip().lower()
    exporter = _EXPORTERS.get(key)
    if exporter is None:
        raise ValueError(
            f"Unknown export format {fmt!r}. Supported: {', '.join(_EXPORTERS)}"
        )
    filename = f"payroll-status-{report.original_message_id}.{key}"
    return exporter(report), MEDIA_TYPES[key], filename
