"""ISO 20022 pain.001 XML payment instruction parser."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.schemas.instruction import Employee, Initiator, Payment, PaymentInstruction
from app.services.ingestion.base_parser import BaseParser, ParseError
from app.services.ingestion.normalizer import (
    as_list,
    attr_of,
    dig,
    element_to_tree,
    local_name,
    parse_decimal,
    parse_int,
    text_of,
    utc_now_iso,
)

logger = get_logger(__name__)


class Pain001XmlParser(BaseParser):
    """Parser for ISO 20022 customer credit transfer initiation files.

    Expected XML structure::

        <Document xmlns="urn:iso:std:iso:20022:tech:xsd:pain.001.001.03">
          <CstmrCdtTrfInitn>
            <GrpHdr>
              <MsgId>PAYROLL-2024-01</MsgId>
              <CreDtTm>2024-01-31T09:00:00</CreDtTm>
              <NbOfTxs>2</NbOfTxs>
              <CtrlSum>3500.00</CtrlSum>
              <InitgPty><Nm>Acme Corp</Nm><Id><OrgId><Othr><Id>ACME</Id></Othr></OrgId></Id></InitgPty>
            </GrpHdr>
            <PmtInf>
              <CdtTrfTxInf>
                <PmtId><EndToEndId>EMP-001</EndToEndId></PmtId>
                <Amt><InstdAmt Ccy="USD">1500.00</InstdAmt></Amt>
                <Cdtr><Nm>Alice</Nm></Cdtr>
                <CdtrAcct><Id><Othr><Id>0xabc...</Id></Othr></Id></CdtrAcct>
                <RmtInf><Ustrd>January salary</Ustrd></RmtInf>
              </CdtTrfTxInf>
              ...
            </PmtInf>
          </CstmrCdtTrfInitn>
        </Document>

    The format carries no token field, so every payment (and the batch fee
    token) is the configured primary stablecoin.
    """

    format_name: str = "pain.001 XML"

    def __init__(self, config: Settings = settings) -> None:
        self.config = config

    def parse(self, content: str) -> PaymentInstruction:
        """Parse pain.001 XML text into a PaymentInstruction."""
        try:
            root = ET.fromstring(content)
        except ET.ParseError as exc:
            raise ParseError(f"Malformed XML: {exc}") from exc

        tree = {local_name(root.tag): element_to_tree(root)}
        initiation = dig(tree, "Document", "CstmrCdtTrfInitn")
        if not isinstance(initiation, dict):
            raise ParseError(
                "Invalid pain.001 XML format: Missing Document/CstmrCdtTrfInitn"
            )

        grp_hdr = initiation.get("GrpHdr")
        pmt_inf = initiation.get("PmtInf")
        if not grp_hdr or not pmt_inf:
            raise ParseError("Invalid pain.001 XML format: Missing GrpHdr or PmtInf")

        # A lone CdtTrfTxInf (or PmtInf) arrives as a dict, several as a list
        transactions: list[Any] = []
        for block in as_list(pmt_inf):
            transactions.extend(as_list(dig(block, "CdtTrfTxInf")))

        payments = tuple(
            self._parse_transaction(txn, idx) for idx, txn in enumerate(transactions)
        )

        declared_count = parse_int(text_of(dig(grp_hdr, "NbOfTxs")))
        instruction = PaymentInstruction(
            message_id=text_of(dig(grp_hdr, "MsgId"), "UNKNOWN"),
            creation_date_time=text_of(dig(grp_hdr, "CreDtTm")) or utc_now_iso(),
            number_of_transactions=(
                declared_count if declared_count is not None else len(payments)
            ),
            control_sum=parse_decimal(text_of(dig(grp_hdr, "CtrlSum"))),
            initiator=Initiator(
                name=text_of(dig(grp_hdr, "InitgPty", "Nm"), "Unknown"),
                id=text_of(
                    dig(grp_hdr, "InitgPty", "Id", "OrgId", "Othr", "Id"), "UNKNOWN"
                ),
            ),
            fee_token=self.config.fee_token,
            payments=payments,
        )

        if instruction.control_sum is None:
            logger.warning(
                "pain.001 %s: CtrlSum absent or malformed", instruction.message_id
            )

        logger.info(
            "pain.001 XML parse complete: msg=%s payments=%d",
            instruction.message_id,
            len(payments),
        )
        return instruction

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _parse_transaction(self, txn: Any, idx: int) -> Payment:
        """Convert a single CdtTrfTxInf node to a Payment."""
        payment_id = text_of(dig(txn, "PmtId", "EndToEndId"), f"PAY-{idx + 1}")

        instd_amt = dig(txn, "Amt", "InstdAmt")
        amount = text_of(instd_amt, "0")
        currency = attr_of(instd_amt, "Ccy") or "USD"

        address = text_of(dig(txn, "CdtrAcct", "Id", "Othr", "Id"), "")
        name = text_of(dig(txn, "Cdtr", "Nm"), f"Employee {payment_id}")
        memo = text_of(dig(txn, "RmtInf", "Ustrd"), "")

        logger.debug(
            "Parsed CdtTrfTxInf %d: id=%s amount=%s %s", idx, payment_id, amount, currency
        )
        return Payment(
            id=payment_id,
            employee=Employee(name=name, address=address, employee_id=payment_id),
            amount=amount,
            currency=currency,
            token=self.config.primary_token,
            memo=memo,
        )
