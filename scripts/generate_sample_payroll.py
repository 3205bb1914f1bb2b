#!/usr/bin/env python3
"""
Generate sample payroll files for the Tempo payroll engine.

Creates:
  - data/generated_payroll.json    (simplified JSON instruction, 25 employees)
  - data/generated_payroll.xml     (the same batch as pain.001.001.03 XML)
  - data/generated_manifest.json   (every planted validation issue)

Planted issues: one duplicate address, one large amount, one small amount
and one missing memo.  Reproducible: uses random.Random(42).
"""

from __future__ import annotations

import json
import random
import xml.dom.minidom as minidom
import xml.etree.ElementTree as ET
from decimal import Decimal
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SEED = 42

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = PROJECT_ROOT / "data"

PAIN_001_NAMESPACE = "urn:iso:std:iso:20022:tech:xsd:pain.001.001.03"

FIRST_NAMES = [
    "Alice", "Bob", "Carol", "Dan", "Erin", "Frank", "Grace", "Heidi",
    "Ivan", "Judy", "Mallory", "Niaj", "Olivia", "Peggy", "Rupert", "Sybil",
]
LAST_NAMES = ["Johnson", "Smith", "Diaz", "Nakamura", "Okafor", "Silva", "Kowalski"]

SALARY_RANGE = (2500.0, 9000.0)
LARGE_AMOUNT = "150000.00"
SMALL_AMOUNT = "0.50"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _random_address(rng: random.Random) -> str:
    return "0x" + "".join(rng.choice("0123456789abcdef") for _ in range(40))


def _random_salary(rng: random.Random) -> str:
    return f"{rng.uniform(*SALARY_RANGE):.2f}"


# ---------------------------------------------------------------------------
# Step 1: Build the instruction (with planted issues)
# ---------------------------------------------------------------------------


def generate_payroll(
    count: int = 25,
    rng: random.Random | None = None,
    message_id: str = "PAYROLL-GEN-001",
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Build a JSON-shaped instruction and the manifest of planted issues."""
    rng = rng or random.Random(SEED)
    if count < 5:
        raise ValueError("Need at least 5 payments to plant every issue")

    payments: list[dict[str, Any]] = []
    for idx in range(count):
        name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
        payments.append(
            {
                "id": f"EMP-{idx + 1:03d}",
                "employee": {
                    "name": name,
                    "address": _random_address(rng),
                    "employeeId": f"E-{1000 + idx + 1}",
                },
                "amount": _random_salary(rng),
                "currency": "USD",
                "memo": "Monthly salary",
            }
        )

    # The validator flags the later occurrence of a repeated address
    duplicate_of, duplicate = sorted(rng.sample(range(count), 2))
    remaining = [i for i in range(count) if i not in (duplicate_of, duplicate)]
    large, small, no_memo = rng.sample(remaining, 3)

    payments[duplicate]["employee"]["address"] = payments[duplicate_of]["employee"][
        "address"
    ]
    payments[large]["amount"] = LARGE_AMOUNT
    payments[small]["amount"] = SMALL_AMOUNT
    payments[no_memo]["memo"] = ""

    control_sum = sum(Decimal(p["amount"]) for p in payments)
    instruction = {
        "messageId": message_id,
        "creationDateTime": "2024-03-29T09:00:00Z",
        "numberOfTransactions": count,
        "controlSum": f"{control_sum:.2f}",
        "initiator": {"name": "Acme Corp", "id": "ACME-001"},
        "payments": payments,
    }
    manifest = {
        "seed": SEED,
        "messageId": message_id,
        "controlSum": f"{control_sum:.2f}",
        "issues": [
            {
                "code": "DUPLICATE_ADDRESS",
                "paymentId": payments[duplicate]["id"],
                "duplicateOf": payments[duplicate_of]["id"],
            },
            {"code": "LARGE_AMOUNT", "paymentId": payments[large]["id"]},
            {"code": "SMALL_AMOUNT", "paymentId": payments[small]["id"]},
            {"code": "MISSING_MEMO", "paymentId": payments[no_memo]["id"]},
        ],
    }
    return instruction, manifest


# ---------------------------------------------------------------------------
# Step 2: Render as pain.001 XML
# ---------------------------------------------------------------------------


def build_pain001_xml(instruction: dict[str, Any]) -> str:
    """Render a JSON-shaped instruction as pretty-printed pain.001 XML."""
    root = ET.Element("Document", xmlns=PAIN_001_NAMESPACE)
    initn = ET.SubElement(root, "CstmrCdtTrfInitn")

    grp_hdr = ET.SubElement(initn, "GrpHdr")
    ET.SubElement(grp_hdr, "MsgId").text = instruction["messageId"]
    ET.SubElement(grp_hdr, "CreDtTm").text = instruction["creationDateTime"]
    ET.SubElement(grp_hdr, "NbOfTxs").text = str(instruction["numberOfTransactions"])
    ET.SubElement(grp_hdr, "CtrlSum").text = instruction["controlSum"]
    initg_pty = ET.SubElement(grp_hdr, "InitgPty")
    ET.SubElement(initg_pty, "Nm").text = instruction["initiator"]["name"]
    org = ET.SubElement(ET.SubElement(initg_pty, "Id"), "OrgId")
    ET.SubElement(ET.SubElement(org, "Othr"), "Id").text = instruction["initiator"]["id"]

    pmt_inf = ET.SubElement(initn, "PmtInf")
    ET.SubElement(pmt_inf, "PmtInfId").text = f"{instruction['messageId']}-1"
    ET.SubElement(pmt_inf, "PmtMtd").text = "TRF"

    for payment in instruction["payments"]:
        txn = ET.SubElement(pmt_inf, "CdtTrfTxInf")
        ET.SubElement(ET.SubElement(txn, "PmtId"), "EndToEndId").text = payment["id"]
        amt = ET.SubElement(txn, "Amt")
        ET.SubElement(amt, "InstdAmt", Ccy=payment["currency"]).text = payment["amount"]
        ET.SubElement(ET.SubElement(txn, "Cdtr"), "Nm").text = payment["employee"]["name"]
        acct_id = ET.SubElement(ET.SubElement(txn, "CdtrAcct"), "Id")
        ET.SubElement(ET.SubElement(acct_id, "Othr"), "Id").text = payment["employee"][
            "address"
        ]
        if payment["memo"]:
            ET.SubElement(ET.SubElement(txn, "RmtInf"), "Ustrd").text = payment["memo"]

    raw = ET.tostring(root, encoding="unicode")
    return minidom.parseString(raw).toprettyxml(indent="  ", encoding=None)


def main() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)

    print("=" * 70)
    print("Tempo Payroll Engine - Sample Payroll Generator")
    print(f"Seed: {SEED}")
    print("=" * 70)

    instruction, manifest = generate_payroll()

    json_path = DATA_DIR / "generated_payroll.json"
    with open(json_path, "w") as f:
        json.dump(instruction, f, indent=2)
    print(f"  -> {json_path.name}: {len(instruction['payments'])} payments")

    xml_path = DATA_DIR / "generated_payroll.xml"
    with open(xml_path, "w") as f:
        f.write(build_pain001_xml(instruction))
    print(f"  -> {xml_path.name}: control sum {instruction['controlSum']}")

    manifest_path = DATA_DIR / "generated_manifest.json"
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)

    print("\nPlanted issues:")
    for issue in manifest["issues"]:
        print(f"  - {issue['code']}: {issue['paymentId']}")
    print("\nDone!")


if __name__ == "__main__":
    main()
