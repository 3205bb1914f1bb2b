"""Tests for the simplified JSON payroll parser and format detection."""

import json
import os
from decimal import Decimal

import pytest

from app.core.config import ALPHA_USD
from app.services.ingestion.base_parser import ParseError
from app.services.ingestion.json_parser import Pain001JsonParser
from app.services.ingestion.pain001 import detect_parser, parse_instruction
from app.services.ingestion.xml_parser import Pain001XmlParser
from app.services.payroll.validator import validate_instruction

DATA_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data"
)
JSON_FILE = os.path.join(DATA_DIR, "sample_payroll.json")
XML_FILE = os.path.join(DATA_DIR, "sample_payroll.xml")


@pytest.fixture
def parser() -> Pain001JsonParser:
    return Pain001JsonParser()


@pytest.fixture
def json_text() -> str:
    with open(JSON_FILE, encoding="utf-8") as f:
        return f.read()


class TestParseValidJson:
    def test_parse_sample_file(self, parser: Pain001JsonParser, json_text: str):
        instruction = parser.parse(json_text)
        assert instruction.message_id == "PAYROLL-2024-02"
        assert instruction.number_of_transactions == 2
        assert instruction.control_sum == Decimal("3500.0")
        assert instruction.initiator.name == "Acme Corp"
        assert [p.id for p in instruction.payments] == ["EMP-001", "EMP-002"]

    def test_camel_case_fields(self, parser: Pain001JsonParser, json_text: str):
        payment = parser.parse(json_text).payments[1]
        assert payment.employee.employee_id == "E-1002"
        assert payment.employee.address == "0x2222222222222222222222222222222222222222"
        assert payment.memo == "February salary"

    def test_minimal_document_gets_defaults(self, parser: Pain001JsonParser):
        doc = json.dumps(
            {
                "messageId": "MIN",
                "payments": [{"id": "P1", "employee": {}, "amount": 25}],
            }
        )
        instruction = parser.parse(doc)
        assert instruction.number_of_transactions == 1
        assert instruction.control_sum is None
        assert instruction.fee_token == ALPHA_USD

        payment = instruction.payments[0]
        assert payment.amount == "25"
        assert payment.currency == "USD"
        assert payment.token == ALPHA_USD
        assert payment.memo is None

    def test_explicit_tokens_are_kept(self, parser: Pain001JsonParser):
        beta = "0x20c0000000000000000000000000000000000002"
        doc = json.dumps(
            {
                "messageId": "TOK",
                "feeToken": beta,
                "payments": [
                    {"id": "P1", "employee": {}, "amount": "1", "token": beta}
                ],
            }
        )
        instruction = parser.parse(doc)
        assert instruction.fee_token == beta
        assert instruction.payments[0].token == beta

    def test_non_numeric_control_sum_is_none(self, parser: Pain001JsonParser):
        doc = json.dumps({"messageId": "M", "controlSum": "n/a", "payments": []})
        assert parser.parse(doc).control_sum is None

    def test_numeric_identifiers_become_strings(self, parser: Pain001JsonParser):
        doc = json.dumps(
            {
                "messageId": 2024,
                "payments": [
                    {"id": 1, "employee": {"employeeId": 7}, "amount": "10"}
                ],
            }
        )
        instruction = parser.parse(doc)
        assert instruction.message_id == "2024"
        assert instruction.payments[0].id == "1"
        assert instruction.payments[0].employee.employee_id == "7"

    def test_missing_amount_is_left_for_validation(self, parser: Pain001JsonParser):
        doc = json.dumps({"messageId": "M", "payments": [{"id": "P1", "employee": {}}]})
        instruction = parser.parse(doc)
        assert instruction.payments[0].amount == ""

        warnings = validate_instruction(instruction, "100").warnings
        assert ("INVALID_AMOUNT", "P1") in [(w.code, w.payment_id) for w in warnings]


class TestJsonErrors:
    def test_invalid_json(self, parser: Pain001JsonParser):
        with pytest.raises(ParseError, match="Invalid JSON"):
            parser.parse("{not json")

    @pytest.mark.parametrize(
        "doc",
        [
            [],
            {"payments": []},
            {"messageId": "", "payments": []},
            {"messageId": "M"},
            {"messageId": "M", "payments": {"id": "P1"}},
        ],
    )
    def test_structure_rejected(self, parser: Pain001JsonParser, doc):
        with pytest.raises(ParseError, match="Invalid JSON payment instruction format"):
            parser.parse(json.dumps(doc))

    def test_payment_without_employee_rejected(self, parser: Pain001JsonParser):
        doc = json.dumps({"messageId": "M", "payments": [{"id": "P1", "amount": "1"}]})
        with pytest.raises(ParseError):
            parser.parse(doc)


class TestFormatDetection:
    def test_xml_declaration(self):
        assert isinstance(detect_parser('  <?xml version="1.0"?><Document/>'), Pain001XmlParser)

    def test_bare_document_root(self):
        assert isinstance(detect_parser("\n<Document></Document>"), Pain001XmlParser)

    def test_everything_else_is_json(self):
        assert isinstance(detect_parser('{"messageId": "M"}'), Pain001JsonParser)

    def test_parse_bytes_with_bom(self):
        with open(XML_FILE, "rb") as f:
            content = b"\xef\xbb\xbf" + f.read()
        instruction = parse_instruction(content)
        assert instruction.message_id == "PAYROLL-2024-01"

    def test_both_formats_normalize_alike(self, json_text: str):
        instruction = parse_instruction(json_text)
        assert instruction.payments[0].employee.name == "Alice Johnson"

    @pytest.mark.parametrize(
        "content",
        ["", "plain text", "<?xml version='1.0'?><broken", '{"messageId": "M"}'],
    )
    def test_failures_surface_as_parse_error(self, content: str):
        with pytest.raises(ParseError, match="Failed to parse payment instruction"):
            parse_instruction(content)
