"""Entry point for parsing uploaded payroll files.

Detects the format from the content itself and hands off to the matching
parser.  Whatever goes wrong underneath, callers see one ``ParseError``.
"""

from __future__ import annotations

from typing import Union

from app.core.config import Settings, settings
from app.core.logging import get_logger
from app.schemas.instruction import PaymentInstruction
from app.services.ingestion.base_parser import BaseParser, ParseError
from app.services.ingestion.json_parser import Pain001JsonParser
from app.services.ingestion.xml_parser import Pain001XmlParser

logger = get_logger(__name__)

_XML_PREFIXES = ("<?xml", "<Document")


def detect_parser(content: str, config: Settings = settings) -> BaseParser:
    """Pick the XML parser for XML-looking content, JSON otherwise."""
    if content.strip().startswith(_XML_PREFIXES):
        return Pain001XmlParser(config)
    return Pain001JsonParser()


def parse_instruction(
    content: Union[str, bytes],
    config: Settings = settings,
) -> PaymentInstruction:
    """Parse a pain.001 XML or simplified JSON payroll file.

    Args:
        content: Raw file content; bytes are decoded as UTF-8 (BOM tolerant).
        config: Settings supplying the default token addresses.

    Returns:
        The normalized, frozen PaymentInstruction.

    Raises:
        ParseError: For any failure on either format path.
    """
    try:
        if isinstance(content, bytes):
            content = content.decode("utf-8-sig")
        parser = detect_parser(content, config)
        return parser.parse(content)
    except Exception as exc:
        logger.warning("Payment instruction rejected: %s", exc)
        raise ParseError(f"Failed to parse payment instruction: {exc}") from exc
