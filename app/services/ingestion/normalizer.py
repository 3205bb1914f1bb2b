"""Normalizer utility functions for payment instruction data.

These functions provide a single place to handle the messy reality of
XML-derived trees: a field may arrive as a bare string or as a wrapper
dict holding its text under ``#text`` next to ``@attribute`` keys,
depending on whether the element carried attributes.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, getcontext
from typing import Any, Optional, Union

from app.core.logging import get_logger

logger = get_logger(__name__)

TEXT_KEY = "#text"
ATTR_PREFIX = "@"

# A leaf of the generic XML tree: plain text, or a wrapper dict that carries
# attributes and/or children alongside its ``#text``.
TextOrWrapped = Union[str, dict[str, Any], None]

_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on qualified tags."""
    return tag.rsplit("}", 1)[-1]


def element_to_tree(el: ET.Element) -> TextOrWrapped:
    """Convert an XML element into a generic dict tree.

    Leaves without attributes collapse to their text; everything else
    becomes a dict with ``@attr`` keys, child tags, and ``#text``.
    Repeated sibling tags become lists.  Values are never coerced: hex
    addresses and decimal amounts stay strings.
    """
    children = list(el)
    text = (el.text or "").strip()
    if not children and not el.attrib:
        return text

    node: dict[str, Any] = {
        f"{ATTR_PREFIX}{local_name(key)}": value for key, value in el.attrib.items()
    }
    for child in children:
        key = local_name(child.tag)
        value = element_to_tree(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]
    if text:
        node[TEXT_KEY] = text
    return node


def dig(tree: Any, *path: str) -> Any:
    """Walk nested dict keys, returning None as soon as a hop is missing."""
    node = tree
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def as_list(value: Any) -> list:
    """Normalize a lone node and a repeated node to the same list shape."""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_of(value: TextOrWrapped, default: Optional[str] = None) -> Optional[str]:
    """Extract text from a bare string or a wrapper dict.

    Args:
        value: A tree leaf: string, wrapper dict, or None.
        default: Returned when the value is absent or blank.

    Returns:
        The stripped text, or ``default``.
    """
    if isinstance(value, dict):
        if TEXT_KEY not in value:
            return default
        value = value[TEXT_KEY]
    if value is None:
        return default
    text = value.strip() if isinstance(value, str) else str(value).strip()
    return text if text else default


def attr_of(value: TextOrWrapped, name: str) -> Optional[str]:
    """Read an ``@name`` attribute from a wrapper dict, or None."""
    if isinstance(value, dict):
        return value.get(f"{ATTR_PREFIX}{name}")
    return None


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a decimal string, returning None unless it is finite.

    Values whose exponent falls outside the active decimal context are
    rejected too, so later arithmetic on them cannot overflow.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    if parsed and not getcontext().Emin <= parsed.adjusted() <= getcontext().Emax:
        return None
    return parsed


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer count, returning None on failure."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Could not parse integer: %r", value)
        return None


def normalize_address(address: Any) -> str:
    """Trim and lowercase a chain address for comparisons."""
    return str(address or "").strip().lower()


def is_valid_address(address: str) -> bool:
    """True for a ``0x``-prefixed 20-byte hex address."""
    return bool(_ADDRESS_RE.match(address or ""))


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
