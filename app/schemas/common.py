"""Shared pydantic configuration for wire-facing schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys.

    Payroll files and status reports use camelCase field names on the wire
    (``messageId``, ``creationDateTime``...).  Python code keeps snake_case
    attributes; ``populate_by_name`` lets either spelling in.  Hand-written
    JSON files often carry ids as numbers, so numbers are accepted for
    string fields.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    def to_wire(self) -> dict:
        """Dump using wire (camelCase) keys and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)
