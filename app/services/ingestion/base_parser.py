"""Abstract base class for all payment instruction parsers."""

from abc import ABC, abstractmethod

from app.schemas.instruction import PaymentInstruction


class ParseError(ValueError):
    """Raised when an uploaded file is not a usable payment instruction.

    Both the XML and the JSON paths surface this single error type so
    callers never need to know which format was attempted.
    """


class BaseParser(ABC):
    """Base interface that every instruction-format parser must implement.

    Each parser is responsible for:
    1. Reading decoded file text in its format (pain.001 XML, JSON, ...)
    2. Normalizing fields into our internal PaymentInstruction schema
    3. Failing loudly with ParseError: a half-parsed payroll is never returned
    """

    format_name: str

    @abstractmethod
    def parse(self, content: str) -> PaymentInstruction:
        """Parse file content and return a normalized payment instruction.

        Args:
            content: Decoded text of the uploaded file.

        Returns:
            A frozen PaymentInstruction ready for validation.

        Raises:
            ParseError: If the content is malformed or structurally invalid.
        """
        pass
