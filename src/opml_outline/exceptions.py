"""Custom exceptions for the OPML codec."""

from typing import Optional


class OpmlError(Exception):
    """Base class for all OPML decoding failures."""


class StructuralError(OpmlError):
    """Raised when the input is not well-formed OPML markup.

    Covers unbalanced or invalid syntax, undecodable bytes, and documents whose
    root element is not ``<opml>``.
    """


class FieldValidationError(OpmlError):
    """Raised when a field is present but its value fails its parse rule.

    Attributes:
        field: Wire location of the field (e.g. "head.dateCreated", "outline.created")
        value: Offending raw text
        rule: Name of the rule that failed ("integer", "timestamp", "url", ...)
        message: Human-readable error message
    """

    def __init__(self, field: str, value: Optional[str], rule: str, message: str = ""):
        """Initialize FieldValidationError.

        Args:
            field: Wire location of the field
            value: Offending raw text (None when the field is missing)
            rule: Name of the rule that failed
            message: Optional detail from the underlying parser
        """
        self.field = field
        self.value = value
        self.rule = rule
        self.message = message or f"invalid {rule}"
        super().__init__(f"{field}: {self.message}: {value!r}")
