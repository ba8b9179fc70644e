"""Output options for the OPML encoder."""

from lxml import etree
from pydantic import BaseModel, Field, field_validator


class RenderOptions(BaseModel):
    """Controls how an encoded document is laid out.

    Options only change whitespace and the XML declaration; the decoded content
    of the output is the same for every combination.
    """

    xml_declaration: bool = Field(
        default=True,
        description="Write an <?xml ...?> declaration before the root element"
    )

    encoding: str = Field(
        default="UTF-8",
        description="Character encoding of the output bytes"
    )

    pretty_print: bool = Field(
        default=False,
        description="Put each element on its own indented line"
    )

    indent: str = Field(
        default="  ",
        description="Indentation unit used when pretty_print is set"
    )

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate lxml can serialise to the encoding."""
        # "unicode" makes lxml return str instead of bytes
        if v.lower() == "unicode":
            raise ValueError(f"Unknown encoding: {v}")
        try:
            etree.tostring(etree.Element("opml"), encoding=v)
        except (LookupError, ValueError):
            raise ValueError(f"Unknown encoding: {v}") from None
        return v

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: str) -> str:
        """Validate indent is made of spaces and tabs only."""
        if v.strip(" \t"):
            raise ValueError(f"Indent must contain only spaces and tabs: {v!r}")
        return v

    model_config = {"frozen": True}
