"""Wire conversions for OPML attribute and element values.

Each value kind that is text on the wire but typed in the model gets a parse
function (text to value) and a format function (value to text). Parse functions
raise ValueError; the decoder turns that into a FieldValidationError carrying
the field location.
"""

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

_INTEGER = re.compile(r"[+-]?[0-9]+\Z")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# Anything outside the XML 1.0 Char production
_NON_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def check_xml_text(value: Optional[str], name: str) -> None:
    """Check a string can be carried in an XML document.

    Raises:
        ValueError: If the string holds NUL, control or other non-XML characters
    """
    if value is not None and _NON_XML_CHARS.search(value):
        raise ValueError(f"{name} contains characters XML cannot carry: {value!r}")


@dataclass(frozen=True)
class Url:
    """Syntactically valid URL, kept as its five generic components.

    The value is not resolved or interpreted; relative references are allowed.

    Attributes:
        scheme: URL scheme ("" for relative references)
        netloc: Authority (user info, host, port)
        path: Hierarchical path
        query: Query string without the leading "?"
        fragment: Fragment without the leading "#"
    """

    scheme: str = ""
    netloc: str = ""
    path: str = ""
    query: str = ""
    fragment: str = ""

    def __post_init__(self):
        for name in ("scheme", "netloc", "path", "query", "fragment"):
            check_xml_text(getattr(self, name), f"Url {name}")

    @classmethod
    def parse(cls, text: str) -> "Url":
        """Parse URL text, checking it against the generic URL grammar.

        Args:
            text: URL text (surrounding whitespace is ignored)

        Returns:
            Parsed Url

        Raises:
            ValueError: If the text is not a syntactically valid URL

        Examples:
            >>> Url.parse("http://news.com.com/2547-1_3-0-5.xml").netloc
            'news.com.com'
        """
        candidate = text.strip()
        if _CONTROL_CHARS.search(candidate):
            raise ValueError("invalid control character in URL")
        if _BAD_PERCENT.search(candidate):
            raise ValueError("invalid URL escape")
        if candidate.startswith(":"):
            raise ValueError("missing protocol scheme")

        # urlsplit rejects unbalanced IPv6 brackets; .port rejects bad ports
        split = urlsplit(candidate)
        split.port

        if not split.scheme and not split.netloc:
            first_segment = split.path.split("/", 1)[0]
            if ":" in first_segment:
                raise ValueError("first path segment in URL cannot contain colon")

        return cls._from_split(split)

    @classmethod
    def _from_split(cls, split: SplitResult) -> "Url":
        return cls(
            scheme=split.scheme,
            netloc=split.netloc,
            path=split.path,
            query=split.query,
            fragment=split.fragment,
        )

    def __str__(self) -> str:
        if self.netloc or not self.path.startswith("//"):
            return urlunsplit((self.scheme, self.netloc, self.path, self.query, self.fragment))

        # A path starting with "//" needs an explicit empty authority, or it
        # would read back as one
        text = f"{self.scheme}:" if self.scheme else ""
        text += "//" + self.path
        if self.query:
            text += "?" + self.query
        if self.fragment:
            text += "#" + self.fragment
        return text


def parse_integer(text: str) -> int:
    """Parse a base-10 integer with optional sign.

    Raises:
        ValueError: If the text is not an integer
    """
    candidate = text.strip()
    if not _INTEGER.match(candidate):
        raise ValueError(f"not an integer: {text!r}")
    return int(candidate)


def format_integer(value: int) -> str:
    return str(value)


def parse_integer_list(text: str) -> list[int]:
    """Parse a comma-separated integer list.

    Tokens are trimmed and empty tokens skipped, so "1, 6,,13" gives
    [1, 6, 13] and "" gives [].

    Raises:
        ValueError: If any non-empty token is not an integer
    """
    values = []
    for token in text.split(","):
        trimmed = token.strip()
        if not trimmed:
            continue
        values.append(parse_integer(trimmed))
    return values


def format_integer_list(values: list[int]) -> str:
    return ",".join(format_integer(value) for value in values)


def parse_string_list(text: str) -> Optional[list[str]]:
    """Parse a comma-separated string list (the category attribute).

    Tokens are trimmed and empty tokens skipped. A value with no tokens left
    gives None, the same as a missing attribute.
    """
    values = [token.strip() for token in text.split(",") if token.strip()]
    return values or None


def format_string_list(values: list[str]) -> str:
    return ",".join(values)


def parse_boolean(text: str) -> bool:
    """Parse a boolean attribute.

    A blank value is False.

    Raises:
        ValueError: If the text is not a recognised boolean spelling
    """
    candidate = text.strip()
    if not candidate:
        return False
    if candidate in _TRUE:
        return True
    if candidate in _FALSE:
        return False
    raise ValueError(f"not a boolean: {text!r}")


def format_boolean(value: bool) -> str:
    return "true" if value else "false"
