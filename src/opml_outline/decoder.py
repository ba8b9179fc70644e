"""OPML decoder: wire bytes to the typed document model.

The generic markup work (tokenizing, character encodings, entities) is left to
lxml. This module maps the resulting element tree onto :class:`Document` and
:class:`Outline`, applying the per-field parse rules. Decoding is all-or-nothing:
the first invalid field aborts with a FieldValidationError.
"""

from io import BytesIO
from typing import BinaryIO, Callable, Iterator, Optional, TypeVar

import structlog
from lxml import etree

from opml_outline.exceptions import FieldValidationError, StructuralError
from opml_outline.fieldtypes import (
    Url,
    parse_boolean,
    parse_integer,
    parse_integer_list,
    parse_string_list,
)
from opml_outline.model import Document, Outline
from opml_outline.timestamps import parse_timestamp

logger = structlog.get_logger()

T = TypeVar("T")


def _make_parser() -> etree.XMLParser:
    # One parser per call; lxml parsers must not be shared between threads.
    # Only entities declared in the internal subset are expanded
    return etree.XMLParser(
        resolve_entities="internal",
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _children(element: etree._Element, name: str) -> Iterator[etree._Element]:
    """Yield child elements with the given local name, in document order."""
    for child in element.iterchildren(tag=etree.Element):
        if _local_name(child) == name:
            yield child


def _first_child(element: etree._Element, name: str) -> Optional[etree._Element]:
    return next(_children(element, name), None)


def _element_text(element: etree._Element) -> str:
    """Character data directly inside an element (nested elements skipped)."""
    return (element.text or "") + "".join(child.tail or "" for child in element)


class Decoder:
    """Decodes one OPML document from a binary stream.

    The stream is read to the end; opening and closing it is up to the caller.

    Example:
        >>> with open("states.opml", "rb") as f:
        ...     document = Decoder(f).decode()
        >>> document.title
        'states.opml'
    """

    def __init__(self, source: BinaryIO):
        self.source = source

    def decode(self) -> Document:
        """Read and decode the whole stream.

        Returns:
            Decoded Document

        Raises:
            StructuralError: If the input is not well-formed OPML markup
            FieldValidationError: If a field value fails its parse rule
        """
        try:
            tree = etree.parse(self.source, _make_parser())
        except etree.XMLSyntaxError as e:
            logger.debug("opml_markup_invalid", error=str(e))
            raise StructuralError(f"Malformed markup: {e}") from e

        root = tree.getroot()
        unresolved = next(root.iter(etree.Entity), None)
        if unresolved is not None:
            logger.debug("opml_markup_invalid", error="unresolved entity", entity=unresolved.text)
            raise StructuralError(f"Unresolved entity reference {unresolved.text}")

        document = self._decode_root(root)
        logger.debug(
            "opml_decoded",
            version=document.version,
            outlines=sum(1 for _ in document.walk()),
        )
        return document

    def _decode_root(self, root: etree._Element) -> Document:
        if _local_name(root) != "opml":
            raise StructuralError(f"Expected <opml> root element, found <{_local_name(root)}>")

        document = Document(version=root.get("version", ""))

        head = _first_child(root, "head")
        if head is not None:
            self._decode_head(head, document)

        body = _first_child(root, "body")
        if body is not None:
            document.outlines = [self._decode_outline(child) for child in _children(body, "outline")]

        return document

    def _decode_head(self, head: etree._Element, document: Document) -> None:
        document.title = self._head_text(head, "title")
        document.date_created = self._head_value(head, "dateCreated", parse_timestamp, "timestamp")
        document.date_modified = self._head_value(head, "dateModified", parse_timestamp, "timestamp")
        document.owner_name = self._head_text(head, "ownerName")
        document.owner_email = self._head_text(head, "ownerEmail")
        document.owner_id = self._head_value(head, "ownerId", Url.parse, "url")
        document.docs = self._head_value(head, "docs", Url.parse, "url")
        document.expansion_state = self._head_value(
            head, "expansionState", parse_integer_list, "integer-list", allow_blank=True
        )
        document.vert_scroll_state = self._head_value(head, "vertScrollState", parse_integer, "integer")
        document.window_top = self._head_value(head, "windowTop", parse_integer, "integer")
        document.window_left = self._head_value(head, "windowLeft", parse_integer, "integer")
        document.window_bottom = self._head_value(head, "windowBottom", parse_integer, "integer")
        document.window_right = self._head_value(head, "windowRight", parse_integer, "integer")

    def _head_text(self, head: etree._Element, name: str) -> Optional[str]:
        element = _first_child(head, name)
        if element is None:
            return None
        return _element_text(element)

    def _head_value(
        self,
        head: etree._Element,
        name: str,
        parse: Callable[[str], T],
        rule: str,
        allow_blank: bool = False,
    ) -> Optional[T]:
        """Parse a typed header element.

        A missing element is None. A present but blank element is also None
        unless allow_blank is set (expansionState distinguishes "" from absent).
        """
        text = self._head_text(head, name)
        if text is None:
            return None
        if not text.strip() and not allow_blank:
            return None
        return _convert(f"head.{name}", text, parse, rule)

    def _decode_outline(self, element: etree._Element) -> Outline:
        text = element.get("text")
        if not text:
            logger.debug("opml_field_invalid", field="outline.text", rule="required")
            raise FieldValidationError("outline.text", text, "required", "outline text is required")

        return Outline(
            text=text,
            type=element.get("type"),
            is_comment=_attribute(element, "isComment", parse_boolean, "boolean") or False,
            is_breakpoint=_attribute(element, "isBreakpoint", parse_boolean, "boolean") or False,
            created=_attribute(element, "created", parse_timestamp, "timestamp"),
            categories=_attribute(element, "category", parse_string_list, "string-list"),
            xml_url=_attribute(element, "xmlUrl", Url.parse, "url"),
            description=element.get("description"),
            html_url=_attribute(element, "htmlUrl", Url.parse, "url"),
            language=element.get("language"),
            title=element.get("title"),
            version=element.get("version"),
            url=_attribute(element, "url", Url.parse, "url"),
            children=[self._decode_outline(child) for child in _children(element, "outline")],
        )


def _attribute(
    element: etree._Element, name: str, parse: Callable[[str], T], rule: str
) -> Optional[T]:
    value = element.get(name)
    if value is None:
        return None
    return _convert(f"outline.{name}", value, parse, rule)


def _convert(field: str, text: str, parse: Callable[[str], T], rule: str) -> T:
    """Apply a parse rule, reporting failures as FieldValidationError."""
    try:
        return parse(text)
    except ValueError as e:
        logger.debug("opml_field_invalid", field=field, value=text, rule=rule)
        raise FieldValidationError(field, text, rule, str(e)) from e


def decode(source: BinaryIO) -> Document:
    """Decode an OPML document from a binary stream.

    Args:
        source: Readable binary file-like object

    Returns:
        Decoded Document

    Raises:
        StructuralError: If the input is not well-formed OPML markup
        FieldValidationError: If a field value fails its parse rule
    """
    return Decoder(source).decode()


def decode_bytes(data: bytes) -> Document:
    """Decode an OPML document held in memory.

    The encoding is taken from the XML declaration (UTF-8 if none).
    """
    return Decoder(BytesIO(data)).decode()
