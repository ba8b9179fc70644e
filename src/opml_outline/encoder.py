"""OPML encoder: typed document model to wire bytes.

Absent fields are left out of the output entirely. Timestamps are always
written in the canonical RFC 1123 layout, whatever layout they were read from.
The encoder never modifies the Document it is given.
"""

from typing import BinaryIO, Optional

import structlog
from lxml import etree

from opml_outline.config import RenderOptions
from opml_outline.fieldtypes import (
    Url,
    format_boolean,
    format_integer,
    format_integer_list,
    format_string_list,
)
from opml_outline.model import Document, Outline
from opml_outline.timestamps import format_timestamp

logger = structlog.get_logger()


def _sub_element(parent: etree._Element, name: str, text: Optional[str]) -> None:
    if text is None:
        return
    etree.SubElement(parent, name).text = text


def _url_text(value: Optional[Url]) -> Optional[str]:
    return None if value is None else str(value)


class Encoder:
    """Encodes OPML documents to a binary sink.

    The sink is written to but never closed. It may be None when only
    :meth:`to_bytes` is used.

    Example:
        >>> with open("out.opml", "wb") as f:
        ...     Encoder(f, RenderOptions(pretty_print=True)).encode(document)
    """

    def __init__(self, sink: Optional[BinaryIO], options: Optional[RenderOptions] = None):
        self.sink = sink
        self.options = options or RenderOptions()

    def encode(self, document: Document) -> None:
        """Encode a document and write it to the sink.

        Raises:
            OSError: If writing to the sink fails
        """
        data = self.to_bytes(document)
        self.sink.write(data)

    def to_bytes(self, document: Document) -> bytes:
        """Encode a document to bytes without touching the sink."""
        tree = etree.ElementTree(self._encode_root(document))
        if self.options.pretty_print:
            etree.indent(tree, space=self.options.indent)

        data = etree.tostring(
            tree,
            encoding=self.options.encoding,
            xml_declaration=self.options.xml_declaration,
            pretty_print=self.options.pretty_print,
        )
        logger.debug(
            "opml_encoded",
            version=document.version,
            outlines=sum(1 for _ in document.walk()),
            size=len(data),
        )
        return data

    def _encode_root(self, document: Document) -> etree._Element:
        root = etree.Element("opml")
        root.set("version", document.version)

        head = etree.SubElement(root, "head")
        self._encode_head(head, document)

        body = etree.SubElement(root, "body")
        for outline in document.outlines:
            self._encode_outline(body, outline)

        return root

    def _encode_head(self, head: etree._Element, document: Document) -> None:
        _sub_element(head, "title", document.title)
        if document.date_created is not None:
            _sub_element(head, "dateCreated", format_timestamp(document.date_created))
        if document.date_modified is not None:
            _sub_element(head, "dateModified", format_timestamp(document.date_modified))
        _sub_element(head, "ownerName", document.owner_name)
        _sub_element(head, "ownerEmail", document.owner_email)
        _sub_element(head, "ownerId", _url_text(document.owner_id))
        _sub_element(head, "docs", _url_text(document.docs))

        # Empty and absent expansion states look the same on the wire
        if document.expansion_state:
            _sub_element(head, "expansionState", format_integer_list(document.expansion_state))

        for name, value in (
            ("vertScrollState", document.vert_scroll_state),
            ("windowTop", document.window_top),
            ("windowLeft", document.window_left),
            ("windowBottom", document.window_bottom),
            ("windowRight", document.window_right),
        ):
            if value is not None:
                _sub_element(head, name, format_integer(value))

    def _encode_outline(self, parent: etree._Element, outline: Outline) -> None:
        element = etree.SubElement(parent, "outline")

        # Attribute order is fixed: text first, then the optional fields
        element.set("text", outline.text)
        if outline.type is not None:
            element.set("type", outline.type)
        if outline.is_comment:
            element.set("isComment", format_boolean(True))
        if outline.is_breakpoint:
            element.set("isBreakpoint", format_boolean(True))
        if outline.created is not None:
            element.set("created", format_timestamp(outline.created))
        if outline.categories:
            element.set("category", format_string_list(outline.categories))
        if outline.xml_url is not None:
            element.set("xmlUrl", str(outline.xml_url))
        if outline.description is not None:
            element.set("description", outline.description)
        if outline.html_url is not None:
            element.set("htmlUrl", str(outline.html_url))
        if outline.language is not None:
            element.set("language", outline.language)
        if outline.title is not None:
            element.set("title", outline.title)
        if outline.version is not None:
            element.set("version", outline.version)
        if outline.url is not None:
            element.set("url", str(outline.url))

        for child in outline.children:
            self._encode_outline(element, child)


def encode(document: Document, sink: BinaryIO, options: Optional[RenderOptions] = None) -> None:
    """Encode a document and write it to a binary sink.

    Args:
        document: Document to encode
        sink: Writable binary file-like object
        options: Output layout (defaults to RenderOptions())

    Raises:
        OSError: If writing to the sink fails
    """
    Encoder(sink, options).encode(document)


def encode_bytes(document: Document, options: Optional[RenderOptions] = None) -> bytes:
    """Encode a document and return the bytes."""
    return Encoder(None, options).to_bytes(document)
