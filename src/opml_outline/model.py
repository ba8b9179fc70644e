"""Typed document model for OPML outlines.

This module holds the in-memory tree the codec produces and consumes. It knows
nothing about markup: timestamps are datetimes, URLs are :class:`Url` values,
comma-lists are Python lists.

Absent fields are ``None``. For lists this matters: ``None`` means the field was
not on the wire, while an empty list means it was present but held no items.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Optional

from opml_outline.fieldtypes import Url, check_xml_text


@dataclass
class Outline:
    """Single ``<outline>`` node with its children.

    Attributes:
        text: Display text (the only required field, never empty)
        type: Free-form node kind ("rss", "link", "include", ...)
        is_comment: Node is commented out
        is_breakpoint: Node carries a script breakpoint
        created: Creation instant
        categories: Slash-delimited category paths, in source order
        xml_url: Feed address for subscription nodes
        description: Feed description
        html_url: Web page for the feed
        language: Feed language tag
        title: Feed title
        version: Feed format version (e.g. "RSS2")
        url: Target of link/include nodes
        children: Nested outlines in document order
    """

    text: str
    type: Optional[str] = None
    is_comment: bool = False
    is_breakpoint: bool = False
    created: Optional[datetime] = None
    categories: Optional[list[str]] = None
    xml_url: Optional[Url] = None
    description: Optional[str] = None
    html_url: Optional[Url] = None
    language: Optional[str] = None
    title: Optional[str] = None
    version: Optional[str] = None
    url: Optional[Url] = None
    children: list["Outline"] = field(default_factory=list)

    def __post_init__(self):
        if not self.text:
            raise ValueError("Outline text must not be empty")
        for name in ("text", "type", "description", "language", "title", "version"):
            check_xml_text(getattr(self, name), f"Outline {name}")
        for category in self.categories or ():
            check_xml_text(category, "Outline category")

    def add_child(self, text: str, position: Optional[int] = None, **fields) -> "Outline":
        """Create a child outline and attach it.

        Args:
            text: Display text of the new child
            position: Optional index to insert at (None = append to end)
            **fields: Any other Outline fields

        Returns:
            The created child
        """
        child = Outline(text=text, **fields)

        if position is None:
            self.children.append(child)
        else:
            self.children.insert(position, child)

        return child

    def walk(self) -> Iterator["Outline"]:
        """Yield this node and every descendant, depth-first in document order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class Document:
    """Parsed OPML document: header metadata plus top-level outlines.

    Attributes:
        version: OPML format version from the root element
        title: Document title
        date_created: When the document was created
        date_modified: When the document was last modified
        owner_name: Author name
        owner_email: Author email address
        owner_id: Author profile page
        docs: Pointer to the format documentation
        expansion_state: Indices of outlines shown expanded, order significant
        vert_scroll_state: Top line shown in the editor window
        window_top: Editor window geometry
        window_left: Editor window geometry
        window_bottom: Editor window geometry
        window_right: Editor window geometry
        outlines: Top-level outlines in document order
    """

    version: str = "2.0"
    title: Optional[str] = None
    date_created: Optional[datetime] = None
    date_modified: Optional[datetime] = None
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    owner_id: Optional[Url] = None
    docs: Optional[Url] = None
    expansion_state: Optional[list[int]] = None
    vert_scroll_state: Optional[int] = None
    window_top: Optional[int] = None
    window_left: Optional[int] = None
    window_bottom: Optional[int] = None
    window_right: Optional[int] = None
    outlines: list[Outline] = field(default_factory=list)

    def __post_init__(self):
        for name in ("version", "title", "owner_name", "owner_email"):
            check_xml_text(getattr(self, name), f"Document {name}")

    def walk(self) -> Iterator[Outline]:
        """Yield every outline in the document, depth-first in document order."""
        for outline in self.outlines:
            yield from outline.walk()
