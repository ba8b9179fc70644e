"""OPML outline codec - Convert OPML documents to and from a typed tree.

This package decodes OPML (Outline Processor Markup Language) into a plain
Document/Outline tree with typed fields, and encodes such trees back to OPML.

Key features:
- Timestamps accepted in 15 historical layouts, written in one canonical layout
- Comma-list fields (expansionState, category) as Python lists
- Absent fields stay absent through a round trip
- All-or-nothing decoding with field-level error reporting

Example:
    >>> from opml_outline import Document, Outline, decode_bytes, encode_bytes
    >>> document = Document(title="feeds", outlines=[Outline(text="News")])
    >>> decode_bytes(encode_bytes(document)) == document
    True
"""

from opml_outline.config import RenderOptions
from opml_outline.decoder import Decoder, decode, decode_bytes
from opml_outline.encoder import Encoder, encode, encode_bytes
from opml_outline.exceptions import FieldValidationError, OpmlError, StructuralError
from opml_outline.fieldtypes import Url
from opml_outline.model import Document, Outline
from opml_outline.timestamps import format_timestamp, parse_timestamp

__version__ = "0.1.0"

__all__ = [
    "Document",
    "Outline",
    "Url",
    "Decoder",
    "Encoder",
    "decode",
    "decode_bytes",
    "encode",
    "encode_bytes",
    "RenderOptions",
    "OpmlError",
    "StructuralError",
    "FieldValidationError",
    "parse_timestamp",
    "format_timestamp",
]
