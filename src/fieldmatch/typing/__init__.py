"""Typing-centric domain modules."""

from fieldmatch.typing.enums import DocumentKind, FieldType
from fieldmatch.typing.models import (
    BooleanField,
    ChoiceField,
    ComparisonReport,
    FieldMatch,
    HighlightBox,
    LoadedDocument,
    NumericField,
    Page,
    Schema,
    SchemaField,
    TextField,
    TextFragment,
    Viewport,
)
from fieldmatch.typing.protocol import DocumentHandle, Embedder, PageHandle

__all__ = [
    "BooleanField",
    "ChoiceField",
    "ComparisonReport",
    "DocumentHandle",
    "DocumentKind",
    "Embedder",
    "FieldMatch",
    "FieldType",
    "HighlightBox",
    "LoadedDocument",
    "NumericField",
    "Page",
    "PageHandle",
    "Schema",
    "SchemaField",
    "TextField",
    "TextFragment",
    "Viewport",
]
