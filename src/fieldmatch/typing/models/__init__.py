"""Core domain model exports."""

from fieldmatch.typing.models.comparison import ComparisonReport, FieldMatch, HighlightBox
from fieldmatch.typing.models.document import LoadedDocument, Page, TextFragment, Viewport
from fieldmatch.typing.models.schema import (
    BooleanField,
    ChoiceField,
    NumericField,
    Schema,
    SchemaField,
    TextField,
)

__all__ = [
    "BooleanField",
    "ChoiceField",
    "ComparisonReport",
    "FieldMatch",
    "HighlightBox",
    "LoadedDocument",
    "NumericField",
    "Page",
    "Schema",
    "SchemaField",
    "TextField",
    "TextFragment",
    "Viewport",
]
