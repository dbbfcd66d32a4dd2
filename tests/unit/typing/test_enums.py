from __future__ import annotations

import pytest

from fieldmatch.typing.enums import DocumentKind, FieldType


def test_field_type_from_str() -> None:
    assert FieldType.from_str("numerico") == FieldType.NUMERIC


def test_field_type_from_str_raises_on_invalid_value() -> None:
    with pytest.raises(ValueError, match="Unsupported FieldType value"):
        FieldType.from_str("data")


def test_document_kind_to_str() -> None:
    assert DocumentKind.PDF.to_str() == "pdf"
