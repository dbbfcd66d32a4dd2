"""Rule-based validation of the text found for a schema field."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from fieldmatch.typing.models import ChoiceField, NumericField

if TYPE_CHECKING:
    from fieldmatch.typing.models import SchemaField

REQUIRED_MISSING = "required field not found/filled"
NUMERIC_MISSING = "numeric value not identified"
CHOICE_MISMATCH = "value not in allowed list"
PATTERN_MISMATCH = "does not match pattern"

# A digit followed by more digits or decimal/thousand separators.
_NUMBER_RE = re.compile(r"\d[\d.,]*")


def too_few_words(min_words: int) -> str:
    """Return the error emitted when a page has fewer than `min_words` words."""
    return f"fewer than {min_words} words"


def validate_field(field: SchemaField, page_text: str) -> list[str]:
    """Apply every rule of `field` to the matched page text.

    Rules are independent; each failing rule appends one error, in this order:
    required, numeric, choice, pattern, minimum word count.

    Args:
        field (SchemaField): Schema field.
        page_text (str): Full text of the matched page.

    Returns:
        list[str]: Error descriptions, empty when the field is valid.
    """
    errors: list[str] = []
    is_blank = not page_text.strip()

    if field.required and is_blank:
        errors.append(REQUIRED_MISSING)

    if isinstance(field, NumericField) and not _NUMBER_RE.search(page_text):
        errors.append(NUMERIC_MISSING)

    if isinstance(field, ChoiceField) and field.allowed_values:
        lowered = page_text.lower()
        if not any(value.lower() in lowered for value in field.allowed_values):
            errors.append(CHOICE_MISMATCH)

    if field.pattern is not None and not re.search(field.pattern, page_text, re.IGNORECASE):
        errors.append(PATTERN_MISMATCH)

    if field.min_words and page_text and len(page_text.split()) < field.min_words:
        errors.append(too_few_words(field.min_words))

    return errors
