"""Matching, validation and highlighting helpers."""

from fieldmatch.processing.highlight import compute_highlights, page_keywords
from fieldmatch.processing.keywords import STOP_WORDS, pick_keywords
from fieldmatch.processing.similarity import best_page, cosine_similarity
from fieldmatch.processing.text import normalize_text
from fieldmatch.processing.validation import validate_field

__all__ = [
    "STOP_WORDS",
    "best_page",
    "compute_highlights",
    "cosine_similarity",
    "normalize_text",
    "page_keywords",
    "pick_keywords",
    "validate_field",
]
