"""Highlight overlay geometry for matched keywords."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fieldmatch.processing.keywords import MIN_KEYWORD_LENGTH
from fieldmatch.typing.models import HighlightBox

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fieldmatch.typing.models import FieldMatch, Page

# Boxes start this far above the fragment baseline.
BASELINE_OFFSET = 10.0
BOX_HEIGHT = 14.0
MIN_BOX_WIDTH = 4.0


def page_keywords(matches: Iterable[FieldMatch], page_index: int) -> list[str]:
    """Collect the keywords of every match located on `page_index`.

    Args:
        matches (Iterable[FieldMatch]): Comparison matches.
        page_index (int): Displayed page.

    Returns:
        list[str]: Unique keywords in first-seen order.
    """
    keywords: dict[str, None] = {}
    for match in matches:
        if match.page_index != page_index:
            continue
        for keyword in match.keywords:
            if keyword and len(keyword) >= MIN_KEYWORD_LENGTH:
                keywords.setdefault(keyword)
    return list(keywords)


def compute_highlights(page: Page, keywords: Iterable[str]) -> list[HighlightBox]:
    """Return one box per text fragment that contains a keyword.

    Matching is a case-insensitive substring test. Pages without positioned
    fragments (OCR, DOCX, TXT) never produce boxes.

    Args:
        page (Page): Displayed page.
        keywords (Iterable[str]): Keywords to highlight.

    Returns:
        list[HighlightBox]: Boxes in fragment order.
    """
    needles = [keyword.lower() for keyword in keywords if keyword]
    if not page.fragments or not needles:
        return []

    boxes: list[HighlightBox] = []
    for fragment in page.fragments:
        haystack = fragment.text.lower()
        if not haystack or not any(needle in haystack for needle in needles):
            continue
        x, y = fragment.transform[4], fragment.transform[5]
        boxes.append(
            HighlightBox(
                x=x,
                y=y - BASELINE_OFFSET,
                width=max(MIN_BOX_WIDTH, fragment.width),
                height=BOX_HEIGHT,
            ),
        )
    return boxes
