"""Text normalization helpers."""

from __future__ import annotations

import re

_INLINE_SPACE_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{2,}")


def normalize_text(text: str) -> str:
    """Collapse inline whitespace and blank lines, then trim.

    Args:
        text (str): Raw extracted text.

    Returns:
        str: Normalized text.
    """
    collapsed = _INLINE_SPACE_RE.sub(" ", text)
    return _BLANK_LINES_RE.sub("\n", collapsed).strip()
