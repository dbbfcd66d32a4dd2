from __future__ import annotations

from fieldmatch.processing.text import normalize_text


def test_normalize_text_collapses_spaces_and_blank_lines() -> None:
    assert normalize_text("  Total \t a   pagar\n\n\nR$ 10  ") == "Total a pagar\nR$ 10"


def test_normalize_text_keeps_single_newlines() -> None:
    assert normalize_text("a\nb") == "a\nb"


def test_normalize_text_empty() -> None:
    assert normalize_text(" \t\n\n ") == ""
