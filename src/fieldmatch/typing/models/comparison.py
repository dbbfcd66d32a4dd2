"""Comparison result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FieldMatch(BaseModel):
    """Best page found for one schema field and its validation outcome."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    field_id: str
    page_index: int = Field(ge=0)
    similarity: float
    keywords: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    snippet: str = ""

    @property
    def ok(self) -> bool:
        """Return whether the field passed every rule."""
        return not self.errors


class ComparisonReport(BaseModel):
    """Per-field matches of one comparison run with the aggregate score."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    matches: tuple[FieldMatch, ...] = ()
    score: int = Field(default=0, ge=0, le=100)

    @property
    def error_count(self) -> int:
        """Return the total number of validation errors."""
        return sum(len(match.errors) for match in self.matches)


class HighlightBox(BaseModel):
    """Overlay rectangle in viewport pixels."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    x: float
    y: float
    width: float
    height: float
