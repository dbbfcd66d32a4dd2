"""Page and document models produced by text extraction."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fieldmatch.typing.enums import DocumentKind

# Pixel size reported for documents that have no renderable surface.
PLACEHOLDER_VIEWPORT_WIDTH = 800.0
PLACEHOLDER_VIEWPORT_HEIGHT = 1200.0


class TextFragment(BaseModel):
    """Positioned run of text from a PDF text layer.

    `transform` is the affine matrix `(a, b, c, d, e, f)` in viewport pixels;
    `(e, f)` is the baseline origin of the run.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    transform: tuple[float, float, float, float, float, float]
    width: float
    height: float = 0.0


class Viewport(BaseModel):
    """Rendered page size at a given scale."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: float
    height: float
    scale: float = Field(gt=0)

    @classmethod
    def placeholder(cls) -> Viewport:
        """Return the viewport used for single-page flat text documents."""
        return cls(width=PLACEHOLDER_VIEWPORT_WIDTH, height=PLACEHOLDER_VIEWPORT_HEIGHT, scale=1.0)


class Page(BaseModel):
    """Normalized text of one document page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_index: int = Field(ge=0)
    full_text: str
    fragments: tuple[TextFragment, ...] = ()
    viewport: Viewport = Field(default_factory=Viewport.placeholder)


class LoadedDocument(BaseModel):
    """Pages of a loaded document plus its provenance."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source: Path
    kind: DocumentKind
    pages: tuple[Page, ...]
    used_ocr: bool = False

    @property
    def is_pdf(self) -> bool:
        """Return whether the pages come from a renderable PDF."""
        return self.kind == DocumentKind.PDF
