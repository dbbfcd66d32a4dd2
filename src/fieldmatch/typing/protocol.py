"""Collaborator interfaces consumed by the core pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fieldmatch.typing.models import TextFragment, Viewport


class PageHandle(Protocol):
    """One page of an opened PDF document."""

    def viewport(self, scale: float) -> Viewport:
        """Return the page size at `scale`.

        Args:
            scale: Render scale.

        Returns:
            Viewport: Page size in pixels.
        """

    def get_text_fragments(self, scale: float) -> list[TextFragment]:
        """Return positioned text-layer runs in page order.

        Args:
            scale: Render scale applied to positions and sizes.

        Returns:
            list[TextFragment]: Text fragments.
        """

    def ocr_text(self, scale: float, language: str) -> str:
        """Rasterize the page and return recognized text.

        Args:
            scale: Rasterization scale.
            language: OCR language set, e.g. `por+eng`.

        Returns:
            str: Raw recognized text.
        """


class DocumentHandle(Protocol):
    """Opened PDF document."""

    @property
    def page_count(self) -> int:
        """Return the number of pages."""

    def get_page(self, index: int) -> PageHandle:
        """Return the page at a zero-based index.

        Args:
            index: Page index.

        Returns:
            PageHandle: Page handle.
        """


class Embedder(Protocol):
    """Text embedding service."""

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed texts into L2-normalized vectors, preserving input order.

        Args:
            texts: Texts to embed.

        Returns:
            list[list[float]]: One vector per input text.
        """
