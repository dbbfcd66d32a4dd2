"""Stateful comparison session: schema, document, results and active page."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fieldmatch.comparator import compare
from fieldmatch.extraction import load_document
from fieldmatch.logging import get_logger
from fieldmatch.processing.highlight import compute_highlights, page_keywords
from fieldmatch.schema_loader import load_schema
from fieldmatch.typing.models import ComparisonReport

if TYPE_CHECKING:
    from pathlib import Path

    from fieldmatch.settings import Settings
    from fieldmatch.typing.models import FieldMatch, HighlightBox, LoadedDocument, Page, Schema
    from fieldmatch.typing.protocol import Embedder

logger = get_logger(__name__)


class ComparisonSession:
    """Holds the state of one interactive comparison.

    Every load or comparison either fully succeeds and replaces the relevant
    state, or raises and leaves the previous state in place.
    """

    def __init__(self, *, settings: Settings | None = None, embedder: Embedder | None = None) -> None:
        """Create an empty session.

        Args:
            settings (Settings | None): Runtime settings used for document loading.
            embedder (Embedder | None): Embedding service, the shared one by default.
        """
        self._settings = settings
        self._embedder = embedder
        self.schema: Schema | None = None
        self.document: LoadedDocument | None = None
        self.report = ComparisonReport()
        self.active_page_index = 0
        self.processing = False

    @property
    def pages(self) -> tuple[Page, ...]:
        """Return the pages of the loaded document."""
        return self.document.pages if self.document else ()

    @property
    def matches(self) -> tuple[FieldMatch, ...]:
        """Return the matches of the last successful comparison."""
        return self.report.matches

    @property
    def score(self) -> int:
        """Return the score of the last successful comparison."""
        return self.report.score

    @property
    def can_compare(self) -> bool:
        """Return whether a comparison can run."""
        return self.schema is not None and bool(self.pages) and not self.processing

    def load_schema(self, path: Path) -> Schema:
        """Load a schema file and make it current.

        Args:
            path (Path): Schema file.

        Returns:
            Schema: Loaded schema.
        """
        schema = load_schema(path)
        self.schema = schema
        return schema

    def load_document(self, path: Path, *, use_ocr: bool = False) -> LoadedDocument:
        """Load a document, reset the active page and drop stale results.

        Args:
            path (Path): Document file.
            use_ocr (bool): Recognize PDF pages with OCR.

        Returns:
            LoadedDocument: Loaded document.
        """
        document = load_document(path, use_ocr=use_ocr, settings=self._settings)
        self.document = document
        self.report = ComparisonReport()
        self.active_page_index = 0
        return document

    def run_compare(self) -> ComparisonReport:
        """Compare the current schema with the current document.

        Does nothing without a schema or pages, or while another comparison is
        running. On success the first match's page becomes active.

        Returns:
            ComparisonReport: Current report (unchanged when nothing ran).
        """
        if self.schema is None or not self.pages or self.processing:
            return self.report

        self.processing = True
        try:
            report = compare(self.schema, self.pages, embedder=self._embedder)
        finally:
            self.processing = False

        self.report = report
        if report.matches:
            self.go_to_page(report.matches[0].page_index)
        return report

    def go_to_page(self, index: int) -> int:
        """Activate a page, clamped to the document bounds.

        Args:
            index (int): Requested page index.

        Returns:
            int: Active page index.
        """
        last = max(len(self.pages) - 1, 0)
        self.active_page_index = min(max(index, 0), last)
        return self.active_page_index

    def next_page(self) -> int:
        """Activate the following page, if any."""
        return self.go_to_page(self.active_page_index + 1)

    def previous_page(self) -> int:
        """Activate the preceding page, if any."""
        return self.go_to_page(self.active_page_index - 1)

    def active_highlights(self) -> list[HighlightBox]:
        """Return highlight boxes for the active page.

        Only PDF text-layer pages have positioned fragments to highlight.

        Returns:
            list[HighlightBox]: Boxes in viewport pixels.
        """
        if self.document is None or not self.document.is_pdf or not self.pages:
            return []
        page = self.pages[self.active_page_index]
        return compute_highlights(page, page_keywords(self.matches, self.active_page_index))
