"""Per-page text extraction for PDF, DOCX and plain text documents."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

import docx
import fitz

from fieldmatch.exceptions import DocumentLoadError, ExtractionError, PackageError
from fieldmatch.logging import get_logger
from fieldmatch.processing.text import normalize_text
from fieldmatch.settings import Settings, get_settings
from fieldmatch.typing.enums import DocumentKind
from fieldmatch.typing.models import LoadedDocument, Page, TextFragment, Viewport

if TYPE_CHECKING:
    from types import TracebackType

    from fieldmatch.typing.protocol import DocumentHandle

logger = get_logger(__name__)

PDF_EXTENSIONS = frozenset({".pdf"})
DOCX_EXTENSIONS = frozenset({".docx"})
TEXT_EXTENSIONS = frozenset({".txt", ".md"})
UNSUPPORTED_FORMAT_MESSAGE = "Unsupported format. Use PDF/DOCX/TXT."

_TEXT_BLOCK = 0


class PyMuPDFPage:
    """`PageHandle` backed by a PyMuPDF page."""

    def __init__(self, page: fitz.Page) -> None:
        """Wrap a PyMuPDF page.

        Args:
            page (fitz.Page): Loaded page.
        """
        self._page = page

    def viewport(self, scale: float) -> Viewport:
        """Return the page size at `scale`."""
        rect = self._page.rect
        return Viewport(width=rect.width * scale, height=rect.height * scale, scale=scale)

    def get_text_fragments(self, scale: float) -> list[TextFragment]:
        """Return text spans positioned in viewport pixels.

        Args:
            scale (float): Render scale.

        Returns:
            list[TextFragment]: Spans in reading order.
        """
        payload: dict[str, Any] = self._page.get_text("dict", sort=False)
        fragments: list[TextFragment] = []
        for block in payload.get("blocks", []):
            if block.get("type") != _TEXT_BLOCK:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    fragments.append(_span_to_fragment(span, scale))
        return fragments

    def ocr_text(self, scale: float, language: str) -> str:
        """Run Tesseract OCR through PyMuPDF on the rasterized page.

        Args:
            scale (float): Rasterization scale (1.0 = 72 dpi).
            language (str): Tesseract language set.

        Returns:
            str: Recognized text.
        """
        textpage = self._page.get_textpage_ocr(language=language, dpi=round(72 * scale), full=True)
        return self._page.get_text("text", textpage=textpage)


class PyMuPDFDocument:
    """`DocumentHandle` backed by an open PyMuPDF document."""

    def __init__(self, doc: fitz.Document) -> None:
        """Wrap an open PyMuPDF document.

        Args:
            doc (fitz.Document): Open document.
        """
        self._doc = doc

    @classmethod
    def open(cls, path: Path) -> Self:
        """Open a PDF file.

        Args:
            path (Path): PDF path.

        Raises:
            DocumentLoadError: If the file cannot be parsed as a PDF.

        Returns:
            Self: Open document handle.
        """
        try:
            doc = fitz.open(path, filetype="pdf")
        except Exception as exc:
            raise DocumentLoadError(message=f"Failed to open PDF: {path}") from exc
        return cls(doc)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def page_count(self) -> int:
        """Return the number of pages."""
        return self._doc.page_count

    def get_page(self, index: int) -> PyMuPDFPage:
        """Return the page at a zero-based index."""
        return PyMuPDFPage(self._doc.load_page(index))

    def close(self) -> None:
        """Close the underlying document."""
        self._doc.close()


def _span_to_fragment(span: dict[str, Any], scale: float) -> TextFragment:
    """Convert a PyMuPDF text span into a scaled fragment.

    Args:
        span (dict[str, Any]): Span from `page.get_text("dict")`.
        scale (float): Render scale.

    Returns:
        TextFragment: Fragment anchored at the span baseline origin.
    """
    x0, y0, x1, y1 = span["bbox"]
    origin_x, origin_y = span.get("origin", (x0, y1))
    size = float(span.get("size", y1 - y0)) * scale
    return TextFragment(
        text=span.get("text", ""),
        transform=(size, 0.0, 0.0, size, origin_x * scale, origin_y * scale),
        width=(x1 - x0) * scale,
        height=(y1 - y0) * scale,
    )


def extract_per_page(document: DocumentHandle, scale: float = 1.75) -> list[Page]:
    """Extract the text layer of every page.

    Args:
        document (DocumentHandle): Open PDF document.
        scale (float): Render scale for fragment positions.

    Raises:
        DocumentLoadError: If a page cannot be parsed.

    Returns:
        list[Page]: Pages in document order.
    """
    pages: list[Page] = []
    try:
        for index in range(document.page_count):
            handle = document.get_page(index)
            fragments = handle.get_text_fragments(scale)
            full_text = normalize_text(" ".join(fragment.text for fragment in fragments))
            pages.append(
                Page(
                    page_index=index,
                    full_text=full_text,
                    fragments=tuple(fragments),
                    viewport=handle.viewport(scale),
                ),
            )
    except PackageError:
        raise
    except Exception as exc:
        raise DocumentLoadError(message=f"Failed to extract PDF text: {exc}") from exc

    logger.info("PDF text extracted", extra={"pages": len(pages), "scale": scale})
    return pages


def ocr_pages(document: DocumentHandle, scale: float = 2.0, language: str = "por+eng") -> list[Page]:
    """Recognize the text of every page with OCR.

    OCR pages carry no positioned fragments. This is CPU bound and slow; use it
    for scanned documents whose text layer is empty or unusable.

    Args:
        document (DocumentHandle): Open PDF document.
        scale (float): Rasterization scale.
        language (str): OCR language set.

    Raises:
        ExtractionError: If OCR fails on any page.

    Returns:
        list[Page]: Pages in document order.
    """
    pages: list[Page] = []
    for index in range(document.page_count):
        try:
            handle = document.get_page(index)
            text = normalize_text(handle.ocr_text(scale, language) or "")
            viewport = handle.viewport(scale)
        except PackageError:
            raise
        except Exception as exc:
            raise ExtractionError(message=f"OCR failed on page {index + 1}: {exc}") from exc
        logger.debug("OCR page recognized", extra={"page_index": index, "chars": len(text)})
        pages.append(Page(page_index=index, full_text=text, viewport=viewport))

    logger.info("PDF OCR completed", extra={"pages": len(pages), "scale": scale, "language": language})
    return pages


def _read_docx_text(path: Path) -> str:
    """Return paragraph and table text of a DOCX file.

    Args:
        path (Path): DOCX path.

    Returns:
        str: Raw text, one paragraph per line.
    """
    document = docx.Document(str(path))
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append("\t".join(cell.text for cell in row.cells))
    return "\n\n".join(lines)


def extract_flat_text(path: Path) -> str:
    """Return the normalized text of a DOCX or TXT/Markdown file.

    Args:
        path (Path): Document path.

    Raises:
        DocumentLoadError: If the file cannot be read or has an unsupported extension.

    Returns:
        str: Normalized text.
    """
    suffix = path.suffix.lower()
    try:
        if suffix in DOCX_EXTENSIONS:
            raw = _read_docx_text(path)
        elif suffix in TEXT_EXTENSIONS:
            raw = path.read_bytes().decode("utf-8", errors="replace")
        else:
            raise DocumentLoadError(message=UNSUPPORTED_FORMAT_MESSAGE)
    except PackageError:
        raise
    except Exception as exc:
        raise DocumentLoadError(message=f"Failed to read document: {path}") from exc
    return normalize_text(raw)


def flat_text_page(text: str) -> Page:
    """Wrap flat document text as the single page of a non-PDF document.

    Args:
        text (str): Normalized document text.

    Returns:
        Page: Page 0 without fragments and with a placeholder viewport.
    """
    return Page(page_index=0, full_text=text, fragments=(), viewport=Viewport.placeholder())


def load_document(path: Path, *, use_ocr: bool = False, settings: Settings | None = None) -> LoadedDocument:
    """Load a document into pages according to its extension.

    Args:
        path (Path): Document path.
        use_ocr (bool): Recognize PDF pages with OCR instead of reading the text layer.
        settings (Settings | None): Runtime settings for scales and OCR language.

    Raises:
        DocumentLoadError: If the file is missing, unreadable or unsupported.

    Returns:
        LoadedDocument: Loaded pages.
    """
    config = settings or get_settings()
    if not path.is_file():
        raise DocumentLoadError(message=f"Document not found: {path}")

    suffix = path.suffix.lower()
    if suffix in PDF_EXTENSIONS:
        with PyMuPDFDocument.open(path) as document:
            if use_ocr:
                pages = ocr_pages(document, config.ocr_scale, config.ocr_language)
            else:
                pages = extract_per_page(document, config.text_scale)
        kind = DocumentKind.PDF
    elif suffix in DOCX_EXTENSIONS or suffix in TEXT_EXTENSIONS:
        pages = [flat_text_page(extract_flat_text(path))]
        kind = DocumentKind.FLAT
        use_ocr = False
    else:
        raise DocumentLoadError(message=UNSUPPORTED_FORMAT_MESSAGE)

    logger.info(
        "Document loaded",
        extra={"input_path": str(path), "kind": kind.value, "pages": len(pages), "ocr": use_ocr},
    )
    return LoadedDocument(source=path, kind=kind, pages=tuple(pages), used_ocr=use_ocr)
