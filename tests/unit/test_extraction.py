from __future__ import annotations

from typing import TYPE_CHECKING

import docx
import pytest

from fieldmatch.exceptions import DocumentLoadError, ExtractionError
from fieldmatch.extraction import (
    _span_to_fragment,
    extract_flat_text,
    extract_per_page,
    flat_text_page,
    load_document,
    ocr_pages,
)
from fieldmatch.settings import Settings
from fieldmatch.typing.enums import DocumentKind
from fieldmatch.typing.models import TextFragment, Viewport

if TYPE_CHECKING:
    from pathlib import Path


def _fragment(text: str) -> TextFragment:
    return TextFragment(text=text, transform=(1.0, 0.0, 0.0, 1.0, 0.0, 0.0), width=10.0)


class _FakePage:
    def __init__(self, texts: list[str], ocr: str = "", *, fail: bool = False) -> None:
        self._texts = texts
        self._ocr = ocr
        self._fail = fail
        self.scales: list[float] = []

    def viewport(self, scale: float) -> Viewport:
        return Viewport(width=100 * scale, height=200 * scale, scale=scale)

    def get_text_fragments(self, scale: float) -> list[TextFragment]:
        self.scales.append(scale)
        if self._fail:
            raise RuntimeError("broken content stream")
        return [_fragment(text) for text in self._texts]

    def ocr_text(self, scale: float, language: str) -> str:
        assert language == "por+eng"
        self.scales.append(scale)
        if self._fail:
            raise RuntimeError("tesseract missing")
        return self._ocr


class _FakeDocument:
    def __init__(self, pages: list[_FakePage]) -> None:
        self._pages = pages

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def get_page(self, index: int) -> _FakePage:
        return self._pages[index]


def test_extract_per_page_joins_and_normalizes_fragments() -> None:
    document = _FakeDocument([_FakePage(["Total  a", "pagar:", ""]), _FakePage([])])

    pages = extract_per_page(document, scale=1.75)

    assert [page.page_index for page in pages] == [0, 1]
    assert pages[0].full_text == "Total a pagar:"
    assert len(pages[0].fragments) == 3
    assert pages[0].viewport == Viewport(width=175, height=350, scale=1.75)
    assert pages[1].full_text == ""


def test_extract_per_page_wraps_parse_failures() -> None:
    document = _FakeDocument([_FakePage([], fail=True)])

    with pytest.raises(DocumentLoadError, match="broken content stream"):
        extract_per_page(document)


def test_extract_per_page_is_idempotent() -> None:
    document = _FakeDocument([_FakePage(["a b"])])

    assert extract_per_page(document) == extract_per_page(document)


def test_ocr_pages_normalizes_text_without_fragments() -> None:
    page = _FakePage([], ocr="Linha   1\n\n\nLinha 2 ")

    pages = ocr_pages(_FakeDocument([page]), scale=2.0)

    assert pages[0].full_text == "Linha 1\nLinha 2"
    assert pages[0].fragments == ()
    assert pages[0].viewport.scale == 2.0
    assert page.scales == [2.0]


def test_ocr_pages_raises_extraction_error() -> None:
    document = _FakeDocument([_FakePage([], ocr="ok"), _FakePage([], fail=True)])

    with pytest.raises(ExtractionError, match="OCR failed on page 2"):
        ocr_pages(document)


def test_span_to_fragment_scales_baseline_origin() -> None:
    span = {"text": "Total", "bbox": (10.0, 20.0, 50.0, 32.0), "origin": (10.0, 30.0), "size": 12.0}

    fragment = _span_to_fragment(span, 2.0)

    assert fragment.text == "Total"
    assert fragment.transform == (24.0, 0.0, 0.0, 24.0, 20.0, 60.0)
    assert fragment.width == 80.0
    assert fragment.height == 24.0


def test_extract_flat_text_from_txt(tmp_path: Path) -> None:
    path = tmp_path / "doc.txt"
    path.write_bytes("Aceite:\t sim\n\n\nFim".encode() + b"\xff")

    text = extract_flat_text(path)

    assert text == "Aceite: sim\nFim\ufffd"


def test_extract_flat_text_from_docx(tmp_path: Path) -> None:
    path = tmp_path / "doc.docx"
    document = docx.Document()
    document.add_paragraph("Contrato de serviços")
    document.add_paragraph("Aceite: sim")
    document.save(str(path))

    assert extract_flat_text(path) == "Contrato de serviços\nAceite: sim"


def test_extract_flat_text_rejects_corrupt_docx(tmp_path: Path) -> None:
    path = tmp_path / "doc.docx"
    path.write_bytes(b"not a zip")

    with pytest.raises(DocumentLoadError, match="Failed to read document"):
        extract_flat_text(path)


def test_flat_text_page_is_single_placeholder_page() -> None:
    page = flat_text_page("texto")

    assert page.page_index == 0
    assert page.fragments == ()
    assert page.viewport == Viewport.placeholder()


def test_load_document_docx_produces_single_page(tmp_path: Path) -> None:
    path = tmp_path / "doc.docx"
    document = docx.Document()
    document.add_paragraph("Total a pagar: 10")
    document.save(str(path))

    loaded = load_document(path, use_ocr=True, settings=Settings())

    assert loaded.kind == DocumentKind.FLAT
    assert loaded.used_ocr is False
    assert len(loaded.pages) == 1
    assert loaded.pages[0].page_index == 0
    assert loaded.pages[0].fragments == ()


def test_load_document_markdown(tmp_path: Path) -> None:
    path = tmp_path / "notes.MD"
    path.write_text("# Título\n\ntexto", encoding="utf-8")

    loaded = load_document(path, settings=Settings())

    assert loaded.pages[0].full_text == "# Título\ntexto"


def test_load_document_rejects_unsupported_extension(tmp_path: Path) -> None:
    path = tmp_path / "image.png"
    path.write_bytes(b"png")

    with pytest.raises(DocumentLoadError, match="Unsupported format"):
        load_document(path, settings=Settings())


def test_load_document_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DocumentLoadError, match="not found"):
        load_document(tmp_path / "missing.pdf", settings=Settings())


def test_pdf_open_failure_is_document_load_error(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"%PDF-garbage")

    def _raise(*args, **kwargs):
        raise RuntimeError("cannot open broken document")

    monkeypatch.setattr("fieldmatch.extraction.fitz.open", _raise)

    with pytest.raises(DocumentLoadError, match="Failed to open PDF"):
        load_document(path, settings=Settings())


def test_load_document_uses_ocr_scale_for_scanned_pdf(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "scan.pdf"
    path.write_bytes(b"%PDF")
    page = _FakePage([], ocr="Total 10")

    class _FakeHandle(_FakeDocument):
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb) -> None:
            return None

    monkeypatch.setattr(
        "fieldmatch.extraction.PyMuPDFDocument.open",
        classmethod(lambda cls, _path: _FakeHandle([page])),
    )

    loaded = load_document(path, use_ocr=True, settings=Settings(ocr_scale=3.0))

    assert loaded.kind == DocumentKind.PDF
    assert loaded.used_ocr is True
    assert page.scales == [3.0]
    assert loaded.pages[0].full_text == "Total 10"
