"""PDF page rendering with highlight overlays."""

from __future__ import annotations

from typing import TYPE_CHECKING

import fitz

from fieldmatch.exceptions import BackendError
from fieldmatch.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from fieldmatch.typing.models import HighlightBox

logger = get_logger(__name__)

HIGHLIGHT_COLOR = (1.0, 0.85, 0.0)
HIGHLIGHT_OPACITY = 0.35


def render_page_png(
    pdf_path: Path,
    page_index: int,
    *,
    scale: float,
    boxes: Sequence[HighlightBox] = (),
    output_path: Path,
) -> Path:
    """Render one PDF page to PNG with translucent highlight boxes.

    Box coordinates are viewport pixels at `scale`; they are mapped back to PDF
    points before drawing so the rendered image lines up with them.

    Args:
        pdf_path: PDF file to render.
        page_index: Zero-based page index.
        scale: Render scale used when the boxes were computed.
        boxes: Highlight boxes.
        output_path: PNG destination.

    Raises:
        BackendError: If the page index is out of range or rendering fails.

    Returns:
        Path: Written PNG path.
    """
    try:
        with fitz.open(pdf_path, filetype="pdf") as doc:
            if not 0 <= page_index < doc.page_count:
                raise BackendError(message=f"Page {page_index + 1} out of range (1-{doc.page_count})")
            page = doc.load_page(page_index)
            for box in boxes:
                rect = fitz.Rect(
                    box.x / scale,
                    box.y / scale,
                    (box.x + box.width) / scale,
                    (box.y + box.height) / scale,
                )
                page.draw_rect(
                    rect,
                    color=None,
                    fill=HIGHLIGHT_COLOR,
                    fill_opacity=HIGHLIGHT_OPACITY,
                    overlay=True,
                )
            pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            pix.save(str(output_path))
    except BackendError:
        raise
    except Exception as exc:  # pragma: no cover - depends on file and fitz internals
        raise BackendError(message=f"Failed to render PDF page: {pdf_path}") from exc

    logger.info(
        "PDF page rendered",
        extra={"input_path": str(pdf_path), "page_index": page_index, "boxes": len(boxes)},
    )
    return output_path
