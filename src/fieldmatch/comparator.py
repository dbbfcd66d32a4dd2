"""Field-to-page comparison orchestration."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fieldmatch.embedder import get_embedder
from fieldmatch.logging import get_logger
from fieldmatch.processing.keywords import DEFAULT_KEYWORD_COUNT, pick_keywords
from fieldmatch.processing.similarity import best_page
from fieldmatch.processing.validation import validate_field
from fieldmatch.typing.models import ComparisonReport, FieldMatch

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from fieldmatch.typing.models import Page, Schema, SchemaField
    from fieldmatch.typing.protocol import Embedder

logger = get_logger(__name__)

SNIPPET_LENGTH = 800
ERROR_PENALTY = 5
MAX_SCORE = 100


def aggregate_score(matches: Sequence[FieldMatch]) -> int:
    """Return the document score for a set of matches.

    Each validation error costs a fixed penalty, floored at zero. A run with
    no matches scores zero since nothing was compared.

    Args:
        matches (Sequence[FieldMatch]): Comparison matches.

    Returns:
        int: Score between 0 and 100.
    """
    if not matches:
        return 0
    total_errors = sum(len(match.errors) for match in matches)
    return max(0, MAX_SCORE - ERROR_PENALTY * total_errors)


def match_field(
    field: SchemaField,
    pages: Sequence[Page],
    page_vectors: Sequence[Sequence[float]],
    embedder: Embedder,
) -> FieldMatch:
    """Locate, validate and summarize one field.

    Args:
        field (SchemaField): Schema field.
        pages (Sequence[Page]): Document pages.
        page_vectors (Sequence[Sequence[float]]): Page embeddings aligned with `pages`.
        embedder (Embedder): Embedding service.

    Returns:
        FieldMatch: Field result.
    """
    [query_vector] = embedder.embed([field.query])
    page_index, similarity = best_page(query_vector, page_vectors)
    page_text = pages[page_index].full_text
    snippet = page_text[:SNIPPET_LENGTH]
    return FieldMatch(
        field_id=field.id,
        page_index=page_index,
        similarity=similarity,
        keywords=tuple(pick_keywords(snippet, DEFAULT_KEYWORD_COUNT)),
        errors=tuple(validate_field(field, page_text)),
        snippet=snippet,
    )


def compare(schema: Schema, pages: Sequence[Page], *, embedder: Embedder | None = None) -> ComparisonReport:
    """Match every schema field to its most similar page and validate it.

    Page texts are embedded once; each field query is embedded separately.
    Embedding failures propagate, validation failures are recorded on matches.

    Args:
        schema (Schema): Field schema.
        pages (Sequence[Page]): Document pages.
        embedder (Embedder | None): Embedding service, the shared one by default.

    Returns:
        ComparisonReport: Matches in schema order with the aggregate score.
    """
    if not pages:
        logger.info("Comparison skipped: document has no pages")
        return ComparisonReport()

    service = embedder or get_embedder()
    page_vectors = service.embed([page.full_text for page in pages])

    matches: list[FieldMatch] = []
    for field in schema.fields:
        match = match_field(field, pages, page_vectors, service)
        logger.debug(
            "Field matched",
            extra={"field_id": match.field_id, "page_index": match.page_index, "errors": len(match.errors)},
        )
        matches.append(match)

    report = ComparisonReport(matches=tuple(matches), score=aggregate_score(matches))
    logger.info(
        "Comparison completed",
        extra={"fields": len(matches), "pages": len(pages), "errors": report.error_count, "score": report.score},
    )
    return report


def persist_report(report: ComparisonReport, path: Path, *, metadata: dict[str, object] | None = None) -> None:
    """Persist a comparison report as JSON.

    Args:
        report (ComparisonReport): Report payload.
        path (Path): Output path.
        metadata (dict[str, object] | None): Extra top-level entries, e.g. the source document.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report_to_json(report, metadata=metadata), encoding="utf-8")


def report_to_json(report: ComparisonReport, *, metadata: dict[str, object] | None = None) -> str:
    """Serialize a report with optional metadata.

    Args:
        report (ComparisonReport): Report payload.
        metadata (dict[str, object] | None): Extra top-level entries.

    Returns:
        str: Indented JSON document.
    """
    payload = report.model_dump(mode="json")
    payload["error_count"] = report.error_count
    if metadata:
        payload["metadata"] = metadata
    return json.dumps(payload, indent=2, ensure_ascii=False)
