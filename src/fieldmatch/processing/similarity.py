"""Vector similarity and nearest-page selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

EPSILON = 1e-8


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the cosine similarity of two vectors.

    Zero vectors yield 0.0 instead of a division error.

    Args:
        a (Sequence[float]): First vector.
        b (Sequence[float]): Second vector.

    Raises:
        ValueError: If the vectors have different lengths.

    Returns:
        float: Similarity, roughly in [-1, 1].
    """
    left = np.asarray(a, dtype=np.float64)
    right = np.asarray(b, dtype=np.float64)
    if left.shape != right.shape:
        raise ValueError(f"Vector shapes differ: {left.shape} != {right.shape}")  # noqa: TRY003
    denominator = float(np.linalg.norm(left) * np.linalg.norm(right)) + EPSILON
    return float(np.dot(left, right)) / denominator


def best_page(query_vector: Sequence[float], page_vectors: Sequence[Sequence[float]]) -> tuple[int, float]:
    """Find the page vector closest to the query.

    Scans pages in order and only replaces the current best on a strictly
    greater score, so the lowest index wins ties.

    Args:
        query_vector (Sequence[float]): Field query embedding.
        page_vectors (Sequence[Sequence[float]]): Page embeddings in page order.

    Raises:
        ValueError: If there are no page vectors.

    Returns:
        tuple[int, float]: Best page index and its similarity.
    """
    if not page_vectors:
        raise ValueError("best_page requires at least one page vector")  # noqa: TRY003

    best_index = 0
    best_score = float("-inf")
    for index, page_vector in enumerate(page_vectors):
        score = cosine_similarity(query_vector, page_vector)
        if score > best_score:
            best_index, best_score = index, score
    return best_index, best_score
