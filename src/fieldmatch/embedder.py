"""Sentence embeddings for field labels and page texts."""

from __future__ import annotations

import time
from functools import lru_cache
from typing import TYPE_CHECKING

import numpy as np
from sentence_transformers import SentenceTransformer

from fieldmatch.exceptions import EmbeddingError
from fieldmatch.logging import get_logger
from fieldmatch.settings import Settings, get_settings

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


class SentenceTransformerEmbedder:
    """Embedder backed by a lazily loaded sentence-transformers model.

    The model is loaded on the first `embed` call and reused afterwards. The
    default model mean-pools token states; vectors are L2-normalized.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize the embedder without loading the model.

        Args:
            settings (Settings): Runtime settings.
        """
        self._settings = settings
        self._model: SentenceTransformer | None = None

    @property
    def model_name(self) -> str:
        """Return the configured model name."""
        return self._settings.embedding_model

    def _get_model(self) -> SentenceTransformer:
        """Return the loaded model, loading it on first use.

        Raises:
            EmbeddingError: If the model cannot be loaded.

        Returns:
            SentenceTransformer: Loaded model.
        """
        if self._model is not None:
            return self._model

        started = time.perf_counter()
        try:
            self._model = SentenceTransformer(
                self.model_name,
                device=self._settings.embedding_device,
                cache_folder=self._settings.embedding_cache_dir,
            )
        except Exception as exc:
            raise EmbeddingError(message=f"Failed to load embedding model '{self.model_name}': {exc}") from exc

        logger.info(
            "Embedding model loaded",
            extra={"model": self.model_name, "elapsed_s": round(time.perf_counter() - started, 3)},
        )
        return self._model

    def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed texts in one batched model call.

        Args:
            texts (Sequence[str]): Texts to embed.

        Raises:
            EmbeddingError: If encoding fails or returns an unexpected shape.

        Returns:
            list[list[float]]: One normalized vector per text, in input order.
        """
        if not texts:
            return []

        model = self._get_model()
        try:
            vectors = model.encode(
                list(texts),
                batch_size=self._settings.embedding_batch_size,
                convert_to_numpy=True,
                normalize_embeddings=True,
                show_progress_bar=False,
            )
        except Exception as exc:
            raise EmbeddingError(message=f"Embedding failed: {exc}") from exc

        matrix = np.asarray(vectors, dtype=np.float32)
        if matrix.ndim != 2 or matrix.shape[0] != len(texts):  # noqa: PLR2004
            raise EmbeddingError(
                message=f"Embedding returned shape {matrix.shape} for {len(texts)} texts",
            )
        logger.debug("Texts embedded", extra={"count": len(texts), "dimension": int(matrix.shape[1])})
        return matrix.tolist()


@lru_cache(maxsize=1)
def get_embedder() -> SentenceTransformerEmbedder:
    """Return the process-wide embedder.

    Returns:
        SentenceTransformerEmbedder: Shared embedder instance.
    """
    return SentenceTransformerEmbedder(get_settings())
