"""Runtime settings loaded from `.env` and environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fieldmatch.exceptions import SettingsError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Package settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    project_name: str = "fieldmatch"
    app_env: str = Field(
        default="dev",
        validation_alias="APP_ENV",
        description="Application environment, e.g. 'dev', 'prod'.",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level, e.g. 'INFO', 'DEBUG'.",
    )
    log_json: bool = Field(
        default=True,
        validation_alias="LOG_JSON",
        description="Enable JSON formatted logs.",
    )
    log_file: str | None = Field(
        default=None,
        validation_alias="LOG_FILE",
        description="File path for log output.",
    )

    embedding_model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        validation_alias="EMBEDDING_MODEL",
        description="sentence-transformers model used to embed labels and pages.",
    )
    embedding_device: str = Field(
        default="cpu",
        validation_alias="EMBEDDING_DEVICE",
        description="Torch device for the embedding model.",
    )
    embedding_cache_dir: str | None = Field(
        default=None,
        validation_alias="EMBEDDING_CACHE_DIR",
        description="Directory where model weights are cached.",
    )
    embedding_batch_size: int = Field(
        default=32,
        ge=1,
        validation_alias="EMBEDDING_BATCH_SIZE",
        description="Encode batch size.",
    )

    text_scale: float = Field(
        default=1.75,
        gt=0,
        validation_alias="TEXT_SCALE",
        description="Render scale used for text-layer extraction.",
    )
    ocr_scale: float = Field(
        default=2.0,
        gt=0,
        validation_alias="OCR_SCALE",
        description="Rasterization scale used before OCR.",
    )
    ocr_language: str = Field(
        default="por+eng",
        validation_alias="OCR_LANGUAGE",
        description="Tesseract language set.",
    )

    results_dir: str = Field(
        default="results",
        validation_alias="RESULTS_DIR",
        description="Directory to store reports and rendered pages.",
    )

    @field_validator("ocr_language")
    @classmethod
    def _validate_ocr_language(cls, value: str) -> str:
        """Reject empty OCR language sets.

        Args:
            value (str): Raw language set, e.g. `por+eng`.

        Raises:
            ValueError: If no language is given.

        Returns:
            str: Normalized language set.
        """
        languages = [part.strip() for part in value.split("+") if part.strip()]
        if not languages:
            raise ValueError("OCR_LANGUAGE must name at least one language")  # noqa: TRY003
        return "+".join(languages)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance.

    Raises:
        SettingsError: If settings cannot be loaded or validated.

    Returns:
        Settings: The loaded settings instance.
    """
    try:
        return Settings()
    except Exception as exc:
        if _is_missing_settings_error(exc):
            ensure_env_file_exists()
            try:
                return Settings()
            except Exception as retry_exc:
                raise SettingsError(exc=retry_exc) from retry_exc
        raise SettingsError(exc=exc) from exc


def ensure_env_file_exists(
    *,
    env_path: Path = Path(".env"),
    template_path: Path = Path(".env.template"),
) -> None:
    """Create `.env` from template when missing.

    Args:
        env_path (Path): Target environment file path.
        template_path (Path): Template file path.
    """
    if env_path.exists() or not template_path.exists():
        return
    env_path.write_text(template_path.read_text(encoding="utf-8"), encoding="utf-8")
    logger.info(
        "Created environment file from template",
        extra={"env_path": str(env_path), "template_path": str(template_path)},
    )


def _is_missing_settings_error(exc: Exception) -> bool:
    """Return whether the settings failure is due to missing values.

    Args:
        exc (Exception): Caught settings initialization error.

    Returns:
        bool: True when the error represents missing settings values.
    """
    if not isinstance(exc, ValidationError):
        return False
    return any(error.get("type") == "missing" for error in exc.errors())
