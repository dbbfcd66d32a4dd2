"""FieldMatch package."""

from fieldmatch.exceptions import (
    BackendError,
    DependencyError,
    DocumentLoadError,
    EmbeddingError,
    ExtractionError,
    PackageError,
    SchemaParseError,
    SettingsError,
)
from fieldmatch.logging import configure_logging, get_logger
from fieldmatch.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("fieldmatch")

__all__ = [
    "BackendError",
    "DependencyError",
    "DocumentLoadError",
    "EmbeddingError",
    "ExtractionError",
    "PackageError",
    "SchemaParseError",
    "Settings",
    "SettingsError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
]
