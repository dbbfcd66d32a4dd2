"""Field schema loading from YAML or JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import cast

import yaml
from pydantic import ValidationError

from fieldmatch import logger
from fieldmatch.exceptions import SchemaParseError
from fieldmatch.typing.models import Schema

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})
_FIELDS_KEYS = ("campos", "fields")


def load_schema(path: Path) -> Schema:
    """Load and validate a schema file.

    Args:
        path (Path): `.yaml`, `.yml` or `.json` file.

    Raises:
        SchemaParseError: If the file is unreadable, malformed or structurally incomplete.

    Returns:
        Schema: Validated schema.
    """
    _validate_schema_file_path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaParseError(message=f"Cannot read schema file {path}: {exc}") from exc

    schema = parse_schema(text, fmt="json" if path.suffix.lower() in JSON_SUFFIXES else "yaml")
    logger.info(
        "Schema loaded",
        extra={"schema_path": str(path), "schema_name": schema.name, "fields": len(schema.fields)},
    )
    return schema


def parse_schema(text: str, *, fmt: str = "yaml") -> Schema:
    """Parse schema text.

    Args:
        text (str): Schema document.
        fmt (str): `yaml` or `json`. JSON is also valid YAML.

    Raises:
        SchemaParseError: If the payload is malformed or fails validation.

    Returns:
        Schema: Validated schema.
    """
    try:
        payload = json.loads(text) if fmt == "json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaParseError(message=f"Malformed schema {fmt.upper()}: {exc}") from exc
    return schema_from_payload(payload)


def schema_from_payload(payload: object) -> Schema:
    """Validate a deserialized schema payload.

    Args:
        payload (object): Deserialized document.

    Raises:
        SchemaParseError: If the payload is not a mapping, lacks `campos` or fails validation.

    Returns:
        Schema: Validated schema.
    """
    if not isinstance(payload, dict):
        raise SchemaParseError(message="Schema must be a mapping with a 'campos' list")

    payload_obj = cast("dict[str, object]", payload)
    if not any(payload_obj.get(key) is not None for key in _FIELDS_KEYS):
        raise SchemaParseError(message="Schema has no 'campos'")

    try:
        return Schema.model_validate(payload_obj)
    except ValidationError as exc:
        raise SchemaParseError(message=f"Invalid schema: {_summarize_validation_error(exc)}") from exc


def _summarize_validation_error(exc: ValidationError) -> str:
    """Render pydantic errors as `location: message` pairs.

    Args:
        exc (ValidationError): Validation failure.

    Returns:
        str: Compact error summary.
    """
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def _validate_schema_file_path(path: Path) -> None:
    """Validate schema file path before loading.

    Args:
        path (Path): Schema file path.

    Raises:
        SchemaParseError: If the path is not an existing YAML or JSON file.
    """
    if not isinstance(path, Path):
        raise SchemaParseError(message=f"Schema path must be a pathlib.Path instance, got: {type(path)!r}")
    if not path.is_file():
        raise SchemaParseError(message=f"Schema path is not a file: {path}")
    if path.suffix.lower() not in YAML_SUFFIXES | JSON_SUFFIXES:
        raise SchemaParseError(message=f"Schema path must end with .yaml, .yml or .json: {path}")
