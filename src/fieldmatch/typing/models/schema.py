"""Schema-centric domain models.

Schema files use Portuguese keys (`campos`, `rotulos`, `tipo`, ...). Each key is
declared as a validation alias so models can also be built from the English
attribute names.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)

from fieldmatch.typing.enums import FieldType

_TYPE_KEYS = ("tipo", "type")


def _as_string_tuple(value: object) -> object:
    """Normalize a scalar or list of scalars into a tuple of strings.

    Args:
        value (object): Raw value from a schema file.

    Returns:
        object: Tuple of strings, or the untouched value when it is not list-like.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list | tuple):
        return tuple(item if isinstance(item, str) else str(item) for item in value)
    return value


class _BaseField(BaseModel):
    """Attributes shared by every field type."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    labels: tuple[str, ...] = Field(default=(), validation_alias=AliasChoices("rotulos", "labels"))
    required: bool = Field(default=False, validation_alias=AliasChoices("obrigatorio", "required"))
    min_words: int | None = Field(default=None, ge=0, validation_alias=AliasChoices("min_palavras", "min_words"))
    pattern: str | None = Field(default=None, validation_alias=AliasChoices("regex", "pattern"))

    @model_validator(mode="before")
    @classmethod
    def _coerce_raw_field(cls, data: Any) -> Any:
        """Normalize raw YAML scalars before field validation.

        Numeric ids become strings and a blank `tipo` falls back to the default type.

        Args:
            data (Any): Raw field mapping or model.

        Returns:
            Any: Normalized mapping, or `data` untouched when it is not a mapping.
        """
        if not isinstance(data, dict):
            return data
        normalized = {key: value for key, value in data.items() if not (key in _TYPE_KEYS and value is None)}
        raw_id = normalized.get("id")
        if isinstance(raw_id, int | float) and not isinstance(raw_id, bool):
            normalized["id"] = str(raw_id)
        return normalized

    @field_validator("labels", mode="before")
    @classmethod
    def _coerce_labels(cls, value: object) -> object:
        """Accept a single label or scalar labels written unquoted in YAML."""
        return _as_string_tuple(value)

    @field_validator("id")
    @classmethod
    def _validate_id(cls, value: str) -> str:
        """Reject blank identifiers.

        Args:
            value (str): Raw identifier.

        Raises:
            ValueError: If the identifier is blank.

        Returns:
            str: Identifier.
        """
        if not value.strip():
            raise ValueError("field id must not be blank")  # noqa: TRY003
        return value

    @field_validator("pattern")
    @classmethod
    def _validate_pattern(cls, value: str | None) -> str | None:
        """Ensure the validation pattern compiles.

        Args:
            value (str | None): Raw regular expression.

        Raises:
            ValueError: If the expression is not a valid regular expression.

        Returns:
            str | None: Pattern.
        """
        if value is None:
            return None
        try:
            re.compile(value, re.IGNORECASE)
        except re.error as exc:
            raise ValueError(f"invalid regex {value!r}: {exc}") from exc
        return value

    @property
    def query(self) -> str:
        """Return the label string used as the similarity query."""
        return " ".join(self.labels)


class TextField(_BaseField):
    """Free text field."""

    type: Literal["texto"] = Field(default="texto", validation_alias=AliasChoices("tipo", "type"))


class NumericField(_BaseField):
    """Field whose page must contain a number."""

    type: Literal["numerico"] = Field(
        default="numerico",
        validation_alias=AliasChoices("tipo", "type"),
    )


class ChoiceField(_BaseField):
    """Field whose page must mention one of the allowed values."""

    type: Literal["escolha"] = Field(default="escolha", validation_alias=AliasChoices("tipo", "type"))
    allowed_values: tuple[str, ...] = Field(
        default=(),
        validation_alias=AliasChoices("valores_validos", "allowed_values"),
    )

    @field_validator("allowed_values", mode="before")
    @classmethod
    def _coerce_allowed_values(cls, value: object) -> object:
        """Accept scalar values written unquoted in YAML."""
        return _as_string_tuple(value)


class BooleanField(_BaseField):
    """Yes/no field. Carries no extra rule."""

    type: Literal["booleano"] = Field(
        default="booleano",
        validation_alias=AliasChoices("tipo", "type"),
    )


def _field_type_tag(value: Any) -> str:
    """Return the union tag of a raw or already-built field.

    Args:
        value (Any): Mapping from a schema file or a field model.

    Returns:
        str: Field type tag, `texto` when absent.
    """
    if isinstance(value, dict):
        raw = next((value[key] for key in _TYPE_KEYS if value.get(key) is not None), None)
        return str(raw) if raw is not None else FieldType.TEXT.value
    return str(getattr(value, "type", FieldType.TEXT))


SchemaField = Annotated[
    Annotated[TextField, Tag(FieldType.TEXT.value)]
    | Annotated[NumericField, Tag(FieldType.NUMERIC.value)]
    | Annotated[ChoiceField, Tag(FieldType.CHOICE.value)]
    | Annotated[BooleanField, Tag(FieldType.BOOLEAN.value)],
    Discriminator(_field_type_tag),
]


class Schema(BaseModel):
    """Ordered set of fields to locate and validate in a document."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str | None = Field(default=None, validation_alias=AliasChoices("nome", "name"))
    version: str | None = Field(default=None, validation_alias=AliasChoices("versao", "version"))
    language: str | None = Field(default=None, validation_alias=AliasChoices("idioma", "language"))
    fields: tuple[SchemaField, ...] = Field(validation_alias=AliasChoices("campos", "fields"))

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: object) -> object:
        """Accept numeric versions such as `1.0` written unquoted in YAML.

        Args:
            value (object): Raw version.

        Returns:
            object: Version as string when numeric.
        """
        if isinstance(value, int | float):
            return str(value)
        return value

    @model_validator(mode="after")
    def _validate_unique_ids(self) -> Schema:
        """Ensure field identifiers are unique.

        Raises:
            ValueError: If two fields share an identifier.

        Returns:
            Schema: Validated schema.
        """
        seen: set[str] = set()
        duplicates: list[str] = []
        for field in self.fields:
            if field.id in seen:
                duplicates.append(field.id)
            seen.add(field.id)
        if duplicates:
            raise ValueError(f"duplicate field ids: {', '.join(duplicates)}")
        return self
