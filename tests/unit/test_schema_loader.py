from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from fieldmatch.exceptions import SchemaParseError
from fieldmatch.schema_loader import load_schema, parse_schema, schema_from_payload
from fieldmatch.typing.models import ChoiceField, NumericField, TextField

if TYPE_CHECKING:
    from pathlib import Path

_YAML_SCHEMA = """\
nome: Fatura
versao: "1.0"
idioma: pt-BR
campos:
  - id: total
    rotulos: ["total a pagar", "valor"]
    obrigatorio: true
    tipo: numerico
  - id: aceite
    rotulos: [aceite]
    tipo: escolha
    valores_validos: [sim, não]
"""


def test_load_schema_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "schema.yaml"
    path.write_text(_YAML_SCHEMA, encoding="utf-8")

    schema = load_schema(path)

    assert schema.name == "Fatura"
    assert schema.version == "1.0"
    assert schema.language == "pt-BR"
    assert isinstance(schema.fields[0], NumericField)
    assert isinstance(schema.fields[1], ChoiceField)
    assert schema.fields[1].allowed_values == ("sim", "não")


def test_load_schema_from_json(tmp_path: Path) -> None:
    path = tmp_path / "schema.json"
    path.write_text(json.dumps({"campos": [{"id": "a", "rotulos": ["A"]}]}), encoding="utf-8")

    schema = load_schema(path)

    assert [field.id for field in schema.fields] == ["a"]


def test_parse_schema_requires_campos() -> None:
    with pytest.raises(SchemaParseError, match="no 'campos'"):
        parse_schema("nome: Sem campos\n")


def test_parse_schema_accepts_empty_field_list() -> None:
    assert parse_schema("campos: []\n").fields == ()


def test_parse_schema_accepts_numeric_field_ids() -> None:
    schema = parse_schema("campos:\n  - id: 2024\n    rotulos: [ano]\n  - id: 1\n    rotulos: [primeiro]\n")

    assert [field.id for field in schema.fields] == ["2024", "1"]


def test_parse_schema_treats_blank_tipo_as_text() -> None:
    schema = parse_schema("campos:\n  - id: a\n    tipo:\n    rotulos: [nome]\n")

    [field] = schema.fields
    assert isinstance(field, TextField)
    assert field.type == "texto"


def test_parse_schema_rejects_malformed_yaml() -> None:
    with pytest.raises(SchemaParseError, match="Malformed schema YAML"):
        parse_schema("campos: [unclosed\n")


def test_parse_schema_rejects_malformed_json() -> None:
    with pytest.raises(SchemaParseError, match="Malformed schema JSON"):
        parse_schema("{", fmt="json")


def test_schema_from_payload_rejects_non_mapping() -> None:
    with pytest.raises(SchemaParseError, match="must be a mapping"):
        schema_from_payload(["campos"])


def test_schema_from_payload_reports_field_location() -> None:
    with pytest.raises(SchemaParseError, match="Invalid schema: .*duplicate field ids: a"):
        schema_from_payload({"campos": [{"id": "a"}, {"id": "a"}]})


def test_load_schema_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SchemaParseError, match="not a file"):
        load_schema(tmp_path / "missing.yaml")


def test_load_schema_rejects_unknown_suffix(tmp_path: Path) -> None:
    path = tmp_path / "schema.txt"
    path.write_text("campos: []", encoding="utf-8")

    with pytest.raises(SchemaParseError, match=r"\.yaml, \.yml or \.json"):
        load_schema(path)
