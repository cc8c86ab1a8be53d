"""Tests for restquery.parser.extractor."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from restquery.builders.query import build_query_string
from restquery.config import resolve_encoder_config
from restquery.exceptions import SpecParseError
from restquery.models import EncoderConfig, HTTPMethod, ParameterLocation, ParameterStyle
from restquery.parser.extractor import (
    _extract_schema_type,
    _merge_parameters,
    _stringify_default,
    extract_operation,
    extract_parameters,
)


def _param(name: str, location: str = "query", **extra: Any) -> dict[str, Any]:
    return {"name": name, "in": location, **extra}


# ---------------------------------------------------------------------------
# extract_parameters
# ---------------------------------------------------------------------------


class TestExtractParameters:
    def test_basic_query_parameter(self) -> None:
        [param] = extract_parameters(
            [_param("limit", required=True, description="Max", schema={"type": "integer"})]
        )
        assert param.name == "limit"
        assert param.location == ParameterLocation.QUERY
        assert param.required is True
        assert param.description == "Max"
        assert param.schema_type == "integer"
        assert param.style == ParameterStyle.SIMPLE
        assert param.default is None

    def test_declaration_order_kept(self) -> None:
        params = extract_parameters([_param("z"), _param("a"), _param("m")])
        assert [p.name for p in params] == ["z", "a", "m"]

    def test_path_parameters_always_required(self) -> None:
        [param] = extract_parameters([_param("id", "path", required=False)])
        assert param.required is True

    def test_unknown_location_skipped(self) -> None:
        params = extract_parameters([_param("x", "body"), _param("q")])
        assert [p.name for p in params] == ["q"]

    def test_missing_in_defaults_to_query(self) -> None:
        [param] = extract_parameters([{"name": "q"}])
        assert param.location == ParameterLocation.QUERY

    def test_declared_style(self) -> None:
        [param] = extract_parameters([_param("ids", style="form")])
        assert param.style == ParameterStyle.FORM

    def test_default_style_applied_when_absent(self) -> None:
        [param] = extract_parameters(
            [_param("ids")], EncoderConfig(default_style=ParameterStyle.FORM)
        )
        assert param.style == ParameterStyle.FORM

    def test_default_style_from_resolved_config(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RESTQUERY_DEFAULT_STYLE", "pipeDelimited")
        [declared, undeclared] = extract_parameters(
            [_param("a", style="simple"), _param("b")], resolve_encoder_config()
        )
        assert declared.style == ParameterStyle.SIMPLE
        assert undeclared.style == ParameterStyle.PIPE_DELIMITED

    def test_unknown_style_raises(self) -> None:
        with pytest.raises(SpecParseError, match="'ids'"):
            extract_parameters([_param("ids", style="exotic")])

    def test_unresolved_ref_raises(self) -> None:
        with pytest.raises(SpecParseError, match="#/components/parameters/Limit"):
            extract_parameters([{"$ref": "#/components/parameters/Limit"}])

    def test_missing_name_raises(self) -> None:
        with pytest.raises(SpecParseError):
            extract_parameters([{"in": "query"}])

    def test_schema_default_is_stringified(self) -> None:
        [param] = extract_parameters([_param("page", schema={"type": "integer", "default": 1})])
        assert param.default == "1"


class TestStringifyDefault:
    def test_none(self) -> None:
        assert _stringify_default(None) is None

    def test_string_verbatim(self) -> None:
        assert _stringify_default("open") == "open"

    def test_booleans_lowercase(self) -> None:
        assert _stringify_default(True) == "true"
        assert _stringify_default(False) == "false"

    def test_numbers(self) -> None:
        assert _stringify_default(10) == "10"
        assert _stringify_default(0.5) == "0.5"

    def test_list_as_compact_json(self) -> None:
        assert _stringify_default(["a", "b"]) == '["a","b"]'


class TestExtractSchemaType:
    def test_plain_type(self) -> None:
        assert _extract_schema_type({"type": "number"}) == "number"

    def test_openapi_31_type_array(self) -> None:
        assert _extract_schema_type({"type": ["null", "integer"]}) == "integer"

    def test_only_null(self) -> None:
        assert _extract_schema_type({"type": ["null"]}) == "string"

    def test_not_a_dict(self) -> None:
        assert _extract_schema_type(None) == "string"


# ---------------------------------------------------------------------------
# _merge_parameters
# ---------------------------------------------------------------------------


class TestMergeParameters:
    def test_operation_overrides_path_level_in_place(self) -> None:
        path_params = [_param("a", description="path"), _param("b")]
        op_params = [_param("c"), _param("a", description="op")]
        merged = _merge_parameters(path_params, op_params)
        assert [p["name"] for p in merged] == ["a", "b", "c"]
        assert merged[0]["description"] == "op"

    def test_missing_in_matches_query(self) -> None:
        merged = _merge_parameters(
            [{"name": "q", "description": "path"}], [_param("q", description="op")]
        )
        assert merged == [_param("q", description="op")]

    def test_same_name_different_location_kept(self) -> None:
        merged = _merge_parameters([_param("id", "path")], [_param("id", "query")])
        assert [(p["name"], p["in"]) for p in merged] == [("id", "path"), ("id", "query")]


# ---------------------------------------------------------------------------
# extract_operation
# ---------------------------------------------------------------------------


class TestExtractOperation:
    @pytest.fixture()
    def operation(self) -> dict[str, Any]:
        return {
            "operationId": "listPets",
            "summary": "List pets",
            "parameters": [
                _param("limit", schema={"type": "integer", "default": 20}),
                _param("tag", required=True),
            ],
        }

    def test_fields(self, operation: dict[str, Any]) -> None:
        op = extract_operation(
            "/pets/{owner}",
            "GET",
            operation,
            path_item={"parameters": [_param("owner", "path")]},
            server_url="https://petstore.example.com",
        )
        assert op.method == HTTPMethod.GET
        assert op.operation_id == "listPets"
        assert op.description == "List pets"
        assert op.server_url == "https://petstore.example.com"
        assert [p.name for p in op.parameters] == ["owner", "limit", "tag"]
        assert [p.name for p in op.query_parameters] == ["limit", "tag"]

    def test_feeds_query_builder(self, operation: dict[str, Any]) -> None:
        op = extract_operation("/pets", "get", operation)
        assert build_query_string(op, {"tag": "dog/cat"}) == "limit=20&tag=dog%2fcat"

    def test_unknown_method_raises(self, operation: dict[str, Any]) -> None:
        with pytest.raises(SpecParseError, match="FETCH"):
            extract_operation("/pets", "FETCH", operation)

    def test_path_level_without_in_is_overridden(self) -> None:
        op = extract_operation(
            "/search",
            "get",
            {"parameters": [_param("q", required=True)]},
            path_item={"parameters": [{"name": "q"}]},
        )
        assert [(p.name, p.required) for p in op.parameters] == [("q", True)]

    def test_config_reaches_parameters(self) -> None:
        op = extract_operation(
            "/search",
            "get",
            {"parameters": [_param("q")]},
            config=EncoderConfig(default_style=ParameterStyle.FORM),
        )
        assert op.parameters[0].style == ParameterStyle.FORM

    def test_duplicate_parameters_raise(self) -> None:
        operation = {"parameters": [_param("q"), _param("q")]}
        with pytest.raises(SpecParseError, match="Duplicate"):
            extract_operation("/search", "get", operation)
