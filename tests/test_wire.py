"""Tests for the raw graph and schema wire models."""

from typing import Any

import pytest

from vax import GraphFormatError, RawGraph, Schema
from vax._wire import RawNode, normalize_raw_graph, parse_raw_graph


class TestRawGraph:
    def test_aliases(self) -> None:
        node = RawNode.model_validate({"id": "n", "c": "Const", "a": {"Value": 1}, "t": "int"})
        assert node.component_type == "Const"
        assert node.attributes == {"Value": 1}
        assert node.type_info == "int"

    def test_field_names_accepted(self) -> None:
        node = RawNode(id="n", component_type="Const")
        assert node.to_wire() == {"id": "n", "c": "Const", "a": {}, "edges": {}}

    def test_optional_keys_omitted(self) -> None:
        node = RawNode.model_validate({"id": "n", "c": "Const", "x": 0, "y": 1.5})
        assert node.to_wire() == {"id": "n", "c": "Const", "a": {}, "edges": {}, "x": 0, "y": 1.5}

    def test_nested_composed_node(self) -> None:
        raw = {"id": "r", "c": "Print", "a": {}, "edges": {"text": {"id": "p", "c": "Const", "a": {}, "out": "out"}}}
        node = RawNode.model_validate(raw)
        assert node.edges["text"].out == "out"
        assert node.to_wire()["edges"]["text"] == {"id": "p", "c": "Const", "a": {}, "edges": {}, "out": "out"}

    def test_to_wire_copies_attributes(self) -> None:
        node = RawNode.model_validate({"id": "n", "c": "Const", "a": {"Value": [1, 2]}})
        node.to_wire()["a"]["Value"].append(3)
        assert node.attributes == {"Value": [1, 2]}

    def test_missing_sections_default_to_empty(self) -> None:
        assert normalize_raw_graph({}) == {"nodes": [], "edges": [], "comments": []}

    def test_edges_become_lists(self) -> None:
        raw = {"nodes": [], "edges": [("a", "x", "b", "out")]}
        assert normalize_raw_graph(raw)["edges"] == [["a", "x", "b", "out"]]

    def test_parsed_model_passes_through(self) -> None:
        model = RawGraph()
        assert parse_raw_graph(model) is model

    @pytest.mark.parametrize(
        "raw",
        [
            {"nodes": [{"c": "Const"}]},
            {"edges": [["a", "x", "b"]]},
            {"edges": [["a", "x", "b", "out", "extra"]]},
            {"comments": [{"text": "hello"}]},
            {"nodes": [], "extra": True},
        ],
    )
    def test_invalid(self, raw: dict[str, Any]) -> None:
        with pytest.raises(GraphFormatError, match="Invalid raw graph"):
            parse_raw_graph(raw)


class TestSchema:
    def test_user_function_types(self) -> None:
        schema = Schema.parse(
            {
                "components": {
                    "Add": {"inputs": ["a", "b"]},
                    "Double": {"isUserFunction": True},
                    "Print": {"isUserFunction": False},
                },
            },
        )

        assert schema.user_function_types() == frozenset({"Double"})
        assert schema.is_user_function("Double")
        assert not schema.is_user_function("Add")
        assert not schema.is_user_function("Unknown")

    def test_extra_component_keys_kept(self) -> None:
        schema = Schema.parse({"components": {"Add": {"inputs": ["a", "b"]}}})
        assert schema.components["Add"].model_extra == {"inputs": ["a", "b"]}

    def test_empty_schema(self) -> None:
        assert Schema.parse({}).user_function_types() == frozenset()

    def test_parsed_schema_passes_through(self) -> None:
        schema = Schema()
        assert Schema.parse(schema) is schema

    def test_invalid_schema(self) -> None:
        with pytest.raises(GraphFormatError, match="Invalid schema"):
            Schema.parse({"components": {"Add": {"isUserFunction": "maybe"}}})
