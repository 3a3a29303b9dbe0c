"""Shared fixtures: a tiny program calling the ``Double`` user function."""

import copy
from typing import Any

import pytest


def raw_node(node_id: str, component: str, **attributes: Any) -> dict[str, Any]:
    return {"id": node_id, "c": component, "a": attributes, "edges": {}}


SCHEMA: dict[str, Any] = {
    "components": {
        "Const": {"isUserFunction": False, "outputs": ["out"]},
        "Mul": {"isUserFunction": False, "inputs": ["a", "b"], "outputs": ["out"]},
        "Print": {"isUserFunction": False, "inputs": ["text"]},
        "Double": {"isUserFunction": True},
    },
}

DOUBLE_BODY: dict[str, Any] = {
    "nodes": [
        raw_node("in", "UF_Input", Name="Value"),
        raw_node("mul", "Mul"),
        raw_node("two", "Const", Value=2),
        raw_node("out", "UF_Output", Name="Result"),
    ],
    "edges": [["mul", "a", "in", "value"], ["mul", "b", "two", "out"], ["out", "value", "mul", "out"]],
    "comments": [],
}

PROGRAM: dict[str, Any] = {
    "nodes": [raw_node("x", "Const", Value=3), raw_node("call", "Double"), raw_node("print", "Print")],
    "edges": [["call", "Value", "x", "out"], ["print", "text", "call", "Result"]],
    "comments": [{"comment": ["prints 3 * 2"]}],
}


@pytest.fixture
def schema() -> dict[str, Any]:
    return copy.deepcopy(SCHEMA)


@pytest.fixture
def double_body() -> dict[str, Any]:
    return copy.deepcopy(DOUBLE_BODY)


@pytest.fixture
def program() -> dict[str, Any]:
    return copy.deepcopy(PROGRAM)
