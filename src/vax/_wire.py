"""Wire format of raw graphs and component schemas.

A raw graph is the only persisted/exchanged representation::

    {
        "nodes": [{"id": ..., "c": ..., "a": {...}, "x": 0, "y": 0, "edges": {}}],
        "edges": [[consumer_id, consumer_slot, producer_id, producer_slot]],
        "comments": [{"comment": ["line", ...]}],
    }

The models here only validate and normalize that shape; the in-memory
representation used by the algorithms lives in `vax._ir`.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, ValidationError

from ._errors import GraphFormatError

RawEdge = tuple[str, str, str, str]


class RawNode(BaseModel):
    """A node as it appears on the wire.

    ``edges`` and ``out`` are only populated on composed nodes, which are an
    output-only shape.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: str
    component_type: str = Field(alias="c")
    attributes: dict[str, JsonValue] = Field(default_factory=dict, alias="a")
    type_info: JsonValue | None = Field(default=None, alias="t")
    x: int | float | None = None
    y: int | float | None = None
    edges: dict[str, RawNode] = Field(default_factory=dict)
    out: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Dump to the wire shape, omitting optional keys that are unset."""
        data: dict[str, Any] = {
            "id": self.id,
            "c": self.component_type,
            "a": copy.deepcopy(self.attributes),
            "edges": {slot: child.to_wire() for slot, child in self.edges.items()},
        }
        if self.type_info is not None:
            data["t"] = copy.deepcopy(self.type_info)
        if self.x is not None:
            data["x"] = self.x
        if self.y is not None:
            data["y"] = self.y
        if self.out is not None:
            data["out"] = self.out
        return data


class RawComment(BaseModel):
    """A free-text annotation."""

    model_config = ConfigDict(extra="forbid")

    comment: list[str] = Field(default_factory=list)


class RawGraph(BaseModel):
    """A whole graph as it appears on the wire."""

    model_config = ConfigDict(extra="forbid")

    nodes: list[RawNode] = Field(default_factory=list)
    edges: list[RawEdge] = Field(default_factory=list)
    comments: list[RawComment] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        """Dump to plain JSON-compatible data (edges become 4-element lists)."""
        return {
            "nodes": [node.to_wire() for node in self.nodes],
            "edges": [list(edge) for edge in self.edges],
            "comments": [{"comment": list(c.comment)} for c in self.comments],
        }


def parse_raw_graph(raw: RawGraph | Mapping[str, Any]) -> RawGraph:
    """Validate a raw graph description.

    Args:
        raw: Either an already validated RawGraph or a mapping of the wire shape.

    Returns:
        The validated RawGraph.

    Raises:
        GraphFormatError: If the mapping does not match the wire format.

    """
    if isinstance(raw, RawGraph):
        return raw
    try:
        return RawGraph.model_validate(raw)
    except ValidationError as e:
        msg = f"Invalid raw graph: {e}"
        raise GraphFormatError(msg) from e


def normalize_raw_graph(raw: RawGraph | Mapping[str, Any]) -> dict[str, Any]:
    """Return the canonical wire form of a raw graph, used for structural comparison."""
    return parse_raw_graph(raw).to_wire()


class SchemaComponent(BaseModel):
    """Schema entry for one component type.

    Only ``isUserFunction`` is interpreted here; slot shapes and other keys
    belong to the schema collaborator and are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    is_user_function: bool = Field(default=False, alias="isUserFunction")


class Schema(BaseModel):
    """Component schema: component type name to its description."""

    components: dict[str, SchemaComponent] = Field(default_factory=dict)

    @classmethod
    def parse(cls, raw: Schema | Mapping[str, Any]) -> Schema:
        """Validate a schema mapping, raising GraphFormatError on bad input."""
        if isinstance(raw, Schema):
            return raw
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            msg = f"Invalid schema: {e}"
            raise GraphFormatError(msg) from e

    def user_function_types(self) -> frozenset[str]:
        """Get the names of all component types flagged as user functions."""
        return frozenset(name for name, component in self.components.items() if component.is_user_function)

    def is_user_function(self, component_type: str) -> bool:
        """Check whether a component type is a user function.

        Unknown component types are treated as primitives.
        """
        component = self.components.get(component_type)
        return component is not None and component.is_user_function
