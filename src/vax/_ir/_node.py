"""Graph vertices and comments."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from vax._wire import RawComment, RawNode

if TYPE_CHECKING:
    from collections.abc import Generator


@dataclass(slots=True)
class Node:
    """A graph vertex: one primitive operation or one user-function call.

    On a raw graph node ``edges`` is empty and ``out`` is None. On a composed
    node (see `compose_tree`) ``edges`` maps each consumer slot name to the
    composed producer subtree, and ``out`` is the producer slot through which
    this node was reached from its parent.

    Attributes:
        id: Identifier, unique within a Graph.
        component_type: Name of the primitive or user function (wire ``c``).
        attributes: Opaque attribute bag interpreted by the schema (wire ``a``).
        type_info: Opaque type metadata from the editor (wire ``t``).
        x: Horizontal screen position, passed through.
        y: Vertical screen position, passed through.
        edges: Consumer slot name to composed child node.
        out: Producer slot name this node was reached through.

    """

    id: str
    component_type: str
    attributes: dict[str, Any] = field(default_factory=dict)
    type_info: Any = None
    x: float | None = None
    y: float | None = None
    edges: dict[str, Node] = field(default_factory=dict)
    out: str | None = None

    @classmethod
    def from_raw(cls, raw: RawNode, prefix: str = "") -> Node:
        """Build a node from its wire model, optionally prefixing its id."""
        return cls(
            id=f"{prefix}{raw.id}",
            component_type=raw.component_type,
            attributes=copy.deepcopy(raw.attributes),
            type_info=copy.deepcopy(raw.type_info),
            x=raw.x,
            y=raw.y,
            edges={slot: cls.from_raw(child, prefix) for slot, child in raw.edges.items()},
            out=raw.out,
        )

    def to_raw_model(self) -> RawNode:
        return RawNode.model_construct(
            id=self.id,
            component_type=self.component_type,
            attributes=self.attributes,
            type_info=self.type_info,
            x=self.x,
            y=self.y,
            edges={slot: child.to_raw_model() for slot, child in self.edges.items()},
            out=self.out,
        )

    def to_raw(self) -> dict[str, Any]:
        """Dump the node (and any composed children) to the wire shape.

        Optional keys that are unset or ``null`` are left out.
        """
        return self.to_raw_model().to_wire()

    def clone(self, prefix: str = "") -> Node:
        """Deep copy of this node with ``prefix`` prepended to its id."""
        return Node(
            id=f"{prefix}{self.id}",
            component_type=self.component_type,
            attributes=copy.deepcopy(self.attributes),
            type_info=copy.deepcopy(self.type_info),
            x=self.x,
            y=self.y,
            edges={slot: child.clone(prefix) for slot, child in self.edges.items()},
            out=self.out,
        )

    def iter_tree(self) -> Generator[Node]:
        """Iterate over this node and all composed descendants, depth first."""
        yield self
        for child in self.edges.values():
            yield from child.iter_tree()


@dataclass(frozen=True, slots=True)
class Comment:
    """An inert free-text annotation attached to a graph."""

    lines: tuple[str, ...] = ()

    @classmethod
    def from_raw(cls, raw: RawComment) -> Comment:
        return cls(lines=tuple(raw.comment))

    def to_raw_model(self) -> RawComment:
        return RawComment.model_construct(comment=list(self.lines))
