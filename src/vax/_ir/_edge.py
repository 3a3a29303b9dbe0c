"""Directed connections between node slots."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from vax._str_enum_with_doc import StrEnumWithDoc

if TYPE_CHECKING:
    from vax._wire import RawEdge


class EdgeDirection(StrEnumWithDoc):
    """Which side of an edge a node must be on to match a query."""

    AS_CONSUMER = "consumer", "The node receives the value (consumer side)"
    AS_PRODUCER = "producer", "The node supplies the value (producer side)"
    EITHER = "either", "The node is on either side"


class IncomingEdge(NamedTuple):
    """Index record for an edge, stored under its consumer node id."""

    consumer_slot: str
    producer_id: str
    producer_slot: str


@dataclass(frozen=True, slots=True)
class Edge:
    """A wire from a producer's output slot to a consumer's input slot.

    Edges relate nodes by id only. They are immutable: rewiring during
    inlining replaces the edge with a new one.
    """

    consumer_id: str
    consumer_slot: str
    producer_id: str
    producer_slot: str

    @classmethod
    def from_raw(cls, raw: RawEdge) -> Edge:
        consumer_id, consumer_slot, producer_id, producer_slot = raw
        return cls(consumer_id, consumer_slot, producer_id, producer_slot)

    def to_raw(self) -> RawEdge:
        """Return the ``(consumer_id, consumer_slot, producer_id, producer_slot)`` tuple."""
        return (self.consumer_id, self.consumer_slot, self.producer_id, self.producer_slot)

    def to_incoming(self) -> IncomingEdge:
        return IncomingEdge(self.consumer_slot, self.producer_id, self.producer_slot)

    def clone(self, prefix: str = "", *, rename_slots: bool = True) -> Edge:
        """Copy with node ids (and, unless disabled, slot names) prefixed."""
        slot_prefix = prefix if rename_slots else ""
        return Edge(
            consumer_id=f"{prefix}{self.consumer_id}",
            consumer_slot=f"{slot_prefix}{self.consumer_slot}",
            producer_id=f"{prefix}{self.producer_id}",
            producer_slot=f"{slot_prefix}{self.producer_slot}",
        )

    def replace(self, **changes: str) -> Edge:
        return dataclasses.replace(self, **changes)

    def touches(self, node_id: str, direction: EdgeDirection = EdgeDirection.EITHER) -> bool:
        """Check whether ``node_id`` is on the requested side of this edge."""
        match direction:
            case EdgeDirection.AS_CONSUMER:
                return self.consumer_id == node_id
            case EdgeDirection.AS_PRODUCER:
                return self.producer_id == node_id
            case _:
                return node_id in (self.consumer_id, self.producer_id)

    def __str__(self) -> str:
        return f"{self.producer_id}.{self.producer_slot} -> {self.consumer_id}.{self.consumer_slot}"
