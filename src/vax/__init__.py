"""Intermediate-representation engine for node-graph programs."""

__all__ = [
    "Comment",
    "CycleDetectedError",
    "DanglingReferenceError",
    "DependencyGraph",
    "DuplicateNodeError",
    "Edge",
    "EdgeDirection",
    "FunctionLibrary",
    "Graph",
    "GraphFormatError",
    "IncomingEdge",
    "InlineResult",
    "Inliner",
    "InlinerConfig",
    "MissingFunctionBodyError",
    "Node",
    "NodeNotFoundError",
    "NonTerminatingInliningError",
    "PrefixGenerator",
    "RawGraph",
    "RecursiveFunctionError",
    "Schema",
    "UnmatchedBoundary",
    "UnmatchedBoundaryError",
    "UnmatchedPolicy",
    "Vax",
    "VaxError",
    "compose_tree",
]

from ._config import InlinerConfig, UnmatchedPolicy
from ._dependency import DependencyGraph
from ._engine import Vax
from ._errors import (
    CycleDetectedError,
    DanglingReferenceError,
    DuplicateNodeError,
    GraphFormatError,
    MissingFunctionBodyError,
    NodeNotFoundError,
    NonTerminatingInliningError,
    RecursiveFunctionError,
    UnmatchedBoundaryError,
    VaxError,
)
from ._inline import FunctionLibrary, InlineResult, Inliner, PrefixGenerator, UnmatchedBoundary
from ._ir import Comment, Edge, EdgeDirection, Graph, IncomingEdge, Node, compose_tree
from ._wire import RawGraph, Schema
