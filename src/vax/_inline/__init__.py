"""User-function inlining.

Key types:
- FunctionLibrary: Body graphs of user functions by component type
- Inliner: Expands user-function nodes to a fixpoint
- InlineResult: Flattened graph plus pass statistics and unmatched boundaries
- UnmatchedBoundary: A call-site edge with no boundary marker in the body
- PrefixGenerator: Per-inliner source of unique identifier prefixes
"""

from ._inliner import InlineResult, Inliner, PrefixGenerator, UnmatchedBoundary
from ._library import FunctionLibrary

__all__ = ["FunctionLibrary", "InlineResult", "Inliner", "PrefixGenerator", "UnmatchedBoundary"]
