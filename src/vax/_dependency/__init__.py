"""Call-graph analysis of user functions.

This module contains:
- DependencyGraph[T]: An immutable "depends on" relation
- find_cycle: Detection of recursive calls
"""

from ._algorithms import find_cycle
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "find_cycle"]
