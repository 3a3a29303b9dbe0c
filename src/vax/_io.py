"""Reading and writing graphs, schemas and function libraries as JSON files.

This is the surrounding layer used by the CLI; the core never touches disk.
"""

import json
import logging
from pathlib import Path
from typing import Any

from ._errors import GraphFormatError
from ._inline import FunctionLibrary
from ._ir import Graph
from ._wire import Schema

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON in {path}: {e}"
        raise GraphFormatError(msg) from e


def load_graph(path: Path) -> Graph:
    """Load a raw graph JSON file.

    Raises:
        GraphFormatError: If the file is not valid JSON or not a raw graph.

    """
    graph = Graph.from_raw(_read_json(path))
    logger.debug(f"Loaded {graph!r} from {path}")
    return graph


def dump_raw_graph(raw: dict[str, Any], path: Path) -> None:
    """Write a raw graph (or composed trees) as indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(raw, f, indent=2)
        f.write("\n")
    logger.debug(f"Wrote {path}")


def load_schema(path: Path) -> Schema:
    """Load a component schema JSON file."""
    return Schema.parse(_read_json(path))


def load_function_library(directory: Path) -> FunctionLibrary:
    """Load every ``*.json`` file in ``directory`` as a user-function body.

    The file stem is the function's component type name, so
    ``functions/Double.json`` defines the body of ``Double``.
    """
    library = FunctionLibrary()
    for path in sorted(directory.glob("*.json")):
        library.register(path.stem, _read_json(path))
        logger.debug(f"Loaded body of user function '{path.stem}'")
    return library
