"""Inline the Double and Quad user functions of the doubling example and print the composed tree.

Run from the repository root:

    python examples/doubling.py

The same result is available from the command line:

    cd examples/doubling
    vax compose program.json --inline --sinks
"""

import json
from pathlib import Path

import vax
from vax._io import load_function_library, load_schema

HERE = Path(__file__).parent / "doubling"

engine = vax.Vax(load_schema(HERE / "schema.json"), load_function_library(HERE / "functions"))
engine.load_graph(json.loads((HERE / "program.json").read_text()))

result = engine.inline_user_functions(engine.graph.clone())
print(f"Inlined {result.expanded} calls in {result.passes} passes")

[tree] = result.graph.compose_trees(result.graph.sink_nodes())
print(json.dumps(tree.to_raw(), indent=2))
