"""Tests for the vax command line interface."""

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from vax._cli.main import app

runner = CliRunner()


@pytest.fixture
def project(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    schema: dict[str, Any],
    double_body: dict[str, Any],
    program: dict[str, Any],
) -> Path:
    """A working directory with a graph, a schema and a function library."""
    (tmp_path / "functions").mkdir()
    (tmp_path / "functions" / "Double.json").write_text(json.dumps(double_body))
    (tmp_path / "schema.json").write_text(json.dumps(schema))
    (tmp_path / "program.json").write_text(json.dumps(program))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _inline_args(*extra: str) -> list[str]:
    return ["inline", "program.json", "-s", "schema.json", "-f", "functions", *extra]


class TestRoots:
    def test_lists_root_nodes(self, project: Path) -> None:
        result = runner.invoke(app, ["roots", "program.json"])

        assert result.exit_code == 0, result.output
        assert "Root nodes" in result.output
        assert "Total: 1 nodes" in result.output

    def test_missing_file(self, project: Path) -> None:
        result = runner.invoke(app, ["roots", "nope.json"])
        assert result.exit_code != 0


class TestCheck:
    def test_valid_graph(self, project: Path) -> None:
        result = runner.invoke(app, ["check", "program.json"])

        assert result.exit_code == 0, result.output
        assert "3 nodes, 2 edges, no problems" in result.output

    def test_dangling_edge(self, project: Path, program: dict[str, Any]) -> None:
        program["edges"].append(["print", "extra", "ghost", "out"])
        (project / "broken.json").write_text(json.dumps(program))

        result = runner.invoke(app, ["check", "broken.json"])

        assert result.exit_code == 1
        assert "ghost" in result.output
        assert "1 problem(s) found" in result.output

    def test_invalid_json(self, project: Path) -> None:
        (project / "broken.json").write_text("[")

        result = runner.invoke(app, ["check", "broken.json"])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output


class TestInline:
    def test_writes_output_file(self, project: Path) -> None:
        result = runner.invoke(app, _inline_args("-o", "flat.json"))

        assert result.exit_code == 0, result.output
        assert "Inlined 1 call(s) in 1 pass(es)" in result.output
        flat = json.loads((project / "flat.json").read_text())
        assert [node["id"] for node in flat["nodes"]] == ["x", "print", "uf_0_mul", "uf_0_two"]
        assert ["print", "text", "uf_0_mul", "out"] in flat["edges"]

    def test_writes_stdout(self, project: Path) -> None:
        result = runner.invoke(app, _inline_args())

        assert result.exit_code == 0, result.output
        flat = json.loads(result.stdout)
        assert len(flat["nodes"]) == 4

    def test_missing_body(self, project: Path) -> None:
        (project / "functions" / "Double.json").unlink()

        result = runner.invoke(app, _inline_args("-o", "flat.json"))

        assert result.exit_code == 1
        assert "No body registered for user function 'Double'" in result.output
        assert not (project / "flat.json").exists()

    def test_unmatched_policy_option(self, project: Path, program: dict[str, Any]) -> None:
        program["nodes"].append({"id": "y", "c": "Const", "a": {}, "edges": {}})
        program["edges"].append(["call", "Bogus", "y", "out"])
        (project / "program.json").write_text(json.dumps(program))

        result = runner.invoke(app, _inline_args("-o", "flat.json", "--on-unmatched", "raise"))

        assert result.exit_code == 1
        assert "Bogus" in result.output

    def test_settings_from_pyproject(self, project: Path) -> None:
        (project / "pyproject.toml").write_text('[tool.vax]\nschema = "schema.json"\nfunctions = "functions"\n')

        result = runner.invoke(app, ["inline", "program.json", "-o", "flat.json"])

        assert result.exit_code == 0, result.output
        assert "uf_0_mul" in (project / "flat.json").read_text()

    def test_invalid_pyproject(self, project: Path) -> None:
        (project / "pyproject.toml").write_text("[tool.vax]\nmax_passes = 0\n")

        result = runner.invoke(app, _inline_args())

        assert result.exit_code == 1
        assert "max_passes" in result.output


class TestCompose:
    def test_json_trees_from_roots(self, project: Path) -> None:
        result = runner.invoke(app, ["compose", "program.json", "--json"])

        assert result.exit_code == 0, result.output
        trees = json.loads(result.stdout)
        assert [tree["id"] for tree in trees] == ["x"]

    def test_json_trees_from_sinks_after_inlining(self, project: Path) -> None:
        result = runner.invoke(
            app,
            ["compose", "program.json", "-s", "schema.json", "-f", "functions", "--inline", "--sinks", "--json"],
        )

        assert result.exit_code == 0, result.output
        [tree] = json.loads(result.stdout)
        mul = tree["edges"]["text"]
        assert tree["id"] == "print"
        assert mul["id"] == "uf_0_mul"
        assert mul["out"] == "out"
        assert mul["edges"]["a"]["id"] == "x"
        assert mul["edges"]["b"]["a"] == {"Value": 2}

    def test_single_root(self, project: Path) -> None:
        result = runner.invoke(app, ["compose", "program.json", "--root", "print"])

        assert result.exit_code == 0, result.output
        assert "print" in result.output
        assert "call" in result.output

    def test_unknown_root(self, project: Path) -> None:
        result = runner.invoke(app, ["compose", "program.json", "--root", "ghost"])

        assert result.exit_code == 1
        assert "No node with id 'ghost'" in result.output

    def test_cycle(self, project: Path) -> None:
        cyclic = {
            "nodes": [{"id": "a", "c": "Mul", "a": {}, "edges": {}}, {"id": "b", "c": "Mul", "a": {}, "edges": {}}],
            "edges": [["a", "x", "b", "out"], ["b", "x", "a", "out"]],
            "comments": [],
        }
        (project / "cyclic.json").write_text(json.dumps(cyclic))

        result = runner.invoke(app, ["compose", "cyclic.json", "--root", "a"])

        assert result.exit_code == 1
        assert "already present in graph parents" in result.output
