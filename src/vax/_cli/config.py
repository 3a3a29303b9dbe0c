"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from vax._config import UnmatchedPolicy


class ConfigError(Exception):
    """Error in vax configuration."""


@dataclass(slots=True, frozen=True)
class VaxConfig:
    """Configuration loaded from the ``[tool.vax]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    schema: Path | None = None
    functions: Path | None = None
    max_passes: int | None = None
    on_unmatched: UnmatchedPolicy | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_path(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.vax].{key}: expected string path"
        raise ConfigError(msg)
    path = Path(value)
    if not path.is_absolute():
        path = project_root / path
    return path


def load_config(pyproject_path: Path) -> VaxConfig:
    """Load and validate [tool.vax] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed VaxConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("vax", {})
    if not section:
        return VaxConfig(project_root=project_root)

    max_passes = section.get("max_passes")
    # bool is an int subclass
    if max_passes is not None and (not isinstance(max_passes, int) or isinstance(max_passes, bool) or max_passes < 1):
        msg = "Invalid [tool.vax].max_passes: expected positive integer"
        raise ConfigError(msg)

    on_unmatched: UnmatchedPolicy | None = None
    if "on_unmatched" in section:
        try:
            on_unmatched = UnmatchedPolicy(section["on_unmatched"])
        except ValueError as e:
            choices = ", ".join(policy.value for policy in UnmatchedPolicy)
            msg = f"Invalid [tool.vax].on_unmatched: expected one of {choices}"
            raise ConfigError(msg) from e

    return VaxConfig(
        schema=_parse_path(section, "schema", project_root),
        functions=_parse_path(section, "functions", project_root),
        max_passes=max_passes,
        on_unmatched=on_unmatched,
        project_root=project_root,
    )


def get_config() -> VaxConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        VaxConfig (may be empty if no pyproject.toml or no [tool.vax] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return VaxConfig()
    return load_config(pyproject_path)
