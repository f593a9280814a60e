"""
TOML-based config file loading for Outlinemark.

Searches for `.outlinemark.toml`, `outlinemark.toml`, or `pyproject.toml
[tool.outlinemark]` walking up from the current directory. Config values are
merged with CLI flags using three-way precedence: explicit CLI flags > config
file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]


@dataclass
class OutlinemarkConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set, so the merge
    can tell "not configured" apart from "explicitly set to the default".
    """

    # Formatting
    tab_width: int | None = None
    numbering: bool | None = None
    footnotes: bool | None = None
    toc: bool | None = None
    # File discovery
    include: list[str] | None = None
    extend_include: list[str] | None = None
    exclude: list[str] | None = None
    extend_exclude: list[str] | None = None
    files_max_size: int | None = None
    respect_gitignore: bool | None = None


# Search order within each directory (first match wins).
_CONFIG_FILENAMES = [".outlinemark.toml", "outlinemark.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(OutlinemarkConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. A `pyproject.toml` only
    counts if it has a `[tool.outlinemark]` table.
    """
    current = start_dir.resolve()
    for directory in (current, *current.parents):
        for filename in _CONFIG_FILENAMES:
            candidate = directory / filename
            if not candidate.is_file():
                continue
            if filename != "pyproject.toml" or _pyproject_has_section(candidate):
                return candidate
    return None


def _pyproject_has_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "outlinemark" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> OutlinemarkConfig:
    """
    Load an `OutlinemarkConfig` from a TOML file. For `pyproject.toml` only the
    `[tool.outlinemark]` table is read.

    Raises:
        ValueError: If the file is not valid TOML.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file {config_path}: {e}") from e

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("outlinemark", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> OutlinemarkConfig:
    """Parse a flat or sectioned TOML dict. Tables like `[formatting]` are flattened."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(cast(dict[str, Any], value))
        else:
            flat[key] = value

    # Kebab-case keys map to snake_case fields; unknown keys are ignored.
    mapped = {key.replace("-", "_"): value for key, value in flat.items()}
    return OutlinemarkConfig(**{k: v for k, v in mapped.items() if k in _VALID_FIELDS})


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: OutlinemarkConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Apply config values to CLI options, except for flags the user passed
    explicitly. Modifies and returns `cli_opts`.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(OutlinemarkConfig):
        value = getattr(config, cfg_field.name)
        if value is None or cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, value)

    return cli_opts
