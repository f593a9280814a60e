"""
File discovery for outline documents.

Expands a mix of files, directories and glob patterns into a sorted list of
document paths. Directory walks skip default-excluded directories, anything
matched by `.gitignore` files under the walk root, and anything matched by a
`.outlinemarkignore` found in the walk root or one of its parents. All patterns
use gitignore syntax via `pathspec`.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pathspec

DEFAULT_INCLUDES: list[str] = ["*.rfc", "*.txxt", "*.txtx"]

# Directories that never hold documents worth renumbering. Pruned during walks.
DEFAULT_EXCLUDES: list[str] = [
    ".git/",
    ".hg/",
    ".svn/",
    ".venv/",
    "venv/",
    "__pycache__/",
    ".tox/",
    ".pytest_cache/",
    "*.egg-info/",
    "build/",
    "dist/",
    "node_modules/",
    ".idea/",
    ".vscode/",
    "vendor/",
    "third_party/",
]

IGNORE_FILE_NAME = ".outlinemarkignore"

_GLOB_CHARS = frozenset("*?[")


@dataclass
class FileResolverConfig:
    """
    Settings for file discovery.

    `exclude=None` keeps `DEFAULT_EXCLUDES`; a list replaces them.
    `files_max_size=0` disables the size limit.
    """

    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDES))
    extend_include: list[str] = field(default_factory=list)
    exclude: list[str] | None = None
    extend_exclude: list[str] = field(default_factory=list)
    respect_gitignore: bool = True
    files_max_size: int = 1_048_576

    @property
    def effective_include(self) -> list[str]:
        return self.include + self.extend_include

    @property
    def effective_exclude(self) -> list[str]:
        base = list(DEFAULT_EXCLUDES) if self.exclude is None else self.exclude
        return base + self.extend_exclude


def has_glob_chars(path: str) -> bool:
    return any(c in path for c in _GLOB_CHARS)


def _read_patterns(path: Path) -> pathspec.PathSpec | None:
    """Compile a gitignore-style file, or return None if it is missing or empty."""
    if not path.is_file():
        return None
    lines = [
        line
        for line in path.read_text().splitlines()
        if line.strip() and not line.strip().startswith("#")
    ]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitignore", lines)


def find_ignore_file(start_dir: Path) -> Path | None:
    """Walk up from `start_dir` to find the nearest `.outlinemarkignore`."""
    current = start_dir.resolve()
    for directory in (current, *current.parents):
        candidate = directory / IGNORE_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


class FileResolver:
    """Resolves input paths to document files using a `FileResolverConfig`."""

    def __init__(self, config: FileResolverConfig | None = None) -> None:
        self.config: FileResolverConfig = config or FileResolverConfig()
        self._include = pathspec.PathSpec.from_lines("gitignore", self.config.effective_include)
        self._exclude = pathspec.PathSpec.from_lines("gitignore", self.config.effective_exclude)
        self._gitignores: dict[Path, pathspec.PathSpec | None] = {}

    def resolve(self, paths: Sequence[str | Path]) -> list[Path]:
        """
        Resolve paths into a sorted, de-duplicated list of files.

        Files named explicitly are kept even if they don't match the include
        patterns (but are still subject to the size limit). Directories are
        walked with all filters applied. Glob matches are filtered by the include
        patterns and the size limit only; excludes and ignore files do not apply
        to them. Anything else raises `FileNotFoundError`.
        """
        found: set[Path] = set()
        for raw in paths:
            path = Path(raw)
            if path.is_file():
                if not self._too_large(path):
                    found.add(path.resolve())
            elif path.is_dir():
                found.update(p.resolve() for p in self._walk(path))
            elif has_glob_chars(str(raw)):
                found.update(p.resolve() for p in self._glob(str(raw)))
            else:
                raise FileNotFoundError(f"Path not found: {raw}")
        return sorted(found)

    def _walk(self, root: Path) -> Iterator[Path]:
        root = root.resolve()
        tool_rules: list[tuple[Path, pathspec.PathSpec]] = []
        ignore_file = find_ignore_file(root)
        if ignore_file:
            spec = _read_patterns(ignore_file)
            if spec is not None:
                tool_rules.append((ignore_file.parent, spec))

        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rules = self._gitignore_rules(current, root) + tool_rules

            # Prune in place so excluded directories are never entered.
            dirnames[:] = sorted(
                d for d in dirnames if not self._is_excluded_dir(current / d, root, rules)
            )

            for filename in sorted(filenames):
                filepath = current / filename
                if not self._include.match_file(filename):
                    continue
                if _is_ignored(filepath, rules, is_dir=False):
                    continue
                if not self._too_large(filepath):
                    yield filepath

    def _is_excluded_dir(
        self, path: Path, root: Path, rules: list[tuple[Path, pathspec.PathSpec]]
    ) -> bool:
        rel = path.relative_to(root).as_posix()
        if self._exclude.match_file(path.name + "/") or self._exclude.match_file(rel + "/"):
            return True
        return _is_ignored(path, rules, is_dir=True)

    def _gitignore_rules(
        self, directory: Path, root: Path
    ) -> list[tuple[Path, pathspec.PathSpec]]:
        """`.gitignore` specs from `root` down to `directory`, with their base directories."""
        if not self.config.respect_gitignore:
            return []
        chain = [root]
        for part in directory.relative_to(root).parts:
            chain.append(chain[-1] / part)

        rules: list[tuple[Path, pathspec.PathSpec]] = []
        for base in chain:
            if base not in self._gitignores:
                self._gitignores[base] = _read_patterns(base / ".gitignore")
            spec = self._gitignores[base]
            if spec is not None:
                rules.append((base, spec))
        return rules

    def _glob(self, pattern: str) -> Iterator[Path]:
        parts = Path(pattern).parts
        split = next(i for i, part in enumerate(parts) if has_glob_chars(part))
        base = Path(*parts[:split]) if split else Path(".")
        for path in sorted(base.glob(str(Path(*parts[split:])))):
            if path.is_file() and self._include.match_file(path.name) and not self._too_large(path):
                yield path

    def _too_large(self, path: Path) -> bool:
        limit = self.config.files_max_size
        if limit == 0:
            return False
        try:
            return path.stat().st_size > limit
        except OSError:
            return False


def _is_ignored(path: Path, rules: list[tuple[Path, pathspec.PathSpec]], *, is_dir: bool) -> bool:
    """Check `path` against each spec, relative to the directory the spec came from."""
    suffix = "/" if is_dir else ""
    for base, spec in rules:
        try:
            rel = path.relative_to(base).as_posix()
        except ValueError:
            continue
        if spec.match_file(rel + suffix):
            return True
    return False
