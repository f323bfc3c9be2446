"""AST-based discovery of candidate model classes.

Walks the configured model directories, parses every ``.py`` file with
:mod:`ast` and lists the module-level classes it defines as fully qualified
names (``app.models.user.User``). Module names are derived from the file path
relative to the project root, so the root must be importable for the names to
resolve later.

Nothing is imported here. Whether a class really is a model is decided by the
driver after loading it.
"""

from __future__ import annotations

import ast
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from modelhint.exceptions import DiscoveryError

logger = logging.getLogger(__name__)

# Directories that are always pruned during traversal.
_ALWAYS_SKIP = frozenset(
    {"__pycache__", ".git", ".tox", ".venv", "venv", ".mypy_cache", ".ruff_cache", ".pytest_cache"}
)


def _load_gitignore(root: Path) -> Optional[pathspec.PathSpec]:
    """Load ``.gitignore`` from *root* if it exists, returning a PathSpec matcher."""
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return None
    lines = gitignore.read_text(encoding="utf-8", errors="replace").splitlines()
    return pathspec.PathSpec.from_lines("gitignore", lines)


def module_name(path: Path, base_path: Path) -> str:
    """Dotted module name of *path* relative to *base_path*.

    ``app/models/user.py`` becomes ``app.models.user`` and a package's
    ``__init__.py`` becomes the package name.
    """
    parts = list(path.relative_to(base_path).with_suffix("").parts)
    if parts and parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


class ModelScanner:
    """List class names defined under a set of directories.

    Args:
        base_path: Project root. Model locations are resolved against it and
            module names are derived relative to it.
        exclude_patterns: Extra gitignore-style patterns to skip, matched
            against paths relative to each location.
    """

    def __init__(self, base_path: str | Path, exclude_patterns: Optional[list[str]] = None) -> None:
        self.base_path = Path(base_path).resolve()
        self.exclude_spec = (
            pathspec.PathSpec.from_lines("gitignore", exclude_patterns) if exclude_patterns else None
        )

    def scan(self, locations: Iterable[str]) -> list[str]:
        """Return fully qualified class names found under *locations*.

        Locations that do not exist are skipped. Names are de-duplicated and
        keep discovery order: locations in the given order, files sorted by
        path, classes in source order.

        Raises:
            DiscoveryError: If the project root is not a directory or a
                location lies outside of it.
        """
        if not self.base_path.is_dir():
            raise DiscoveryError(f"Project root {self.base_path} is not a directory")

        gitignore_spec = _load_gitignore(self.base_path)
        names: list[str] = []
        seen: set[str] = set()

        for location in locations:
            root = (self.base_path / location).resolve()
            if not root.is_dir():
                logger.debug("Model location %s does not exist, skipping", root)
                continue
            try:
                root.relative_to(self.base_path)
            except ValueError:
                raise DiscoveryError(
                    f"Model location {location} is outside the project root {self.base_path}"
                ) from None

            for path in self._python_files(root, gitignore_spec):
                for name in self._scan_file(path):
                    if name not in seen:
                        seen.add(name)
                        names.append(name)

        return names

    def _python_files(self, root: Path, gitignore_spec: Optional[pathspec.PathSpec]) -> list[Path]:
        py_files: list[Path] = []
        try:
            walker = os.walk(str(root), onerror=_raise_walk_error)
            for dirpath, dirnames, filenames in walker:
                rel_dir = os.path.relpath(dirpath, str(root))
                project_dir = os.path.relpath(dirpath, str(self.base_path))

                dirnames[:] = [
                    d for d in dirnames
                    if d not in _ALWAYS_SKIP
                    and not (gitignore_spec and gitignore_spec.match_file(
                        os.path.join(project_dir, d) + "/"
                    ))
                ]

                for fname in filenames:
                    if not fname.endswith(".py"):
                        continue
                    rel_path = os.path.join(rel_dir, fname) if rel_dir != "." else fname
                    if gitignore_spec and gitignore_spec.match_file(os.path.join(project_dir, fname)):
                        continue
                    if self.exclude_spec and self.exclude_spec.match_file(rel_path):
                        continue
                    py_files.append(Path(dirpath) / fname)
        except OSError as exc:
            raise DiscoveryError(f"Cannot list model location {root}: {exc}") from exc

        return sorted(py_files)

    def _scan_file(self, path: Path) -> list[str]:
        try:
            source = path.read_text(encoding="utf-8")
            tree = ast.parse(source, filename=str(path))
        except (SyntaxError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            return []

        module = module_name(path, self.base_path)
        return [
            f"{module}.{node.name}" if module else node.name
            for node in tree.body
            if isinstance(node, ast.ClassDef)
        ]


def _raise_walk_error(exc: OSError) -> None:
    raise exc


def namespaced_model_names(all_models: Iterable[str], names: Iterable[str]) -> list[str]:
    """Models from *all_models* whose qualified name ends with one of *names*.

    A name matches on whole dotted segments: ``User`` and ``models.user.User``
    both select ``app.models.user.User``, while ``ser`` selects nothing.
    """
    suffixes = tuple("." + name.strip().lstrip(".") for name in names if name.strip())
    if not suffixes:
        return []
    return [model for model in all_models if ("." + model).endswith(suffixes)]
