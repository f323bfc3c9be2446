"""Shared test fixtures for modelhint.

Provides reusable fixtures for isolated config environments, a copy of the
sample model project (``tests/fixtures/project``) with its own import
namespace, a SQLite database matching the sample models, and managing output
state. These fixtures are automatically discovered by pytest and available to
all test modules without explicit imports.
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    create_engine,
)

from modelhint.models import HintConfig, OrmConfig
from modelhint.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"

_PROJECT_PACKAGES = ("app", "tinyorm")


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path so
    that tests never touch real user config. Clears all MODELHINT_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("modelhint.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["MODELHINT_DATABASE_URL", "MODELHINT_FILENAME"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Sample project fixtures
# ---------------------------------------------------------------------------


def _purge_project_modules() -> None:
    for name in list(sys.modules):
        if name.split(".", 1)[0] in _PROJECT_PACKAGES:
            del sys.modules[name]


@pytest.fixture
def model_project(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A fresh copy of the sample project, importable and set as the working directory.

    The project contains ``tinyorm`` (a minimal active-record ORM) and
    ``app/models`` with ``User``, ``Post`` and ``Comment`` models, an
    abstract model and a plain class. Tests may rewrite its files freely.
    Previously imported ``app``/``tinyorm`` modules are purged before and
    after the test so each copy is imported from its own files.
    """
    project = isolated_config / "project"
    shutil.copytree(
        FIXTURES_DIR / "project", project, ignore=shutil.ignore_patterns("__pycache__")
    )
    monkeypatch.chdir(project)
    monkeypatch.syspath_prepend(str(project))
    monkeypatch.setattr(sys, "dont_write_bytecode", True)
    _purge_project_modules()
    yield project
    _purge_project_modules()


@pytest.fixture
def project_config(model_project: Path) -> HintConfig:
    """Effective configuration for the sample project (no database)."""
    return HintConfig(
        model_locations=["app"],
        base_path=str(model_project),
        orm=OrmConfig(
            model_base="tinyorm.Model",
            query_builder_type="tinyorm.Builder",
            collection_type="tinyorm.Collection",
        ),
    )


@pytest.fixture
def app_database(model_project: Path) -> str:
    """SQLite database with the tables of the sample models; returns its URL."""
    url = f"sqlite:///{model_project / 'app.db'}"
    engine = create_engine(url)
    metadata = MetaData()
    Table(
        "users",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("name", String(100)),
        Column("email", String(255)),
        Column("created_at", DateTime),
    )
    Table(
        "posts",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("user_id", Integer),
        Column("title", String(200)),
        Column("body", Text),
        Column("is_draft", Boolean),
        Column("rating", Float),
        Column("price", Numeric(10, 2)),
        Column("meta", JSON),
        Column("published_at", DateTime),
    )
    Table(
        "comments",
        metadata,
        Column("id", Integer, primary_key=True),
        Column("post_id", Integer),
        Column("body", Text),
    )
    metadata.create_all(engine)
    engine.dispose()
    return url


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Set up a quiet output manager for tests that don't care about output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Set up JSON output for tests that check JSON-formatted output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner with the sub-commands registered."""
    from typer.testing import CliRunner

    from modelhint.app import register_commands

    register_commands()
    return CliRunner()
