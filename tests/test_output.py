"""Tests for modelhint.output: stream discipline, formats and escaping."""

from __future__ import annotations

import json

import pytest

from modelhint import output as output_module
from modelhint.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("modelhint.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    monkeypatch.setattr("modelhint.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# Format and colour resolution
# ------------------------------------------------------------------ #


class TestFormatResolution:
    def test_auto_is_plain_when_piped(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_is_rich_on_terminal(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_is_plain_on_terminal_without_colour(self, tty, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        assert OutputManager().format == OutputFormat.PLAIN

    def test_explicit_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# Diagnostics
# ------------------------------------------------------------------ #


class TestDiagnostics:
    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            ("info", "Written new docstring to user.py\n"),
            ("success", "Written new docstring to user.py\n"),
            ("warning", "Warning: Written new docstring to user.py\n"),
            ("error", "Error: Written new docstring to user.py\n"),
        ],
    )
    def test_plain_prefixes_on_stderr(self, capfd, non_tty, method, expected):
        getattr(OutputManager(no_color=True), method)("Written new docstring to user.py")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == expected

    def test_quiet_hides_progress_only(self, capfd, non_tty):
        manager = OutputManager(quiet=True, no_color=True)
        manager.info("hidden")
        manager.success("hidden")
        manager.warning("schema unavailable")
        manager.error("boom")
        assert capfd.readouterr().err == "Warning: schema unavailable\nError: boom\n"

    def test_debug_requires_verbose(self, capfd, non_tty):
        OutputManager(no_color=True).debug("details")
        assert capfd.readouterr().err == ""

        OutputManager(verbose=True, no_color=True).debug("Loading model 'app.models.user.User'")
        assert capfd.readouterr().err == "[debug] Loading model 'app.models.user.User'\n"

    def test_type_expressions_survive_rich_rendering(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        manager = OutputManager()
        manager.error("Collection|app.models.comment.Comment[] [bold]x[/bold]")
        manager.debug("never shown")
        err = capfd.readouterr().err
        assert "Error: Collection|app.models.comment.Comment[] [bold]x[/bold]" in err
        assert "never shown" not in err


# ------------------------------------------------------------------ #
# Tables and mappings
# ------------------------------------------------------------------ #


class TestPrintTable:
    def test_json_records(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(
            ["Class", "Model"], [["app.models.user.User", "yes"]]
        )
        assert json.loads(capfd.readouterr().out) == [
            {"Class": "app.models.user.User", "Model": "yes"}
        ]

    def test_plain_tab_separated(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_table(
            ["Class", "Model"], [["app.models.user.User", "yes"]]
        )
        assert capfd.readouterr().out == "Class\tModel\napp.models.user.User\tyes\n"

    def test_rich_table_keeps_brackets(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH).print_table(
            ["Type"], [["Comment[]"]], title="Discovered classes"
        )
        out = capfd.readouterr().out
        assert "Discovered classes" in out
        assert "Comment[]" in out


class TestPrintMapping:
    CONFIG = {
        "filename": "_model_hints.py",
        "model_locations": ["app"],
        "database": {"url": None, "custom_types": {}},
        "orm": {"model_base": "tinyorm.Model"},
    }

    def test_json_keeps_nesting(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_mapping(self.CONFIG)
        assert json.loads(capfd.readouterr().out) == self.CONFIG

    def test_plain_uses_dotted_keys(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_mapping(self.CONFIG)
        assert capfd.readouterr().out.splitlines() == [
            "Key\tValue",
            "filename\t_model_hints.py",
            'model_locations\t["app"]',
            "database.url\t",
            "database.custom_types\t{}",
            "orm.model_base\ttinyorm.Model",
        ]


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_default_created_lazily(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_output_installs_instance(self):
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager

    def test_module_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_table(["Class"], [["User"]])
        output_module.warning("note")
        captured = capfd.readouterr()
        assert captured.out == "Class\nUser\n"
        assert captured.err == "Warning: note\n"
