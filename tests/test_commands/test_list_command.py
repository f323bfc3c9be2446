"""Integration tests for ``modelhint list``."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from modelhint.app import app


class TestListCommand:
    def test_json_rows(self, cli_runner: CliRunner, model_project: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "list"])

        assert result.exit_code == 0, result.output
        rows = {row["Class"]: row for row in json.loads(result.stdout)}
        assert rows["app.models.user.User"]["Model"] == "yes"
        assert rows["app.models.base.Helper"]["Model"] == "no"
        assert rows["app.models.base.AuditedModel"]["Note"] == "abstract"
        assert rows["app.models.comment.CommentCollection"]["Model"] == "no"

    def test_plain_table(self, cli_runner: CliRunner, model_project: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "list"])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines()[0] == "Class\tModel\tNote"
        assert "app.models.post.Post\tyes\t" in result.stdout

    def test_import_error_is_reported_in_row(self, cli_runner: CliRunner, model_project: Path) -> None:
        (model_project / "app" / "models" / "broken.py").write_text(
            "raise RuntimeError('boom')\n\n\nclass Broken:\n    pass\n", encoding="utf-8"
        )

        result = cli_runner.invoke(app, ["--json", "list"])

        rows = {row["Class"]: row for row in json.loads(result.stdout)}
        assert rows["app.models.broken.Broken"]["Model"] == "error"
        assert "boom" in rows["app.models.broken.Broken"]["Note"]

    def test_empty_location(self, cli_runner: CliRunner, model_project: Path) -> None:
        (model_project / "modelhint.json").write_text(
            '{"model_locations": ["empty"], "orm": {"model_base": "tinyorm.Model"}}',
            encoding="utf-8",
        )
        (model_project / "empty").mkdir()

        result = cli_runner.invoke(app, ["--no-color", "list"])

        assert result.exit_code == 0, result.output
        assert "No classes found in: empty" in result.output
