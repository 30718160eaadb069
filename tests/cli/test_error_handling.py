"""
Test suite for CLI error handling.
"""

import json
from io import StringIO

import pytest
import typer
import yaml
from rich.console import Console

from ignr.cli.context import OutputFormat
from ignr.cli.error_handling import handle_error
from ignr.core.exceptions import ConfigurationError, ErrorCode, IgnrError, NotAGitRepositoryError


def capture_console():
    return Console(file=StringIO(), width=100, no_color=True)


@pytest.mark.cli
class TestHandleError:
    """Test rendering of IgnrError instances."""

    def test_exits_with_status_one(self):
        with pytest.raises(typer.Exit) as exc_info:
            handle_error(IgnrError("boom"), capture_console())
        assert exc_info.value.exit_code == 1

    def test_panel_and_suggestions(self):
        console = capture_console()
        error = NotAGitRepositoryError("Not in a git repository. Use --force to create .gitignore anyway.")

        with pytest.raises(typer.Exit):
            handle_error(error, console)

        output = console.file.getvalue()
        assert "Error: NotAGitRepositoryError" in output
        assert "Not in a git repository" in output
        assert "Suggested solutions:" in output
        assert "Run: ignr generate --force" in output
        assert "Run: git init" in output

    def test_no_suggestions_section_without_suggestions(self):
        console = capture_console()

        with pytest.raises(typer.Exit):
            handle_error(IgnrError("plain failure"), console)

        assert "Suggested solutions" not in console.file.getvalue()

    def test_message_markup_not_interpreted(self):
        console = capture_console()
        error = ConfigurationError("bad value [red]x[/red]", error_code=ErrorCode.CONFIG_INVALID_VALUE)

        with pytest.raises(typer.Exit):
            handle_error(error, console)

        assert "[red]x[/red]" in console.file.getvalue()

    def test_json_output(self, capsys):
        console = capture_console()
        error = ConfigurationError("bad value", error_code=ErrorCode.CONFIG_INVALID_VALUE, config_key="detection.max_depth")

        with pytest.raises(typer.Exit) as exc_info:
            handle_error(error, console, OutputFormat.JSON)

        assert exc_info.value.exit_code == 1
        assert console.file.getvalue() == ""
        captured = capsys.readouterr()
        assert captured.out == ""
        data = json.loads(captured.err)
        assert data["error_type"] == "ConfigurationError"
        assert data["error_code"] == ErrorCode.CONFIG_INVALID_VALUE.value
        assert data["context"]["user_context"]["config_key"] == "detection.max_depth"
        assert data["suggestions"][0]["command"] == "ignr config reset"

    def test_yaml_output(self, capsys):
        with pytest.raises(typer.Exit):
            handle_error(IgnrError("plain failure"), capture_console(), OutputFormat.YAML)

        data = yaml.safe_load(capsys.readouterr().err)
        assert data["message"] == "plain failure"
        assert data["suggestions"] == []
