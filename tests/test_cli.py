"""Smoke tests for the CLI entrypoint."""

from click.testing import CliRunner

from tagmark.cli import cli


def test_cli_help_displays_commands() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Tag files and bookmark directories" in result.output
    for command in ("tag", "tags", "bookmark", "config"):
        assert command in result.output


def test_bookmark_help_lists_actions() -> None:
    result = CliRunner().invoke(cli, ["bookmark", "--help"])

    assert result.exit_code == 0
    for command in ("add", "view", "list"):
        assert command in result.output
