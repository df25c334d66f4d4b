"""Tests for the console prompter."""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner
from rich.console import Console

from tagmark.catalog import validate_alias
from tagmark.interaction import ConsolePrompter, SelectionError, fuzzy_match


def _prompter() -> ConsolePrompter:
    return ConsolePrompter(Console(stderr=True))


@pytest.mark.parametrize(
    ("query", "candidate", "expected"),
    [
        ("wk", "work", True),
        ("WORK", "work", True),
        ("kw", "work", False),
        ("", "anything", True),
        ("pr j", "proj  /srv/proj", True),
    ],
)
def test_fuzzy_match(query: str, candidate: str, expected: bool) -> None:
    assert fuzzy_match(query, candidate) is expected


@pytest.mark.parametrize(
    ("answers", "default", "expected"),
    [
        ("2\n", 0, 1),
        ("\n", 0, 0),
        ("\n", 2, 2),
        ("9\n1\n", 0, 0),
        ("hm\n", 0, 1),
        ("wo\n2\n", 0, 2),
        ("zzz\n3\n", 0, 2),
    ],
)
def test_select(answers: str, default: int, expected: int) -> None:
    with CliRunner().isolation(input=answers):
        index = _prompter().select("Choose tag", ["work", "home", "world"], default=default)

    assert index == expected


def test_select_without_options_fails() -> None:
    with pytest.raises(SelectionError):
        _prompter().select("Choose tag", [])


def test_select_aborts_when_input_ends() -> None:
    with CliRunner().isolation(input=""):
        with pytest.raises(click.Abort):
            _prompter().select("Choose tag", ["work"])


def test_text_reprompts_until_valid() -> None:
    with CliRunner().isolation(input="a/b\nproj\n"):
        value = _prompter().text("Enter alias", validate=validate_alias)

    assert value == "proj"


def test_confirm() -> None:
    with CliRunner().isolation(input="y\n"):
        assert _prompter().confirm("Remove?") is True
    with CliRunner().isolation(input="\n"):
        assert _prompter().confirm("Remove?", default=False) is False


def test_select_number_beyond_menu_filters_by_label() -> None:
    with CliRunner().isolation(input="2024\n"):
        index = _prompter().select("Choose tag", ["2023", "2024"])

    assert index == 1
