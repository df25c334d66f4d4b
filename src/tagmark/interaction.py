"""Interactive prompts used by the command driver.

Menus are rendered as numbered rich tables on stderr so stdout stays free for
the directory path handed back to the calling shell. Typing text instead of a
number narrows the menu to the options that fuzzily match it.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

import click
from rich.console import Console
from rich.table import Table

from tagmark.catalog import CatalogError


class SelectionError(Exception):
    """Raised when a selection cannot be made."""


class Prompter(Protocol):
    """Capabilities the command driver needs from an interaction shell."""

    def select(self, prompt: str, options: Sequence[str], default: int = 0) -> int: ...

    def text(self, prompt: str, validate: Optional[Callable[[str], str]] = None) -> str: ...

    def confirm(self, prompt: str, default: bool = False) -> bool: ...


def fuzzy_match(query: str, candidate: str) -> bool:
    """Return True when the characters of ``query`` appear in order in ``candidate``."""
    remaining = iter(candidate.casefold())
    return all(char in remaining for char in query.casefold() if not char.isspace())


class ConsolePrompter:
    """Terminal prompts built on click and rich."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def select(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        """Ask the user to pick one of ``options``.

        Args:
            prompt: Question shown above the menu.
            options: Labels to choose from.
            default: Index chosen when the user just presses enter.

        Returns:
            int: Index of the chosen option within ``options``.

        Raises:
            SelectionError: If there is nothing to choose from.
            click.Abort: If input ends before a choice is made.
        """
        if not options:
            raise SelectionError(f"{prompt}: nothing to choose from.")
        visible = list(range(len(options)))
        fallback = default if 0 <= default < len(options) else 0

        while True:
            self._render(prompt, options, visible)
            position = visible.index(fallback) + 1 if fallback in visible else 1
            answer = click.prompt(
                "Number or filter", default=str(position), err=True, show_default=True
            ).strip()

            # Numbers outside the menu are treated as filter text, e.g. a tag named 2024.
            if answer.isdigit() and 1 <= int(answer) <= len(visible):
                return visible[int(answer) - 1]

            matches = [
                index for index, option in enumerate(options) if fuzzy_match(answer, option)
            ]
            if len(matches) == 1:
                return matches[0]
            if not matches:
                self._console.print(f"[yellow]Nothing matches '{answer}'.[/yellow]")
                visible = list(range(len(options)))
            else:
                visible = matches

    def text(self, prompt: str, validate: Optional[Callable[[str], str]] = None) -> str:
        """Ask for free text, re-prompting until ``validate`` accepts it."""

        def _convert(value: str) -> str:
            if validate is None:
                return value
            try:
                return validate(value)
            except (CatalogError, ValueError) as exc:
                raise click.BadParameter(str(exc)) from exc

        return click.prompt(prompt, err=True, value_proc=_convert)

    def confirm(self, prompt: str, default: bool = False) -> bool:
        return click.confirm(prompt, default=default, err=True)

    def _render(self, prompt: str, options: Sequence[str], visible: Sequence[int]) -> None:
        table = Table(title=prompt, show_header=False, title_justify="left")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Option")
        for position, index in enumerate(visible, start=1):
            table.add_row(str(position), options[index])
        self._console.print(table)


__all__ = ["Prompter", "ConsolePrompter", "SelectionError", "fuzzy_match"]
