"""Shared fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

import pytest

from tagmark.cli import AppContext
from tagmark.config import ConfigManager


class ScriptedPrompter:
    """Prompter answering from a fixed script.

    Select answers may be an index, an exact option label, or the leading
    alias of a bookmark label.
    """

    def __init__(self, answers: Sequence[Any]) -> None:
        self.answers: List[Any] = list(answers)
        self.prompts: List[str] = []

    def _next(self, prompt: str) -> Any:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"No scripted answer left for {prompt!r}")
        return self.answers.pop(0)

    def select(self, prompt: str, options: Sequence[str], default: int = 0) -> int:
        answer = self._next(prompt)
        if isinstance(answer, int):
            return answer
        for index, option in enumerate(options):
            if option == answer or option.startswith(f"{answer}  "):
                return index
        raise AssertionError(f"{answer!r} is not one of {list(options)!r}")

    def text(self, prompt: str, validate: Optional[Callable[[str], str]] = None) -> str:
        answer = self._next(prompt)
        return validate(answer) if validate else answer

    def confirm(self, prompt: str, default: bool = False) -> bool:
        return bool(self._next(prompt))


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def make_app(tmp_path: Path, store_root: Path) -> Callable[..., AppContext]:
    """Return a factory building an app context with scripted answers."""

    def _make(*answers: Any) -> AppContext:
        manager = ConfigManager(config_path=tmp_path / "config.yaml", env={})
        manager.save({"storage": {"root_dir": str(store_root)}})
        return AppContext(manager, prompter=ScriptedPrompter(answers))

    return _make
