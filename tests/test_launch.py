"""Tests for launching external programs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from tagmark import launch
from tagmark.launch import LaunchError, open_in_file_manager, open_terminal


class _PopenRecorder:
    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Any]] = []

    def __call__(self, args: list[str], cwd: Any = None) -> None:
        self.calls.append((args, cwd))


def test_open_terminal_without_command_defers_to_shell(tmp_path: Path) -> None:
    assert open_terminal(tmp_path, None) is False


def test_open_terminal_spawns_in_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    recorder = _PopenRecorder()
    monkeypatch.setattr(launch.subprocess, "Popen", recorder)

    assert open_terminal(tmp_path, "kitty --single-instance") is True
    assert recorder.calls == [(["kitty", "--single-instance"], tmp_path)]


def test_file_manager_command_receives_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    recorder = _PopenRecorder()
    monkeypatch.setattr(launch.subprocess, "Popen", recorder)

    open_in_file_manager(tmp_path, "nautilus -w")

    assert recorder.calls == [(["nautilus", "-w", str(tmp_path)], None)]


def test_file_manager_defaults_to_click_launch(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    launched: list[str] = []
    monkeypatch.setattr(launch.click, "launch", lambda url: launched.append(url) or 0)

    open_in_file_manager(tmp_path)

    assert launched == [str(tmp_path)]


def test_failed_default_launch_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(launch.click, "launch", lambda url: 1)

    with pytest.raises(LaunchError):
        open_in_file_manager(tmp_path)


def test_missing_program_raises(tmp_path: Path) -> None:
    with pytest.raises(LaunchError):
        open_in_file_manager(tmp_path, "definitely-not-a-real-program-xyz")
