"""Open paths in external programs."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

import click

LOGGER = logging.getLogger(__name__)


class LaunchError(Exception):
    """Raised when an external program cannot be started."""


def _spawn(args: list[str], *, cwd: Path | None = None) -> None:
    LOGGER.debug("Spawning %s (cwd=%s)", args, cwd)
    try:
        subprocess.Popen(args, cwd=cwd)
    except OSError as exc:
        raise LaunchError(f"Unable to run {args[0]}: {exc}") from exc


def open_in_file_manager(path: Path, command: str | None = None) -> None:
    """Open ``path`` with ``command``, or with the desktop default when unset."""
    if command:
        _spawn([*shlex.split(command), str(path)])
        return
    LOGGER.debug("Launching %s with the default application", path)
    if click.launch(str(path)) != 0:
        raise LaunchError(f"Unable to open {path}.")


def open_terminal(path: Path, command: str | None = None) -> bool:
    """Start ``command`` inside ``path``.

    Returns:
        bool: False when no terminal command is configured, so the caller
            should hand the path to the invoking shell instead.
    """
    if not command:
        return False
    _spawn(shlex.split(command), cwd=path)
    return True


__all__ = ["LaunchError", "open_in_file_manager", "open_terminal"]
