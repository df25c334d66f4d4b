"""Configuration models describing tagmark settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TagmarkBaseModel(BaseModel):
    """Shared configuration for tagmark Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class StorageSettings(TagmarkBaseModel):
    """Where catalogs are persisted.

    Attributes:
        root_dir: Directory holding the catalog files and the log file.
        tag_file: File name of the tag catalog inside ``root_dir``.
        bookmark_file: File name of the bookmark catalog inside ``root_dir``.
    """

    root_dir: str = "~/.tagmark"
    tag_file: str = "tagfile"
    bookmark_file: str = "bookmarks"

    def root_path(self) -> Path:
        return Path(self.root_dir).expanduser()

    def tag_path(self) -> Path:
        return self.root_path() / self.tag_file

    def bookmark_path(self) -> Path:
        return self.root_path() / self.bookmark_file


class LauncherSettings(TagmarkBaseModel):
    """External programs used to open paths.

    Attributes:
        file_manager: Command that opens a directory or file; the desktop
            default is used when unset.
        terminal: Command started inside a directory; when unset the
            directory is printed for the calling shell instead.
    """

    file_manager: Optional[str] = None
    terminal: Optional[str] = None


class LoggingSettings(TagmarkBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
        file_name: Log file name inside the storage root.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    max_size_mb: int = Field(default=5, ge=1)
    backup_count: int = Field(default=3, ge=0)
    file_name: str = "tagmark.log"


class CLIOptions(TagmarkBaseModel):
    """CLI behavior defaults.

    Attributes:
        print_cwd: Whether commands print the directory to change into on stdout.
    """

    print_cwd: bool = True


class TagmarkConfig(TagmarkBaseModel):
    """Top-level configuration struct for tagmark.

    Attributes:
        storage: Catalog file locations.
        launcher: External launcher commands.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    storage: StorageSettings = Field(default_factory=StorageSettings)
    launcher: LauncherSettings = Field(default_factory=LauncherSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "TagmarkBaseModel",
    "StorageSettings",
    "LauncherSettings",
    "LoggingSettings",
    "CLIOptions",
    "TagmarkConfig",
]
