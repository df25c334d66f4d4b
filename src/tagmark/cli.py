"""Command line interface for tagmark."""

from __future__ import annotations

import difflib
import json
import logging
import os
from contextlib import contextmanager
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from tagmark.catalog import (
    BookmarkCatalog,
    BookmarkRecord,
    CatalogIntegrityError,
    DuplicateAliasError,
    FileRecord,
    InvalidAliasError,
    InvalidPathError,
    NotFoundError,
    TagCatalog,
    validate_alias,
)
from tagmark.config import (
    ConfigError,
    ConfigManager,
    TagmarkConfig,
    assign_nested,
    resolve_with_precedence,
)
from tagmark.interaction import ConsolePrompter, Prompter, SelectionError
from tagmark.launch import LaunchError, open_in_file_manager, open_terminal
from tagmark.logging_config import configure_logging
from tagmark.state import CatalogStore, EncodeError, StateError, bookmark_store, tag_store

LOGGER = logging.getLogger(__name__)

# Messages go to stderr; stdout only carries paths and listings.
console = Console(stderr=True)
out = Console()

CREATE_TAG_OPTION = "Create new tag"
_TAG_ACTIONS = ["Choose tag", "Remove tag"]
OPEN_TERMINAL = "Open path in terminal"
OPEN_FILE_MANAGER = "Open path in file manager"
OPEN_FILE = "Open file"
REMOVE_FILE = "Remove file from tag"
_BOOKMARK_ACTIONS = ["Open", "Open in file manager", "Rename", "Remove"]

_EXIT_CODES: tuple[tuple[type[Exception], int], ...] = (
    (SelectionError, 2),
    (NotFoundError, 3),
    (DuplicateAliasError, 4),
    (InvalidAliasError, 5),
    (InvalidPathError, 6),
    (StateError, 7),
    (ConfigError, 8),
    (CatalogIntegrityError, 9),
    (LaunchError, 10),
)


class CommandError(click.ClickException):
    """Click exception carrying the exit code of the error it wraps."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Translate domain errors into click exceptions with distinct exit codes.

    Raises:
        CommandError: For any error listed in ``_EXIT_CODES``.
    """
    try:
        yield
    except tuple(kind for kind, _ in _EXIT_CODES) as exc:
        code = next(code for kind, code in _EXIT_CODES if isinstance(exc, kind))
        LOGGER.warning("%s: %s", type(exc).__name__, exc)
        raise CommandError(str(exc), exit_code=code) from exc


@dataclass
class AppContext:
    """Per-invocation state shared by commands.

    Attributes:
        manager: Configuration manager for the active config file.
        prompter: Interaction shell used for menus and text input.
        overrides: Dotted ``--set`` overrides applied above file and environment.
    """

    manager: ConfigManager
    prompter: Prompter = field(default_factory=lambda: ConsolePrompter(console))
    overrides: Dict[str, Any] = field(default_factory=dict)
    _config: Optional[TagmarkConfig] = None

    @property
    def config(self) -> TagmarkConfig:
        """Load configuration on first use and configure logging from it.

        Raises:
            ConfigError: If the configuration is invalid.
            EncodeError: If the log file cannot be created under the storage root.
        """
        if self._config is None:
            config = self.manager.load(cli_overrides=self.overrides)
            root = config.storage.root_path()
            try:
                configure_logging(config.logging, root)
            except OSError as exc:
                raise EncodeError(f"Unable to prepare log file under {root}: {exc}") from exc
            self._config = config
        return self._config

    def tag_store(self) -> CatalogStore[TagCatalog]:
        return tag_store(self.config.storage.tag_path())

    def bookmark_store(self) -> CatalogStore[BookmarkCatalog]:
        return bookmark_store(self.config.storage.bookmark_path())


def _print_directory(app: AppContext, directory: Path) -> None:
    """Hand ``directory`` to the calling shell when enabled."""
    if app.config.cli.print_cwd:
        click.echo(str(directory))


def _current_directory() -> Path:
    """Return the working directory if it can be bookmarked.

    Raises:
        InvalidPathError: If it is gone, not a directory, or not valid UTF-8.
    """
    try:
        cwd = os.getcwd()
    except FileNotFoundError as exc:
        raise InvalidPathError("The current directory no longer exists.") from exc
    path = Path(cwd)
    if not path.is_dir():
        raise InvalidPathError(f"{path} is not a directory.")
    try:
        cwd.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidPathError("The current directory path is not valid UTF-8.") from exc
    return path


def _validate_tag_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise ValueError("Tag name must not be empty.")
    return name


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="tagmark")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TAGMARK_CONFIG",
    help="Configuration file to use instead of ~/.tagmark/config.yaml.",
)
@click.option(
    "--set",
    "set_options",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a configuration value for this run, e.g. storage.root_dir=/tmp/tm.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, set_options: tuple[str, ...]) -> None:
    """Tag files and bookmark directories from the command line."""
    if ctx.obj is None:
        ctx.obj = AppContext(ConfigManager(config_path), overrides=_parse_overrides(set_options))


def _parse_overrides(assignments: tuple[str, ...]) -> Dict[str, Any]:
    """Turn ``KEY=VALUE`` pairs into dotted overrides with YAML-parsed values.

    Raises:
        click.BadParameter: If an entry has no ``=`` or an empty key.
    """
    overrides: Dict[str, Any] = {}
    for assignment in assignments:
        key, sep, raw_value = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(
                f"Expected KEY=VALUE, got '{assignment}'.", param_hint="--set"
            )
        try:
            overrides[key] = yaml.safe_load(raw_value)
        except yaml.YAMLError as exc:
            raise click.BadParameter(
                f"Unable to parse value for {key}: {exc}", param_hint="--set"
            ) from exc
    return overrides


# Tags ----------------------------------------------------------------


@cli.command()
@click.argument("file", required=False)
@click.option(
    "-t",
    "--tag",
    "tag_names",
    multiple=True,
    help="Tag to apply without prompting. Repeat for several tags.",
)
@click.pass_obj
def tag(app: AppContext, file: str | None, tag_names: tuple[str, ...]) -> None:
    """Tag FILE, or browse tagged files when FILE is omitted.

    FILE is resolved against the current directory and must exist.
    """
    if file is None and tag_names:
        raise click.UsageError("--tag requires a FILE argument.")
    names = [name.strip() for name in tag_names]
    if not all(names):
        raise click.BadParameter("Tag names must not be empty.", param_hint="--tag")
    with _handle_errors():
        if file is None:
            _browse_tags(app)
        else:
            _tag_file(app, file, names)


def _tag_file(app: AppContext, file: str, tag_names: List[str]) -> None:
    cwd = Path.cwd()
    path = Path(os.path.abspath(cwd / file))
    if not path.exists():
        raise NotFoundError(f"{file} is not found")

    store = app.tag_store()
    catalog = store.load()
    if not tag_names:
        tag_names = [_choose_tag(app, catalog)]

    record = FileRecord(name=file, path=str(path), tags=tag_names)
    report = catalog.insert_file(record)
    for skipped in report.skipped:
        console.print(f"[yellow]{file} already exists in {skipped}[/yellow]")
    if report.added:
        store.save(catalog)
        LOGGER.info("Tagged %s with %s", path, ", ".join(report.added))
        console.print(f"[green]Tagged {file} with {', '.join(report.added)}.[/green]")
    _print_directory(app, cwd)


def _choose_tag(app: AppContext, catalog: TagCatalog) -> str:
    options = [*catalog.tags(), CREATE_TAG_OPTION]
    selection = app.prompter.select("Choose tags", options)
    if selection == len(options) - 1:
        return app.prompter.text("Enter tag name", validate=_validate_tag_name)
    return options[selection]


def _browse_tags(app: AppContext) -> None:
    store = app.tag_store()
    catalog = store.load()
    tags = catalog.tags()
    if not tags:
        console.print("[yellow]No tags yet. Tag a file with `tagmark tag FILE`.[/yellow]")
        return

    action = app.prompter.select("Choose tag or remove tag", _TAG_ACTIONS)
    chosen = tags[app.prompter.select("Choose tag", tags)]

    if _TAG_ACTIONS[action] == "Remove tag":
        catalog.remove_tag(chosen)
        store.save(catalog)
        LOGGER.info("Removed tag %s", chosen)
        console.print(f"[green]Removed tag {chosen}.[/green]")
        _print_directory(app, Path.cwd())
        return

    files = catalog.files_of(chosen)
    if not files:
        raise NotFoundError(f"No files found in tag {chosen}")
    record = files[app.prompter.select("Choose file", [entry.name for entry in files])]

    path = Path(record.path)
    if not path.exists():
        raise NotFoundError(f"{record.name} is not found")
    is_file = path.is_file()
    directory = path.parent if is_file else path

    options = [OPEN_TERMINAL, OPEN_FILE_MANAGER]
    if is_file:
        options.append(OPEN_FILE)
    options.append(REMOVE_FILE)
    choice = options[app.prompter.select("Choose action", options)]

    launcher = app.config.launcher
    if choice == OPEN_TERMINAL:
        if not open_terminal(directory, launcher.terminal):
            click.echo(str(directory))
        return
    if choice == REMOVE_FILE:
        catalog.remove_file(chosen, record.name)
        store.save(catalog)
        LOGGER.info("Removed %s from tag %s", record.name, chosen)
        console.print(f"[green]Removed {record.name} from {chosen}.[/green]")
    else:
        open_in_file_manager(path if choice == OPEN_FILE else directory, launcher.file_manager)
    _print_directory(app, Path.cwd())


@cli.command("tags")
@click.option("--json", "json_output", is_flag=True, help="Emit the tag catalog as JSON.")
@click.pass_obj
def list_tags(app: AppContext, json_output: bool) -> None:
    """List tags and the files under each."""
    with _handle_errors():
        catalog = app.tag_store().load()

    if json_output:
        payload: dict[str, Any] = {}
        for tag_name in catalog.tags():
            files = catalog.files_of(tag_name) or []
            payload[tag_name] = [record.model_dump(mode="json") for record in files]
        click.echo(json.dumps(payload, indent=2))
        return

    if not len(catalog):
        console.print("[yellow]No tags yet.[/yellow]")
        return

    table = Table(title="Tags")
    table.add_column("Tag", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Names")
    for tag_name in catalog.tags():
        files = catalog.files_of(tag_name) or []
        table.add_row(tag_name, str(len(files)), ", ".join(record.name for record in files))
    out.print(table)


# Bookmarks -----------------------------------------------------------


@cli.group()
def bookmark() -> None:
    """Bookmark directories under short aliases."""


@bookmark.command("add")
@click.argument("alias", required=False)
@click.pass_obj
def bookmark_add(app: AppContext, alias: str | None) -> None:
    """Bookmark the current directory as ALIAS (prompted when omitted)."""
    with _handle_errors():
        directory = _current_directory()
        store = app.bookmark_store()
        catalog = store.load()
        if alias is None:
            alias = app.prompter.text("Enter alias", validate=validate_alias)

        catalog.insert(BookmarkRecord(alias=alias, folder_path=str(directory)))
        store.save(catalog)
        LOGGER.info("Bookmarked %s as %s", directory, alias)
        console.print(f"[green]Bookmarked {directory} as {alias}.[/green]")
        _print_directory(app, directory)


@bookmark.command("view")
@click.pass_obj
def bookmark_view(app: AppContext) -> None:
    """Choose a bookmark, then open, rename, or remove it."""
    with _handle_errors():
        store = app.bookmark_store()
        catalog = store.load()
        aliases = catalog.aliases()
        if not aliases:
            console.print("[yellow]No bookmarks yet. Add one with `tagmark bookmark add`.[/yellow]")
            return

        labels = [f"{alias}  {_folder_of(catalog, alias)}" for alias in aliases]
        alias = aliases[app.prompter.select("Choose bookmark", labels)]
        folder = Path(_folder_of(catalog, alias))

        if not folder.is_dir():
            console.print(
                f"[yellow]Bookmark {alias} points to a missing folder: {folder}[/yellow]"
            )
            if app.prompter.confirm("Remove this bookmark?", default=True):
                catalog.remove(alias)
                store.save(catalog)
                LOGGER.info("Removed stale bookmark %s", alias)
                console.print(f"[green]Removed bookmark {alias}.[/green]")
            return

        choice = _BOOKMARK_ACTIONS[app.prompter.select("Choose action", _BOOKMARK_ACTIONS)]
        launcher = app.config.launcher
        if choice == "Open":
            catalog.touch_access(alias)
            store.save(catalog)
            if not open_terminal(folder, launcher.terminal):
                click.echo(str(folder))
        elif choice == "Open in file manager":
            catalog.touch_access(alias)
            store.save(catalog)
            open_in_file_manager(folder, launcher.file_manager)
        elif choice == "Rename":
            new_alias = app.prompter.text("Enter new alias", validate=validate_alias)
            catalog.rename(alias, new_alias)
            store.save(catalog)
            LOGGER.info("Renamed bookmark %s to %s", alias, new_alias)
            console.print(f"[green]Renamed {alias} to {new_alias}.[/green]")
        else:
            catalog.remove(alias)
            store.save(catalog)
            LOGGER.info("Removed bookmark %s", alias)
            console.print(f"[green]Removed bookmark {alias}.[/green]")


def _folder_of(catalog: BookmarkCatalog, alias: str) -> str:
    record = catalog.get(alias)
    if record is None:
        raise NotFoundError(f"Alias '{alias}' not found.")
    return record.folder_path


@bookmark.command("list")
@click.option("--json", "json_output", is_flag=True, help="Emit bookmarks as JSON.")
@click.option("--stale", is_flag=True, help="Only list bookmarks whose folder is missing.")
@click.pass_obj
def bookmark_list(app: AppContext, json_output: bool, stale: bool) -> None:
    """List bookmarks in alias order."""
    with _handle_errors():
        catalog = app.bookmark_store().load()

    stale_aliases = set(catalog.stale_aliases())
    aliases = [alias for alias in catalog.aliases() if not stale or alias in stale_aliases]
    records = [catalog.get(alias) for alias in aliases]

    if json_output:
        payload = [record.model_dump(mode="json") for record in records if record is not None]
        click.echo(json.dumps(payload, indent=2))
        return

    if not records:
        console.print("[yellow]No bookmarks to show.[/yellow]")
        return

    table = Table(title="Bookmarks")
    table.add_column("Alias", style="cyan")
    table.add_column("Folder")
    table.add_column("Created")
    table.add_column("Last accessed")
    for record in records:
        if record is None:
            continue
        folder = record.folder_path
        if record.alias in stale_aliases:
            folder = f"[red]{folder} (missing)[/red]"
        accessed = record.last_accessed.isoformat() if record.last_accessed else "never"
        table.add_row(record.alias, folder, record.created_at.isoformat(), accessed)
    out.print(table)


# Configuration -------------------------------------------------------


@cli.group()
def config() -> None:
    """Manage tagmark configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
@click.pass_obj
def config_view(app: AppContext, no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    with _handle_errors():
        effective = app.manager.load(include_env=not no_env, cli_overrides=app.overrides)

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    out.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
@click.pass_obj
def config_set(app: AppContext, key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.UsageError("KEY must specify a dotted path such as 'storage.root_dir'.")

    try:
        parsed_value: Any = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.UsageError(f"Unable to parse value: {exc}") from exc

    manager = app.manager
    with _handle_errors():
        manager.ensure_exists()
        before = manager.read_text().splitlines()
        current = manager.load_file_overrides()
        file_data = deepcopy(current)
        assign_nested(file_data, segments, parsed_value, source_name="file")
        if file_data == current:
            console.print("[yellow]No changes applied; value already up to date.[/yellow]")
            return
        resolve_with_precedence(defaults=TagmarkConfig(), file_overrides=file_data)
        manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = difflib.unified_diff(
        before,
        after,
        fromfile="config.yaml (before)",
        tofile="config.yaml (after)",
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
@click.pass_obj
def config_edit(app: AppContext) -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = app.manager
    with _handle_errors():
        manager.ensure_exists()
    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return
    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise CommandError(f"Invalid YAML: {exc}", exit_code=8) from exc
    if not isinstance(parsed, dict):
        raise CommandError("Configuration file must contain a top-level mapping.", exit_code=8)

    with _handle_errors():
        resolve_with_precedence(defaults=TagmarkConfig(), file_overrides=parsed)
        manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
