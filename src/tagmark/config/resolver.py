"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import TagmarkConfig


def resolve_with_precedence(
    *,
    defaults: TagmarkConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> TagmarkConfig:
    """Merge configuration sources, later sources winning.

    Precedence, lowest first: defaults, file, environment, CLI. Keys may be
    nested mappings or dotted paths such as ``storage.root_dir``.

    Raises:
        ConfigError: If a source is malformed or the merged values are invalid.
    """
    merged = defaults.model_dump(mode="python")
    for name, source in (
        ("file", file_overrides),
        ("environment", env_overrides),
        ("cli", cli_overrides),
    ):
        if source is None:
            continue
        merged = _deep_merge(merged, expand_dotted(source, source_name=name))

    try:
        return TagmarkConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def expand_dotted(source: Mapping[str, Any], *, source_name: str = "cli") -> dict[str, Any]:
    """Return ``source`` with dotted keys expanded into nested mappings."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = expand_dotted(value, source_name=source_name)
        assign_nested(result, key.split("."), value, source_name=source_name)
    return result


def assign_nested(
    target: dict[str, Any],
    path: list[str],
    value: Any,
    *,
    source_name: str = "cli",
) -> None:
    """Assign ``value`` at ``path`` inside ``target``, creating mappings as needed.

    Raises:
        ConfigError: If a non-mapping value sits on the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(
                f"{source_name.capitalize()} override for {'.'.join(path)} "
                "conflicts with an existing value."
            )
        node = existing
    leaf = path[-1]
    if isinstance(value, dict) and isinstance(node.get(leaf), dict):
        node[leaf] = _deep_merge(node[leaf], value)
    else:
        node[leaf] = value


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        if isinstance(value, MappingABC) and isinstance(merged.get(key), MappingABC):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["resolve_with_precedence", "expand_dotted", "assign_nested"]
