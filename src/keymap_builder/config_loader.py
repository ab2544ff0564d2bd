"""Utilities for loading user keybindings from JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import jsonschema

from .errors import KeymapError
from .keys import Key, normalize_key
from .models import Action
from .table import BindingTable, Entry, build_table

_LOGGER = logging.getLogger(__name__)


class ConfigError(KeymapError):
    """Raised when the configuration file cannot be loaded or validated."""


def _schema_dir() -> Path:
    return Path(__file__).resolve().parent / "schema"


def default_schema_path() -> Path:
    return _schema_dir() / "config.schema.json"


def load_schema(schema_path: Path) -> dict:
    try:
        return json.loads(schema_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Schema file {schema_path} is missing") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(
            f"Schema file {schema_path} is not valid JSON: {exc}"
        ) from exc


def _validate_config(data: object, schema_path: Path) -> None:
    schema = load_schema(schema_path)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"Configuration validation error: {exc.message}") from exc


def _hydrate_config(data: dict) -> List[Entry]:
    grouped: Dict[Key, Dict[str, Action]] = {}
    for index, raw in enumerate(data.get("bindings", [])):
        try:
            key = normalize_key(raw["key"])
            bound = Action(raw["command"], raw.get("args"))
        except KeyError as exc:
            raise ConfigError(
                f"Binding at index {index} is missing required field: {exc.args[0]}"
            ) from exc
        condition = raw.get("when", "")
        bindings = grouped.setdefault(key, {})
        if condition in bindings:
            raise ConfigError(
                f"Binding at index {index} repeats key {key!r} with condition "
                f"{condition!r}"
            )
        bindings[condition] = bound
    return list(grouped.items())


def load_config(
    config_path: Path,
    *,
    schema_path: Optional[Path] = None,
) -> List[Entry]:
    """Load user bindings as ``(key, bindings)`` table entries."""

    sch_path = schema_path or default_schema_path()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file {config_path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {config_path} is not valid JSON: {exc}") from exc

    _validate_config(data, sch_path)
    entries = _hydrate_config(data)
    _LOGGER.info("Loaded %d user keys from %s", len(entries), config_path)
    return entries


def build_user_table(
    base: List[Entry],
    config_path: Optional[Path] = None,
    *,
    schema_path: Optional[Path] = None,
) -> BindingTable:
    """Combine ``base`` with the user bindings in ``config_path``, if any.

    A user key that is already part of ``base`` is a definition conflict,
    just like a key defined twice by hand.
    """

    entries = list(base)
    if config_path is not None:
        entries.extend(load_config(config_path, schema_path=schema_path))
    return build_table(entries)
