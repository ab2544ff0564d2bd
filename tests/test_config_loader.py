from __future__ import annotations

import json
from pathlib import Path

import pytest

from keymap_builder.config_loader import ConfigError, build_user_table, load_config
from keymap_builder.errors import DefinitionConflictError
from keymap_builder.keys import ctrl
from keymap_builder.models import Action
from keymap_builder.table import only


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_config_groups_bindings_by_key(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "bindings.json",
        {
            "version": "1.0.0",
            "bindings": [
                {"key": "ctrl+alt+k", "command": "groog.kill"},
                {
                    "key": "ctrl+alt+k",
                    "when": "editorTextFocus",
                    "command": "groog.type",
                    "args": {"text": "k"},
                },
            ],
        },
    )

    entries = load_config(config_path)

    assert len(entries) == 1
    key, bindings = entries[0]
    assert key == "ctrl+alt+k"
    assert bindings == {
        "": Action("groog.kill"),
        "editorTextFocus": Action("groog.type", {"text": "k"}),
    }


def test_load_config_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "bindings.json"
    config_path.write_text("{not valid json}", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.json")


def test_load_config_validation_failure(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "bindings.json", {"bindings": [{"key": "ctrl+alt+k"}]}
    )

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_load_config_missing_schema(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "bindings.json", {"bindings": []})

    with pytest.raises(ConfigError):
        load_config(config_path, schema_path=tmp_path / "schema.json")


def test_load_config_rejects_repeated_condition(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "bindings.json",
        {
            "bindings": [
                {"key": "ctrl+alt+k", "command": "a"},
                {"key": "ctrl+alt+k", "when": "", "command": "b"},
            ]
        },
    )

    with pytest.raises(ConfigError):
        load_config(config_path)


def test_build_user_table_merges_with_base(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "bindings.json",
        {"bindings": [{"key": "ctrl+alt+k", "command": "groog.kill"}]},
    )

    table = build_user_table([(ctrl("a"), only("groog.cursorHome"))], config_path)

    assert set(table) == {"ctrl+a", "ctrl+alt+k"}


def test_build_user_table_without_config() -> None:
    table = build_user_table([(ctrl("a"), only("groog.cursorHome"))])
    assert list(table) == ["ctrl+a"]


def test_user_key_colliding_with_base_is_a_conflict(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "bindings.json",
        {"bindings": [{"key": "ctrl+a", "command": "editor.action.selectAll"}]},
    )

    with pytest.raises(DefinitionConflictError):
        build_user_table([(ctrl("a"), only("groog.cursorHome"))], config_path)
