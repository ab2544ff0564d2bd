from __future__ import annotations

import pytest

from keymap_builder.actions import (
    MULTI_COMMAND,
    action,
    notification,
    repeat,
    send_sequence,
    sequence,
    sequence_of,
    type_text,
)
from keymap_builder.models import Action, KeybindingRecord


def test_action_args_are_copied_and_read_only():
    args = {"text": "a"}
    bound = action("groog.type", args)
    args["text"] = "b"

    assert bound.args == {"text": "a"}
    with pytest.raises(TypeError):
        bound.args["text"] = "c"  # type: ignore[index]


def test_removal_marker():
    assert action("-workbench.action.quickOpen").is_removal is True
    assert action("workbench.action.quickOpen").is_removal is False


def test_sequence_of_commands_serializes_steps_without_hints():
    bound = sequence_of("workbench.action.closePanel", "workbench.action.openSettings")

    assert bound.command == MULTI_COMMAND
    assert bound.to_dict() == {
        "command": MULTI_COMMAND,
        "args": {
            "sequence": [
                {"command": "workbench.action.closePanel"},
                {"command": "workbench.action.openSettings"},
            ]
        },
    }


def test_sequence_keeps_async_and_delay_hints():
    bound = sequence(
        Action("go.test.package", async_=True),
        Action("workbench.action.focusPanel", delay_ms=250),
        notification("done"),
    )

    steps = bound.to_dict()["args"]["sequence"]
    assert steps[0] == {"command": "go.test.package", "async": True}
    assert steps[1] == {"command": "workbench.action.focusPanel", "delay": 250}
    assert steps[2] == {"command": "groog.message.info", "args": {"message": "done"}}


def test_small_builders():
    assert type_text("x") == Action("groog.type", {"text": "x"})
    assert send_sequence("\u001f").args == {"text": "\u001f"}
    assert repeat("a", 3) == ["a", "a", "a"]
    assert repeat("a", 0) == []


def test_record_to_dict_omits_empty_fields():
    plain = KeybindingRecord(key="ctrl+a", when="", command="groog.cursorHome")
    full = KeybindingRecord(
        key="a", when="editorTextFocus", command="groog.type", args={"text": "a"}
    )

    assert plain.to_dict() == {"key": "ctrl+a", "command": "groog.cursorHome"}
    assert full.to_dict() == {
        "key": "a",
        "command": "groog.type",
        "when": "editorTextFocus",
        "args": {"text": "a"},
    }


def test_nested_args_are_frozen_copies():
    args = {"items": ["a", {"b": 1}]}
    bound = action("groog.custom", args)
    args["items"].append("c")
    args["items"][1]["b"] = 2

    assert bound.args["items"] == ("a", {"b": 1})
    with pytest.raises(TypeError):
        bound.args["items"][1]["b"] = 3  # type: ignore[index]
    assert bound.to_dict()["args"] == {"items": ["a", {"b": 1}]}
