"""Builders for the actions referenced by the keymap."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from .models import Action

MULTI_COMMAND = "groog.multiCommand.execute"
TYPE_COMMAND = "groog.type"
MESSAGE_COMMAND = "groog.message.info"
SEND_SEQUENCE_COMMAND = "workbench.action.terminal.sendSequence"


def action(command: str, args: Optional[Mapping[str, Any]] = None) -> Action:
    return Action(command, args)


def sequence(*steps: Action) -> Action:
    """Run ``steps`` one after another through the multi-command runner.

    Steps carry no async/delay hints unless they were built with them, e.g.
    ``Action("go.test.package", async_=True)``.
    """

    return Action(MULTI_COMMAND, {"sequence": tuple(steps)})


def sequence_of(*commands: str) -> Action:
    return sequence(*(Action(command) for command in commands))


def repeat(command: str, times: int) -> List[str]:
    return [command] * max(0, times)


def notification(message: str) -> Action:
    return Action(MESSAGE_COMMAND, {"message": message})


def send_sequence(text: str) -> Action:
    """Send raw characters to the active terminal."""

    return Action(SEND_SEQUENCE_COMMAND, {"text": text})


def type_text(text: str) -> Action:
    return Action(TYPE_COMMAND, {"text": text})
