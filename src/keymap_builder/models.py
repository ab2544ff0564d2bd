"""Core data models for compiled keymaps."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

# Commands starting with this marker remove the host's built-in binding.
REMOVAL_MARKER = "-"


def _freeze(value: Any) -> Any:
    if isinstance(value, Action):
        return value
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _to_json(value: Any) -> Any:
    if isinstance(value, Action):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    return value


@dataclass(frozen=True)
class Action:
    """A command invocation bound to a key under some condition.

    ``args`` is frozen recursively: nested mappings become read-only and
    lists become tuples. Actions with args are not hashable.
    """

    command: str
    args: Optional[Mapping[str, Any]] = None
    # Only honoured inside multi-command sequences.
    async_: Optional[bool] = None
    delay_ms: Optional[int] = None

    def __post_init__(self) -> None:
        if self.args is not None:
            object.__setattr__(self, "args", _freeze(self.args))

    @property
    def is_removal(self) -> bool:
        return self.command.startswith(REMOVAL_MARKER)

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"command": self.command}
        if self.args:
            entry["args"] = _to_json(self.args)
        if self.async_ is not None:
            entry["async"] = self.async_
        if self.delay_ms is not None:
            entry["delay"] = self.delay_ms
        return entry


@dataclass(frozen=True)
class KeybindingRecord:
    """One entry of the compiled keybinding list."""

    key: str
    when: str
    command: str
    args: Optional[Mapping[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"key": self.key, "command": self.command}
        if self.when:
            entry["when"] = self.when
        if self.args:
            entry["args"] = _to_json(self.args)
        return entry
