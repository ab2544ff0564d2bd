"""Helpers for assembling the key → condition → action table."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from .actions import action, sequence_of
from .errors import DefinitionConflictError, MalformedPredicateError
from .keys import Key
from .models import Action
from .predicates import (
    ACTIVE_PANEL,
    ALWAYS,
    EDITOR_FOCUS,
    IN_SEARCH_EDITOR,
    PANEL_FOCUS,
    QMK,
    RECORDING,
    SEARCH_VIEWLET_FOCUS,
    TERMINAL_FOCUS,
    TEXT_FOCUS,
    Predicate,
)

_LOGGER = logging.getLogger(__name__)

# A single branch may be left unbound with ``None``.
KeyBindings = Dict[str, Optional[Action]]
Entry = Tuple[str, Mapping[Union[str, Predicate], Optional[Action]]]
BindingTable = Mapping[Key, Mapping[str, Optional[Action]]]

_SIMPLE_CONTEXT = re.compile(r"[a-zA-Z.]+")


def unconditional(bound: Action) -> KeyBindings:
    return {ALWAYS.text: bound}


def only(command: str) -> KeyBindings:
    return unconditional(action(command))


def only_sequence(*commands: str) -> KeyBindings:
    return unconditional(sequence_of(*commands))


def only_when(bound: Action, predicate: Predicate) -> KeyBindings:
    return {predicate.text: bound}


def gated_on_focus_context(bound: Action) -> KeyBindings:
    """Bind ``bound`` only while editor text or the find input has focus."""

    return only_when(bound, TEXT_FOCUS)


def text_only(command: str) -> KeyBindings:
    return gated_on_focus_context(action(command))


def if_else(
    predicate: Predicate,
    true_action: Optional[Action],
    false_action: Optional[Action],
) -> KeyBindings:
    """Run ``true_action`` when ``predicate`` holds and ``false_action`` otherwise.

    ``predicate`` must be a single bare context key (letters and dots only).
    """

    text = predicate.text
    if not _SIMPLE_CONTEXT.fullmatch(text):
        raise MalformedPredicateError(
            f"Context key {text!r} does not match required pattern "
            f"{_SIMPLE_CONTEXT.pattern}"
        )
    return {
        text: true_action,
        predicate.negate().text: false_action,
    }


def keyboard_split(basic: Optional[Action], qmk: Optional[Action]) -> KeyBindings:
    return if_else(QMK, qmk, basic)


def panel_split(panel: Optional[Action], other: Optional[Action]) -> KeyBindings:
    """Run ``panel`` while the panel is active (visible, not necessarily focused)."""

    return if_else(ACTIVE_PANEL, panel, other)


def recording_split(
    recording: Optional[Action], other: Optional[Action]
) -> KeyBindings:
    return if_else(RECORDING, recording, other)


def terminal_panel_split(
    terminal: Optional[Action],
    panel: Optional[Action],
    other: Optional[Action],
) -> KeyBindings:
    return {
        TERMINAL_FOCUS.text: terminal,
        (PANEL_FOCUS & ~TERMINAL_FOCUS).text: panel,
        (~PANEL_FOCUS).text: other,
    }


def find_toggler(
    suffix: str,
    predicate: Optional[Predicate] = None,
    extra: Optional[Mapping[str, Optional[Action]]] = None,
) -> KeyBindings:
    """Toggle a find option in whichever find widget is relevant.

    ``suffix`` is the option name, e.g. ``"Regex"`` or ``"WholeWord"``.
    """

    toggle = f"groog.find.toggle{suffix}"
    contexts = {
        EDITOR_FOCUS: f"toggleFind{suffix}",
        IN_SEARCH_EDITOR: f"toggleSearchEditor{suffix}",
        SEARCH_VIEWLET_FOCUS: f"toggleSearch{suffix}",
        ~EDITOR_FOCUS & ~IN_SEARCH_EDITOR & ~SEARCH_VIEWLET_FOCUS: f"toggleSearch{suffix}",
    }
    bindings: KeyBindings = {}
    for context, command in contexts.items():
        if predicate is not None:
            context = predicate & context
        bindings[context.text] = sequence_of(toggle, command)
    if extra:
        bindings = merge(bindings, extra)
    return bindings


def merge(*maps: Mapping[str, Optional[Action]]) -> KeyBindings:
    """Combine per-key maps, refusing to bind one condition twice."""

    merged: KeyBindings = {}
    for bindings in maps:
        for text, bound in bindings.items():
            if text in merged:
                raise DefinitionConflictError(
                    f"Condition {text!r} is bound more than once"
                )
            merged[text] = bound
    return merged


def _normalize(key: Key, bindings: Mapping) -> Mapping[str, Optional[Action]]:
    normalized: KeyBindings = {}
    for condition, bound in bindings.items():
        text = condition.text if isinstance(condition, Predicate) else str(condition)
        if text in normalized:
            raise DefinitionConflictError(
                f"Key {key!r} binds condition {text!r} more than once"
            )
        normalized[text] = bound
    return MappingProxyType(normalized)


def build_table(entries: Iterable[Entry]) -> BindingTable:
    """Assemble an immutable table from ``(key, bindings)`` pairs.

    Raises :class:`DefinitionConflictError` when a key appears twice.
    """

    table: Dict[Key, Mapping[str, Optional[Action]]] = {}
    for raw_key, bindings in entries:
        key = Key(raw_key)
        if key in table:
            raise DefinitionConflictError(f"Key {key!r} is defined more than once")
        table[key] = _normalize(key, bindings)
    _LOGGER.debug("Built binding table with %d keys", len(table))
    return MappingProxyType(table)
