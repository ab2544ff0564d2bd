"""Flatten a binding table into the ordered keybinding list."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Set, Tuple

from .actions import type_text
from .errors import DefinitionConflictError
from .keys import Key, shift
from .models import REMOVAL_MARKER, KeybindingRecord
from .predicates import TEXT_FOCUS
from .table import BindingTable

_LOGGER = logging.getLogger(__name__)

# Keyboard rows, unshifted and shifted, position for position.
CHARACTERS = "".join(
    [
        "`1234567890-=",
        "qwertyuiop[]\\",
        "asdfghjkl;'",
        "zxcvbnm,./",
    ]
)
SHIFTED_CHARACTERS = "".join(
    [
        "~!@#$%^&*()_+",
        "QWERTYUIOP{}|",
        'ASDFGHJKL:"',
        "ZXCVBNM<>?",
    ]
)


def with_typed_characters(table: BindingTable) -> BindingTable:
    """Return a new table that also types every plain character.

    Each character key and its ``shift+`` variant is bound to insert the
    literal character while text has focus, so typing inside the find
    widget goes through the extension. Character keys must never be
    defined by hand.
    """

    merged = dict(table)
    for plain, shifted in zip(CHARACTERS, SHIFTED_CHARACTERS):
        for key, text in ((Key(plain), plain), (shift(plain), shifted)):
            if key in merged:
                raise DefinitionConflictError(
                    f"Binding table already contains key for {key}"
                )
            merged[key] = MappingProxyType({TEXT_FOCUS.text: type_text(text)})
    return MappingProxyType(merged)


def compile_bindings(
    table: BindingTable, *, check_alias_collisions: bool = True
) -> List[KeybindingRecord]:
    """Sort the table and emit one record per key alias and condition.

    Keys and conditions are both ordered by their string form so the
    output is byte-stable. Conditions bound to ``None`` are skipped.
    With ``check_alias_collisions`` a ``(key, when)`` pair produced twice by
    alias expansion raises :class:`DefinitionConflictError`.
    """

    records: List[KeybindingRecord] = []
    seen: Dict[Tuple[str, str], str] = {}
    for key in sorted(table, key=str):
        bindings = table[key]
        for when in sorted(bindings):
            bound = bindings[when]
            if bound is None:
                continue
            for alias in Key(key).aliases():
                if check_alias_collisions:
                    origin = seen.get((alias, when))
                    if origin is not None:
                        raise DefinitionConflictError(
                            f"Key {alias!r} with condition {when!r} is produced "
                            f"by both {origin!r} and {str(key)!r}"
                        )
                    seen[(alias, when)] = str(key)
                records.append(
                    KeybindingRecord(
                        key=alias,
                        when=when,
                        command=bound.command,
                        args=bound.args,
                    )
                )
    removals = sum(1 for record in records if record.command.startswith(REMOVAL_MARKER))
    _LOGGER.debug("%d of %d records remove built-in bindings", removals, len(records))
    return records


def compile_keymap(
    table: BindingTable, *, check_alias_collisions: bool = True
) -> List[KeybindingRecord]:
    """Add the typed-character bindings to ``table`` and compile the result."""

    merged = with_typed_characters(table)
    records = compile_bindings(merged, check_alias_collisions=check_alias_collisions)
    _LOGGER.info(
        "Compiled %d keys into %d keybindings", len(merged), len(records)
    )
    return records


def duplicate_keys(records: List[KeybindingRecord]) -> Set[Tuple[str, str]]:
    """Return every ``(key, when)`` pair that occurs in more than one record."""

    seen: Set[Tuple[str, str]] = set()
    duplicates: Set[Tuple[str, str]] = set()
    for record in records:
        pair = (record.key, record.when)
        if pair in seen:
            duplicates.add(pair)
        seen.add(pair)
    return duplicates
