from __future__ import annotations

import pytest

from keymap_builder.actions import action
from keymap_builder.errors import DefinitionConflictError, MalformedPredicateError
from keymap_builder.keys import ctrl, ctrl_x
from keymap_builder.predicates import ALWAYS, QMK, TEXT_FOCUS, Atomic, Compound, when
from keymap_builder.table import (
    build_table,
    find_toggler,
    gated_on_focus_context,
    if_else,
    keyboard_split,
    merge,
    only,
    panel_split,
    recording_split,
    terminal_panel_split,
    unconditional,
)


def test_unconditional_and_focus_gated_helpers():
    find = action("groog.find")
    assert unconditional(find) == {"": find}
    assert only("groog.find") == {"": find}
    assert gated_on_focus_context(find) == {
        "editorTextFocus || findInputFocussed": find
    }
    assert TEXT_FOCUS.text in gated_on_focus_context(find)


def test_if_else_yields_exactly_two_entries():
    a, b = action("a"), action("b")
    result = if_else(when("inQuickOpen"), a, b)
    assert result == {"inQuickOpen": a, "!inQuickOpen": b}


@pytest.mark.parametrize(
    "predicate",
    [
        when("editorLangId == 'markdown'"),
        when("!inQuickOpen"),
        when("inQuickOpen\n"),
        ALWAYS,
        when("a") & when("b"),
    ],
)
def test_if_else_rejects_non_identifiers(predicate):
    with pytest.raises(MalformedPredicateError):
        if_else(predicate, action("a"), action("b"))


def test_named_splits_use_their_context():
    a, b = action("a"), action("b")
    assert keyboard_split(a, b) == {QMK.text: b, f"!{QMK.text}": a}
    assert panel_split(a, None) == {"activePanel": a, "!activePanel": None}
    assert recording_split(a, b) == {
        "groog.context.recordMode": a,
        "!groog.context.recordMode": b,
    }


def test_terminal_panel_split_is_three_way():
    t, p, o = action("t"), action("p"), action("o")
    assert terminal_panel_split(t, p, o) == {
        "terminalFocus": t,
        "panelFocus && !terminalFocus": p,
        "!panelFocus": o,
    }


def test_find_toggler_with_context_and_extra():
    extra = {"!groog.context.qmkMode": action("notify")}
    result = find_toggler("WholeWord", QMK, extra)

    assert set(result) == {
        "groog.context.qmkMode && editorFocus",
        "groog.context.qmkMode && inSearchEditor",
        "groog.context.qmkMode && searchViewletFocus",
        "groog.context.qmkMode && !editorFocus && !inSearchEditor && !searchViewletFocus",
        "!groog.context.qmkMode",
    }
    steps = result["groog.context.qmkMode && editorFocus"].to_dict()["args"]["sequence"]
    assert steps == [
        {"command": "groog.find.toggleWholeWord"},
        {"command": "toggleFindWholeWord"},
    ]


def test_merge_rejects_repeated_condition():
    with pytest.raises(DefinitionConflictError):
        merge({"a": action("x")}, {"a": action("y")})


def test_build_table_normalizes_predicate_keys():
    table = build_table([(ctrl("a"), {QMK: action("x"), ALWAYS: action("y")})])
    assert dict(table[ctrl("a")]) == {
        "groog.context.qmkMode": action("x"),
        "": action("y"),
    }


def test_build_table_rejects_duplicate_keys():
    with pytest.raises(DefinitionConflictError):
        build_table([(ctrl_x("s"), only("a")), ("ctrl+x s", only("b"))])


def test_build_table_rejects_predicates_rendering_identically():
    with pytest.raises(DefinitionConflictError):
        build_table([(ctrl("a"), {Atomic("x"): action("a"), Compound("x"): action("b")})])


def test_build_table_is_read_only():
    table = build_table([(ctrl("a"), only("a"))])
    with pytest.raises(TypeError):
        table[ctrl("b")] = {}  # type: ignore[index]
