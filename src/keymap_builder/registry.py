"""Built-in keymap for the groog extension."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .actions import (
    action,
    notification,
    repeat,
    send_sequence,
    sequence,
    sequence_of,
    type_text,
)
from .keys import (
    BACKSPACE,
    DELETE,
    DOWN,
    END,
    ENTER,
    HOME,
    LEFT,
    PAGEDOWN,
    PAGEUP,
    RIGHT,
    SPACE,
    TAB,
    UP,
    alt,
    ctrl,
    ctrl_x,
    ctrl_z,
    shift,
)
from .models import Action
from .predicates import (
    ACTIVE_PANEL,
    ALWAYS,
    EDITOR_FOCUS,
    EDITOR_TEXT_FOCUS,
    FIND_MODE,
    IN_QUICK_OPEN,
    LIST_FOCUS,
    LIST_SUPPORTS_MULTISELECT,
    PANEL_FOCUS,
    QMK,
    RECORDING,
    SEARCH_INPUT_BOX_FOCUS,
    SEARCH_VIEWLET_FOCUS,
    SIDE_BAR_FOCUS,
    SUGGEST_WIDGET_VISIBLE,
    TERMINAL_FIND_MODE,
    TERMINAL_VISIBLE,
    TEXT_FOCUS,
    when,
)
from .table import (
    BindingTable,
    Entry,
    KeyBindings,
    build_table,
    find_toggler,
    gated_on_focus_context,
    if_else,
    keyboard_split,
    only,
    only_sequence,
    only_when,
    panel_split,
    recording_split,
    terminal_panel_split,
    text_only,
    unconditional,
)

_LOGGER = logging.getLogger(__name__)

_CACHED_TABLE: Optional[BindingTable] = None


def _ctrl_l() -> KeyBindings:
    return {
        IN_QUICK_OPEN.text: sequence_of(
            *repeat("workbench.action.quickOpenNavigatePreviousInFilePicker", 5)
        ),
        (ACTIVE_PANEL & ~IN_QUICK_OPEN).text: action("workbench.action.nextPanelView"),
        (~ACTIVE_PANEL & ~IN_QUICK_OPEN).text: action("groog.jump"),
    }


def _ctrl_v() -> KeyBindings:
    return if_else(
        IN_QUICK_OPEN,
        sequence_of(*repeat("workbench.action.quickOpenNavigateNextInFilePicker", 5)),
        action("groog.fall"),
    )


def _up() -> KeyBindings:
    return {
        TERMINAL_FIND_MODE.text: action("groog.terminal.reverseFind"),
        ALWAYS.text: action("-workbench.action.quickOpen"),
        (EDITOR_TEXT_FOCUS & ~SUGGEST_WIDGET_VISIBLE).text: action("groog.cursorUp"),
        (EDITOR_TEXT_FOCUS & SUGGEST_WIDGET_VISIBLE).text: action("selectPrevSuggestion"),
        IN_QUICK_OPEN.text: action(
            "workbench.action.quickOpenNavigatePreviousInFilePicker"
        ),
        FIND_MODE.text: action("editor.action.previousMatchFindAction"),
        SEARCH_VIEWLET_FOCUS.text: action("list.focusUp"),
    }


def _down() -> KeyBindings:
    return {
        TERMINAL_FIND_MODE.text: action("groog.terminal.find"),
        ALWAYS.text: action("-workbench.action.files.newUntitledFile"),
        (EDITOR_TEXT_FOCUS & ~SUGGEST_WIDGET_VISIBLE).text: action("groog.cursorDown"),
        (EDITOR_TEXT_FOCUS & SUGGEST_WIDGET_VISIBLE).text: action("selectNextSuggestion"),
        IN_QUICK_OPEN.text: action("workbench.action.quickOpenNavigateNextInFilePicker"),
        FIND_MODE.text: action("editor.action.nextMatchFindAction"),
        SEARCH_INPUT_BOX_FOCUS.text: action("search.action.focusSearchList"),
        (~SEARCH_INPUT_BOX_FOCUS & SEARCH_VIEWLET_FOCUS).text: action("list.focusDown"),
    }


def _left() -> KeyBindings:
    # quickPickManyToggle is left out so left moves the cursor in quick open.
    return only_when(action("groog.cursorLeft"), EDITOR_TEXT_FOCUS & ~IN_QUICK_OPEN)


def _paste() -> KeyBindings:
    return if_else(
        EDITOR_TEXT_FOCUS,
        action("groog.paste"),
        action("editor.action.clipboardPasteAction"),
    )


def _previous_tab() -> KeyBindings:
    return terminal_panel_split(
        action("workbench.action.terminal.focusPrevious"),
        action("workbench.action.terminal.focus"),
        action("groog.focusPreviousEditor"),
    )


def _next_tab() -> KeyBindings:
    return terminal_panel_split(
        action("workbench.action.terminal.focusNext"),
        action("workbench.action.terminal.focus"),
        action("groog.focusNextEditor"),
    )


def _new_terminal() -> KeyBindings:
    return panel_split(
        action("workbench.action.terminal.newInActiveWorkspace"),
        sequence(send_sequence("\u001b[A\u000d"), action("terminal.focus")),
    )


def _settings(command: str) -> KeyBindings:
    return panel_split(
        sequence_of("workbench.action.closePanel", command),
        action(command),
    )


def _find_bindings() -> List[Entry]:
    not_recording = ~TERMINAL_VISIBLE & ~RECORDING
    return [
        (
            ctrl("f"),
            {
                QMK & TERMINAL_VISIBLE: action("groog.terminal.find"),
                QMK & ~TERMINAL_VISIBLE & RECORDING: action("groog.record.findNext"),
                # Lets `ctrl+s ctrl+s` redo the previous find in simple mode.
                QMK & not_recording & IN_QUICK_OPEN: action(
                    "workbench.action.acceptSelectedQuickOpenItem"
                ),
                QMK & not_recording & ~IN_QUICK_OPEN: action("groog.find"),
                ~QMK & (EDITOR_TEXT_FOCUS & ~IN_QUICK_OPEN): action("groog.cursorRight"),
                ALWAYS: action("-workbench.action.terminal.focusFind"),
            },
        ),
        (
            ctrl("s"),
            {
                QMK: action("groog.cursorRight"),
                ~QMK & TERMINAL_VISIBLE: action("groog.terminal.find"),
                ~QMK & ~TERMINAL_VISIBLE & RECORDING: action("groog.record.findNext"),
                ~QMK & not_recording & IN_QUICK_OPEN: action(
                    "workbench.action.acceptSelectedQuickOpenItem"
                ),
                ~QMK & not_recording & ~IN_QUICK_OPEN: action("groog.find"),
            },
        ),
        # Not gated on the terminal being visible so ctrl+r still searches
        # shell history outside of terminal find mode.
        (
            ctrl("r"),
            if_else(
                TERMINAL_FIND_MODE,
                action("groog.terminal.reverseFind"),
                action("groog.reverseFind"),
            ),
        ),
        (
            shift(ENTER),
            {
                FIND_MODE: action("editor.action.previousMatchFindAction"),
                TERMINAL_FIND_MODE: action("groog.terminal.reverseFind"),
            },
        ),
        (
            ENTER,
            {
                TERMINAL_FIND_MODE: action("groog.terminal.find"),
                FIND_MODE: action("editor.action.nextMatchFindAction"),
                # Recorded so playback reproduces newlines. Tab is not
                # recorded since its width depends on the file type.
                RECORDING: type_text("\n"),
            },
        ),
        (SPACE, gated_on_focus_context(type_text(" "))),
        (shift(SPACE), gated_on_focus_context(type_text(" "))),
        (alt("r"), find_toggler("Regex")),
        (alt("c"), find_toggler("CaseSensitive")),
        (alt("w"), find_toggler("WholeWord")),
        (alt(shift("c")), only("togglePreserveCase")),
        (
            alt("f4"),
            find_toggler(
                "WholeWord",
                QMK,
                {(~QMK).text: notification("Run alt+shift+f4 to close the window")},
            ),
        ),
        (alt(shift("f4")), only("workbench.action.closeWindow")),
    ]


def _emacs_bindings() -> List[Entry]:
    return [
        (ctrl("w"), only("groog.yank")),
        (
            ctrl("j"),
            {
                # Jump to the other input box in find mode.
                FIND_MODE: action("groog.find.toggleReplaceMode"),
                ~FIND_MODE & ACTIVE_PANEL: action("workbench.action.previousPanelView"),
                ~FIND_MODE & ~ACTIVE_PANEL: action("groog.toggleMarkMode"),
            },
        ),
        (ctrl("y"), only("groog.emacsPaste")),
        (ctrl(shift("k")), only("editor.action.replaceAll")),
        (
            ctrl("k"),
            if_else(FIND_MODE, action("editor.action.replaceOne"), action("groog.kill")),
        ),
        (ctrl("l"), _ctrl_l()),
        (PAGEUP, _ctrl_l()),
        (ctrl("v"), _ctrl_v()),
        (PAGEDOWN, _ctrl_v()),
        (ctrl(shift("p")), only("groog.find.previous")),
        (alt("s"), only("groog.find.toggleSimpleMode")),
        (shift(UP), {QMK & FIND_MODE: action("groog.find.previous")}),
        (ctrl("p"), _up()),
        (UP, _up()),
        (ctrl("n"), _down()),
        (DOWN, _down()),
        (LEFT, _left()),
        (ctrl("b"), _left()),
        (
            ctrl("m"),
            {
                IN_QUICK_OPEN & LIST_SUPPORTS_MULTISELECT: action(
                    "workbench.action.quickPickManyToggle"
                ),
                # Never enter tab focus mode.
                ALWAYS: action("-editor.action.toggleTabFocusMode"),
            },
        ),
        (RIGHT, only_when(action("groog.cursorRight"), EDITOR_TEXT_FOCUS & ~IN_QUICK_OPEN)),
        (HOME, text_only("groog.cursorHome")),
        (
            ctrl("a"),
            keyboard_split(action("groog.cursorHome"), action("editor.action.selectAll")),
        ),
        (ctrl(shift("a")), only("editor.action.selectAll")),
        (ctrl(shift(HOME)), only("editor.action.selectAll")),
        (shift(HOME), only("editor.action.selectAll")),
        (END, text_only("groog.cursorEnd")),
        (ctrl("e"), only("groog.cursorEnd")),
        (alt("f"), only("groog.cursorWordRight")),
        (
            ctrl("g"),
            {
                ~SIDE_BAR_FOCUS & (~IN_QUICK_OPEN & ~SUGGEST_WIDGET_VISIBLE): action(
                    "groog.ctrlG"
                ),
                SIDE_BAR_FOCUS & (~IN_QUICK_OPEN & ~SUGGEST_WIDGET_VISIBLE): action(
                    "workbench.action.focusActiveEditorGroup"
                ),
                IN_QUICK_OPEN & ~SUGGEST_WIDGET_VISIBLE: action(
                    "workbench.action.closeQuickOpen"
                ),
                SUGGEST_WIDGET_VISIBLE: action("hideSuggestWidget"),
            },
        ),
        (ctrl("/"), panel_split(None, action("groog.undo"))),
        (ctrl(shift("/")), panel_split(None, action("groog.redo"))),
        (ctrl(RIGHT), text_only("groog.cursorWordRight")),
        (alt("b"), only("groog.cursorWordLeft")),
        (ctrl(LEFT), text_only("groog.cursorWordLeft")),
        (ctrl_x("p"), only("groog.cursorTop")),
        (ctrl_x("s"), only("workbench.action.files.save")),
        (
            ctrl("h"),
            if_else(
                SEARCH_VIEWLET_FOCUS,
                action("search.action.remove"),
                action("groog.deleteLeft"),
            ),
        ),
        (
            BACKSPACE,
            {
                TEXT_FOCUS: action("groog.deleteLeft"),
                SEARCH_VIEWLET_FOCUS & LIST_FOCUS: action("search.action.remove"),
            },
        ),
        (
            ctrl("d"),
            if_else(
                SEARCH_VIEWLET_FOCUS,
                action("search.action.remove"),
                action("groog.deleteRight"),
            ),
        ),
        (
            DELETE,
            {
                TEXT_FOCUS: action("groog.deleteRight"),
                SEARCH_VIEWLET_FOCUS & LIST_FOCUS: action("search.action.remove"),
            },
        ),
        (alt("h"), only("groog.deleteWordLeft")),
        (alt(BACKSPACE), text_only("groog.deleteWordLeft")),
        (
            ctrl(BACKSPACE),
            {
                # Shells need ctrl+x ctrl+h bound to backward-kill-word.
                QMK & PANEL_FOCUS: send_sequence("\u0018\u0008"),
                EDITOR_TEXT_FOCUS: action("groog.deleteWordLeft"),
            },
        ),
        (alt("d"), only("groog.deleteWordRight")),
        (alt(DELETE), text_only("groog.deleteWordRight")),
        (ctrl(DELETE), text_only("groog.deleteWordRight")),
        (alt("x"), only("workbench.action.showCommands")),
        (ctrl_x("l"), only("workbench.action.gotoLine")),
        (ctrl(";"), only("editor.action.commentLine")),
    ]


def _navigation_bindings() -> List[Entry]:
    reveal_in_new_editor = only_sequence(
        "workbench.action.splitEditorRight",
        "editor.action.revealDefinition",
    )
    return [
        (ctrl_x("f"), only("workbench.action.quickOpen")),
        (ctrl_x("v"), only_sequence("workbench.action.splitEditorDown")),
        (ctrl_z("v"), only("faves.toggle")),
        (ctrl_z(PAGEDOWN), only_when(action("faves.toggle"), QMK)),
        (ctrl_z("f"), only("faves.search")),
        (ctrl_z(RIGHT), only_when(action("faves.search"), QMK)),
        (ctrl_x("h"), only_sequence("workbench.action.splitEditorRight")),
        (
            ctrl(shift("n")),
            if_else(
                FIND_MODE,
                action("groog.find.next"),
                action("workbench.action.files.newUntitledFile"),
            ),
        ),
        # The QMK control layer sends shift+down for ctrl+shift+n.
        (
            shift(DOWN),
            {
                QMK & FIND_MODE: action("groog.find.next"),
                QMK & ~FIND_MODE: action("workbench.action.files.newUntitledFile"),
            },
        ),
        (ctrl_x("d"), only("editor.action.revealDefinition")),
        (ctrl(shift("d")), reveal_in_new_editor),
        (shift(DELETE), reveal_in_new_editor),
        (ctrl(PAGEUP), _previous_tab()),
        (ctrl(PAGEDOWN), _next_tab()),
        (ctrl("u"), _previous_tab()),
        (ctrl("o"), _next_tab()),
        (ctrl(shift(TAB)), _previous_tab()),
        (ctrl(TAB), _next_tab()),
        (
            ctrl_x("b"),
            # Reopens the previously opened file.
            only_sequence(
                "workbench.action.openPreviousEditorFromHistory",
                "workbench.action.acceptSelectedQuickOpenItem",
            ),
        ),
    ]


def _recording_bindings() -> List[Entry]:
    return [
        (ctrl_x("x"), only("groog.record.startRecording")),
        (
            alt("e"),
            recording_split(
                action("groog.record.endRecording"),
                action("groog.record.playRecording"),
            ),
        ),
        (
            alt(shift("e")),
            recording_split(
                action("groog.record.saveRecordingAs"),
                action("groog.record.playNamedRecording"),
            ),
        ),
        (alt(shift("d")), only("groog.record.deleteRecording")),
        (
            ctrl(shift("s")),
            {
                ~QMK & RECORDING: action("groog.record.find"),
                ~QMK & ~RECORDING: action("workbench.action.findInFiles"),
            },
        ),
        (
            ctrl(shift("f")),
            {
                QMK & RECORDING: action("groog.record.find"),
                QMK & ~RECORDING: action("workbench.action.findInFiles"),
            },
        ),
    ]


def _panel_bindings() -> List[Entry]:
    return [
        (ctrl_x("q"), only("workbench.action.toggleSidebarVisibility")),
        (ctrl_x("z"), only("workbench.action.togglePanel")),
        # Killing a terminal takes ctrl+shift+q; ctrl+q only warns.
        (
            ctrl("q"),
            panel_split(
                notification("Run ctrl+shift+q to kill the terminal"),
                action("workbench.action.closeEditorsAndGroup"),
            ),
        ),
        (ctrl(shift("q")), panel_split(action("workbench.action.terminal.kill"), None)),
        (
            ctrl_x("n"),
            panel_split(
                action("workbench.action.terminal.rename"),
                action("groog.cursorBottom"),
            ),
        ),
        (
            ctrl("t"),
            panel_split(
                sequence_of("groog.ctrlG", "termin-all-or-nothing.closePanel"),
                sequence_of("groog.ctrlG", "termin-all-or-nothing.openPanel"),
            ),
        ),
        # alt+t on the QMK keyboard sends ctrl+shift+t.
        (ctrl(shift("t")), _new_terminal()),
        (alt("t"), _new_terminal()),
        (alt(shift("t")), only("workbench.action.terminal.newWithProfile")),
        (
            ctrl_x("c"),
            panel_split(
                sequence(
                    notification("Terminal output copied!"),
                    action("workbench.action.terminal.copyLastCommandOutput"),
                ),
                None,
            ),
        ),
        (ctrl_z("c"), only("groog.copyFilename")),
        # ctrl+/ as the terminal receives it (octal 037).
        (ctrl("z"), panel_split(send_sequence("\u001f"), None)),
    ]


def _editing_bindings() -> List[Entry]:
    paste = _paste()
    return [
        (ctrl_x(TAB), only("groog.format")),
        (ctrl("i"), only("editor.action.indentLines")),
        (ctrl(shift("i")), only("editor.action.outdentLines")),
        (ctrl_x("i"), only("editor.action.organizeImports")),
        (alt("i"), only("groog.indentToPreviousLine")),
        (
            alt(shift("i")),
            {
                ALWAYS: action("groog.indentToNextLine"),
                EDITOR_TEXT_FOCUS: action(
                    "-editor.action.insertCursorAtEndOfEachLineSelected"
                ),
            },
        ),
        (ctrl_x("y"), paste),
        # ctrl+x ctrl+y on the QMK keyboard.
        (ctrl("x shift+insert"), paste),
        (alt("y"), paste),
        (ctrl("."), _settings("workbench.action.openGlobalKeybindings")),
        (ctrl_x("."), _settings("workbench.action.openGlobalKeybindingsFile")),
        (ctrl(","), _settings("workbench.action.openSettings")),
        (ctrl_x(","), _settings("workbench.action.openSettingsJson")),
        (
            ctrl_x("m"),
            {when("editorLangId == 'markdown'"): action("markdown.showPreviewToSide")},
        ),
    ]


def _misc_bindings() -> List[Entry]:
    return [
        (alt("z"), only("git.revertSelectedRanges")),
        (alt("p"), only("workbench.action.editor.previousChange")),
        (alt("n"), only("workbench.action.editor.nextChange")),
        (
            alt(shift("p")),
            only_sequence("editor.action.marker.prevInFiles", "closeMarkersNavigation"),
        ),
        (
            alt(shift("n")),
            only_sequence("editor.action.marker.nextInFiles", "closeMarkersNavigation"),
        ),
        (
            ctrl_x("t"),
            unconditional(
                sequence(
                    # Focus only moves to the panel once the tests finish.
                    Action("go.test.package", async_=True),
                    Action("workbench.action.focusPanel", delay_ms=250),
                )
            ),
        ),
        (ctrl_x("r"), only("workbench.action.reloadWindow")),
        # Keeps alt+g from focusing the menu bar.
        (alt("g"), only("noop")),
        (ctrl_x("o"), only("workbench.action.openRecent")),
        # ctrl+shift+l in QMK mode.
        (shift(PAGEUP), only_when(action("editor.action.selectHighlights"), EDITOR_FOCUS)),
        (ctrl_x("k"), only("groog.toggleQMK")),
        (
            ctrl_x("e"),
            only_sequence(
                "workbench.view.extensions",
                "workbench.extensions.action.checkForUpdates",
            ),
        ),
    ]


def default_entries() -> List[Entry]:
    """Return the hand-authored ``(key, bindings)`` pairs in definition order."""

    entries: List[Entry] = []
    for group in (
        _find_bindings,
        _emacs_bindings,
        _navigation_bindings,
        _recording_bindings,
        _panel_bindings,
        _editing_bindings,
        _misc_bindings,
    ):
        entries.extend(group())
    return entries


def default_table() -> BindingTable:
    """Return the validated default table, building it on first use."""

    global _CACHED_TABLE
    if _CACHED_TABLE is None:
        _CACHED_TABLE = build_table(default_entries())
        _LOGGER.debug("Cached default table with %d keys", len(_CACHED_TABLE))
    return _CACHED_TABLE


def iter_keys() -> Iterable[str]:
    """Convenience iterator over the keys of the default table."""
    yield from default_table()
