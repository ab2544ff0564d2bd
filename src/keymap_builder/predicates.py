"""Composable ``when`` predicates over editor state."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .errors import InvalidNegationError


@dataclass(frozen=True)
class Predicate(ABC):
    """A rendered boolean condition.

    Composition is purely textual: ``a & b`` renders ``"a && b"`` and no
    simplification or de-duplication of clauses is ever performed.
    """

    text: str

    @property
    def is_atomic(self) -> bool:
        return False

    def and_(self, other: Predicate) -> Compound:
        return Compound(f"{self.text} && {other.text}")

    def or_(self, other: Predicate) -> Compound:
        return Compound(f"{self.text} || {other.text}")

    @abstractmethod
    def negate(self) -> Predicate:
        """Return the negated predicate."""

    def __and__(self, other: Predicate) -> Compound:
        return self.and_(other)

    def __or__(self, other: Predicate) -> Compound:
        return self.or_(other)

    def __invert__(self) -> Predicate:
        return self.negate()

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Atomic(Predicate):
    """A single named condition, its negation, or the empty predicate."""

    @property
    def is_atomic(self) -> bool:
        return True

    def negate(self) -> Atomic:
        return Atomic(f"!{self.text}")


@dataclass(frozen=True)
class Compound(Predicate):
    """The result of ``and_``/``or_``. Cannot be negated."""

    def negate(self) -> Predicate:
        raise InvalidNegationError(
            f"Cannot negate compound predicate {self.text!r}; "
            "negate its atomic parts before combining them"
        )


def when(name: str) -> Atomic:
    """Wrap an arbitrary context key as an atomic predicate."""

    return Atomic(name)


def context_mode(mode: str) -> str:
    # Matches the key names set by the extension's setGroogContext.
    return f"groog.context.{mode}Mode"


# Unconditional binding.
ALWAYS = when("")

ACTIVE_PANEL = when("activePanel")
EDITOR_FOCUS = when("editorFocus")
EDITOR_TEXT_FOCUS = when("editorTextFocus")
FIND_WIDGET_VISIBLE = when("findWidgetVisible")
FIND_INPUT_FOCUSSED = when("findInputFocussed")
INPUT_FOCUS = when("inputFocus")
FIND_MODE = when(context_mode("find"))
QMK = when(context_mode("qmk"))
RECORDING = when(context_mode("record"))
TERMINAL_FIND_MODE = when(context_mode("terminal.find"))
IN_QUICK_OPEN = when("inQuickOpen")
IN_SEARCH_EDITOR = when("inSearchEditor")
PANEL_FOCUS = when("panelFocus")
LIST_FOCUS = when("listFocus")
LIST_SUPPORTS_MULTISELECT = when("listSupportsMultiselect")
SEARCH_VIEWLET_FOCUS = when("searchViewletFocus")
SIDE_BAR_FOCUS = when("sideBarFocus")
SUGGEST_WIDGET_VISIBLE = when("suggestWidgetVisible")
TERMINAL_FOCUS = when("terminalFocus")
# terminal.visible stays true while the terminal is behind another panel.
TERMINAL_VISIBLE = when("view.terminal.visible")
SEARCH_INPUT_BOX_FOCUS = when("searchInputBoxFocus")

# Keys that should do nothing inside global find, input boxes, etc.
TEXT_FOCUS = EDITOR_TEXT_FOCUS | FIND_INPUT_FOCUSSED
