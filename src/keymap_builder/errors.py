"""Exceptions raised while assembling and compiling keymaps."""

from __future__ import annotations


class KeymapError(RuntimeError):
    """Base class for every fatal keymap build error."""


class DefinitionConflictError(KeymapError):
    """Raised when the same key (or key and condition) is defined twice."""


class InvalidNegationError(KeymapError):
    """Raised when negating a predicate that is not a single condition."""


class MalformedPredicateError(KeymapError):
    """Raised when a branch predicate is not a bare identifier."""
