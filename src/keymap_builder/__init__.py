"""Keymap compiler for the groog VS Code extension."""

__all__ = [
    "actions",
    "cli",
    "compiler",
    "config_loader",
    "errors",
    "keys",
    "manifest",
    "models",
    "predicates",
    "registry",
    "table",
]
