"""Key chords, chord sequences and their alias expansion."""

from __future__ import annotations

import re
from typing import List, Tuple

# Two-step sequences whose modifier some keyboards keep held for the second
# chord, so "ctrl+x s" must also be bound as "ctrl+x ctrl+s".
PREFIXES: Tuple[str, ...] = (
    "ctrl+x ",
    "ctrl+z ",
)


_PLUS = re.compile(r"\s*\+\s*")


class Key(str):
    """A chord (``ctrl+shift+a``) or space-separated chord sequence."""

    def aliases(self) -> List[str]:
        """Return every key string this key must be emitted under."""

        result = [str(self)]
        for prefix in PREFIXES:
            if self.startswith(prefix):
                result.append(f"{prefix}ctrl+{self[len(prefix):]}")
        return result


def alt(inner: str) -> Key:
    return Key(f"alt+{inner}")


def ctrl(inner: str) -> Key:
    return Key(f"ctrl+{inner}")


def shift(inner: str) -> Key:
    return Key(f"shift+{inner}")


def ctrl_x(inner: str) -> Key:
    return Key(f"ctrl+x {inner}")


def ctrl_z(inner: str) -> Key:
    return Key(f"ctrl+z {inner}")


UP = Key("up")
DOWN = Key("down")
LEFT = Key("left")
RIGHT = Key("right")
PAGEUP = Key("pageup")
PAGEDOWN = Key("pagedown")
BACKSPACE = Key("backspace")
DELETE = Key("delete")
HOME = Key("home")
END = Key("end")
INSERT = Key("insert")
TAB = Key("tab")
ENTER = Key("enter")
SPACE = Key("space")


def normalize_key(text: str) -> Key:
    """Canonicalize hand-written keys, e.g. ``"Ctrl + X  S"`` -> ``"ctrl+x s"``."""

    chords = _PLUS.sub("+", text.strip()).split()
    return Key(" ".join(chord.lower() for chord in chords))
