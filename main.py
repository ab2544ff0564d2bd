"""Command-line entry point for the keymap compiler."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
SRC_DIR = ROOT_DIR / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from keymap_builder import cli  # noqa: E402


if __name__ == "__main__":
    sys.exit(cli.main())
