#!/usr/bin/env python3
"""Convenience script to format, lint, test and compile the keymap in sequence."""

from __future__ import annotations

import subprocess
import sys
from typing import Iterable


def run_step(description: str, args: list[str], ok_codes: Iterable[int] = (0,)) -> None:
    print(f"\n=== {description} ===", flush=True)
    result = subprocess.run(args)
    if result.returncode not in ok_codes:
        print(f"{description} failed with exit code {result.returncode}.")
        sys.exit(result.returncode)


def main() -> None:
    run_step("Formatting (black)", ["black", "src", "tests", "main.py"])
    run_step("Linting (ruff)", ["ruff", "check", "."])
    run_step("Testing (pytest)", ["pytest"], ok_codes=(0, 5))
    run_step(
        "Compiling keymap",
        [sys.executable, "main.py", "--output", "build/keybindings.json"],
    )
    print("\nKeymap compiled to build/keybindings.json")


if __name__ == "__main__":
    main()
