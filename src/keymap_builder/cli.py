"""Command-line entry point that compiles the keymap."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import compiler, config_loader, manifest, registry
from .errors import KeymapError

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="keymap-builder",
        description="Compile the groog keymap into VS Code keybindings.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the keybinding array to this file (default: stdout)",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        help="Replace contributes.keybindings in this package.json",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON file with additional user bindings",
    )
    parser.add_argument(
        "--allow-alias-collisions",
        action="store_true",
        help="Warn instead of failing when two keys alias to the same binding",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run(args: argparse.Namespace) -> None:
    if args.config is None:
        table = registry.default_table()
    else:
        table = config_loader.build_user_table(registry.default_entries(), args.config)
    records = compiler.compile_keymap(
        table, check_alias_collisions=not args.allow_alias_collisions
    )
    for key, condition in sorted(compiler.duplicate_keys(records)):
        _LOGGER.warning("Duplicate keybinding for %s when %r", key, condition)

    manifest.validate_keybindings(manifest.serialize(records))
    documents: Dict[Path, str] = {}
    if args.manifest is not None:
        documents[args.manifest] = manifest.render_manifest(records, args.manifest)
    if args.output is not None:
        documents[args.output] = manifest.dumps(records)
    if not documents:
        sys.stdout.write(manifest.dumps(records))
        return
    manifest.write_documents(documents)
    for path in documents:
        _LOGGER.info("Wrote %d keybindings to %s", len(records), path)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    try:
        run(args)
    except KeymapError as exc:
        _LOGGER.error("Keymap build failed: %s", exc)
        return 1
    return 0
