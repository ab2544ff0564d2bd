"""Serialization of compiled keybindings into JSON documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import jsonschema

from .errors import KeymapError
from .models import KeybindingRecord

_LOGGER = logging.getLogger(__name__)


class ManifestError(KeymapError):
    """Raised when keybindings cannot be read, validated or written."""


def default_schema_path() -> Path:
    return Path(__file__).resolve().parent / "schema" / "keybindings.schema.json"


def serialize(records: Sequence[KeybindingRecord]) -> List[Dict[str, Any]]:
    """Convert records to JSON-ready dictionaries, omitting empty fields."""

    return [record.to_dict() for record in records]


def dumps(records: Sequence[KeybindingRecord]) -> str:
    return json.dumps(serialize(records), indent=2) + "\n"


def validate_keybindings(data: object, schema_path: Optional[Path] = None) -> None:
    sch_path = schema_path or default_schema_path()
    try:
        schema = json.loads(sch_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"Schema file {sch_path} is missing") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Schema file {sch_path} is not valid JSON: {exc}") from exc

    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as exc:
        raise ManifestError(f"Keybinding validation error: {exc.message}") from exc


def save_keybindings(
    records: Sequence[KeybindingRecord],
    path: Path,
    *,
    schema_path: Optional[Path] = None,
) -> None:
    """Validate ``records`` and write them as a JSON array to ``path``."""

    data = serialize(records)
    validate_keybindings(data, schema_path)
    write_documents({path: json.dumps(data, indent=2) + "\n"})
    _LOGGER.info("Saved %d keybindings to %s", len(records), path)


def load_keybindings(
    path: Path, *, schema_path: Optional[Path] = None
) -> List[KeybindingRecord]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"Keybindings file {path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Keybindings file {path} is not valid JSON: {exc}") from exc

    validate_keybindings(data, schema_path)
    return [
        KeybindingRecord(
            key=raw["key"],
            when=raw.get("when", ""),
            command=raw["command"],
            args=raw.get("args"),
        )
        for raw in data
    ]


def render_manifest(
    records: Sequence[KeybindingRecord],
    path: Path,
    *,
    schema_path: Optional[Path] = None,
) -> str:
    """Return the manifest at ``path`` with ``contributes.keybindings`` replaced.

    Every other field of the manifest is left untouched. Nothing is written.
    """

    try:
        manifest = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest {path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Manifest {path} is not valid JSON: {exc}") from exc
    if not isinstance(manifest, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")

    data = serialize(records)
    validate_keybindings(data, schema_path)
    contributes = manifest.setdefault("contributes", {})
    if not isinstance(contributes, dict):
        raise ManifestError(f"Manifest {path} has a non-object 'contributes' field")
    contributes["keybindings"] = data
    return json.dumps(manifest, indent=2) + "\n"


def update_manifest(
    records: Sequence[KeybindingRecord],
    path: Path,
    *,
    schema_path: Optional[Path] = None,
) -> None:
    """Replace ``contributes.keybindings`` of the extension manifest at ``path``."""

    write_documents({path: render_manifest(records, path, schema_path=schema_path)})
    _LOGGER.info("Updated %s with %d keybindings", path, len(records))


def write_documents(documents: Mapping[Path, str]) -> None:
    """Write every document, creating all parent directories first.

    No file is written until every parent directory exists.
    """

    try:
        for path in documents:
            path.parent.mkdir(parents=True, exist_ok=True)
        for path, text in documents.items():
            path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to write keybindings: {exc}") from exc
