from __future__ import annotations

import json
import logging
from pathlib import Path

from keymap_builder import cli, registry


def test_main_writes_output_file(tmp_path: Path) -> None:
    output = tmp_path / "keybindings.json"

    assert cli.main(["--output", str(output)]) == 0

    data = json.loads(output.read_text(encoding="utf-8"))
    keys = {entry["key"] for entry in data}
    assert {"ctrl+x s", "ctrl+x ctrl+s", "a", "shift+a"} <= keys


def test_main_prints_to_stdout(capsys) -> None:
    assert cli.main([]) == 0

    data = json.loads(capsys.readouterr().out)
    assert any(entry["command"] == "groog.find" for entry in data)


def test_main_updates_manifest(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text(json.dumps({"name": "groog"}), encoding="utf-8")

    assert cli.main(["--manifest", str(path)]) == 0

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["contributes"]["keybindings"]


def test_main_reports_conflicts(tmp_path: Path, caplog) -> None:
    config_path = tmp_path / "bindings.json"
    config_path.write_text(
        json.dumps({"bindings": [{"key": "a", "command": "groog.find"}]}),
        encoding="utf-8",
    )
    output = tmp_path / "keybindings.json"

    with caplog.at_level(logging.ERROR):
        code = cli.main(["--config", str(config_path), "--output", str(output)])

    assert code == 1
    assert not output.exists()
    assert "Keymap build failed" in caplog.text


def test_parse_args_defaults() -> None:
    args = cli.parse_args([])
    assert args.log_level == "INFO"
    assert args.output is None
    assert args.allow_alias_collisions is False


def test_main_without_config_uses_cached_default_table(tmp_path: Path) -> None:
    assert cli.main(["--output", str(tmp_path / "keybindings.json")]) == 0
    assert registry._CACHED_TABLE is not None  # type: ignore[attr-defined]


def test_main_leaves_manifest_untouched_when_output_cannot_be_written(
    tmp_path: Path,
) -> None:
    path = tmp_path / "package.json"
    original = json.dumps({"name": "groog"})
    path.write_text(original, encoding="utf-8")
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    code = cli.main(
        ["--manifest", str(path), "--output", str(blocker / "keybindings.json")]
    )

    assert code == 1
    assert path.read_text(encoding="utf-8") == original
