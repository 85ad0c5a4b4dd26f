from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

import wbedit.cli as cli
from wbedit.errors import NotFoundError, PermissionDeniedError, from_os_error


def test_strip_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "config.jsonc"
    p.write_text('{"a": 1} // c\n', encoding="utf-8")

    assert cli.main(["strip", str(p)]) == 0
    assert capsys.readouterr().out == '{"a": 1} \n'


def test_validate_from_stdin(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli.sys, "stdin", io.StringIO('{/* c */ "a": 1}'))
    assert cli.main(["validate"]) == 0
    assert capsys.readouterr().out.strip() == "OK"


def test_validate_strict_rejects_comments(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli.sys, "stdin", io.StringIO('{/* c */ "a": 1}'))
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["validate", "--strict"])
    assert excinfo.value.code == 1
    assert "Validation error: Invalid JSON" in capsys.readouterr().err


def test_save_load_and_backups(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "config.jsonc"
    config.write_text('{"height": 30}', encoding="utf-8")
    new = tmp_path / "new.json"
    new.write_text('{"height": 40}', encoding="utf-8")

    assert cli.main(["save", "--config-dir", str(tmp_path), "-i", str(new)]) == 0
    assert "backup: config.backup." in capsys.readouterr().out

    assert cli.main(["load", str(config)]) == 0
    loaded = json.loads(capsys.readouterr().out)
    assert loaded["path"] == str(config)
    assert '"height": 40' in loaded["content"]

    assert cli.main(["backups", "--config-dir", str(tmp_path)]) == 0
    names = json.loads(capsys.readouterr().out)
    assert len(names) == 1
    assert names[0].startswith("config.backup.")


def test_load_missing_reports_not_found(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["load", str(tmp_path / "config.jsonc")])
    assert excinfo.value.code == 1
    assert "Not found: Config file not found" in capsys.readouterr().err


def test_compositor_check(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "is_compositor_running", lambda name: name == "sway")
    assert cli.main(["compositor", "--check", "sway"]) == 0
    assert capsys.readouterr().out.strip() == "yes"


def test_error_mapping() -> None:
    assert isinstance(from_os_error(FileNotFoundError(2, "gone")), NotFoundError)
    error = from_os_error(PermissionError(13, "denied"), "style.css")
    assert isinstance(error, PermissionDeniedError)
    assert error.to_payload().model_dump() == {
        "type": "PermissionDenied",
        "message": "style.css: [Errno 13] denied",
    }
    assert str(error) == "Permission denied: style.css: [Errno 13] denied"
