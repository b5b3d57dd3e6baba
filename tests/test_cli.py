"""CLI tests for jobl."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import yaml

from jobl.cli import main

REPO_ROOT = Path(__file__).resolve().parents[1]
FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_cli_help_exits_zero() -> None:
    env = os.environ.copy()
    src_path = str(REPO_ROOT / "src")
    env["PYTHONPATH"] = (
        src_path if "PYTHONPATH" not in env else f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    )

    result = subprocess.run(
        [sys.executable, "-m", "jobl.cli", "--help"],
        check=False,
        capture_output=True,
        text=True,
        env=env,
    )

    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()


def test_main_without_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "usage:" in capsys.readouterr().out.lower()


def test_validate_reports_ok(capsys: pytest.CaptureFixture[str]) -> None:
    path = FIXTURES / "complete.jobl"

    assert main(["validate", str(path)]) == 0
    assert capsys.readouterr().out == f"{path}: ok\n"


def test_validate_prints_every_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(
        tmp_path,
        "bad.jobl",
        "[person]\nname = ''\nnickname = 'JD'\n\n[hobbies]\nlist = ['chess']\n",
    )

    assert main(["validate", str(path)]) == 1
    assert capsys.readouterr().out.splitlines() == [
        f"{path}: hobbies: unknown top-level key 'hobbies'",
        f"{path}: person.name: name cannot be empty",
        f"{path}: person.nickname: unknown field 'nickname'",
    ]


def test_validate_fails_when_any_file_is_invalid(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    good = FIXTURES / "complete.yml"
    missing = tmp_path / "missing.jobl"

    assert main(["validate", str(good), str(missing)]) == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"{good}: ok"
    assert lines[1].startswith(f"{missing}: file: ")


def test_validate_json_error_format(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path, "bad.jobl", "[person]\nname = 'Jane'\n\n[skills]\ntools = []\n")

    assert main(["validate", "--error-format", "json", str(path)]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "file": str(path),
        "ok": False,
        "errors": [{"path": "skills.tools", "message": "category cannot be empty"}],
    }


def test_validate_uses_config_defaults(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path, "jobl.yml", "error_format: json\ndefault_format: yaml\n")
    path = _write(tmp_path, "profile.txt", "person:\n  name: Jane\n")

    assert main(["--config", str(config), "validate", str(path)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"file": str(path), "ok": True, "errors": []}


def test_invalid_config_exits_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path, "jobl.yml", "error_format: xml\n")

    assert main(["--config", str(config), "validate", str(FIXTURES / "complete.jobl")]) == 2
    assert "Configuration validation failed" in capsys.readouterr().err


def test_dump_prints_canonical_yaml(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["dump", str(FIXTURES / "complete.yml")]) == 0

    data = yaml.safe_load(capsys.readouterr().out)
    assert data["person"] == {"name": "Jane Doe", "email": "jane@example.com"}
    assert "projects" not in data


def test_dump_reports_errors_on_stderr(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write(tmp_path, "bad.jobl", "[person]\nemail = 'x'\n")

    assert main(["dump", str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert f"{path}: person.name: Field required" in captured.err


def test_unknown_log_level_exits_two(capsys: pytest.CaptureFixture[str]) -> None:
    path = FIXTURES / "complete.jobl"

    assert main(["--log-level", "bogus", "validate", str(path)]) == 2
    captured = capsys.readouterr()
    assert "Unsupported log level: bogus" in captured.err
    assert captured.out == ""


def test_log_level_flag_overrides_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write(tmp_path, "jobl.yml", "log_level: bogus\n")

    document = str(FIXTURES / "complete.jobl")
    argv = ["--config", str(config), "--log-level", "error", "validate", document]

    assert main(argv) == 0
    assert logging.getLogger().level == logging.ERROR
