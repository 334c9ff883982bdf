"""
Tests for the command-line entry point.
"""

import io
import json
import sys
from pathlib import Path

import pytest

from tomltree.__main__ import main


def run_cli(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["tomltree", "--no-color", *args])
    return main()


def test_prints_tagged_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], sample_path: Path
) -> None:
    assert run_cli(monkeypatch, str(sample_path)) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["title"] == {"type": "string", "value": "TOML Example"}
    assert len(output["products"]) == 2


def test_get_path(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], sample_path: Path
) -> None:
    assert run_cli(monkeypatch, str(sample_path), "--get", "products.1.name") == 0
    assert json.loads(capsys.readouterr().out) == {"type": "string", "value": "Nail"}


def test_get_missing_path(monkeypatch: pytest.MonkeyPatch, sample_path: Path) -> None:
    assert run_cli(monkeypatch, str(sample_path), "--get", "products.9.name") == 1


def test_get_malformed_path(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], sample_path: Path
) -> None:
    assert run_cli(monkeypatch, str(sample_path), "--get", "a..b") == 2
    assert "empty segment" in capsys.readouterr().err


def test_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("a = [1, 2, 3]\n"))

    assert run_cli(monkeypatch, "-", "--get", "a.1") == 0
    assert json.loads(capsys.readouterr().out) == {"type": "integer", "value": "2"}


def test_parse_error_exit_code(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    path = tmp_path / "bad.toml"
    path.write_text("a = \n", encoding="utf-8")

    assert run_cli(monkeypatch, str(path)) == 1
    assert "Failed to parse document" in capsys.readouterr().err


def test_suite(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str], suite_dir: Path
) -> None:
    assert run_cli(monkeypatch, "--suite", str(suite_dir)) == 1

    output = capsys.readouterr().out
    assert "TEST/VALID:     simple.toml" in output
    assert "[FAIL]" in output
    assert "Tests/PASS/FAIL: 4/3/1" in output


def test_document_required_without_suite(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SystemExit) as exc_info:
        run_cli(monkeypatch)

    assert exc_info.value.code == 2
