"""Tests for the command line front end."""

from __future__ import annotations

import json

import pytest

from asset_ledger.cli import main


@pytest.fixture()
def database_url(tmp_path) -> str:
    return f"sqlite+pysqlite:///{tmp_path / 'ledger.sqlite'}"


def _run(database_url: str, *argv: str) -> int:
    return main(["--database", database_url, "--schema", "marble", *argv])


def test_cli_round_trip(database_url: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(database_url, "invoke", "init", "100") == 0
    assert _run(database_url, "invoke", "create", "widget1", "red", "5", "alice") == 0
    capsys.readouterr()

    assert _run(database_url, "query", "read", "widget1") == 0
    out = capsys.readouterr().out
    assert json.loads(out) == {"name": "widget1", "color": "red", "size": 5, "user": "alice"}

    assert _run(database_url, "query", "list") == 0
    assert json.loads(capsys.readouterr().out) == ["widget1"]


def test_cli_reports_structured_errors(database_url: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(database_url, "query", "read", "missing") == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert json.loads(captured.err) == {"Error": "Failed to get state for missing"}


def test_cli_rejects_unknown_schema(database_url: str) -> None:
    with pytest.raises(SystemExit):
        main(["--database", database_url, "--schema", "vehicle", "query", "list"])
