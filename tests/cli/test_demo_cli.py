"""CLI tests for the conflict demo command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from occfs.cli.main import app

runner = CliRunner()


def _json_payload(output: str) -> dict[str, Any]:
    # Conflict warnings may share the captured output
    return json.loads(output[output.index("{") :])


def test_demo_creates_file_and_reports(memory_env: Path) -> None:
    result = runner.invoke(app, ["demo"])

    assert result.exit_code == 0
    assert "Transaction A: committed" in result.stdout
    assert "Transaction B: rolled back" in result.stdout
    assert (memory_env / "test.txt").exists()


def test_demo_json(memory_env: Path) -> None:
    target = memory_env / "shared.txt"
    target.write_text("Initial content\n")

    result = runner.invoke(app, ["demo", "--file", str(target), "--json"])

    assert result.exit_code == 0
    payload = _json_payload(result.stdout)
    assert payload["first_committed"] is True
    assert payload["second_committed"] is False
    assert payload["initial_content"] == "Initial content\n"
    assert payload["path"] == str(target.resolve())


def test_demo_discard_mode_keeps_first_commit(
    memory_env: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("OCCFS_ROLLBACK_ON_CONFLICT", "false")

    result = runner.invoke(app, ["demo", "--json"])

    assert result.exit_code == 0
    payload = _json_payload(result.stdout)
    assert payload["final_content"] == "A: new line from A.\n"


def test_verbose_logs_transaction_events(memory_env: Path) -> None:
    result = runner.invoke(app, ["--verbose", "--log-json", "demo"])

    assert result.exit_code == 0
    assert '"event": "transaction.commit"' in result.output


def test_parallel_demo(memory_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OCCFS_ROLLBACK_ON_CONFLICT", "false")

    result = runner.invoke(app, ["demo", "--parallel", "--json"])

    assert result.exit_code == 0
    payload = _json_payload(result.stdout)
    assert payload["first_committed"] is True
    assert payload["second_committed"] is False
    assert payload["final_content"] == "A: change from thread A.\n"
