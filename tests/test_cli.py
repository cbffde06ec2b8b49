"""Mini README: Tests for the ``summarise`` and ``run`` CLI commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

import main_ledger_service
from ledger_engine.configuration import get_settings
from main_ledger_service import cli

runner = CliRunner()


def test_summarise_prints_balances_and_groups(tmp_path) -> None:
    log_path = tmp_path / "transactions.json"
    log_path.write_text(
        json.dumps(
            {
                "categories": ["Groceries", "Salary"],
                "transactions": [
                    {"id": 1, "category": "Groceries", "type": "Withdrawal", "rawAmount": 50, "cookedAmount": 45},
                    {"id": 2, "category": "Salary", "type": "Deposit", "rawAmount": 200, "cookedAmount": 200},
                    {"id": 3, "category": "Groceries", "type": "Withdrawal", "rawAmount": 30, "cookedAmount": 30},
                ],
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["summarise", str(log_path), "--initial-raw", "1000"])

    assert result.exit_code == 0, result.output
    assert "Current raw balance: 1120.00" in result.output
    assert "Groceries: raw -80.00 cooked -75.00" in result.output
    assert "Salary: raw 200.00 cooked 200.00" in result.output


def test_summarise_rejects_unknown_category(tmp_path) -> None:
    log_path = tmp_path / "transactions.json"
    log_path.write_text(
        json.dumps(
            {
                "categories": ["Salary"],
                "transactions": [
                    {"id": 1, "category": "Rent", "type": "Withdrawal", "rawAmount": 5, "cookedAmount": 5},
                ],
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(cli, ["summarise", str(log_path)])

    assert result.exit_code == 1


def test_summarise_rejects_non_object_log(tmp_path) -> None:
    log_path = tmp_path / "transactions.json"
    log_path.write_text("[]", encoding="utf-8")

    result = runner.invoke(cli, ["summarise", str(log_path)])

    assert result.exit_code == 1
    assert "Invalid transaction log" in result.output


def test_summarise_rejects_non_mapping_rows(tmp_path) -> None:
    log_path = tmp_path / "transactions.json"
    log_path.write_text(json.dumps({"categories": ["Salary"], "transactions": [42]}), encoding="utf-8")

    result = runner.invoke(cli, ["summarise", str(log_path)])

    assert result.exit_code == 1


@pytest.mark.parametrize(
    ("environment", "flags", "expected_reload"),
    [
        ("development", [], True),
        ("production", [], False),
        ("development", ["--production"], False),
    ],
)
def test_run_reload_follows_environment(monkeypatch, environment, flags, expected_reload) -> None:
    calls = []
    monkeypatch.setenv("LEDGER_ENGINE_ENVIRONMENT", environment)
    monkeypatch.setattr(main_ledger_service.uvicorn, "run", lambda *args, **kwargs: calls.append(kwargs))
    get_settings.cache_clear()
    try:
        result = runner.invoke(cli, ["run", *flags])
    finally:
        get_settings.cache_clear()

    assert result.exit_code == 0, result.output
    assert calls[0]["reload"] is expected_reload
