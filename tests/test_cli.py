import csv
import json

import pytest
from click.testing import CliRunner

from debt_engine.main import cli, parse_amount, parse_extra_payment_strings

BASE_ARGS = ["-p", "10m", "-r", "12", "-n", "12", "-s", "2025-01-01"]


@pytest.fixture
def runner():
    return CliRunner()


def test_parse_amount():
    assert parse_amount("500k") == 500_000.0
    assert parse_amount("1.5m") == 1_500_000.0
    assert parse_amount("1,250") == 1_250.0


def test_parse_extra_payment_strings():
    extras = parse_extra_payment_strings(("3:2m", "5:100k:term"))
    assert [(e.installment, int(e.amount), e.mode) for e in extras] == [
        (3, 2_000_000, "installment"),
        (5, 100_000, "term"),
    ]


def test_schedule_prints_summary_and_table(runner):
    result = runner.invoke(cli, ["schedule", *BASE_ARGS])
    assert result.exit_code == 0, result.output
    assert "Summary" in result.output
    assert "888487.89" in result.output
    assert "2025-12-01" in result.output


def test_schedule_json_export(runner, tmp_path):
    out = tmp_path / "schedule.json"
    result = runner.invoke(cli, ["schedule", *BASE_ARGS, "--paid", "3", "--extra-payment", "3:2m", "--output", str(out)])
    assert result.exit_code == 0, result.output

    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["schedule"]) == 12
    assert data["schedule"][2]["extra_payment"] == 2_000_000.0
    assert data["schedule"][2]["status"] == "paid"
    assert data["summary"]["remaining_installments"] == 9
    assert data["summary"]["interest_saved"] > 0


def test_schedule_csv_export(runner, tmp_path):
    out = tmp_path / "schedule.csv"
    result = runner.invoke(cli, ["schedule", *BASE_ARGS, "--output", str(out)])
    assert result.exit_code == 0, result.output

    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0][0] == "Installment"
    assert len(rows) == 13


def test_schedule_rejects_unknown_export(runner, tmp_path):
    result = runner.invoke(cli, ["schedule", *BASE_ARGS, "--output", str(tmp_path / "out.txt")])
    assert result.exit_code != 0


def test_summary_command(runner):
    result = runner.invoke(cli, ["summary", *BASE_ARGS, "--paid", "12"])
    assert result.exit_code == 0, result.output
    assert "Remaining          : 0 installments" in result.output


def test_simulate_command_json(runner):
    result = runner.invoke(cli, ["simulate", *BASE_ARGS, "--amount", "2m", "--after", "3", "--mode", "term", "--json"])
    assert result.exit_code == 0, result.output

    data = json.loads(result.output)
    assert data["installments_saved"] > 0
    assert data["interest_saved"] > 0
    assert data["original_end_date"] == "2025-12-01"


def test_simulate_defaults_to_next_installment(runner):
    result = runner.invoke(cli, ["simulate", *BASE_ARGS, "--paid", "2", "--amount", "500k"])
    assert result.exit_code == 0, result.output
    assert "Interest saved" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["schedule", "-p", "0", "-r", "12", "-n", "12", "-s", "2025-01-01"],
        ["schedule", *BASE_ARGS, "--extra-payment", "3"],
        ["schedule", *BASE_ARGS, "--extra-payment", "3:100:balloon"],
        ["schedule", *BASE_ARGS, "--extra-payment", "20:100"],
        ["schedule", "-p", "10m", "-r", "12", "-n", "12", "-s", "January"],
        ["simulate", *BASE_ARGS, "--paid", "12", "--amount", "100"],
        ["schedule", "-p", "inf", "-r", "12", "-n", "12", "-s", "2025-01-01"],
        ["schedule", "-p", "nan", "-r", "12", "-n", "12", "-s", "2025-01-01"],
        ["schedule", "-p", "10m", "-r", "inf", "-n", "12", "-s", "2025-01-01"],
        ["schedule", *BASE_ARGS, "--extra-payment", "3:inf"],
        ["simulate", *BASE_ARGS, "--amount", "inf"],
    ],
)
def test_bad_input_is_rejected(runner, args):
    result = runner.invoke(cli, args)
    assert result.exit_code == 2
