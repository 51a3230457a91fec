"""
Tests for the command-line interface.
"""

import csv
import json
from decimal import Decimal

import click
import pytest
from click.testing import CliRunner

from loan_engine.main import cli, parse_amount, parse_failed_payment_strings


@pytest.fixture
def runner():
    return CliRunner()


class TestParsing:
    @pytest.mark.parametrize(
        "value,expected",
        [("500", "500"), ("1,250.50", "1250.50"), ("1.5k", "1500"), ("2M", "2000000"), (" 75 ", "75")],
    )
    def test_parse_amount(self, value, expected):
        assert parse_amount(value) == Decimal(expected)

    def test_parse_amount_rejects_text(self):
        with pytest.raises(click.BadParameter):
            parse_amount("lots")

    def test_parse_failed_payments(self):
        failed = parse_failed_payment_strings(("2024-03-01:174.79:8.15",))
        assert len(failed) == 1
        assert failed[0].interest == Decimal("8.15")

    @pytest.mark.parametrize("value", ["2024-03-01:174.79", "2024-13-01:174.79:8.15"])
    def test_parse_failed_payments_rejects_bad_format(self, value):
        with pytest.raises(click.BadParameter):
            parse_failed_payment_strings((value,))


class TestScheduleCommand:
    def test_prints_summary_and_schedule(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "1000", "-r", "12", "-n", "3", "-s", "2024-01-01"])
        assert result.exit_code == 0, result.output
        assert "Payment amount     : $340.02" in result.output
        assert "2024-03-01\t340.03" in result.output

    def test_defaults_to_policy_payment_count(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "500", "-r", "29", "-f", "weekly", "-s", "2024-02-01"])
        assert result.exit_code == 0, result.output
        assert "Number of payments : 12" in result.output

    def test_exports_json(self, runner, tmp_path):
        path = tmp_path / "loan.json"
        result = runner.invoke(
            cli, ["schedule", "-p", "1000", "-r", "12", "-n", "3", "-s", "2024-01-01", "--output", str(path)]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"]["total_interest"] == 20.07
        assert len(data["schedule"]) == 3

    def test_exports_csv(self, runner, tmp_path):
        path = tmp_path / "loan.csv"
        result = runner.invoke(
            cli, ["schedule", "-p", "1000", "-r", "12", "-n", "3", "-s", "2024-01-01", "--output", str(path)]
        )
        assert result.exit_code == 0, result.output
        with path.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0][0] == "Payment_Number"
        assert rows[3] == ["3", "2024-03-01", "340.03", "336.66", "3.37", "0.00"]

    def test_rejects_unknown_export_format(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["schedule", "-p", "500", "-r", "29", "-s", "2024-02-01", "--output", str(tmp_path / "x.txt")]
        )
        assert result.exit_code == 2

    def test_rejects_negative_principal(self, runner):
        result = runner.invoke(cli, ["schedule", "--principal=-100", "-r", "29", "-s", "2024-02-01"])
        assert result.exit_code == 2
        assert "Principal amount must be greater than 0" in result.output

    def test_rejects_bad_date(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "500", "-r", "29", "-s", "2024-02-30"])
        assert result.exit_code == 2
        assert "Invalid date string" in result.output


class TestSummaryCommand:
    def test_prints_totals_only(self, runner):
        result = runner.invoke(cli, ["summary", "-p", "500", "-r", "29", "-s", "2024-02-01", "--brokerage-fee", "50"])
        assert result.exit_code == 0, result.output
        assert "Total loan amount  : $550.00" in result.output
        assert "DueDate" not in result.output

    def test_exports_json_without_schedule(self, runner, tmp_path):
        path = tmp_path / "summary.json"
        result = runner.invoke(cli, ["summary", "-p", "500", "-r", "29", "-s", "2024-02-01", "--output", str(path)])
        assert result.exit_code == 0, result.output
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["summary"]["payment_amount"] == 174.79
        assert "schedule" not in data


class TestCompareCommand:
    def test_lists_every_frequency(self, runner):
        result = runner.invoke(cli, ["compare", "-p", "500", "-r", "29", "-s", "2024-02-01"])
        assert result.exit_code == 0, result.output
        for frequency in ("weekly", "bi-weekly", "twice-monthly", "monthly"):
            assert frequency in result.output


class TestPayCommand:
    def test_partial_payment(self, runner):
        result = runner.invoke(cli, ["pay", "--balance", "500", "--amount", "175"])
        assert result.exit_code == 0, result.output
        assert "New balance : $325.00" in result.output
        assert "Paid off    : No" in result.output

    def test_overpayment_warns_and_floors(self, runner):
        result = runner.invoke(cli, ["pay", "--balance", "100", "--amount", "150"])
        assert result.exit_code == 0, result.output
        assert "cannot exceed remaining balance" in result.output
        assert "New balance : $0.00" in result.output
        assert "Paid off    : Yes" in result.output

    def test_rejects_non_finite_amount(self, runner):
        result = runner.invoke(cli, ["pay", "--balance", "nan", "--amount", "10"])
        assert result.exit_code == 2
        assert "Invalid amount: nan" in result.output


class TestModifyCommand:
    def test_modification_balance(self, runner):
        result = runner.invoke(
            cli,
            [
                "modify",
                "--balance", "325.21",
                "--brokerage-fee", "50",
                "--origination-fee", "55",
                "--failed", "2024-03-01:174.79:8.15",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Failed payments    : 1" in result.output
        assert "New balance        : $438.36" in result.output

    def test_rebuilds_schedule(self, runner):
        result = runner.invoke(
            cli,
            [
                "modify",
                "--balance", "325.21",
                "--brokerage-fee", "50",
                "--origination-fee", "55",
                "--failed", "2024-03-01:174.79:8.15",
                "-s", "2024-04-01",
                "-r", "29",
                "-n", "2",
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Total loan amount  : $438.36" in result.output
        assert "2024-05-01" in result.output

    def test_rebuild_requires_rate(self, runner):
        result = runner.invoke(cli, ["modify", "--balance", "300", "-s", "2024-04-01"])
        assert result.exit_code == 2
        assert "--rate" in result.output
