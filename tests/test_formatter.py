"""
Tests for currency formatting and the plain-text renderers.
"""

import pytest

from loan_engine.data_models import BI_WEEKLY, MONTHLY, LoanCalculationParams
from loan_engine.engine import calculate_loan
from loan_engine.formatter import format_currency, print_comparison, print_schedule, print_summary


class TestFormatCurrency:
    @pytest.mark.parametrize(
        "amount,code,expected",
        [
            (1234.56, "CAD", "$1,234.56"),
            (0, "CAD", "$0.00"),
            (-100, "CAD", "-$100.00"),
            ("1234567.891", "CAD", "$1,234,567.89"),
            (1, "usd", "US$1.00"),
            (10, "EUR", "€10.00"),
            (10, "GBP", "£10.00"),
            (5, "CHF", "CHF 5.00"),
        ],
    )
    def test_format(self, amount, code, expected):
        assert format_currency(amount, code) == expected

    def test_defaults_to_cad(self):
        assert format_currency(175) == "$175.00"


class TestRenderers:
    def test_summary(self, capsys):
        loan = calculate_loan(LoanCalculationParams(500, 29, MONTHLY, 3, brokerage_fee=50), "2024-02-01")
        print_summary(loan)
        out = capsys.readouterr().out
        assert "Total fees         : $50.00" in out
        assert "Total loan amount  : $550.00" in out
        assert "Last payment       : 2024-04-01" in out

    def test_schedule(self, capsys):
        loan = calculate_loan(LoanCalculationParams(1000, 12, MONTHLY, 3), "2024-01-01")
        print_schedule(loan.payment_schedule)
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 4
        assert lines[1].split("\t") == ["1", "2024-01-01", "340.02", "330.02", "10.00", "669.98"]
        assert lines[3].split("\t")[-1] == "0.00"

    def test_comparison(self, capsys):
        monthly = calculate_loan(LoanCalculationParams(500, 29, MONTHLY, 3), "2024-02-01")
        bi_weekly = calculate_loan(LoanCalculationParams(500, 29, BI_WEEKLY, 6), "2024-02-01")
        print_comparison([monthly, bi_weekly])
        out = capsys.readouterr().out
        assert "monthly" in out
        assert "bi-weekly" in out

    def test_empty_comparison_prints_nothing(self, capsys):
        print_comparison([])
        assert capsys.readouterr().out == ""
