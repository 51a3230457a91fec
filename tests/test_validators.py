"""
Tests for the advisory loan and payment validators.
"""

import pytest

from loan_engine.data_models import MONTHLY, LoanCalculationParams
from loan_engine.engine import calculate_payment_amount
from loan_engine.validators import validate_loan_params, validate_payment_amount


@pytest.fixture
def params():
    return LoanCalculationParams(
        principal_amount=500,
        interest_rate=29,
        payment_frequency=MONTHLY,
        number_of_payments=3,
        brokerage_fee=50,
        origination_fee=55,
    )


class TestValidateLoanParams:
    def test_valid_params(self, params):
        assert validate_loan_params(params) is None

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("principal_amount", -100, "Principal amount must be greater than 0"),
            ("principal_amount", 0, "Principal amount must be greater than 0"),
            ("principal_amount", float("nan"), "Principal amount must be a finite number"),
            ("interest_rate", -5, "Interest rate cannot be negative"),
            ("interest_rate", float("inf"), "Interest rate must be a finite number"),
            ("number_of_payments", 0, "Number of payments must be greater than 0"),
            ("number_of_payments", 1.5, "Number of payments must be a whole number"),
            ("payment_frequency", "daily", "Invalid payment frequency"),
            ("payment_frequency", None, "Invalid payment frequency"),
            ("brokerage_fee", -1, "Brokerage fee cannot be negative"),
            ("origination_fee", -1, "Origination fee cannot be negative"),
            ("other_fees", "-0.01", "Other fees cannot be negative"),
            ("other_fees", "abc", "Other fees must be a finite number"),
        ],
    )
    def test_reports_failed_constraint(self, params, field, value, message):
        setattr(params, field, value)
        assert validate_loan_params(params) == message

    def test_missing_fee_is_valid(self, params):
        params.other_fees = None
        assert validate_loan_params(params) is None

    def test_validator_and_calculator_agree_on_bad_principal(self, params):
        params.principal_amount = -100
        assert "Principal" in validate_loan_params(params)
        assert calculate_payment_amount(params) is None


class TestValidatePaymentAmount:
    def test_valid_payment(self):
        assert validate_payment_amount(100, 500) is None

    def test_payment_equal_to_balance(self):
        assert validate_payment_amount("174.79", "174.79") is None

    @pytest.mark.parametrize("amount", [0, -10, float("nan")])
    def test_non_positive_payment(self, amount):
        assert validate_payment_amount(amount, 500) == "Payment amount must be greater than 0"

    def test_payment_exceeding_balance(self):
        assert validate_payment_amount(150, 100) == (
            "Payment amount ($150.00) cannot exceed remaining balance ($100.00)"
        )
