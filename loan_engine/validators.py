"""Human-readable checks for loan and payment input.

Validators are advisory. The calculators already return ``None`` for bad
input; these functions explain which constraint failed so the message can be
shown to a user. Each returns an error message, or ``None`` when the input is
acceptable.
"""

from __future__ import annotations

from typing import Optional

from .data_models import PAYMENT_FREQUENCY_CONFIG, LoanCalculationParams
from .utils import round_currency, safe_decimal


def validate_loan_params(params: LoanCalculationParams) -> Optional[str]:
    principal = safe_decimal(params.principal_amount)
    if principal is None:
        return "Principal amount must be a finite number"
    if principal <= 0:
        return "Principal amount must be greater than 0"

    rate = safe_decimal(params.interest_rate)
    if rate is None:
        return "Interest rate must be a finite number"
    if rate < 0:
        return "Interest rate cannot be negative"

    count = safe_decimal(params.number_of_payments)
    if count is None or count != count.to_integral_value():
        return "Number of payments must be a whole number"
    if count <= 0:
        return "Number of payments must be greater than 0"

    if not isinstance(params.payment_frequency, str) or params.payment_frequency not in PAYMENT_FREQUENCY_CONFIG:
        return "Invalid payment frequency"

    for label, value in (
        ("Brokerage fee", params.brokerage_fee),
        ("Origination fee", params.origination_fee),
        ("Other fees", params.other_fees),
    ):
        fee = safe_decimal(value)
        if fee is None:
            return f"{label} must be a finite number"
        if fee < 0:
            return f"{label} cannot be negative"

    return None


def validate_payment_amount(payment_amount, current_balance) -> Optional[str]:
    """Check that a payment is positive and does not exceed the balance.

    Paying exactly the remaining balance is allowed.
    """
    payment = safe_decimal(payment_amount)
    balance = safe_decimal(current_balance)
    if payment is None or payment <= 0:
        return "Payment amount must be greater than 0"
    if balance is None:
        return "Remaining balance must be a finite number"
    if payment > balance:
        return (
            f"Payment amount (${round_currency(payment)}) cannot exceed "
            f"remaining balance (${round_currency(balance)})"
        )
    return None
