"""Running balance arithmetic.

Applying a payment (and optionally a fee) to an outstanding balance. A balance
never goes below zero: overpaying simply pays the loan off.

Unlike the schedule calculators these functions work on amounts that have
already been accepted, so bad input is an error: text that is not a number,
NaN and infinity raise ``ValueError``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from .data_models import BalanceCalculationParams, BalanceCalculationResult
from .utils import finite_decimal, round_currency


def calculate_new_balance(params: BalanceCalculationParams) -> BalanceCalculationResult:
    """Return the balance after adding ``additional_fees`` and subtracting the payment.

    ``is_paid_off`` is judged on the balance rounded to cents, so it always
    agrees with ``new_balance``.

    Raises
    ------
    ValueError
        If any amount is not a finite number.

    Example
    -------
    >>> calculate_new_balance(BalanceCalculationParams(500, 175))
    BalanceCalculationResult(new_balance=Decimal('325.00'), amount_paid=Decimal('175.00'), is_paid_off=False)
    """
    balance_with_fees = finite_decimal(params.current_balance) + finite_decimal(params.additional_fees)
    payment_amount = finite_decimal(params.payment_amount)
    new_balance = round_currency(max(Decimal("0"), balance_with_fees - payment_amount))
    return BalanceCalculationResult(
        new_balance=new_balance,
        amount_paid=round_currency(payment_amount),
        is_paid_off=new_balance == 0,
    )


def calculate_balance_from_payments(initial_balance, payments: Iterable) -> Decimal:
    """Return what is left of ``initial_balance`` after the applied ``payments``.

    Raises ``ValueError`` if the balance or any payment is not a finite number.
    """
    total_paid = sum((finite_decimal(p) for p in payments), Decimal("0"))
    return round_currency(max(Decimal("0"), finite_decimal(initial_balance) - total_paid))
