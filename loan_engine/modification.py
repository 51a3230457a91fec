"""Failed-payment penalties and loan modification balances.

When scheduled payments fail, each one costs a flat origination fee and the
interest that was due with it. Restructuring a loan rolls those charges, plus
a brokerage fee, into the outstanding balance. The new balance is then fed
back into :func:`loan_engine.engine.calculate_loan` by the caller to build
the new schedule; nothing here regenerates a schedule.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from .data_models import FailedPaymentCalculationParams, FailedPaymentCalculationResult
from .utils import finite_decimal, round_currency

logger = logging.getLogger(__name__)


def calculate_failed_payment_fees(params: FailedPaymentCalculationParams) -> FailedPaymentCalculationResult:
    """Aggregate fees and forgone interest over a list of failed payments.

    An empty list is valid and yields an all-zero result. Raises
    ``ValueError`` if the origination fee or any interest amount is not a
    finite number.
    """
    failed_payments = list(params.failed_payments)
    count = len(failed_payments)
    total_fees = count * finite_decimal(params.origination_fee)
    # a payment recorded without interest contributes only its fee
    total_interest = sum((finite_decimal(p.interest) for p in failed_payments), Decimal("0"))
    total_amount = total_fees + total_interest

    if count:
        logger.info("%d failed payment(s): fees %s, interest %s", count, total_fees, total_interest)
    return FailedPaymentCalculationResult(
        total_fees=round_currency(total_fees),
        total_interest=round_currency(total_interest),
        total_amount=round_currency(total_amount),
        failed_payment_count=count,
    )


def calculate_modification_balance(
    current_balance, brokerage_fee, failed_payment_result: FailedPaymentCalculationResult
) -> Decimal:
    """Return the balance to carry into a modified loan.

    ``current_balance + brokerage_fee + failed_payment_result.total_amount``

    Raises ``ValueError`` if the balance or the brokerage fee is not a finite
    number.
    """
    total = finite_decimal(current_balance) + finite_decimal(brokerage_fee) + failed_payment_result.total_amount
    return round_currency(total)
