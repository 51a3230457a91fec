"""Core calculation engine for the loan payment-schedule library.

This module implements the financial logic required to price a short-term
consumer loan: the periodic payment amount, the itemized amortization
schedule across weekly, bi-weekly, twice-monthly and monthly frequencies, and
the aggregated totals. All functions are pure. Invalid numeric input never
raises; it yields ``None`` (or an empty schedule) so the functions can be
called with speculative parameters, e.g. on every keystroke of a form.

Intermediate values are kept at full ``Decimal`` precision and only rounded
when an output field is built.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import Iterable, List, Optional, Union

from . import config
from .data_models import (
    BI_WEEKLY,
    MONTHLY,
    PAYMENT_FREQUENCY_CONFIG,
    TWICE_MONTHLY,
    WEEKLY,
    FrequencyConfig,
    LoanCalculationParams,
    LoanCalculationResult,
    PaymentBreakdown,
)
from .utils import due_date_for, parse_iso_date, round_currency, safe_decimal

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Payment counts for the standard "up to 3 months" product. The schedule
# builder itself accepts any number of payments.
NUMBER_OF_PAYMENTS_BY_FREQUENCY = {
    WEEKLY: 12,
    BI_WEEKLY: 6,
    TWICE_MONTHLY: 6,
    MONTHLY: 3,
}


def _frequency_config(frequency: str) -> Optional[FrequencyConfig]:
    try:
        return PAYMENT_FREQUENCY_CONFIG.get(frequency)
    except TypeError:
        # unhashable input
        return None


def _payment_count(value) -> Optional[int]:
    """Return ``value`` as an ``int`` or ``None`` if it is not a whole finite number."""
    count = safe_decimal(value)
    if count is None or count != count.to_integral_value():
        return None
    return int(count)


def _periodic_rate(interest_rate: Decimal, frequency_config: FrequencyConfig) -> Decimal:
    return interest_rate / Decimal(100) / Decimal(frequency_config.payments_per_year)


def _calculate_amortized_payment(total: Decimal, periodic_rate: Decimal, count: int) -> Optional[Decimal]:
    """Return the unrounded level payment for ``total`` over ``count`` periods.

    The formula is:

        payment = P * i * (1 + i)^n / ((1 + i)^n - 1)

    where ``P`` is the amount financed, ``i`` the periodic rate and ``n`` the
    number of payments. With a zero rate the payment is simply ``P / n``.
    """
    if periodic_rate == 0:
        return total / Decimal(count)
    factor = (1 + periodic_rate) ** count
    denominator = factor - 1
    if denominator == 0:
        return None
    return total * periodic_rate * factor / denominator


def calculate_total_fees(params: LoanCalculationParams) -> Decimal:
    """Return the sum of the brokerage, origination and other fees.

    Missing fees count as zero. Fees that are not finite numbers are left
    out here; :func:`calculate_total_loan_amount` rejects them.
    """
    fees = [safe_decimal(f) for f in (params.brokerage_fee, params.origination_fee, params.other_fees)]
    return round_currency(sum((f for f in fees if f is not None), Decimal("0")))


def calculate_total_loan_amount(params: LoanCalculationParams) -> Optional[Decimal]:
    """Return principal plus fees, or ``None`` if any operand is not a finite number."""
    principal = safe_decimal(params.principal_amount)
    fees = [safe_decimal(f) for f in (params.brokerage_fee, params.origination_fee, params.other_fees)]
    if principal is None or None in fees:
        return None
    return round_currency(principal + calculate_total_fees(params))


def calculate_payment_amount(params: LoanCalculationParams) -> Optional[Decimal]:
    """Return the periodic payment for a loan, rounded to cents.

    The payment amortizes the total loan amount (principal plus fees) over
    ``number_of_payments`` periods at the frequency's periodic rate.

    Returns ``None`` when the total loan amount is not positive, the rate is
    negative, the number of payments is not a positive whole number, any
    operand is non-finite, or the frequency is not recognized.

    Example
    -------
    >>> calculate_payment_amount(LoanCalculationParams(500, 29, "monthly", 3))
    Decimal('174.79')
    """
    total_loan_amount = calculate_total_loan_amount(params)
    interest_rate = safe_decimal(params.interest_rate)
    count = _payment_count(params.number_of_payments)
    if total_loan_amount is None or interest_rate is None or count is None:
        logger.debug("No payment amount: non-numeric input in %r", params)
        return None
    if total_loan_amount <= 0 or interest_rate < 0 or count <= 0:
        logger.debug("No payment amount: out-of-range input in %r", params)
        return None

    frequency_config = _frequency_config(params.payment_frequency)
    if frequency_config is None:
        logger.debug("No payment amount: unknown frequency %r", params.payment_frequency)
        return None

    periodic_rate = _periodic_rate(interest_rate, frequency_config)
    payment = _calculate_amortized_payment(total_loan_amount, periodic_rate, count)
    if payment is None:
        return None
    return round_currency(payment)


def calculate_payment_breakdown(
    params: LoanCalculationParams, first_payment_date: Union[date, str]
) -> List[PaymentBreakdown]:
    """Build the payment-by-payment schedule for a loan.

    Parameters
    ----------
    params: LoanCalculationParams
        The loan parameters.
    first_payment_date: date or str
        Due date of the first payment (``YYYY-MM-DD`` strings are accepted).

    Returns
    -------
    List[PaymentBreakdown]
        One entry per payment, or an empty list when no payment amount can
        be computed or the date is unusable. Every row but the last uses the
        nominal payment; the last row pays off whatever balance remains, so
        its amount may differ from the nominal payment by a few cents and
        its remaining balance is always zero. The last row's principal also
        takes up the rounding left over from earlier rows, so the principal
        column sums to the total loan amount exactly and the last amount is
        its principal plus its interest.
    """
    payment_amount = calculate_payment_amount(params)
    if not payment_amount:
        return []

    frequency = params.payment_frequency
    frequency_config = _frequency_config(frequency)
    if frequency_config is None:
        return []

    try:
        first_date = parse_iso_date(first_payment_date)
    except ValueError:
        logger.debug("No schedule: invalid first payment date %r", first_payment_date)
        return []

    count = _payment_count(params.number_of_payments)
    periodic_rate = _periodic_rate(safe_decimal(params.interest_rate), frequency_config)
    total_loan_amount = calculate_total_loan_amount(params)
    remaining = total_loan_amount
    principal_paid = Decimal("0")  # sum of the rounded principal column so far
    zero = Decimal("0")

    schedule: List[PaymentBreakdown] = []
    for i in range(count):
        is_last = i == count - 1
        interest = remaining * periodic_rate
        if is_last:
            principal = remaining
            # the printed principal column must add up to the amount financed
            principal_out = max(zero, total_loan_amount - principal_paid)
            amount = principal_out + round_currency(interest)
        else:
            principal = max(zero, payment_amount - interest)
            principal_out = round_currency(principal)
            principal_paid += principal_out
            amount = payment_amount
        remaining = max(zero, remaining - principal)

        schedule.append(
            PaymentBreakdown(
                payment_number=i + 1,
                due_date=due_date_for(frequency, first_date, i),
                amount=amount,
                interest=round_currency(interest),
                principal=principal_out,
                remaining_balance=round_currency(remaining),
            )
        )
    return schedule


def calculate_total_interest(payment_schedule: Iterable[PaymentBreakdown]) -> Decimal:
    """Return the sum of the interest column of a schedule."""
    return round_currency(sum((p.interest for p in payment_schedule), Decimal("0")))


def calculate_total_repayment_amount(
    params: LoanCalculationParams, payment_schedule: Iterable[PaymentBreakdown]
) -> Optional[Decimal]:
    """Return total loan amount plus the interest in ``payment_schedule``."""
    total_loan_amount = calculate_total_loan_amount(params)
    if total_loan_amount is None:
        return None
    return round_currency(total_loan_amount + calculate_total_interest(payment_schedule))


def calculate_loan(
    params: LoanCalculationParams, first_payment_date: Union[date, str]
) -> Optional[LoanCalculationResult]:
    """Compute fees, payment, schedule and totals for a loan.

    Totals are always derived from the itemized schedule so that they
    reconcile with its rows. Returns ``None`` when no schedule can be built.
    """
    payment_amount = calculate_payment_amount(params)
    if not payment_amount:
        return None

    payment_schedule = calculate_payment_breakdown(params, first_payment_date)
    if not payment_schedule:
        return None

    result = LoanCalculationResult(
        principal_amount=safe_decimal(params.principal_amount),
        total_fees=calculate_total_fees(params),
        total_loan_amount=calculate_total_loan_amount(params),
        payment_amount=payment_amount,
        total_repayment_amount=calculate_total_repayment_amount(params, payment_schedule),
        total_interest=calculate_total_interest(payment_schedule),
        payment_schedule=tuple(payment_schedule),
        number_of_payments=len(payment_schedule),
        payment_frequency=params.payment_frequency,
    )
    logger.debug(
        "Calculated %s loan: %s payments of %s, total repayment %s",
        result.payment_frequency,
        result.number_of_payments,
        result.payment_amount,
        result.total_repayment_amount,
    )
    return result


def get_number_of_payments(payment_frequency: str) -> Optional[int]:
    """Return the standard payment count for a 3-month loan at ``payment_frequency``."""
    try:
        return NUMBER_OF_PAYMENTS_BY_FREQUENCY.get(payment_frequency)
    except TypeError:
        return None


def calculate_brokerage_fee(loan_amount) -> Decimal:
    """Return the brokerage fee charged on ``loan_amount``.

    The fee is ``BROKERAGE_FEE_RATE`` (68 % by default) of the amount, rounded
    to cents. Zero, negative and non-finite amounts carry no fee.
    """
    amount = safe_decimal(loan_amount)
    if amount is None or amount <= 0:
        return round_currency(0)
    return round_currency(amount * config.BROKERAGE_FEE_RATE)


def serialize_result(result: LoanCalculationResult) -> dict:
    """Convert a loan result into a JSON-serialisable dictionary."""
    return {
        "principal_amount": float(result.principal_amount),
        "total_fees": float(result.total_fees),
        "total_loan_amount": float(result.total_loan_amount),
        "payment_amount": float(result.payment_amount),
        "total_repayment_amount": float(result.total_repayment_amount),
        "total_interest": float(result.total_interest),
        "number_of_payments": result.number_of_payments,
        "payment_frequency": result.payment_frequency,
        "payment_schedule": [
            {
                "payment_number": p.payment_number,
                "due_date": p.due_date.isoformat(),
                "amount": float(p.amount),
                "interest": float(p.interest),
                "principal": float(p.principal),
                "remaining_balance": float(p.remaining_balance),
            }
            for p in result.payment_schedule
        ],
    }
