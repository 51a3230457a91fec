"""Data models for the loan payment-schedule engine.

This module defines the payment frequency table and the dataclasses passed in
and out of the calculation functions: loan parameters, individual schedule
rows, the aggregated loan result and the balance / failed-payment results.
Result objects are frozen so a computed schedule cannot be altered after the
fact; every calculation returns a fresh instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Tuple, Union

Number = Union[int, float, str, Decimal]

WEEKLY = "weekly"
BI_WEEKLY = "bi-weekly"
TWICE_MONTHLY = "twice-monthly"
MONTHLY = "monthly"

PAYMENT_FREQUENCIES = (WEEKLY, BI_WEEKLY, TWICE_MONTHLY, MONTHLY)


@dataclass(frozen=True)
class FrequencyConfig:
    """How often a payment falls due.

    Attributes
    ----------
    payments_per_year: int
        Number of payment periods in a year, used to derive the periodic rate.
    days_between: int
        Day step between due dates (weekly and bi-weekly schedules).
    months_between: int
        Month step between due dates (monthly schedules).
    """

    payments_per_year: int
    days_between: int
    months_between: int


PAYMENT_FREQUENCY_CONFIG: Dict[str, FrequencyConfig] = {
    WEEKLY: FrequencyConfig(payments_per_year=52, days_between=7, months_between=0),
    BI_WEEKLY: FrequencyConfig(payments_per_year=26, days_between=14, months_between=0),
    TWICE_MONTHLY: FrequencyConfig(payments_per_year=24, days_between=15, months_between=0),
    MONTHLY: FrequencyConfig(payments_per_year=12, days_between=0, months_between=1),
}


@dataclass
class LoanCalculationParams:
    """Inputs shared by nearly every calculation.

    ``interest_rate`` is the nominal annual rate in percent (``29`` means
    29 %). Fees are optional and are added to the principal before the
    payment is amortized. Values are not checked here; the calculators treat
    out-of-range input as "no result" and the validators explain why.
    """

    principal_amount: Number
    interest_rate: Number
    payment_frequency: str  # one of PAYMENT_FREQUENCIES
    number_of_payments: Number
    brokerage_fee: Number = 0
    origination_fee: Number = 0
    other_fees: Number = 0


@dataclass(frozen=True)
class PaymentBreakdown:
    """One row of the payment schedule.

    All amounts are rounded to cents. For every row except the last,
    ``amount`` is the nominal periodic payment; the last row's ``amount`` is
    its own ``principal + interest`` so the loan is paid off exactly.
    """

    payment_number: int
    due_date: date
    amount: Decimal
    interest: Decimal
    principal: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class LoanCalculationResult:
    """Complete loan calculation: fees, payment, totals and schedule.

    The schedule is stored as a tuple so a result cannot be altered after it
    is returned.
    """

    principal_amount: Decimal
    total_fees: Decimal
    total_loan_amount: Decimal
    payment_amount: Decimal
    total_repayment_amount: Decimal
    total_interest: Decimal
    payment_schedule: Tuple[PaymentBreakdown, ...]
    number_of_payments: int
    payment_frequency: str


@dataclass
class BalanceCalculationParams:
    current_balance: Number
    payment_amount: Number
    additional_fees: Number = 0  # added before the payment is subtracted


@dataclass(frozen=True)
class BalanceCalculationResult:
    new_balance: Decimal
    amount_paid: Decimal
    is_paid_off: bool


@dataclass
class FailedPayment:
    """A scheduled payment that did not go through.

    ``interest`` is the interest portion that was due with the payment and is
    carried into the modification balance.
    """

    amount: Number
    interest: Number
    payment_date: Union[date, str]


@dataclass
class FailedPaymentCalculationParams:
    failed_payments: List[FailedPayment] = field(default_factory=list)
    origination_fee: Number = 0  # charged once per failed payment


@dataclass(frozen=True)
class FailedPaymentCalculationResult:
    total_fees: Decimal
    total_interest: Decimal
    total_amount: Decimal
    failed_payment_count: int
