"""Output helpers for the loan engine.

This module formats money the way Canadian English displays it and renders
loan results, payment schedules and frequency comparisons as plain-text
tables. Only built-in printing and string formatting are used.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, List

from .data_models import LoanCalculationResult, PaymentBreakdown
from .utils import round_currency

# Symbols as rendered by the en-CA locale.
CURRENCY_SYMBOLS: Dict[str, str] = {
    "CAD": "$",
    "USD": "US$",
    "EUR": "€",
    "GBP": "£",
}


def format_currency(amount, currency_code: str = "CAD") -> str:
    """Format ``amount`` with thousands separators, two decimals and a currency symbol.

    >>> format_currency(1234.56)
    '$1,234.56'
    >>> format_currency(-100)
    '-$100.00'
    >>> format_currency(5, "CHF")
    'CHF 5.00'
    """
    code = (currency_code or "CAD").upper()
    value = round_currency(amount)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {digits}"
    return f"{sign}{symbol}{digits}"


def print_summary(result: LoanCalculationResult, currency_code: str = "CAD") -> None:
    """Print the totals of a loan in a human-readable format."""
    fmt = lambda amount: format_currency(amount, currency_code)  # noqa: E731
    print("Summary")
    print("-" * 72)
    print(f"Principal          : {fmt(result.principal_amount)}")
    if result.total_fees:
        print(f"Total fees         : {fmt(result.total_fees)}")
    print(f"Total loan amount  : {fmt(result.total_loan_amount)}")
    print(f"Payment frequency  : {result.payment_frequency}")
    print(f"Number of payments : {result.number_of_payments}")
    print(f"Payment amount     : {fmt(result.payment_amount)}")
    print(f"Total interest     : {fmt(result.total_interest)}")
    print(f"Total repayment    : {fmt(result.total_repayment_amount)}")
    if result.payment_schedule:
        print(f"First payment      : {result.payment_schedule[0].due_date.isoformat()}")
        print(f"Last payment       : {result.payment_schedule[-1].due_date.isoformat()}")
    print("-" * 72)


def print_schedule(schedule: Iterable[PaymentBreakdown]) -> None:
    """Print the payment schedule as a tab-separated table."""
    headers = ["No", "DueDate", "Payment", "Principal", "Interest", "Balance"]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.payment_number),
            entry.due_date.isoformat(),
            f"{entry.amount:.2f}",
            f"{entry.principal:.2f}",
            f"{entry.interest:.2f}",
            f"{entry.remaining_balance:.2f}",
        ]
        print("\t".join(row))


def print_comparison(results: List[LoanCalculationResult]) -> None:
    """Print several results of the same loan side by side.

    The difference column is measured against the first result, so a negative
    value means that scenario is cheaper.
    """
    if not results:
        return
    baseline = results[0].total_repayment_amount
    print("Comparison")
    print("=" * 72)
    print(f"{'Frequency':15s} {'Payments':>9s} {'Payment':>12s} {'Interest':>12s} {'Total':>12s} {'Difference':>11s}")
    for result in results:
        diff: Decimal = result.total_repayment_amount - baseline
        print(
            f"{result.payment_frequency:15s} {result.number_of_payments:9d} "
            f"{result.payment_amount:12.2f} {result.total_interest:12.2f} "
            f"{result.total_repayment_amount:12.2f} {diff:11.2f}"
        )
    print("=" * 72)
