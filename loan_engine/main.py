"""Command-line interface for the loan engine.

This module uses the ``click`` library to implement a multi-command
interface. Users can compute full payment schedules, view summaries, compare
payment frequencies, apply a payment to a balance and price a loan
modification after failed payments. Schedules can be printed to the terminal
or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click

from . import config
from .balance import calculate_new_balance
from .data_models import (
    MONTHLY,
    PAYMENT_FREQUENCIES,
    BalanceCalculationParams,
    FailedPayment,
    FailedPaymentCalculationParams,
    LoanCalculationParams,
    LoanCalculationResult,
)
from .engine import calculate_loan, get_number_of_payments, serialize_result
from .formatter import format_currency, print_comparison, print_schedule, print_summary
from .modification import calculate_failed_payment_fees, calculate_modification_balance
from .utils import finite_decimal, parse_iso_date
from .validators import validate_loan_params, validate_payment_amount

logger = logging.getLogger(__name__)


def decimal_or_bad_parameter(value: str, message: str):
    try:
        return finite_decimal(value)
    except ValueError:
        raise click.BadParameter(message)


def parse_amount(value: str):
    """Parse a money string with optional suffixes.

    Accepts plain numbers ("500", "1,250.50") and shorthand with ``k``/``m``
    suffixes (e.g., "1.5k" meaning 1_500). Returns a ``Decimal``.
    """
    text = value.strip().lower().replace(",", "")
    factor = 1
    if text.endswith("k"):
        factor = 1_000
        text = text[:-1]
    elif text.endswith("m"):
        factor = 1_000_000
        text = text[:-1]
    return decimal_or_bad_parameter(text, f"Invalid amount: {value}") * factor


def parse_failed_payment_strings(values: Tuple[str, ...]) -> List[FailedPayment]:
    failed: List[FailedPayment] = []
    for item in values:
        parts = item.split(":")
        if len(parts) != 3:
            raise click.BadParameter(
                f"Failed payment must be in YYYY-MM-DD:AMOUNT:INTEREST format; got {item}"
            )
        date_str, amount_str, interest_str = parts
        try:
            payment_date = parse_iso_date(date_str)
        except ValueError as exc:
            raise click.BadParameter(str(exc))
        failed.append(
            FailedPayment(
                amount=parse_amount(amount_str),
                interest=parse_amount(interest_str),
                payment_date=payment_date,
            )
        )
    return failed


def build_params_from_options(
    principal: str,
    rate: float,
    frequency: str,
    payments: Optional[int],
    brokerage_fee: Optional[str] = None,
    origination_fee: Optional[str] = None,
    other_fees: Optional[str] = None,
) -> LoanCalculationParams:
    """Build and validate loan parameters from raw option values."""
    params = LoanCalculationParams(
        principal_amount=parse_amount(principal),
        interest_rate=decimal_or_bad_parameter(str(rate), f"Invalid rate: {rate}"),
        payment_frequency=frequency,
        number_of_payments=payments if payments is not None else get_number_of_payments(frequency),
        brokerage_fee=parse_amount(brokerage_fee) if brokerage_fee else 0,
        origination_fee=parse_amount(origination_fee) if origination_fee else 0,
        other_fees=parse_amount(other_fees) if other_fees else 0,
    )
    error = validate_loan_params(params)
    if error:
        raise click.BadParameter(error)
    return params


def run_calculation(params: LoanCalculationParams, first_payment_date: str) -> LoanCalculationResult:
    try:
        first_date = parse_iso_date(first_payment_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--first-payment-date")
    result = calculate_loan(params, first_date)
    if result is None:
        raise click.ClickException("Unable to calculate a payment schedule for these parameters")
    return result


def export_to_json(path: Path, result: LoanCalculationResult, include_schedule: bool = True) -> None:
    """Export a loan result to a JSON file."""
    data = serialize_result(result)
    schedule = data.pop("payment_schedule")
    payload = {"summary": data}
    if include_schedule:
        payload["schedule"] = schedule
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def export_to_csv(path: Path, result: LoanCalculationResult) -> None:
    """Export the payment schedule to a CSV file."""
    header = [
        "Payment_Number",
        "Due_Date",
        "Amount",
        "Principal",
        "Interest",
        "Remaining_Balance",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for p in result.payment_schedule:
            writer.writerow(
                [
                    p.payment_number,
                    p.due_date.isoformat(),
                    f"{p.amount:.2f}",
                    f"{p.principal:.2f}",
                    f"{p.interest:.2f}",
                    f"{p.remaining_balance:.2f}",
                ]
            )


def loan_options(func):
    """Attach the options shared by every command that prices a loan."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Amount financed before fees"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option(
            "--frequency",
            "-f",
            "frequency",
            type=click.Choice(PAYMENT_FREQUENCIES),
            default=MONTHLY,
            show_default=True,
            help="Payment frequency",
        ),
        click.option(
            "--payments",
            "-n",
            "payments",
            type=int,
            help="Number of payments (defaults to the 3-month count for the frequency)",
        ),
        click.option("--brokerage-fee", "brokerage_fee", help="Brokerage fee added to the loan"),
        click.option("--origination-fee", "origination_fee", help="Origination fee added to the loan"),
        click.option("--other-fees", "other_fees", help="Other fees added to the loan"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--log-level", "log_level", help="Logging level (overrides LOAN_ENGINE_LOG_LEVEL)")
def cli(log_level: Optional[str]) -> None:
    """Loan payment schedules, balances and modifications."""
    config.configure_logging(log_level)


@cli.command()
@loan_options
@click.option("--first-payment-date", "-s", "first_payment_date", required=True, help="First payment date (YYYY-MM-DD)")
@click.option("--currency", "currency", default=config.DEFAULT_CURRENCY, show_default=True, help="Currency code")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    frequency: str,
    payments: Optional[int],
    brokerage_fee: Optional[str],
    origination_fee: Optional[str],
    other_fees: Optional[str],
    first_payment_date: str,
    currency: str,
    output: Optional[str],
) -> None:
    """Compute and print the full payment schedule."""
    params = build_params_from_options(principal, rate, frequency, payments, brokerage_fee, origination_fee, other_fees)
    result = run_calculation(params, first_payment_date)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, result)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="--output")
        click.echo(f"Schedule exported to {path}")
        return

    print_summary(result, currency)
    rows = result.payment_schedule
    if len(rows) > config.MAX_SCHEDULE_ROWS:
        click.echo(f"Schedule has {len(rows)} rows; showing first {config.MAX_SCHEDULE_ROWS} rows.")
        rows = rows[: config.MAX_SCHEDULE_ROWS]
    print_schedule(rows)


@cli.command()
@loan_options
@click.option("--first-payment-date", "-s", "first_payment_date", required=True, help="First payment date (YYYY-MM-DD)")
@click.option("--currency", "currency", default=config.DEFAULT_CURRENCY, show_default=True, help="Currency code")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: float,
    frequency: str,
    payments: Optional[int],
    brokerage_fee: Optional[str],
    origination_fee: Optional[str],
    other_fees: Optional[str],
    first_payment_date: str,
    currency: str,
    output: Optional[str],
) -> None:
    """Compute and print only the totals for a loan."""
    params = build_params_from_options(principal, rate, frequency, payments, brokerage_fee, origination_fee, other_fees)
    result = run_calculation(params, first_payment_date)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension", param_hint="--output")
        export_to_json(path, result, include_schedule=False)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result, currency)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, help="Amount financed before fees")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")
@click.option("--first-payment-date", "-s", "first_payment_date", required=True, help="First payment date (YYYY-MM-DD)")
@click.option("--brokerage-fee", "brokerage_fee", help="Brokerage fee added to the loan")
@click.option("--origination-fee", "origination_fee", help="Origination fee added to the loan")
def compare(
    principal: str,
    rate: float,
    first_payment_date: str,
    brokerage_fee: Optional[str],
    origination_fee: Optional[str],
) -> None:
    """Compare the same 3-month loan across every payment frequency.

    The monthly plan is the baseline; more frequent payments should cost the
    same or less.
    """
    results = []
    for frequency in (MONTHLY,) + tuple(f for f in PAYMENT_FREQUENCIES if f != MONTHLY):
        params = build_params_from_options(principal, rate, frequency, None, brokerage_fee, origination_fee)
        results.append(run_calculation(params, first_payment_date))
    print_comparison(results)


@cli.command()
@click.option("--balance", "balance", required=True, help="Current remaining balance")
@click.option("--amount", "amount", required=True, help="Payment amount to apply")
@click.option("--fees", "fees", help="Fees to add before the payment is applied")
@click.option("--currency", "currency", default=config.DEFAULT_CURRENCY, show_default=True, help="Currency code")
def pay(balance: str, amount: str, fees: Optional[str], currency: str) -> None:
    """Apply a payment to a balance."""
    current_balance = parse_amount(balance)
    payment_amount = parse_amount(amount)
    warning = validate_payment_amount(payment_amount, current_balance)
    if warning:
        logger.warning("Payment check failed: %s", warning)
        click.echo(f"Warning: {warning}", err=True)
    result = calculate_new_balance(
        BalanceCalculationParams(
            current_balance=current_balance,
            payment_amount=payment_amount,
            additional_fees=parse_amount(fees) if fees else 0,
        )
    )
    click.echo(f"Amount paid : {format_currency(result.amount_paid, currency)}")
    click.echo(f"New balance : {format_currency(result.new_balance, currency)}")
    click.echo(f"Paid off    : {'Yes' if result.is_paid_off else 'No'}")


@cli.command()
@click.option("--balance", "balance", required=True, help="Current remaining balance")
@click.option("--brokerage-fee", "brokerage_fee", default="0", show_default=True, help="Brokerage fee for the modification")
@click.option("--origination-fee", "origination_fee", default="0", show_default=True, help="Fee charged per failed payment")
@click.option("--failed", "failed", multiple=True, help="Failed payment in YYYY-MM-DD:AMOUNT:INTEREST format")
@click.option("--first-payment-date", "-s", "first_payment_date", help="Rebuild the schedule from this date (YYYY-MM-DD)")
@click.option("--rate", "-r", "rate", type=float, help="Annual interest rate for the new schedule (percent)")
@click.option(
    "--frequency",
    "-f",
    "frequency",
    type=click.Choice(PAYMENT_FREQUENCIES),
    default=MONTHLY,
    show_default=True,
    help="Payment frequency for the new schedule",
)
@click.option("--payments", "-n", "payments", type=int, help="Number of payments for the new schedule")
@click.option("--currency", "currency", default=config.DEFAULT_CURRENCY, show_default=True, help="Currency code")
def modify(
    balance: str,
    brokerage_fee: str,
    origination_fee: str,
    failed: Tuple[str, ...],
    first_payment_date: Optional[str],
    rate: Optional[float],
    frequency: str,
    payments: Optional[int],
    currency: str,
) -> None:
    """Price a loan modification after failed payments.

    Example:

        loan-engine modify --balance 337.29 --brokerage-fee 50 --origination-fee 55
        --failed 2024-03-01:174.79:8.15 -s 2024-04-01 -r 29 -n 2
    """
    failed_result = calculate_failed_payment_fees(
        FailedPaymentCalculationParams(
            failed_payments=parse_failed_payment_strings(failed),
            origination_fee=parse_amount(origination_fee),
        )
    )
    new_balance = calculate_modification_balance(parse_amount(balance), parse_amount(brokerage_fee), failed_result)

    fmt = lambda value: format_currency(value, currency)  # noqa: E731
    click.echo(f"Failed payments    : {failed_result.failed_payment_count}")
    click.echo(f"Failed payment fees: {fmt(failed_result.total_fees)}")
    click.echo(f"Forgone interest   : {fmt(failed_result.total_interest)}")
    click.echo(f"New balance        : {fmt(new_balance)}")

    if not first_payment_date:
        return
    if rate is None:
        raise click.UsageError("--rate is required to rebuild the schedule")
    params = build_params_from_options(str(new_balance), rate, frequency, payments)
    result = run_calculation(params, first_payment_date)
    print_summary(result, currency)
    print_schedule(result.payment_schedule)


if __name__ == "__main__":
    cli()
