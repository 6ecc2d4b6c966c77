"""Command-line interface for the debt engine.

This module uses the ``click`` library to implement a multi-command interface.
Users can compute full amortization schedules, view the current state of a
debt or simulate the effect of an extra payment. Schedules can be printed to
the terminal or exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from .config import MAX_SCHEDULE_ROWS, configure_logging
from .data_models import EXTRA_PAYMENT_MODES, MODE_INSTALLMENT, PERIOD_MONTHS, AmortizationEntry, Debt, ExtraPayment
from .engine import calculate_amortization
from .exceptions import InvalidDebtError
from .formatter import print_schedule, print_simulation, print_summary
from .serialization import serialize_schedule, serialize_simulation, serialize_summary
from .simulator import compare_simulation
from .summary import summarize
from .utils import decimal_from_str, parse_date
from .validation import validate_debt, validate_extra_payment

logger = logging.getLogger(__name__)


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("500000") and shorthand with ``k``/``m`` suffixes
    (e.g., "500k" meaning 500_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def to_decimal(value: Any) -> Decimal:
    """Convert a parsed option value to ``Decimal``, rejecting inf and nan."""
    try:
        return decimal_from_str(str(value))
    except ValueError as exc:
        raise click.BadParameter(str(exc))


def parse_extra_payment_strings(values: Tuple[str, ...]) -> List[ExtraPayment]:
    extras: List[ExtraPayment] = []
    for item in values:
        parts = item.split(":")
        if len(parts) not in (2, 3):
            raise click.BadParameter(
                f"Extra payment must be in INSTALLMENT:AMOUNT[:MODE] format; got {item}"
            )
        try:
            installment = int(parts[0])
        except ValueError:
            raise click.BadParameter(f"Invalid installment number: {parts[0]}")
        amount = to_decimal(parse_amount(parts[1]))
        mode = parts[2].lower() if len(parts) == 3 else MODE_INSTALLMENT
        if mode not in EXTRA_PAYMENT_MODES:
            raise click.BadParameter(
                f"Extra payment mode must be 'installment' or 'term'; got {mode}"
            )
        extras.append(ExtraPayment(installment=installment, amount=amount, mode=mode))
    return extras


def build_debt_from_options(
    principal: str,
    rate: float,
    installments: int,
    period: str,
    start_date: str,
    current_installment: int = 0,
    extra_payment: Tuple[str, ...] = (),
    name: str = "Debt",
) -> Debt:
    try:
        start_dt = parse_date(start_date)
    except ValueError as exc:
        raise click.BadParameter(str(exc))
    extras = parse_extra_payment_strings(extra_payment) if extra_payment else []
    debt = Debt(
        name=name,
        original_amount=to_decimal(parse_amount(principal)),
        annual_rate=to_decimal(rate),
        total_installments=installments,
        installment_period=period.lower(),
        start_date=start_dt,
        current_installment=current_installment,
        extra_payments=tuple(extras),
    )
    try:
        return validate_debt(debt)
    except InvalidDebtError as exc:
        raise click.BadParameter(str(exc))


def export_to_json(path: Path, schedule: List[AmortizationEntry], summary: Dict[str, Any]) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": summary, "schedule": serialize_schedule(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[AmortizationEntry]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Installment",
        "Date",
        "Payment",
        "Principal",
        "Interest",
        "Extra_Payment",
        "Remaining_Balance",
        "Status",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.installment,
                    e.date.isoformat(),
                    float(e.payment),
                    float(e.principal),
                    float(e.interest),
                    float(e.extra_payment),
                    float(e.remaining_balance),
                    e.status,
                ]
            )


def debt_options(func):
    """Attach the options that describe a debt to a command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, help="Original loan amount"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--installments", "-n", "installments", required=True, type=int, help="Total number of installments"),
        click.option(
            "--period",
            "period",
            type=click.Choice(list(PERIOD_MONTHS)),
            default="monthly",
            help="Installment period",
        ),
        click.option("--start-date", "-s", "start_date", required=True, help="Date of the first installment (YYYY-MM-DD)"),
        click.option("--paid", "current_installment", type=int, default=0, help="Installments already paid"),
        click.option(
            "--extra-payment",
            "extra_payment",
            multiple=True,
            help="Extra payment in INSTALLMENT:AMOUNT[:MODE] format, MODE being 'installment' or 'term'",
        ),
        click.option("--name", "name", default="Debt", help="Debt name"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """A command-line debt calculator with extra payments and what-if simulation."""
    configure_logging(logging.DEBUG if verbose else None)


@cli.command()
@debt_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def schedule(
    principal: str,
    rate: float,
    installments: int,
    period: str,
    start_date: str,
    current_installment: int,
    extra_payment: Tuple[str, ...],
    name: str,
    output: Optional[str],
) -> None:
    """Compute and print the full amortization schedule."""
    debt = build_debt_from_options(
        principal, rate, installments, period, start_date, current_installment, extra_payment, name
    )
    schedule_entries = calculate_amortization(debt)
    summary_data = summarize(debt)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, schedule_entries, serialize_summary(summary_data))
            click.echo(f"Schedule exported to {path}")
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, schedule_entries)
            click.echo(f"Schedule exported to {path}")
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
    else:
        print_summary(summary_data)
        # Limit schedule length printed to avoid flooding the terminal
        if len(schedule_entries) > MAX_SCHEDULE_ROWS:
            click.echo(
                f"Schedule has {len(schedule_entries)} rows; showing first {MAX_SCHEDULE_ROWS} rows."
            )
            print_schedule(schedule_entries[:MAX_SCHEDULE_ROWS])
        else:
            print_schedule(schedule_entries)


@cli.command()
@debt_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: str,
    rate: float,
    installments: int,
    period: str,
    start_date: str,
    current_installment: int,
    extra_payment: Tuple[str, ...],
    name: str,
    output: Optional[str],
) -> None:
    """Compute and print only the summary of a debt."""
    debt = build_debt_from_options(
        principal, rate, installments, period, start_date, current_installment, extra_payment, name
    )
    summary_data = summarize(debt)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": serialize_summary(summary_data)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@debt_options
@click.option("--amount", "amount", required=True, help="Hypothetical extra payment amount")
@click.option("--after", "after", type=int, help="Installment after which it is paid (default: the next one due)")
@click.option("--mode", "mode", type=click.Choice(list(EXTRA_PAYMENT_MODES)), default=MODE_INSTALLMENT, help="Extra payment mode")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def simulate(
    principal: str,
    rate: float,
    installments: int,
    period: str,
    start_date: str,
    current_installment: int,
    extra_payment: Tuple[str, ...],
    name: str,
    amount: str,
    after: Optional[int],
    mode: str,
    as_json: bool,
) -> None:
    """Simulate the savings of one more extra payment."""
    debt = build_debt_from_options(
        principal, rate, installments, period, start_date, current_installment, extra_payment, name
    )
    hypothetical = ExtraPayment(
        installment=after if after is not None else debt.current_installment + 1,
        amount=to_decimal(parse_amount(amount)),
        mode=mode,
    )
    try:
        validate_extra_payment(hypothetical, debt.total_installments)
    except InvalidDebtError as exc:
        raise click.BadParameter(str(exc))
    logger.debug("Simulating %s after installment %d", hypothetical.amount, hypothetical.installment)
    result = compare_simulation(debt, hypothetical)
    if as_json:
        click.echo(json.dumps(serialize_simulation(result), indent=2))
    else:
        print_simulation(result)


if __name__ == "__main__":
    cli()
