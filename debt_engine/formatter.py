"""Output helpers for the debt engine.

This module renders amortization schedules, debt summaries and what-if
simulations in a tabular text format using built-in printing and string
formatting.
"""

from __future__ import annotations

from typing import Iterable

from .config import DATE_FORMAT_DISPLAY
from .data_models import AmortizationEntry, DebtSummary, SimulationResult


def print_summary(summary: DebtSummary) -> None:
    """Print the current state of a debt in a human-readable format."""
    print("Summary")
    print("-" * 72)
    print(f"Current balance    : {summary.current_balance:.2f}")
    print(f"Total paid         : {summary.total_paid:.2f}")
    print(f"Interest paid      : {summary.total_interest_paid:.2f}")
    print(f"Principal paid     : {summary.total_principal_paid:.2f}")
    if summary.interest_saved:
        print(f"Interest saved     : {summary.interest_saved:.2f}")
    print(f"Remaining          : {summary.remaining_installments} installments")
    print(f"Projected end date : {summary.projected_end_date.strftime(DATE_FORMAT_DISPLAY)}")
    print(f"Monthly equivalent : {summary.monthly_equivalent_payment:.2f}")
    print("-" * 72)


def print_schedule(schedule: Iterable[AmortizationEntry]) -> None:
    """Print the amortization schedule as a simple table."""
    headers = [
        "No",
        "Date",
        "Payment",
        "Principal",
        "Interest",
        "Extra",
        "Balance",
        "Status",
    ]
    print("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.installment),
            entry.date.strftime(DATE_FORMAT_DISPLAY),
            f"{entry.payment:.2f}",
            f"{entry.principal:.2f}",
            f"{entry.interest:.2f}",
            f"{entry.extra_payment:.2f}",
            f"{entry.remaining_balance:.2f}",
            entry.status,
        ]
        print("\t".join(row))


def print_simulation(result: SimulationResult) -> None:
    """Print the effect of a hypothetical extra payment.

    Positive savings mean the simulated schedule is cheaper or shorter than
    the actual one.
    """

    def fmt_date(value) -> str:
        return value.strftime(DATE_FORMAT_DISPLAY) if value else "-"

    print("Simulation")
    print("=" * 72)
    print(f"{'Metric':20s} {'Actual':>15s} {'Simulated':>15s}")
    print(f"{'installments':20s} {result.original_installments:15d} {result.new_installments:15d}")
    print(f"{'end date':20s} {fmt_date(result.original_end_date):>15s} {fmt_date(result.new_end_date):>15s}")
    print(f"Interest saved     : {result.interest_saved:.2f}")
    print(f"Installments saved : {result.installments_saved}")
    print("=" * 72)
