"""Aggregate figures derived from a debt's amortization schedule.

Summaries are computed on demand from a debt snapshot and never stored. The
interest saved by extra payments compares two *complete* schedules, the actual
one and the same debt without any extra payment, because the question it
answers is how much the extras save over the life of the loan.
"""

from __future__ import annotations

import dataclasses
from decimal import Decimal
from typing import Iterable

from .data_models import STATUS_CURRENT, STATUS_PAID, Debt, DebtSummary, PortfolioTotals
from .engine import ZERO, calculate_amortization, total_interest
from .utils import round_money


def summarize(debt: Debt) -> DebtSummary:
    """Compute the current state of ``debt``.

    ``current_balance`` is read from the entry of the last paid installment.
    When nothing has been paid yet, or when that entry does not exist because
    extra payments settled the debt early, the original amount is reported
    instead.
    """
    schedule = calculate_amortization(debt)
    baseline = calculate_amortization(dataclasses.replace(debt, extra_payments=()))

    interest_saved = total_interest(baseline) - total_interest(schedule)

    paid = [e for e in schedule if e.status == STATUS_PAID]
    total_paid = sum((e.payment + e.extra_payment for e in paid), ZERO)
    total_principal_paid = sum((e.principal + e.extra_payment for e in paid), ZERO)
    total_interest_paid = sum((e.interest for e in paid), ZERO)

    current_balance = Decimal(debt.original_amount)
    if 0 < debt.current_installment <= len(schedule):
        current_balance = schedule[debt.current_installment - 1].remaining_balance

    remaining_installments = sum(1 for e in schedule if e.status != STATUS_PAID)
    projected_end_date = schedule[-1].date if schedule else debt.start_date

    monthly_payment = ZERO
    current_entry = next((e for e in schedule if e.status == STATUS_CURRENT), None)
    reference = current_entry or (schedule[0] if schedule else None)
    if reference is not None:
        monthly_payment = reference.payment / Decimal(debt.months_per_period)

    return DebtSummary(
        current_balance=round_money(current_balance),
        total_paid=round_money(total_paid),
        total_interest_paid=round_money(total_interest_paid),
        total_principal_paid=round_money(total_principal_paid),
        interest_saved=round_money(interest_saved),
        remaining_installments=remaining_installments,
        projected_end_date=projected_end_date,
        monthly_equivalent_payment=round_money(monthly_payment),
    )


def portfolio_totals(debts: Iterable[Debt]) -> PortfolioTotals:
    """Total balance and monthly outflow across debts that are still active.

    A debt counts as active while its schedule has installments left to pay.
    """
    total_balance = ZERO
    total_monthly = ZERO
    active_count = 0
    for debt in debts:
        summary = summarize(debt)
        if summary.remaining_installments > 0:
            total_balance += summary.current_balance
            total_monthly += summary.monthly_equivalent_payment
            active_count += 1
    return PortfolioTotals(
        total_balance=round_money(total_balance),
        total_monthly_payment=round_money(total_monthly),
        active_count=active_count,
    )
