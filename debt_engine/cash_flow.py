"""Projection of debt installments into cash-flow period columns."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from .data_models import STATUS_PAID, CashFlowItem, Debt
from .engine import calculate_amortization


def debt_expenses_for_cash_flow(debt: Debt, periods: Iterable[Tuple[int, int]]) -> Optional[CashFlowItem]:
    """Map the installments still to be paid onto cash-flow periods.

    Parameters
    ----------
    debt: Debt
        The debt to project.
    periods: Iterable[Tuple[int, int]]
        ``(month, year)`` buckets in column order. Columns are numbered
        from 1.

    Returns
    -------
    Optional[CashFlowItem]
        An expense line whose amounts hold payment plus extra payment for each
        column that has installments due. Paid installments are excluded. None
        when the schedule is empty or no installment falls in any period.
    """
    schedule = calculate_amortization(debt)
    if not schedule:
        return None

    columns: Dict[Tuple[int, int], int] = {}
    for column, (month, year) in enumerate(periods, start=1):
        columns.setdefault((month, year), column)

    amounts: Dict[int, Decimal] = {}
    for entry in schedule:
        if entry.status == STATUS_PAID:
            continue
        column = columns.get((entry.date.month, entry.date.year))
        if column is None:
            continue
        amounts[column] = amounts.get(column, Decimal("0")) + entry.payment + entry.extra_payment

    if not amounts:
        return None
    return CashFlowItem(id=f"debt-{debt.id}", name=f"Debt: {debt.name}", amounts=amounts)
