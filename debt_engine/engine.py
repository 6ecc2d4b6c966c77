"""Core calculation engine for the debt engine.

This module implements the equal-installment ("French") amortization used for
every debt. It supports extra principal payments keyed by installment number;
an extra payment either re-amortizes the remaining balance over the remaining
installments (lowering the fixed installment) or, in ``term`` mode, keeps the
installment so the loan is repaid early. Results are returned as a list of
``AmortizationEntry`` objects.

Impossible terms (non-positive principal, rate or installment count) produce an
empty schedule instead of an exception so that half-filled forms simply show
no preview.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, getcontext
from typing import Dict, Iterable, List, Optional, Tuple

from .config import BALANCE_EPSILON
from .data_models import (
    MODE_TERM,
    STATUS_CURRENT,
    STATUS_FUTURE,
    STATUS_PAID,
    AmortizationEntry,
    Debt,
    ExtraPayment,
)
from .utils import installment_date, periodic_rate, round_money

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _calculate_annuity_payment(principal: Decimal, rate: Decimal, term: int) -> Decimal:
    """Return the fixed installment that repays ``principal`` in ``term`` periods.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    which is the same as ``P * i / (1 - (1 + i)^-n)``. ``P`` is the
    outstanding principal, ``i`` the periodic rate and ``n`` the number of
    remaining installments. The rate must be positive.
    """
    factor = (1 + rate) ** term
    return principal * (rate * factor) / (factor - 1)


def _prepare_extra_payments(extra_payments: Iterable[ExtraPayment]) -> Dict[int, Tuple[Decimal, bool]]:
    """Sum extra payments per installment for quick lookup.

    Each value is ``(amount, recalculate)``. ``recalculate`` is True when at
    least one of the payments on that installment re-amortizes the loan.
    """
    mapping: Dict[int, Tuple[Decimal, bool]] = {}
    for ep in extra_payments:
        amount, recalculate = mapping.get(ep.installment, (ZERO, False))
        mapping[ep.installment] = (
            amount + Decimal(ep.amount),
            recalculate or ep.mode != MODE_TERM,
        )
    return mapping


def _periods_to_clear(balance: Decimal, rate: Decimal, installment: Decimal) -> Optional[int]:
    """Return how many whole periods ``installment`` needs to repay ``balance``.

    Solves ``n = -ln(1 - B * i / P) / ln(1 + i)`` and rounds down, so the
    last, partial period is not counted. Returns None when the installment
    does not even cover the interest.
    """
    covered = balance * rate / installment
    if covered >= 1:
        return None
    periods = -(1 - covered).ln() / (1 + rate).ln()
    return int(periods + Decimal("1e-9"))


def _recalculated_installment(
    balance_before_extra: Decimal,
    balance: Decimal,
    rate: Decimal,
    installment: Decimal,
    remaining_term: int,
) -> Tuple[Decimal, int]:
    """Re-amortize ``balance`` after an extra payment.

    The new term is the number of periods the current installment still needed
    before the extra payment, capped at ``remaining_term``. A term shortened by
    earlier extra payments is therefore kept, and the installment never rises.
    """
    needed = _periods_to_clear(balance_before_extra, rate, installment)
    term = remaining_term if needed is None else max(1, min(remaining_term, needed))
    return min(installment, _calculate_annuity_payment(balance, rate, term)), term


def _status(index: int, current_installment: int) -> str:
    if index <= current_installment:
        return STATUS_PAID
    if index == current_installment + 1:
        return STATUS_CURRENT
    return STATUS_FUTURE


def generate_schedule(
    principal: Decimal,
    rate: Decimal,
    total_installments: int,
    start_date: date,
    months_per_period: int,
    current_installment: int = 0,
    extra_payments: Iterable[ExtraPayment] = (),
) -> List[AmortizationEntry]:
    """Compute the amortization schedule of an equal-installment loan.

    Parameters
    ----------
    principal: Decimal
        The amount borrowed.
    rate: Decimal
        The periodic interest rate as a fraction (0.01 for 1 % per period).
    total_installments: int
        The contractual number of installments.
    start_date: date
        The due date of installment #1.
    months_per_period: int
        Calendar months between two installments.
    current_installment: int
        How many installments are already paid; drives the entry status.
    extra_payments: Iterable[ExtraPayment]
        Extra principal payments, applied after the installment they name.

    Returns
    -------
    List[AmortizationEntry]
        One entry per installment, in order. The list ends early when extra
        payments clear the balance before ``total_installments``. It is empty
        when the terms are not computable.
    """
    if principal <= 0 or rate <= 0 or total_installments <= 0:
        return []

    balance = Decimal(principal)
    rate = Decimal(rate)
    extra_map = _prepare_extra_payments(extra_payments)

    installment_amount = _calculate_annuity_payment(balance, rate, total_installments)

    schedule: List[AmortizationEntry] = []
    for index in range(1, total_installments + 1):
        if balance <= BALANCE_EPSILON:
            logger.debug("Balance cleared before installment %d of %d", index, total_installments)
            break

        interest_payment = balance * rate
        principal_payment = installment_amount - interest_payment
        # The last installment only repays what is left
        if principal_payment > balance:
            principal_payment = balance

        extra, recalculate = extra_map.get(index, (ZERO, False))
        balance -= principal_payment
        balance_before_extra = balance
        balance -= extra
        if balance < 0:
            balance = ZERO

        schedule.append(
            AmortizationEntry(
                installment=index,
                date=installment_date(start_date, index - 1, months_per_period),
                payment=round_money(principal_payment + interest_payment),
                principal=round_money(principal_payment),
                interest=round_money(interest_payment),
                extra_payment=round_money(extra),
                remaining_balance=round_money(balance),
                status=_status(index, current_installment),
            )
        )

        # Re-amortize what is left over the installments that remain
        if recalculate and extra > 0 and balance > 0:
            remaining_term = total_installments - index
            if remaining_term > 0:
                installment_amount, term = _recalculated_installment(
                    balance_before_extra, balance, rate, installment_amount, remaining_term
                )
                logger.debug(
                    "Installment recalculated after #%d: %s over %d periods",
                    index,
                    round_money(installment_amount),
                    term,
                )

    return schedule


def calculate_amortization(debt: Debt) -> List[AmortizationEntry]:
    """Return the amortization schedule of ``debt`` including its extra payments."""
    if debt.original_amount <= 0 or debt.annual_rate <= 0 or debt.total_installments <= 0:
        return []
    return generate_schedule(
        Decimal(debt.original_amount),
        periodic_rate(debt.annual_rate, debt.installment_period),
        debt.total_installments,
        debt.start_date,
        debt.months_per_period,
        debt.current_installment,
        debt.extra_payments,
    )


def preview_installment(
    original_amount: Decimal,
    annual_rate: Decimal,
    total_installments: int,
    installment_period: str,
) -> Optional[Decimal]:
    """Return the fixed installment for the given terms, or None if not computable."""
    if original_amount <= 0 or annual_rate <= 0 or total_installments <= 0:
        return None
    rate = periodic_rate(annual_rate, installment_period)
    return round_money(_calculate_annuity_payment(Decimal(original_amount), rate, total_installments))


def total_interest(schedule: Iterable[AmortizationEntry]) -> Decimal:
    return sum((entry.interest for entry in schedule), ZERO)
