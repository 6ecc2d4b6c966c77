"""Caller-side validation of debt terms.

The amortization engine accepts whatever it is given and degrades to an empty
schedule on impossible terms. Code that builds a debt from user input (the
CLI, the web API, the store) validates it here first.
"""

from __future__ import annotations

from decimal import Decimal

from .data_models import EXTRA_PAYMENT_MODES, PERIOD_MONTHS, Debt, ExtraPayment
from .exceptions import InvalidDebtError


def validate_extra_payment(extra: ExtraPayment, total_installments: int) -> None:
    if extra.installment < 1:
        raise InvalidDebtError("installment", "Extra payment installment must be at least 1", extra.installment)
    if extra.installment > total_installments:
        raise InvalidDebtError(
            "installment",
            f"Extra payment installment must not exceed {total_installments}",
            extra.installment,
        )
    if extra.amount <= 0:
        raise InvalidDebtError("amount", "Extra payment amount must be positive", extra.amount)
    if extra.mode not in EXTRA_PAYMENT_MODES:
        raise InvalidDebtError("mode", "Extra payment mode must be 'installment' or 'term'", extra.mode)


def validate_debt(debt: Debt) -> Debt:
    """Check the invariants of ``debt`` and return it unchanged.

    Raises
    ------
    InvalidDebtError
        Naming the first field that violates an invariant.
    """
    if not debt.name or not debt.name.strip():
        raise InvalidDebtError("name", "Debt name is required")
    if debt.original_amount <= 0:
        raise InvalidDebtError("original_amount", "Original amount must be positive", debt.original_amount)
    if debt.annual_rate <= Decimal(0):
        raise InvalidDebtError("annual_rate", "Annual rate must be positive", debt.annual_rate)
    if debt.total_installments <= 0:
        raise InvalidDebtError("total_installments", "Total installments must be positive", debt.total_installments)
    if debt.installment_period not in PERIOD_MONTHS:
        raise InvalidDebtError("installment_period", "Unknown installment period", debt.installment_period)
    if not 0 <= debt.current_installment <= debt.total_installments:
        raise InvalidDebtError(
            "current_installment",
            f"Current installment must be between 0 and {debt.total_installments}",
            debt.current_installment,
        )
    for extra in debt.extra_payments:
        validate_extra_payment(extra, debt.total_installments)
    return debt
