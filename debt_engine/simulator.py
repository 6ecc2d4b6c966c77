"""What-if simulation of a hypothetical extra payment.

The simulator never touches the caller's debt: it builds a copy with the
hypothetical payment appended and runs the regular amortization on it. Every
call is cheap and side-effect free, so a UI can re-run it on each keystroke.
"""

from __future__ import annotations

import dataclasses
from decimal import Decimal
from typing import List

from .data_models import MODE_INSTALLMENT, AmortizationEntry, Debt, ExtraPayment, SimulationResult
from .engine import calculate_amortization, total_interest
from .utils import round_money


def simulate(debt: Debt, hypothetical_extra: ExtraPayment) -> List[AmortizationEntry]:
    """Return the schedule ``debt`` would have with one more extra payment."""
    simulated = dataclasses.replace(
        debt,
        extra_payments=tuple(debt.extra_payments) + (hypothetical_extra,),
    )
    return calculate_amortization(simulated)


def next_installment_extra(debt: Debt, amount: Decimal, mode: str = MODE_INSTALLMENT) -> ExtraPayment:
    """Build a hypothetical extra payment applied with the next installment due."""
    return ExtraPayment(installment=debt.current_installment + 1, amount=Decimal(amount), mode=mode)


def compare_simulation(debt: Debt, hypothetical_extra: ExtraPayment) -> SimulationResult:
    """Quantify the interest and installments saved by ``hypothetical_extra``.

    The baseline is the debt's actual schedule, existing extra payments
    included.
    """
    actual = calculate_amortization(debt)
    simulated = simulate(debt, hypothetical_extra)
    return SimulationResult(
        interest_saved=round_money(total_interest(actual) - total_interest(simulated)),
        installments_saved=len(actual) - len(simulated),
        original_installments=len(actual),
        new_installments=len(simulated),
        original_end_date=actual[-1].date if actual else None,
        new_end_date=simulated[-1].date if simulated else None,
    )
