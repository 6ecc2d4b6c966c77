"""Data models for the debt engine.

This module defines dataclasses representing the entities used by the
amortization engine: the debt being repaid, the extra payments recorded
against it, the rows of a generated schedule and the derived summaries. Money
values are ``Decimal`` throughout so that figures rounded to cents stay exact
when they are summed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Tuple

MONTHLY = "monthly"
QUARTERLY = "quarterly"
SEMIANNUAL = "semiannual"
ANNUAL = "annual"

# Calendar months covered by one installment of each period type
PERIOD_MONTHS: Dict[str, int] = {
    MONTHLY: 1,
    QUARTERLY: 3,
    SEMIANNUAL: 6,
    ANNUAL: 12,
}

MODE_INSTALLMENT = "installment"
MODE_TERM = "term"
EXTRA_PAYMENT_MODES = (MODE_INSTALLMENT, MODE_TERM)

STATUS_PAID = "paid"
STATUS_CURRENT = "current"
STATUS_FUTURE = "future"


@dataclass(frozen=True)
class ExtraPayment:
    """An unscheduled payment applied directly to the outstanding principal.

    Attributes
    ----------
    installment: int
        The 1-based installment *after which* the amount is applied.
    amount: Decimal
        The additional money applied to the principal.
    date: Optional[date]
        When the payment was made. Informational only.
    mode: str
        ``"installment"`` re-amortizes the remaining balance over the
        remaining installments, lowering the fixed installment. ``"term"``
        keeps the installment unchanged so the loan finishes earlier.
    """

    installment: int
    amount: Decimal
    date: Optional[date] = None
    mode: str = MODE_INSTALLMENT


@dataclass(frozen=True)
class Debt:
    """A loan repaid with equal installments.

    The debt is the single source of truth for every calculation. Engine
    functions only read it; derived schedules and summaries are new values.
    ``current_installment`` counts the installments already paid.
    """

    name: str
    original_amount: Decimal
    annual_rate: Decimal  # annual nominal interest rate in percent
    total_installments: int
    installment_period: str
    start_date: date  # date of installment #1
    current_installment: int = 0
    extra_payments: Tuple[ExtraPayment, ...] = ()
    creditor: Optional[str] = None
    notes: Optional[str] = None
    cash_flow_id: Optional[str] = None
    id: Optional[str] = None

    @property
    def months_per_period(self) -> int:
        return PERIOD_MONTHS[self.installment_period]


@dataclass(frozen=True)
class AmortizationEntry:
    """One row of an amortization schedule.

    ``payment`` is the regular installment (principal plus interest) and does
    not include ``extra_payment``. ``remaining_balance`` is the balance after
    both have been applied.
    """

    installment: int
    date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    extra_payment: Decimal
    remaining_balance: Decimal
    status: str


@dataclass(frozen=True)
class DebtSummary:
    """Current state of a debt, derived from its schedule.

    Attributes
    ----------
    current_balance: Decimal
        ``remaining_balance`` of the last paid installment. Falls back to the
        original amount when nothing is paid yet, or when extra payments ended
        the schedule before that installment.
    total_paid: Decimal
        Regular installments plus extra payments of the paid entries.
    total_interest_paid: Decimal
        Interest part of the paid entries.
    total_principal_paid: Decimal
        Principal part of the paid entries, extra payments included.
    interest_saved: Decimal
        Interest of the schedule without extra payments minus interest of the
        actual schedule, both over their whole length.
    remaining_installments: int
        Entries that are not paid yet.
    projected_end_date: date
        Due date of the last entry, or the start date for an empty schedule.
    monthly_equivalent_payment: Decimal
        Installment of the current entry divided by the months per period, so
        a quarterly installment counts a third per month. Uses the first entry
        when no entry is current, and 0 for an empty schedule.
    """

    current_balance: Decimal
    total_paid: Decimal
    total_interest_paid: Decimal
    total_principal_paid: Decimal
    interest_saved: Decimal
    remaining_installments: int
    projected_end_date: date
    monthly_equivalent_payment: Decimal


@dataclass(frozen=True)
class SimulationResult:
    """Comparison between the actual schedule and a what-if schedule."""

    interest_saved: Decimal
    installments_saved: int
    original_installments: int
    new_installments: int
    original_end_date: Optional[date]
    new_end_date: Optional[date]


@dataclass(frozen=True)
class PortfolioTotals:
    """Totals across the debts that still have installments to pay.

    ``total_balance`` sums ``current_balance`` and ``total_monthly_payment``
    sums ``monthly_equivalent_payment`` of each active debt's summary.
    """

    total_balance: Decimal
    total_monthly_payment: Decimal
    active_count: int


@dataclass
class CashFlowItem:
    """A derived expense line for a cash-flow projection.

    ``amounts`` maps 1-based period columns to the money due in that period.
    """

    id: str
    name: str
    amounts: Dict[int, Decimal] = field(default_factory=dict)
