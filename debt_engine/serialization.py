"""Conversion between engine values and JSON-compatible dictionaries.

Used by the CLI exporters, the web API and the persistence store. Money is
written as floats for charts and JSON consumers and read back through
``decimal_from_str`` so that no binary rounding leaks into the engine.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from .config import DATE_FORMAT_STORAGE, DEFAULT_INSTALLMENT_PERIOD
from .data_models import (
    MODE_INSTALLMENT,
    AmortizationEntry,
    CashFlowItem,
    Debt,
    DebtSummary,
    ExtraPayment,
    PortfolioTotals,
    SimulationResult,
)
from .exceptions import InvalidDebtError
from .utils import decimal_from_str, parse_date


def _date_str(value) -> Any:
    return value.strftime(DATE_FORMAT_STORAGE) if value else None


def extra_payment_to_dict(extra: ExtraPayment) -> Dict[str, Any]:
    return {
        "installment": extra.installment,
        "amount": float(extra.amount),
        "date": _date_str(extra.date),
        "mode": extra.mode,
    }


def extra_payment_from_dict(data: Mapping[str, Any]) -> ExtraPayment:
    try:
        return ExtraPayment(
            installment=int(data["installment"]),
            amount=decimal_from_str(str(data["amount"])),
            date=parse_date(data["date"]) if data.get("date") else None,
            mode=data.get("mode") or MODE_INSTALLMENT,
        )
    except KeyError as exc:
        raise InvalidDebtError(str(exc.args[0]), f"Extra payment is missing '{exc.args[0]}'") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidDebtError("extra_payments", str(exc)) from exc


def debt_to_dict(debt: Debt) -> Dict[str, Any]:
    return {
        "id": debt.id,
        "name": debt.name,
        "creditor": debt.creditor,
        "original_amount": float(debt.original_amount),
        "annual_rate": float(debt.annual_rate),
        "total_installments": debt.total_installments,
        "installment_period": debt.installment_period,
        "start_date": _date_str(debt.start_date),
        "current_installment": debt.current_installment,
        "extra_payments": [extra_payment_to_dict(ep) for ep in debt.extra_payments],
        "notes": debt.notes,
        "cash_flow_id": debt.cash_flow_id,
    }


def debt_from_dict(data: Mapping[str, Any], debt_id: str = None) -> Debt:
    """Build a debt from a JSON payload.

    Missing or malformed fields raise ``InvalidDebtError``; the invariants of
    the resulting debt are checked separately by ``validate_debt``.
    """
    field = "name"
    try:
        name = str(data.get("name") or "").strip()
        field = "original_amount"
        original_amount = decimal_from_str(str(data["original_amount"]))
        field = "annual_rate"
        annual_rate = decimal_from_str(str(data["annual_rate"]))
        field = "total_installments"
        total_installments = int(data["total_installments"])
        field = "start_date"
        start_date = parse_date(str(data["start_date"]))
        field = "current_installment"
        current_installment = int(data.get("current_installment") or 0)
    except KeyError as exc:
        raise InvalidDebtError(field, f"Field '{field}' is required") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidDebtError(field, str(exc)) from exc

    extras = tuple(extra_payment_from_dict(ep) for ep in data.get("extra_payments") or [])
    return Debt(
        id=debt_id if debt_id is not None else data.get("id"),
        name=name,
        creditor=data.get("creditor") or None,
        original_amount=original_amount,
        annual_rate=annual_rate,
        total_installments=total_installments,
        installment_period=data.get("installment_period") or DEFAULT_INSTALLMENT_PERIOD,
        start_date=start_date,
        current_installment=current_installment,
        extra_payments=extras,
        notes=data.get("notes") or None,
        cash_flow_id=data.get("cash_flow_id") or None,
    )


def serialize_schedule(schedule: Iterable[AmortizationEntry]) -> List[Dict[str, Any]]:
    """Convert schedule entries into JSON-serialisable dictionaries for charts."""
    serialized = []
    for entry in schedule:
        serialized.append(
            {
                "installment": entry.installment,
                "date": _date_str(entry.date),
                "payment": float(entry.payment),
                "principal": float(entry.principal),
                "interest": float(entry.interest),
                "extra_payment": float(entry.extra_payment),
                "remaining_balance": float(entry.remaining_balance),
                "status": entry.status,
            }
        )
    return serialized


def serialize_summary(summary: DebtSummary) -> Dict[str, Any]:
    return {
        "current_balance": float(summary.current_balance),
        "total_paid": float(summary.total_paid),
        "total_interest_paid": float(summary.total_interest_paid),
        "total_principal_paid": float(summary.total_principal_paid),
        "interest_saved": float(summary.interest_saved),
        "remaining_installments": summary.remaining_installments,
        "projected_end_date": _date_str(summary.projected_end_date),
        "monthly_equivalent_payment": float(summary.monthly_equivalent_payment),
    }


def serialize_simulation(result: SimulationResult) -> Dict[str, Any]:
    return {
        "interest_saved": float(result.interest_saved),
        "installments_saved": result.installments_saved,
        "original_installments": result.original_installments,
        "new_installments": result.new_installments,
        "original_end_date": _date_str(result.original_end_date),
        "new_end_date": _date_str(result.new_end_date),
    }


def serialize_portfolio(totals: PortfolioTotals) -> Dict[str, Any]:
    return {
        "total_balance": float(totals.total_balance),
        "total_monthly_payment": float(totals.total_monthly_payment),
        "active_count": totals.active_count,
    }


def serialize_cash_flow_item(item: CashFlowItem) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "amounts": {str(column): float(amount) for column, amount in sorted(item.amounts.items())},
    }
