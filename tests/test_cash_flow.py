from decimal import Decimal

from conftest import build_debt
from debt_engine.cash_flow import debt_expenses_for_cash_flow
from debt_engine.data_models import ExtraPayment
from debt_engine.engine import calculate_amortization

YEAR_2025 = [(month, 2025) for month in range(1, 13)]


def test_paid_installments_are_excluded():
    debt = build_debt(current_installment=2)
    item = debt_expenses_for_cash_flow(debt, YEAR_2025)

    assert item.id == "debt-d1"
    assert item.name == "Debt: Bank loan"
    assert sorted(item.amounts) == list(range(3, 13))
    assert item.amounts[3] == Decimal("888487.89")


def test_extra_payment_added_to_its_period():
    debt = build_debt(extra_payments=(ExtraPayment(installment=4, amount=Decimal("1000")),))
    schedule = calculate_amortization(debt)
    item = debt_expenses_for_cash_flow(debt, YEAR_2025)

    assert item.amounts[4] == schedule[3].payment + Decimal("1000.00")


def test_only_requested_periods():
    item = debt_expenses_for_cash_flow(build_debt(), [(6, 2025), (1, 2026)])
    assert list(item.amounts) == [1]


def test_quarterly_debt_lands_in_quarter_months():
    debt = build_debt(original_amount=Decimal("1000"), total_installments=4, installment_period="quarterly")
    item = debt_expenses_for_cash_flow(debt, YEAR_2025)
    assert sorted(item.amounts) == [1, 4, 7, 10]


def test_same_month_in_several_years_stays_separate():
    debt = build_debt(total_installments=24)
    periods = [(1, 2025), (1, 2026)]
    item = debt_expenses_for_cash_flow(debt, periods)
    assert sorted(item.amounts) == [1, 2]


def test_no_match_or_not_computable():
    assert debt_expenses_for_cash_flow(build_debt(), [(1, 2030)]) is None
    assert debt_expenses_for_cash_flow(build_debt(annual_rate=Decimal("0")), YEAR_2025) is None
    assert debt_expenses_for_cash_flow(build_debt(current_installment=12), YEAR_2025) is None
