from datetime import date
from decimal import Decimal

from hypothesis import given, settings, strategies as st

from conftest import build_debt
from debt_engine.data_models import ExtraPayment
from debt_engine.engine import calculate_amortization
from debt_engine.summary import portfolio_totals, summarize

CENT = Decimal("0.01")


def test_unstarted_debt(debt):
    summary = summarize(debt)

    assert summary.current_balance == Decimal("10000000.00")
    assert summary.total_paid == Decimal("0.00")
    assert summary.total_interest_paid == Decimal("0.00")
    assert summary.total_principal_paid == Decimal("0.00")
    assert summary.interest_saved == Decimal("0.00")
    assert summary.remaining_installments == 12
    assert summary.projected_end_date == date(2025, 12, 1)
    # No current entry is missing here: installment 1 is current
    assert summary.monthly_equivalent_payment == Decimal("888487.89")


def test_partially_paid_debt():
    debt = build_debt(current_installment=3)
    schedule = calculate_amortization(debt)
    summary = summarize(debt)

    assert summary.current_balance == schedule[2].remaining_balance
    assert summary.total_paid == sum(e.payment for e in schedule[:3])
    assert summary.total_interest_paid == sum(e.interest for e in schedule[:3])
    assert summary.total_principal_paid == sum(e.principal for e in schedule[:3])
    assert summary.remaining_installments == 9


def test_extra_payment_reduces_balance_and_saves_interest(debt_with_extra):
    schedule = calculate_amortization(debt_with_extra)
    summary = summarize(debt_with_extra)

    principal_paid = sum(e.principal for e in schedule[:3])
    expected_balance = Decimal("10000000") - principal_paid - Decimal("2000000")
    assert abs(summary.current_balance - expected_balance) <= 3 * CENT
    assert summary.total_principal_paid == principal_paid + Decimal("2000000.00")
    assert summary.total_paid == sum(e.payment for e in schedule[:3]) + Decimal("2000000.00")
    assert summary.interest_saved > 0


def test_interest_saved_counts_whole_schedule(debt_with_extra):
    # Savings accrue after installment 3, none of them is paid yet
    summary = summarize(debt_with_extra)
    baseline = calculate_amortization(build_debt(current_installment=3))
    actual = calculate_amortization(debt_with_extra)

    expected = sum(e.interest for e in baseline) - sum(e.interest for e in actual)
    assert summary.interest_saved == expected
    assert summary.total_interest_paid == sum(e.interest for e in actual[:3])


def test_fully_paid_debt():
    summary = summarize(build_debt(current_installment=12))

    assert summary.remaining_installments == 0
    assert summary.current_balance == Decimal("0.00")
    # No current installment left: fall back to the first one
    assert summary.monthly_equivalent_payment == Decimal("888487.89")


def test_settled_early_falls_back_to_original_amount():
    extra = ExtraPayment(installment=3, amount=Decimal("2000000"), mode="term")
    debt = build_debt(current_installment=12, extra_payments=(extra,))
    assert len(calculate_amortization(debt)) < 12

    summary = summarize(debt)
    assert summary.remaining_installments == 0
    assert summary.current_balance == Decimal("10000000.00")


def test_quarterly_monthly_equivalent():
    debt = build_debt(
        original_amount=Decimal("1000"),
        total_installments=4,
        installment_period="quarterly",
        current_installment=1,
    )
    schedule = calculate_amortization(debt)
    summary = summarize(debt)
    assert abs(summary.monthly_equivalent_payment - schedule[1].payment / 3) <= CENT


def test_not_computable_debt():
    summary = summarize(build_debt(annual_rate=Decimal("0")))

    assert summary.current_balance == Decimal("10000000.00")
    assert summary.remaining_installments == 0
    assert summary.projected_end_date == date(2025, 1, 1)
    assert summary.monthly_equivalent_payment == Decimal("0.00")
    assert summary.interest_saved == Decimal("0.00")


def test_summarize_does_not_touch_extra_payments(debt_with_extra):
    before = debt_with_extra.extra_payments
    summarize(debt_with_extra)
    assert debt_with_extra.extra_payments is before


def test_portfolio_totals():
    active = build_debt(id="a", current_installment=3)
    finished = build_debt(id="b", current_installment=12)
    totals = portfolio_totals([active, finished])

    active_summary = summarize(active)
    assert totals.active_count == 1
    assert totals.total_balance == active_summary.current_balance
    assert totals.total_monthly_payment == active_summary.monthly_equivalent_payment


def test_portfolio_totals_empty():
    totals = portfolio_totals([])
    assert totals.active_count == 0
    assert totals.total_balance == Decimal("0.00")


@settings(max_examples=40, deadline=None)
@given(
    installments=st.integers(min_value=2, max_value=120),
    paid_share=st.floats(min_value=0, max_value=1),
    extras=st.lists(
        st.tuples(st.floats(min_value=0, max_value=1), st.integers(min_value=1, max_value=500_000)),
        max_size=4,
    ),
)
def test_interest_saved_sign(installments, paid_share, extras):
    debt = build_debt(
        original_amount=Decimal("5000000"),
        total_installments=installments,
        current_installment=int(paid_share * installments),
        extra_payments=tuple(
            ExtraPayment(installment=1 + int(pos * (installments - 1)), amount=Decimal(amount))
            for pos, amount in extras
        ),
    )
    summary = summarize(debt)
    if extras:
        assert summary.interest_saved >= 0
    else:
        assert summary.interest_saved == 0
