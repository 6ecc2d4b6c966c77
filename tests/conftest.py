from datetime import date
from decimal import Decimal

import pytest

from debt_engine.data_models import Debt, ExtraPayment


def build_debt(**overrides) -> Debt:
    """Ten million at 12 %/yr repaid in 12 monthly installments from 2025-01-01."""
    values = dict(
        id="d1",
        name="Bank loan",
        original_amount=Decimal("10000000"),
        annual_rate=Decimal("12"),
        total_installments=12,
        installment_period="monthly",
        start_date=date(2025, 1, 1),
        current_installment=0,
        extra_payments=(),
    )
    values.update(overrides)
    return Debt(**values)


@pytest.fixture
def debt() -> Debt:
    return build_debt()


@pytest.fixture
def debt_with_extra() -> Debt:
    return build_debt(
        current_installment=3,
        extra_payments=(ExtraPayment(installment=3, amount=Decimal("2000000")),),
    )
