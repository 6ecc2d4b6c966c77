from decimal import Decimal

import pytest

from conftest import build_debt
from debt_engine.data_models import ExtraPayment
from debt_engine.exceptions import DebtNotFoundError, InvalidDebtError
from debt_engine.validation import validate_debt, validate_extra_payment


def test_valid_debt_is_returned(debt_with_extra):
    assert validate_debt(debt_with_extra) is debt_with_extra


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": "  "}, "name"),
        ({"original_amount": Decimal("0")}, "original_amount"),
        ({"annual_rate": Decimal("-1")}, "annual_rate"),
        ({"total_installments": 0}, "total_installments"),
        ({"installment_period": "weekly"}, "installment_period"),
        ({"current_installment": -1}, "current_installment"),
        ({"current_installment": 13}, "current_installment"),
    ],
)
def test_invalid_debt(overrides, field):
    with pytest.raises(InvalidDebtError) as excinfo:
        validate_debt(build_debt(**overrides))
    assert excinfo.value.field == field
    assert excinfo.value.details["field"] == field


@pytest.mark.parametrize(
    "extra, field",
    [
        (ExtraPayment(installment=0, amount=Decimal("10")), "installment"),
        (ExtraPayment(installment=13, amount=Decimal("10")), "installment"),
        (ExtraPayment(installment=2, amount=Decimal("0")), "amount"),
        (ExtraPayment(installment=2, amount=Decimal("-5")), "amount"),
        (ExtraPayment(installment=2, amount=Decimal("5"), mode="balloon"), "mode"),
    ],
)
def test_invalid_extra_payment(extra, field):
    with pytest.raises(InvalidDebtError) as excinfo:
        validate_extra_payment(extra, 12)
    assert excinfo.value.field == field
    with pytest.raises(InvalidDebtError):
        validate_debt(build_debt(extra_payments=(extra,)))


def test_error_messages():
    err = InvalidDebtError("amount", "Extra payment amount must be positive", Decimal("-5"))
    assert str(err) == "Extra payment amount must be positive - {'field': 'amount', 'value': '-5'}"
    assert str(DebtNotFoundError("abc")) == "Debt 'abc' not found - {'debt_id': 'abc'}"
    assert str(DebtNotFoundError()) == "Debt not found"
