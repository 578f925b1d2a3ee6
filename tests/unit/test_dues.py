"""Unit tests for the dues ledger"""

from decimal import Decimal

import pytest

from microfinance_core.domain.dues import (
    account_monthly_dues,
    apply_payment,
    ledger_state,
    monthly_dues,
    set_yearly_dues,
    status,
)
from microfinance_core.domain.exceptions import CurrencyMismatchError, ValidationError
from microfinance_core.domain.models import ClientDuesAccount, Currency, DuesStatus


def test_set_yearly_dues_stores_negative_balance():
    account = set_yearly_dues("c1", 1200, "LRD")

    assert account.total_dues == -1200
    assert account.assigned_yearly_dues == 1200
    assert account.currency == Currency.LRD
    assert status(account) == DuesStatus.OUTSTANDING


def test_set_yearly_dues_zero_amount():
    account = set_yearly_dues("c1", 0)

    assert account.total_dues == 0
    assert account.currency == Currency.USD
    assert ledger_state(account) == DuesStatus.NO_DUES


def test_twelve_monthly_payments_settle_the_year():
    """1200 yearly, paid 100 at a time: monthly figure stays 100 throughout"""
    account = set_yearly_dues("c1", 1200)
    assert account_monthly_dues(account) == 100

    for month in range(12):
        account = apply_payment(account, 100)
        assert account.total_dues == -1200 + 100 * (month + 1)
        assert account_monthly_dues(account) == 100

    assert account.total_dues == 0
    assert status(account) == DuesStatus.PAID
    assert ledger_state(account) == DuesStatus.PAID


@pytest.mark.parametrize("payment", ["0.01", "1", "250.50", "999.99"])
def test_payment_reduces_balance_by_exact_amount(payment):
    account = set_yearly_dues("c1", 1000)

    updated = apply_payment(account, Decimal(payment))

    assert abs(account.total_dues) - abs(updated.total_dues) == Decimal(payment)
    assert updated.total_dues <= 0
    assert account.total_dues == -1000  # input account is untouched


def test_payment_equal_to_balance_settles():
    account = ClientDuesAccount("c1", Decimal("-350"), Currency.USD, Decimal("1200"))

    updated = apply_payment(account, 350)

    assert updated.total_dues == 0


def test_payment_above_balance_rejected():
    account = ClientDuesAccount("c1", Decimal("-350"), Currency.USD, Decimal("1200"))

    with pytest.raises(ValidationError) as exc_info:
        apply_payment(account, 351)

    assert "amount" in exc_info.value.errors


@pytest.mark.parametrize("payment", [0, -10, None, "abc"])
def test_non_positive_payment_rejected(payment):
    account = set_yearly_dues("c1", 1200)

    with pytest.raises(ValidationError):
        apply_payment(account, payment)


def test_payment_on_settled_account_rejected():
    account = apply_payment(set_yearly_dues("c1", 100), 100)

    with pytest.raises(ValidationError):
        apply_payment(account, 1)


def test_payment_in_other_currency_rejected():
    account = set_yearly_dues("c1", 1200, "LRD")

    with pytest.raises(CurrencyMismatchError):
        apply_payment(account, 100, "USD")

    # Same currency is fine
    assert apply_payment(account, 100, "LRD").total_dues == -1100

    # Currency codes are matched exactly
    with pytest.raises(CurrencyMismatchError):
        apply_payment(account, 100, "lrd")


def test_monthly_dues_from_assigned_figure():
    assert monthly_dues(1200) == 100
    assert monthly_dues(-1200) == 100
    assert monthly_dues(None) == 0


def test_reassigning_after_paid_makes_outstanding_again():
    account = apply_payment(set_yearly_dues("c1", 600), 600)
    assert status(account) == DuesStatus.PAID

    account = set_yearly_dues(account.client_id, 900, account.currency)

    assert status(account) == DuesStatus.OUTSTANDING
    assert account_monthly_dues(account) == 75


def test_ledger_state_zero_balance_with_known_payments():
    """Imported accounts have no assigned figure; payment history decides"""
    account = ClientDuesAccount("c9", Decimal("0"))

    assert ledger_state(account) == DuesStatus.NO_DUES
    assert ledger_state(account, has_payments=True) == DuesStatus.PAID
