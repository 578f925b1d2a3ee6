"""Annual dues ledger - signed per-client balance that decays toward zero"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Any, Optional, Union

from microfinance_core.domain.exceptions import CurrencyMismatchError, ValidationError
from microfinance_core.domain.models import ClientDuesAccount, Currency, DuesStatus
from microfinance_core.domain.currency import normalize_currency
from microfinance_core.utils.money import ZERO, parse_money, to_money

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


def set_yearly_dues(
    client_id: str,
    amount: Any,
    currency: Union[Currency, str, None] = Currency.USD,
) -> ClientDuesAccount:
    """
    Assign a new yearly dues obligation to a client.

    The balance is stored negative (-abs(amount)); a zero amount leaves the
    client with nothing outstanding. Reassigning replaces any previous balance.
    """
    yearly = abs(to_money(amount))
    return ClientDuesAccount(
        client_id=client_id,
        total_dues=-yearly,
        currency=normalize_currency(currency),
        assigned_yearly_dues=yearly,
    )


def apply_payment(
    account: ClientDuesAccount,
    amount: Any,
    currency: Union[Currency, str, None] = None,
) -> ClientDuesAccount:
    """
    Apply a dues payment and return the updated account.

    The payment must be positive and no larger than what is still owed, so the
    balance moves toward zero by exactly amount and never crosses it. When a
    payment currency is given it must match the currency the dues are held in.

    Raises:
        ValidationError: amount is not positive or exceeds the outstanding dues
        CurrencyMismatchError: payment currency differs from the dues currency
    """
    payment = parse_money(amount)
    if payment is None or payment <= 0:
        raise ValidationError("Invalid dues payment", {"amount": "Please enter a valid payment amount"})

    outstanding = abs(account.total_dues) if account.total_dues < 0 else ZERO
    if payment > outstanding:
        raise ValidationError(
            "Invalid dues payment",
            {"amount": "Payment amount cannot exceed outstanding dues"},
        )

    if currency is not None:
        paid_in = normalize_currency(currency)
        if paid_in != account.currency:
            raise CurrencyMismatchError(account.currency.value, paid_in.value)

    updated = replace(account, total_dues=account.total_dues + payment)
    logger.debug(
        "Applied dues payment",
        extra={"client_id": account.client_id, "remaining": str(updated.total_dues)},
    )
    return updated


def monthly_dues(assigned_yearly_amount: Any) -> Decimal:
    """Monthly installment of a yearly dues figure.

    Always derived from the assigned yearly amount, so it stays fixed while
    the balance is paid down.
    """
    return abs(to_money(assigned_yearly_amount)) / MONTHS_PER_YEAR


def account_monthly_dues(account: ClientDuesAccount) -> Decimal:
    return monthly_dues(account.assigned_yearly_dues)


def status(account: ClientDuesAccount) -> DuesStatus:
    """OUTSTANDING while anything is owed, PAID otherwise"""
    if account.total_dues < 0:
        return DuesStatus.OUTSTANDING
    return DuesStatus.PAID


def ledger_state(account: ClientDuesAccount, has_payments: Optional[bool] = None) -> DuesStatus:
    """
    Full lifecycle state: NO_DUES, OUTSTANDING or PAID.

    A zero balance means PAID once dues were assigned (or, when the caller
    knows it, once at least one dues payment exists); otherwise NO_DUES.
    """
    if account.total_dues < 0:
        return DuesStatus.OUTSTANDING
    if account.assigned_yearly_dues > 0 or has_payments:
        return DuesStatus.PAID
    return DuesStatus.NO_DUES
