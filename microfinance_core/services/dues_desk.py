"""Dues desk - assign yearly dues and take payments against them"""

from typing import Any, Optional

from microfinance_core.domain import dues
from microfinance_core.domain.exceptions import ValidationError
from microfinance_core.domain.models import ClientDuesAccount, DuesStatus
from microfinance_core.infrastructure.observability.logging import log_validation_failure
from microfinance_core.infrastructure.observability.metrics import (
    record_dues_payment,
    record_validation_failure,
)


def assign_yearly_dues(client_id: str, amount: Any, currency: Optional[str] = None) -> ClientDuesAccount:
    return dues.set_yearly_dues(client_id, amount, currency)


def take_dues_payment(
    account: ClientDuesAccount,
    amount: Any,
    currency: Optional[str] = None,
) -> ClientDuesAccount:
    """
    Apply a payment, recording the outcome.

    A rejected payment leaves the account untouched and re-raises so the
    caller can show the message next to the amount field.
    """
    try:
        updated = dues.apply_payment(account, amount, currency)
    except ValidationError as e:
        record_validation_failure("dues_payment", e.errors)
        log_validation_failure("dues_payment", e.errors)
        raise

    record_dues_payment(updated.currency.value, dues.status(updated) == DuesStatus.PAID)
    return updated
