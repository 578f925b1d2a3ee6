"""Currency normalization shared by ingestion and the dues ledger"""

from typing import Any

from microfinance_core.domain.models import Currency


def normalize_currency(value: Any) -> Currency:
    """
    Map any currency input onto the two supported books.

    Only the exact code LRD stays LRD; everything else, including missing,
    lower-case and unknown codes, is treated as USD.
    """
    if isinstance(value, Currency):
        return value
    if value == Currency.LRD.value:
        return Currency.LRD
    return Currency.USD
