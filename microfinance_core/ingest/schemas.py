"""Pydantic schemas for raw records coming from the back-office API.

These schemas coerce instead of rejecting: a missing or non-numeric amount
becomes zero and an unknown currency becomes USD, so one malformed record
never stops a report from being produced.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, List, Mapping, Optional, TypeVar, Union

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from microfinance_core.domain.currency import normalize_currency
from microfinance_core.domain.models import Currency
from microfinance_core.utils.money import parse_money, to_money


def _to_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _to_optional_int(value: Any) -> Optional[int]:
    parsed = parse_money(value)
    if parsed is None or parsed != parsed.to_integral_value():
        return None
    return int(parsed)


def _to_text(value: Any) -> str:
    return "" if value is None else str(value)


def _to_optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _to_count(value: Any) -> int:
    parsed = _to_optional_int(value)
    return 0 if parsed is None else parsed


def _to_percentage(value: Any) -> Union[Decimal, str, None]:
    # A non-numeric entry is kept as text so validation can flag the field
    parsed = parse_money(value)
    if parsed is not None:
        return parsed
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return str(value)


def _mappings_only(value: Any) -> List[Any]:
    """Drop list entries that are not records; a non-list becomes empty"""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, (Mapping, BaseModel))]


def _to_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


Money = Annotated[Decimal, BeforeValidator(to_money)]
OptionalMoney = Annotated[Optional[Decimal], BeforeValidator(parse_money)]
CurrencyCode = Annotated[Currency, BeforeValidator(normalize_currency)]
RecordId = Annotated[Optional[str], BeforeValidator(_to_id)]
OptionalInt = Annotated[Optional[int], BeforeValidator(_to_optional_int)]
Text = Annotated[str, BeforeValidator(_to_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(_to_optional_text)]
Count = Annotated[int, BeforeValidator(_to_count)]
Percentage = Annotated[Optional[Union[Decimal, str]], BeforeValidator(_to_percentage)]
OptionalDate = Annotated[Optional[date], BeforeValidator(_to_date)]

T = TypeVar("T")
Records = Annotated[List[T], BeforeValidator(_mappings_only)]


class RawRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SavingsAccountIn(RawRecord):
    """Savings account as listed by /api/savings"""

    id: RecordId = None
    client_id: RecordId = None
    balance: Money = Decimal("0")
    currency: CurrencyCode = Currency.USD
    status: Text = "active"


class TransactionIn(RawRecord):
    """Transaction as listed by /api/transactions"""

    id: RecordId = None
    client_id: RecordId = None
    loan_id: RecordId = None
    type: Text = ""
    amount: Money = Decimal("0")
    currency: CurrencyCode = Currency.USD


class LoanIn(RawRecord):
    """Loan as listed by /api/loans"""

    id: RecordId = None
    client_id: RecordId = None
    loan_type: Text = ""
    status: Text = ""
    amount: Money = Decimal("0")
    outstanding_balance: Money = Decimal("0")
    currency: CurrencyCode = Currency.USD


class ClientIn(RawRecord):
    """Client dues position; the API calls the currency dues_currency"""

    id: RecordId = None
    total_dues: Money = Decimal("0")
    currency: CurrencyCode = Field(
        default=Currency.USD,
        validation_alias=AliasChoices("dues_currency", "currency"),
    )
    yearly_dues: OptionalMoney = None


class RevenueIn(RawRecord):
    amount: Money = Decimal("0")
    currency: CurrencyCode = Currency.USD
    source: Text = "other"
    description: OptionalText = None
    revenue_date: OptionalDate = None


class LoanRequestIn(RawRecord):
    """Loan request form; numbers arrive as strings from the form fields"""

    loan_type: Text = "personal"
    amount: OptionalMoney = None
    term_months: OptionalInt = None
    currency: CurrencyCode = Currency.USD
    purpose: Text = Field(default="", validation_alias=AliasChoices("loan_purpose", "purpose"))
    interest_rate: Percentage = None
    upfront_percentage: Percentage = None
    default_charges_percentage: Percentage = None


class RefreshSnapshot(RawRecord):
    """One consistent fetch of everything the reports are computed from"""

    generation: Count = 0
    savings_accounts: Records[SavingsAccountIn] = Field(default_factory=list)
    transactions: Records[TransactionIn] = Field(default_factory=list)
    loans: Records[LoanIn] = Field(default_factory=list)
    clients: Records[ClientIn] = Field(default_factory=list)
    revenues: Records[RevenueIn] = Field(default_factory=list)
    total_clients: OptionalInt = None
