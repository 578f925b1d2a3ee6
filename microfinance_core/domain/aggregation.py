"""Currency aggregation engine - per-currency financial summaries"""

from collections import defaultdict
from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from microfinance_core.domain.currency import normalize_currency
from microfinance_core.domain.models import (
    ClientDuesAccount,
    Currency,
    CurrencySummary,
    FinancialRecord,
    RecordType,
)
from microfinance_core.utils.money import ZERO, to_money

MONTHS_PER_YEAR = 12

FINE_TYPES = (RecordType.PENALTY, RecordType.FEE)


@dataclass
class CurrencyBucket:
    """Records and dues accounts belonging to one currency"""

    currency: Currency
    records: List[FinancialRecord] = field(default_factory=list)
    clients: List[ClientDuesAccount] = field(default_factory=list)


@dataclass(frozen=True)
class CurrencySummaries:
    usd: CurrencySummary
    lrd: CurrencySummary
    combined: CurrencySummary

    def for_currency(self, currency: Currency) -> CurrencySummary:
        return self.lrd if currency == Currency.LRD else self.usd


def _record_type(value: Any) -> Optional[RecordType]:
    try:
        return RecordType(value)
    except ValueError:
        return None


def partition(
    records: Iterable[FinancialRecord],
    clients: Iterable[ClientDuesAccount],
) -> Dict[Currency, CurrencyBucket]:
    """
    Split records and dues accounts into exactly one bucket each.

    Both buckets are always present, even when empty. Currency values other
    than LRD land in the USD bucket.
    """
    buckets = {currency: CurrencyBucket(currency=currency) for currency in Currency}
    for record in records:
        buckets[normalize_currency(record.currency)].records.append(record)
    for client in clients:
        buckets[normalize_currency(client.currency)].clients.append(client)
    return buckets


def compute_summary(bucket: CurrencyBucket) -> CurrencySummary:
    """
    Reduce one currency bucket to its summary figures.

    Requirements:
    - Sum record amounts by type (missing/non-numeric amounts count as zero)
    - Outstanding savings = magnitude of negative savings balances
    - Outstanding dues from clients with a negative balance; total outstanding
      dues is the signed sum of every client balance
    - Grand total = savings + personal interest + general interest - outstanding dues
    - Overall total savings = grand total - outstanding loans
    - A client counts as having paid dues when the balance is zero and at
      least one dues payment from that client is in the bucket
    """
    totals: Dict[RecordType, Decimal] = defaultdict(lambda: ZERO)
    outstanding_savings = ZERO
    dues_payers = set()

    for record in bucket.records:
        record_type = _record_type(record.type)
        if record_type is None:
            continue
        amount = to_money(record.amount)
        totals[record_type] += amount
        if record_type == RecordType.SAVINGS_BALANCE and amount < 0:
            outstanding_savings += abs(amount)
        if record_type == RecordType.DUE_PAYMENT and record.client_id is not None:
            dues_payers.add(record.client_id)

    outstanding_dues = ZERO
    signed_dues = ZERO
    clients_with_outstanding = 0
    clients_paid = 0
    for client in bucket.clients:
        balance = to_money(client.total_dues)
        signed_dues += balance
        if balance < 0:
            outstanding_dues += abs(balance)
            clients_with_outstanding += 1
        elif balance == 0 and client.client_id in dues_payers:
            clients_paid += 1

    total_savings = totals[RecordType.SAVINGS_BALANCE]
    personal_interest = totals[RecordType.PERSONAL_INTEREST_PAYMENT]
    general_interest = totals[RecordType.GENERAL_INTEREST]
    outstanding_loans = totals[RecordType.LOAN_OUTSTANDING]

    grand_total = total_savings + personal_interest + general_interest - outstanding_dues

    return CurrencySummary(
        total_savings=total_savings,
        outstanding_savings=outstanding_savings,
        total_personal_interest=personal_interest,
        total_general_interest=general_interest,
        outstanding_dues=outstanding_dues,
        total_outstanding_dues=signed_dues,
        monthly_dues=outstanding_dues / MONTHS_PER_YEAR,
        total_loans=totals[RecordType.LOAN_PRINCIPAL],
        outstanding_loans=outstanding_loans,
        total_fines=sum((totals[t] for t in FINE_TYPES), ZERO),
        grand_total=grand_total,
        overall_total_savings=grand_total - outstanding_loans,
        clients_with_outstanding_dues=clients_with_outstanding,
        clients_paid_dues=clients_paid,
    )


def combine(*summaries: CurrencySummary) -> CurrencySummary:
    """Field-wise sum of summaries.

    Mixes currencies numerically with no exchange rate; only for the legacy
    "overall" display figures.
    """
    return CurrencySummary(
        **{f.name: sum((getattr(s, f.name) for s in summaries), f.default) for f in fields(CurrencySummary)}
    )


def summarize(
    records: Iterable[FinancialRecord],
    clients: Iterable[ClientDuesAccount],
) -> CurrencySummaries:
    """Partition, summarize each currency and build the combined view"""
    buckets = partition(records, clients)
    usd = compute_summary(buckets[Currency.USD])
    lrd = compute_summary(buckets[Currency.LRD])
    return CurrencySummaries(usd=usd, lrd=lrd, combined=combine(usd, lrd))
