"""Report figures - portfolio counters, performance ratios and revenue breakdown"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from microfinance_core.domain.currency import normalize_currency
from microfinance_core.domain.models import (
    Currency,
    FinancialRecord,
    LoanPosition,
    PortfolioCounters,
    RecordType,
    RevenueEntry,
)
from microfinance_core.utils.money import HUNDRED, ZERO, safe_ratio, to_money

ACTIVE_STATUSES = frozenset({"active", "disbursed"})
OVERDUE_STATUS = "overdue"
PENDING_STATUS = "pending"
COMPLETED_STATUSES = frozenset({"completed", "paid", "closed"})

LOAN_REVENUE_SOURCE = "loan_interest"
SAVINGS_REVENUE_SOURCE = "savings_interest"
FEES_REVENUE_SOURCE = "fees"
DEFAULT_REVENUE_SOURCE = "other"


@dataclass(frozen=True)
class PerformanceMetrics:
    par: Decimal
    default_rate: Decimal
    collection_efficiency: Decimal
    average_loan_size: Decimal


@dataclass
class RevenueBreakdown:
    """Revenue totals for one currency (or both combined)"""

    total_revenue: Decimal = ZERO
    loan_revenue: Decimal = ZERO
    savings_revenue: Decimal = ZERO
    fees_revenue: Decimal = ZERO
    revenue_by_source: Dict[str, Decimal] = field(default_factory=dict)


@dataclass
class RevenueSummary:
    usd: RevenueBreakdown
    lrd: RevenueBreakdown
    combined: RevenueBreakdown
    entries: List[RevenueEntry]

    @property
    def count(self) -> int:
        return len(self.entries)


def derive_portfolio_counters(
    loans: Iterable[LoanPosition],
    records: Iterable[FinancialRecord],
    total_clients: int = 0,
) -> PortfolioCounters:
    """
    Count loans by status and total the portfolio per currency.

    - active: status active or disbursed; their outstanding balances form the
      portfolio value of their currency
    - overdue, pending, completed: counted by status
    - collections: loan_payment records per currency
    """
    counters = PortfolioCounters(
        total_clients=total_clients,
        portfolio_value={currency: ZERO for currency in Currency},
        total_collections={currency: ZERO for currency in Currency},
    )

    for loan in loans:
        loan_status = (loan.status or "").strip().lower()
        if loan_status in ACTIVE_STATUSES:
            counters.active_loans += 1
            currency = normalize_currency(loan.currency)
            counters.portfolio_value[currency] += to_money(loan.outstanding_balance)
        elif loan_status == OVERDUE_STATUS:
            counters.overdue_loans += 1
        elif loan_status == PENDING_STATUS:
            counters.pending_loans += 1
        elif loan_status in COMPLETED_STATUSES:
            counters.completed_loans += 1

    for record in records:
        if record.type == RecordType.LOAN_PAYMENT:
            currency = normalize_currency(record.currency)
            counters.total_collections[currency] += to_money(record.amount)

    return counters


def portfolio_at_risk(overdue_loans: int, active_loans: int) -> Decimal:
    """Overdue loans as a percentage of active loans (0 with no active loans)"""
    return safe_ratio(Decimal(overdue_loans), Decimal(active_loans), HUNDRED)


def collection_efficiency(total_collections: Decimal, portfolio_value: Decimal) -> Decimal:
    """Collections as a percentage of portfolio value (0 with an empty portfolio)"""
    return safe_ratio(to_money(total_collections), to_money(portfolio_value), HUNDRED)


def average_loan_size(portfolio_value: Decimal, active_loans: int) -> Decimal:
    return safe_ratio(to_money(portfolio_value), Decimal(active_loans))


def performance_metrics(counters: PortfolioCounters) -> PerformanceMetrics:
    """
    Derived ratios for the performance report.

    default_rate uses the same formula as PAR. The two are kept identical on
    purpose until a distinct default numerator (e.g. written-off loans) is
    agreed.
    """
    par = portfolio_at_risk(counters.overdue_loans, counters.active_loans)
    portfolio_value = counters.total_portfolio_value
    return PerformanceMetrics(
        par=par,
        default_rate=portfolio_at_risk(counters.overdue_loans, counters.active_loans),
        collection_efficiency=collection_efficiency(counters.total_collections_all, portfolio_value),
        average_loan_size=average_loan_size(portfolio_value, counters.active_loans),
    )


def _add_revenue(breakdown: RevenueBreakdown, source: str, amount: Decimal) -> None:
    breakdown.total_revenue += amount
    breakdown.revenue_by_source[source] = breakdown.revenue_by_source.get(source, ZERO) + amount
    if source == LOAN_REVENUE_SOURCE:
        breakdown.loan_revenue += amount
    elif source == SAVINGS_REVENUE_SOURCE:
        breakdown.savings_revenue += amount
    elif source == FEES_REVENUE_SOURCE:
        breakdown.fees_revenue += amount


def revenue_source(entry: RevenueEntry) -> str:
    return entry.source or DEFAULT_REVENUE_SOURCE


def in_date_range(entry: RevenueEntry, start_date: Optional[date], end_date: Optional[date]) -> bool:
    """Inclusive range check; undated entries fall outside any bounded range"""
    if start_date is None and end_date is None:
        return True
    if entry.revenue_date is None:
        return False
    if start_date is not None and entry.revenue_date < start_date:
        return False
    if end_date is not None and entry.revenue_date > end_date:
        return False
    return True


def summarize_revenue(
    entries: Iterable[RevenueEntry],
    source: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> RevenueSummary:
    """
    Group revenue by source tag, separately per currency and combined.

    When source is given only entries with that tag are included. start_date
    and end_date bound revenue_date inclusively; either may be omitted.
    """
    per_currency = defaultdict(RevenueBreakdown)
    combined = RevenueBreakdown()
    kept: List[RevenueEntry] = []

    for entry in entries:
        entry_source = revenue_source(entry)
        if source is not None and entry_source != source:
            continue
        if not in_date_range(entry, start_date, end_date):
            continue
        amount = to_money(entry.amount)
        _add_revenue(per_currency[normalize_currency(entry.currency)], entry_source, amount)
        _add_revenue(combined, entry_source, amount)
        kept.append(entry)

    return RevenueSummary(
        usd=per_currency[Currency.USD],
        lrd=per_currency[Currency.LRD],
        combined=combined,
        entries=kept,
    )
