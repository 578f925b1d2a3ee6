"""Report assembler - turns summaries and counters into report view models"""

from datetime import date
from typing import Iterable, Optional

from microfinance_core.domain.aggregation import CurrencySummaries
from microfinance_core.domain.models import Currency, CurrencySummary, PortfolioCounters, RevenueEntry
from microfinance_core.domain.reports import performance_metrics, revenue_source, summarize_revenue
from microfinance_core.reporting.schemas import (
    CurrencyPortfolio,
    CurrencySummarySchema,
    FinancialReport,
    LoanDistribution,
    PerformanceReport,
    PortfolioReport,
    ReportBundle,
    RevenueLine,
    RevenueReport,
    RevenueSection,
)
from microfinance_core.utils.money import ZERO


def build_financial_report(summaries: CurrencySummaries) -> FinancialReport:
    """USD, LRD and combined summaries side by side"""
    return FinancialReport(
        usd=CurrencySummarySchema.model_validate(summaries.usd),
        lrd=CurrencySummarySchema.model_validate(summaries.lrd),
        combined=CurrencySummarySchema.model_validate(summaries.combined),
    )


def _currency_portfolio(
    summary: CurrencySummary,
    counters: PortfolioCounters,
    currency: Currency,
) -> CurrencyPortfolio:
    return CurrencyPortfolio(
        portfolio_value=counters.portfolio_value.get(currency, ZERO),
        outstanding_loans=summary.outstanding_loans,
        total_loans=summary.total_loans,
        total_collections=counters.total_collections.get(currency, ZERO),
    )


def build_portfolio_report(summaries: CurrencySummaries, counters: PortfolioCounters) -> PortfolioReport:
    """Loan distribution counts plus per-currency portfolio figures"""
    return PortfolioReport(
        distribution=LoanDistribution(
            active=counters.active_loans,
            pending=counters.pending_loans,
            overdue=counters.overdue_loans,
            completed=counters.completed_loans,
        ),
        total_clients=counters.total_clients,
        usd=_currency_portfolio(summaries.usd, counters, Currency.USD),
        lrd=_currency_portfolio(summaries.lrd, counters, Currency.LRD),
        portfolio_value=counters.total_portfolio_value,
        total_collections=counters.total_collections_all,
    )


def build_revenue_report(
    entries: Iterable[RevenueEntry],
    source: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> RevenueReport:
    """Revenue grouped by source per currency, with the contributing entries"""
    summary = summarize_revenue(entries, source=source, start_date=start_date, end_date=end_date)
    return RevenueReport(
        usd=RevenueSection.model_validate(summary.usd),
        lrd=RevenueSection.model_validate(summary.lrd),
        combined=RevenueSection.model_validate(summary.combined),
        count=summary.count,
        revenues=[
            RevenueLine(
                amount=entry.amount,
                currency=entry.currency,
                source=revenue_source(entry),
                description=entry.description,
                revenue_date=entry.revenue_date,
            )
            for entry in summary.entries
        ],
    )


def build_performance_report(counters: PortfolioCounters) -> PerformanceReport:
    metrics = performance_metrics(counters)
    return PerformanceReport(
        par=metrics.par,
        default_rate=metrics.default_rate,
        collection_efficiency=metrics.collection_efficiency,
        average_loan_size=metrics.average_loan_size,
        active_loans=counters.active_loans,
        overdue_loans=counters.overdue_loans,
        portfolio_value=counters.total_portfolio_value,
        total_collections=counters.total_collections_all,
    )


def assemble_reports(
    summaries: CurrencySummaries,
    counters: PortfolioCounters,
    revenues: Iterable[RevenueEntry],
    generation: int = 0,
) -> ReportBundle:
    """Build all four report view models from one consistent snapshot"""
    return ReportBundle(
        generation=generation,
        financial=build_financial_report(summaries),
        portfolio=build_portfolio_report(summaries, counters),
        revenue=build_revenue_report(revenues),
        performance=build_performance_report(counters),
    )
