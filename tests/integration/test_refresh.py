"""Integration tests for the full report refresh"""

import pytest
from decimal import Decimal
from unittest.mock import patch

from microfinance_core.domain.models import Currency, PortfolioCounters
from microfinance_core.ingest.schemas import RefreshSnapshot
from microfinance_core.services.refresh import LatestResultGate, refresh

pytestmark = pytest.mark.integration


def test_refresh_financial_report(raw_snapshot):
    """Test per-currency summaries from a raw snapshot"""
    bundle = refresh(raw_snapshot)
    usd = bundle.financial.usd
    lrd = bundle.financial.lrd

    assert bundle.generation == 7

    assert usd.total_savings == 500
    assert usd.total_personal_interest == 25
    assert usd.outstanding_dues == 600
    assert usd.total_outstanding_dues == -600
    assert usd.outstanding_savings == 0
    assert usd.monthly_dues == 50
    assert usd.total_loans == 1700
    assert usd.outstanding_loans == 1200
    assert usd.total_fines == 0
    assert usd.grand_total == -75
    assert usd.overall_total_savings == -1275
    assert usd.clients_with_outstanding_dues == 1
    assert usd.clients_paid_dues == 1

    assert lrd.total_savings == 300
    assert lrd.total_general_interest == 40
    assert lrd.outstanding_dues == 1200
    assert lrd.monthly_dues == 100
    assert lrd.total_loans == 5000
    assert lrd.outstanding_loans == 5000
    assert lrd.total_fines == 20
    assert lrd.grand_total == -860
    assert lrd.overall_total_savings == -5860

    assert bundle.financial.combined.total_savings == 800


def test_refresh_portfolio_and_performance(raw_snapshot):
    bundle = refresh(raw_snapshot)
    portfolio = bundle.portfolio

    assert portfolio.distribution.active == 1
    assert portfolio.distribution.overdue == 1
    assert portfolio.distribution.pending == 1
    assert portfolio.distribution.completed == 1
    assert portfolio.total_clients == 3
    assert portfolio.usd.portfolio_value == 800
    assert portfolio.lrd.portfolio_value == 0
    assert portfolio.usd.total_collections == 200

    assert bundle.performance.par == 100
    assert bundle.performance.default_rate == 100
    assert bundle.performance.collection_efficiency == 25
    assert bundle.performance.average_loan_size == 800


def test_refresh_revenue_report(raw_snapshot):
    revenue = refresh(raw_snapshot).revenue

    assert revenue.usd.total_revenue == 60
    assert revenue.usd.loan_revenue == 50
    assert revenue.usd.revenue_by_source["other"] == 10
    assert revenue.lrd.fees_revenue == 20
    assert revenue.combined.total_revenue == 80
    assert revenue.count == 3


def test_refresh_is_idempotent(raw_snapshot):
    """Test the same snapshot always yields the same reports"""
    first = refresh(raw_snapshot)
    second = refresh(RefreshSnapshot.model_validate(raw_snapshot))

    assert first.model_dump() == second.model_dump()


def test_refresh_with_supplied_counters(raw_snapshot):
    counters = PortfolioCounters(
        active_loans=10,
        overdue_loans=1,
        total_clients=50,
        portfolio_value={Currency.USD: Decimal("4000")},
        total_collections={Currency.USD: Decimal("1000")},
    )

    bundle = refresh(raw_snapshot, counters=counters)

    assert bundle.portfolio.total_clients == 50
    assert bundle.performance.par == 10
    assert bundle.performance.collection_efficiency == 25
    assert bundle.performance.average_loan_size == 400
    # Financial summaries still come from the snapshot
    assert bundle.financial.usd.total_savings == 500


def test_refresh_malformed_snapshot():
    """Test garbage values degrade to zero instead of failing the refresh"""
    bundle = refresh(
        {
            "savings_accounts": [{"balance": None}, {"balance": "n/a", "currency": 5}],
            "transactions": [None, {"type": None, "amount": "x"}, "fee", {"type": "fee", "amount": 1}],
            "loans": [{"status": None, "amount": {}}],
            "clients": [{"total_dues": "?"}, None],
            "revenues": [{"amount": 5, "description": 123}, 42],
        }
    )

    assert bundle.financial.combined.total_savings == 0
    assert bundle.financial.combined.grand_total == 0
    assert bundle.portfolio.distribution.active == 0
    assert bundle.performance.par == 0
    assert bundle.financial.usd.total_fines == 1
    assert bundle.revenue.count == 1
    assert bundle.revenue.revenues[0].description == "123"


@patch("microfinance_core.services.refresh.log_refresh")
def test_refresh_logs_outcome(mock_log, raw_snapshot):
    refresh(raw_snapshot)

    mock_log.assert_called_once()
    generation, counts, client_count, _ = mock_log.call_args[0]
    assert generation == 7
    assert counts["savings_balance"] == 3
    assert client_count == 3


def test_latest_result_gate_drops_stale_results(raw_snapshot):
    """Test an older refresh finishing last does not overwrite the newer one"""
    gate = LatestResultGate()
    first = gate.next_generation()
    second = gate.next_generation()

    newer = refresh({**raw_snapshot, "generation": second})
    older = refresh({**raw_snapshot, "generation": first, "savings_accounts": []})

    assert gate.accept(newer) is True
    assert gate.accept(older) is False
    assert gate.current is newer


def test_latest_result_gate_in_order(raw_snapshot):
    gate = LatestResultGate()
    assert gate.current is None

    bundle = refresh({**raw_snapshot, "generation": gate.next_generation()})

    assert gate.accept(bundle) is True
    assert gate.current.financial.usd.total_savings == 500
