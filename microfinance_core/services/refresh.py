"""Report refresh - recompute every summary and report from one snapshot"""

import time
from typing import Any, Mapping, Optional, Union

from microfinance_core.domain.aggregation import summarize
from microfinance_core.domain.models import PortfolioCounters
from microfinance_core.domain.reports import derive_portfolio_counters
from microfinance_core.infrastructure.observability.logging import log_refresh
from microfinance_core.infrastructure.observability.metrics import record_refresh
from microfinance_core.ingest.normalize import normalize_snapshot, record_type_counts
from microfinance_core.ingest.schemas import RefreshSnapshot
from microfinance_core.reporting.assembler import assemble_reports
from microfinance_core.reporting.schemas import ReportBundle


def refresh(
    snapshot: Union[RefreshSnapshot, Mapping[str, Any]],
    counters: Optional[PortfolioCounters] = None,
) -> ReportBundle:
    """
    Recompute all reports from scratch.

    Flow:
    1. Normalize raw records (bad numbers -> 0, unknown currency -> USD)
    2. Partition by currency and summarize each bucket plus the combined view
    3. Derive portfolio counters from loan statuses, unless the caller supplied them
    4. Assemble the financial, portfolio, revenue and performance reports

    The same snapshot always yields the same bundle, so a scheduler can call
    this on every tick. The snapshot's generation token is copied to the
    result so the caller can drop stale results (see LatestResultGate).
    """
    start_time = time.time()

    if not isinstance(snapshot, RefreshSnapshot):
        snapshot = RefreshSnapshot.model_validate(snapshot)

    normalized = normalize_snapshot(snapshot)
    summaries = summarize(normalized.records, normalized.clients)
    if counters is None:
        counters = derive_portfolio_counters(normalized.loans, normalized.records, normalized.total_clients)

    bundle = assemble_reports(summaries, counters, normalized.revenues, generation=snapshot.generation)

    duration = time.time() - start_time
    counts = record_type_counts(normalized.records)
    record_refresh(duration, counts)
    log_refresh(snapshot.generation, counts, len(normalized.clients), duration * 1000)

    return bundle


class LatestResultGate:
    """
    Caller-side guard for overlapping refreshes: the latest request wins.

    Issue a generation with next_generation() before each fetch, put it on
    the snapshot, and pass every finished bundle through accept(). Bundles
    from a request older than the newest one issued are rejected, whatever
    order they finish in.
    """

    def __init__(self) -> None:
        self._requested = 0
        self._current: Optional[ReportBundle] = None

    @property
    def current(self) -> Optional[ReportBundle]:
        return self._current

    def next_generation(self) -> int:
        self._requested += 1
        return self._requested

    def accept(self, bundle: ReportBundle) -> bool:
        if bundle.generation < self._requested:
            return False
        self._requested = bundle.generation
        self._current = bundle
        return True
