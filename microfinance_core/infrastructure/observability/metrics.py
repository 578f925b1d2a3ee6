"""Prometheus metrics for refresh throughput, rejected inputs and dues activity"""

from typing import Mapping

from prometheus_client import Counter, Histogram

# Refresh metrics
refresh_counter = Counter(
    "microfinance_refresh_total",
    "Report refreshes completed",
)

refresh_duration_histogram = Histogram(
    "microfinance_refresh_duration_seconds",
    "Time spent recomputing all reports from a snapshot",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

records_normalized_counter = Counter(
    "microfinance_records_normalized_total",
    "Financial records produced by snapshot normalization",
    ["type"],  # RecordType value
)

# Input metrics
validation_failure_counter = Counter(
    "microfinance_validation_failures_total",
    "Inputs rejected by validation",
    ["operation", "field"],
)

loan_quote_counter = Counter(
    "microfinance_loan_quotes_total",
    "Loan terms computed",
    ["loan_type"],
)

dues_payment_counter = Counter(
    "microfinance_dues_payments_total",
    "Dues payments applied",
    ["currency", "outcome"],  # outcome: partial | settled
)


def record_refresh(duration_seconds: float, record_counts: Mapping[str, int]) -> None:
    """Record one completed refresh and the records it consumed"""
    refresh_counter.inc()
    refresh_duration_histogram.observe(duration_seconds)
    for record_type, count in record_counts.items():
        records_normalized_counter.labels(type=record_type).inc(count)


def record_validation_failure(operation: str, errors: Mapping[str, str]) -> None:
    """One increment per offending field, so dashboards can rank the worst fields"""
    for field_name in errors or {"unknown": ""}:
        validation_failure_counter.labels(operation=operation, field=field_name).inc()


def record_dues_payment(currency: str, settled: bool) -> None:
    dues_payment_counter.labels(currency=currency, outcome="settled" if settled else "partial").inc()
