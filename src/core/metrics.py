"""Prometheus metrics for the eligibility engine.

Metrics are organized into two categories:

Business Metrics (for Product/Risk):
- eligibility_decision_total: Decisions by outcome
- eligibility_limit_bucket_total: Recommended limits by bucket
- eligibility_risk_score: Distribution of risk scores
- eligibility_fraud_veto_total: Applications vetoed by critical fraud flags

Technical Metrics (for Engineering/SRE):
- eligibility_scoring_latency_seconds: End-to-end assessment latency
- eligibility_data_fetch_total / _failures_total / _latency_seconds: Data provider health
- eligibility_sink_write_total: Result sink writes by status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest

from src.service.scoring.credit_limit import get_credit_limit_bucket


# =============================================================================
# Business Metrics (Product/Risk dashboards)
# =============================================================================

decision_total = Counter(
    "eligibility_decision_total",
    "Total number of eligibility decisions made",
    ["outcome", "model_version"],  # approve, reject
)

limit_bucket_total = Counter(
    "eligibility_limit_bucket_total",
    "Recommended credit limits by bucket",
    ["bucket"],
)

risk_score_histogram = Histogram(
    "eligibility_risk_score",
    "Distribution of composite risk scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
)

fraud_veto_total = Counter(
    "eligibility_fraud_veto_total",
    "Applications rejected outright by a critical fraud flag",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

scoring_latency = Histogram(
    "eligibility_scoring_latency_seconds",
    "Assessment latency in seconds, fetch included",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

data_fetch_latency = Histogram(
    "eligibility_data_fetch_latency_seconds",
    "Financial data fetch latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

data_fetch_total = Counter(
    "eligibility_data_fetch_total",
    "Total number of financial data fetches",
    ["status"],  # success, failure
)

data_fetch_failures = Counter(
    "eligibility_data_fetch_failures_total",
    "Total number of financial data fetch failures",
    ["error_type"],  # timeout, error, not_found
)

sink_write_total = Counter(
    "eligibility_sink_write_total",
    "Result sink writes by status",
    ["status"],  # success, failure
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_decision(
    approved: bool,
    risk_score: int,
    recommended_limit: int | None,
    model_version: str,
) -> None:
    """Record an eligibility decision in metrics."""
    outcome = "approve" if approved else "reject"
    decision_total.labels(outcome=outcome, model_version=model_version).inc()
    risk_score_histogram.observe(risk_score)
    limit_bucket_total.labels(bucket=get_credit_limit_bucket(recommended_limit)).inc()


def record_fraud_veto() -> None:
    """Record an application vetoed by a critical fraud flag."""
    fraud_veto_total.inc()


@contextmanager
def track_scoring_latency() -> Generator[None, None, None]:
    """Context manager to track assessment latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        scoring_latency.observe(time.perf_counter() - start)


@contextmanager
def track_data_fetch_latency() -> Generator[None, None, None]:
    """Context manager to track financial data fetch latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        data_fetch_latency.observe(time.perf_counter() - start)


def record_data_fetch_success() -> None:
    """Record a successful financial data fetch."""
    data_fetch_total.labels(status="success").inc()


def record_data_fetch_failure(error_type: str) -> None:
    """Record a financial data fetch failure."""
    data_fetch_total.labels(status="failure").inc()
    data_fetch_failures.labels(error_type=error_type).inc()


def record_sink_write(success: bool) -> None:
    """Record a result sink write attempt."""
    sink_write_total.labels(status="success" if success else "failure").inc()


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)

