"""Prometheus metrics for monitoring ingestion outcomes, mapping latency, and stored volume"""

from prometheus_client import Counter, Histogram, Gauge

INGESTION_OUTCOMES = ("created", "conflict", "invalid_format", "parse_error", "rejected_upload", "error")

# Ingestion metrics
ingestion_counter = Counter(
    "credit_report_ingestion_total",
    "Credit report ingestions by outcome",
    ["outcome"],  # created | conflict | invalid_format | parse_error | rejected_upload | error
)

mapping_duration_histogram = Histogram(
    "credit_report_mapping_seconds",
    "Time spent parsing and mapping one XML document",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

stored_reports_gauge = Gauge(
    "credit_reports_stored",
    "Stored credit reports as of the last summary computation",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ingestion(outcome: str) -> None:
    """Record one ingestion attempt"""
    if outcome not in INGESTION_OUTCOMES:
        outcome = "error"
    ingestion_counter.labels(outcome=outcome).inc()
