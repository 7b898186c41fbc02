"""Prometheus metrics definitions for the Order Entry service.

Usage:
    from apps.order_entry.metrics import orders_total

    orders_total.labels(status="completed").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ============================================================================
# Business Metrics
# ============================================================================

orders_total = Counter(
    "order_entry_orders_total",
    "Orders by lifecycle outcome",
    ["status"],  # status: submitted, completed, failed, rejected
)

cancellations_total = Counter(
    "order_entry_cancellations_total",
    "Cancellation requests by result",
    ["result"],  # result: cancelled, not_found, invalid_transition
)

execution_duration_seconds = Histogram(
    "order_entry_execution_duration_seconds",
    "Time spent in the legacy execution call",
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

execution_queue_depth = Gauge(
    "order_entry_execution_queue_depth",
    "Orders waiting for or holding the legacy execution slot",
)

# ============================================================================
# Service Health Metrics
# ============================================================================

store_connection_status = Gauge(
    "order_entry_store_connection_status",
    "Order store connection status (1=up, 0=down)",
)


def initialize_metrics() -> None:
    """Set gauge defaults at startup; the health check updates them afterwards."""
    execution_queue_depth.set(0)
    store_connection_status.set(0)


# Registry for contract tests; renaming a metric breaks dashboards
METRIC_NAMES = [
    "order_entry_orders_total",
    "order_entry_cancellations_total",
    "order_entry_execution_duration_seconds",
    "order_entry_execution_queue_depth",
    "order_entry_store_connection_status",
]

METRIC_LABELS = {
    "order_entry_orders_total": ["status"],
    "order_entry_cancellations_total": ["result"],
    "order_entry_execution_duration_seconds": [],
    "order_entry_execution_queue_depth": [],
    "order_entry_store_connection_status": [],
}
