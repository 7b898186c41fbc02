"""Metrics contract tests for the Order Entry service.

Metric names and labels are consumed by dashboards and alerts; renaming
one here is a breaking change.
"""

from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from apps.order_entry import metrics
from apps.order_entry.coordinator import OrderLifecycleCoordinator
from apps.order_entry.exceptions import (
    DownstreamUnavailableError,
    InvalidFundError,
    InvalidTransitionError,
)
from apps.order_entry.legacy_simulator import LegacyExecutionSimulator

EXPECTED_METRIC_NAMES = [
    "order_entry_orders_total",
    "order_entry_cancellations_total",
    "order_entry_execution_duration_seconds",
    "order_entry_execution_queue_depth",
    "order_entry_store_connection_status",
]

EXPECTED_METRIC_LABELS = {
    "order_entry_orders_total": ["status"],
    "order_entry_cancellations_total": ["result"],
    "order_entry_execution_duration_seconds": [],
    "order_entry_execution_queue_depth": [],
    "order_entry_store_connection_status": [],
}


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_metric_names_registry_matches_contract():
    assert metrics.METRIC_NAMES == EXPECTED_METRIC_NAMES


def test_metric_labels_registry_matches_contract():
    assert metrics.METRIC_LABELS == EXPECTED_METRIC_LABELS


@pytest.mark.parametrize(
    ("metric", "name"),
    [
        (metrics.orders_total, "order_entry_orders"),
        (metrics.cancellations_total, "order_entry_cancellations"),
        (metrics.execution_duration_seconds, "order_entry_execution_duration_seconds"),
        (metrics.execution_queue_depth, "order_entry_execution_queue_depth"),
        (metrics.store_connection_status, "order_entry_store_connection_status"),
    ],
)
def test_metric_objects_are_registered(metric, name):
    # prometheus_client strips the _total suffix from counter names
    assert metric._name == name


@pytest.mark.asyncio()
async def test_lifecycle_outcomes_are_counted(coordinator: OrderLifecycleCoordinator):
    submitted = _sample("order_entry_orders_total", status="submitted")
    completed = _sample("order_entry_orders_total", status="completed")
    rejected = _sample("order_entry_orders_total", status="rejected")

    await coordinator.place_order("FundA", "Buy", 1)
    with pytest.raises(InvalidFundError):
        await coordinator.create_order("FundX", "Buy", 1)

    assert _sample("order_entry_orders_total", status="submitted") == submitted + 1
    assert _sample("order_entry_orders_total", status="completed") == completed + 1
    assert _sample("order_entry_orders_total", status="rejected") == rejected + 1


@pytest.mark.asyncio()
async def test_cancellations_are_counted_by_result(coordinator: OrderLifecycleCoordinator):
    cancelled = _sample("order_entry_cancellations_total", result="cancelled")
    invalid = _sample("order_entry_cancellations_total", result="invalid_transition")

    order = await coordinator.create_order("FundB", "Sell", 1)
    await coordinator.cancel_order(order.id)
    with pytest.raises(InvalidTransitionError):
        await coordinator.cancel_order(order.id)

    assert _sample("order_entry_cancellations_total", result="cancelled") == cancelled + 1
    assert (
        _sample("order_entry_cancellations_total", result="invalid_transition") == invalid + 1
    )


@pytest.mark.asyncio()
async def test_failed_counted_only_when_failure_is_recorded(
    coordinator: OrderLifecycleCoordinator,
):
    failed = _sample("order_entry_orders_total", status="failed")
    order = await coordinator.create_order("FundC", "Buy", 1)

    # Order is still Submitted, so the Executed -> Failed write misses
    await coordinator._record_failure(order.id, "timed out")

    assert _sample("order_entry_orders_total", status="failed") == failed


@pytest.mark.asyncio()
async def test_failed_counted_on_downstream_failure(store, clock):
    simulator = LegacyExecutionSimulator(latency=0.0, failure_rate=1.0)
    coordinator = OrderLifecycleCoordinator(store, simulator, clock=clock)
    failed = _sample("order_entry_orders_total", status="failed")

    with pytest.raises(DownstreamUnavailableError):
        await coordinator.place_order("FundA", "Sell", 1)

    assert _sample("order_entry_orders_total", status="failed") == failed + 1
