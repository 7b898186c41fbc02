"""Shared pytest fixtures for order_entry tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from apps.order_entry.app_context import AppContext, build_context
from apps.order_entry.config import OrderEntryConfig
from apps.order_entry.coordinator import OrderLifecycleCoordinator
from apps.order_entry.legacy_simulator import LegacyExecutionSimulator
from apps.order_entry.main import create_app
from apps.order_entry.schemas import FundName, Order, OrderStatus, TransactionType
from apps.order_entry.store import InMemoryOrderStore

FAST_LATENCY = 0.01


class SteppingClock:
    """Deterministic clock: each call returns a time one second after the last."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 10, 17, 16, 30, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def make_order(
    order_id: str = "order-1",
    *,
    status: OrderStatus = OrderStatus.SUBMITTED,
    quantity: Decimal = Decimal("10"),
    created_at: datetime | None = None,
) -> Order:
    """Build an Order directly, bypassing the coordinator."""
    return Order(
        id=order_id,
        fund_name=FundName.FUND_A,
        transaction_type=TransactionType.BUY,
        quantity=quantity,
        order_value=quantity * Decimal("100"),
        status=status,
        created_at=created_at or datetime(2024, 10, 17, 16, 30, tzinfo=UTC),
    )


@pytest.fixture()
def store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture()
def simulator() -> LegacyExecutionSimulator:
    return LegacyExecutionSimulator(latency=FAST_LATENCY)


@pytest.fixture()
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture()
def coordinator(
    store: InMemoryOrderStore, simulator: LegacyExecutionSimulator, clock: SteppingClock
) -> OrderLifecycleCoordinator:
    return OrderLifecycleCoordinator(
        store, simulator, execution_timeout_seconds=1.0, clock=clock
    )


@pytest.fixture()
def test_config() -> OrderEntryConfig:
    return OrderEntryConfig(
        legacy_latency_seconds=FAST_LATENCY,
        legacy_timeout_seconds=1.0,
    )


@pytest.fixture()
def app_context(
    test_config: OrderEntryConfig,
    store: InMemoryOrderStore,
    simulator: LegacyExecutionSimulator,
) -> AppContext:
    return build_context(test_config, store=store, simulator=simulator)


@pytest.fixture()
def client(app_context: AppContext, test_config: OrderEntryConfig):
    app = create_app(context=app_context, config=test_config)
    with TestClient(app) as test_client:
        yield test_client
