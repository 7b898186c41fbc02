"""Application context for dependency injection in the Order Entry service.

AppContext holds the service's collaborators so route handlers receive them
explicitly and tests can inject fakes.

Usage:
    async def my_route(ctx: AppContext = Depends(get_context)):
        orders = await ctx.coordinator.list_orders()
"""

from __future__ import annotations

from dataclasses import dataclass

from apps.order_entry.config import OrderEntryConfig
from apps.order_entry.coordinator import OrderLifecycleCoordinator
from apps.order_entry.legacy_simulator import LegacyExecutionSimulator
from apps.order_entry.store import InMemoryOrderStore, OrderStoreProtocol


@dataclass
class AppContext:
    """Container for the service's runtime dependencies.

    Attributes:
        store: Order store (in-memory or PostgreSQL)
        simulator: Legacy execution simulator
        coordinator: Order lifecycle coordinator wired to store and simulator
    """

    store: OrderStoreProtocol
    simulator: LegacyExecutionSimulator
    coordinator: OrderLifecycleCoordinator

    def close(self) -> None:
        """Release resources held by the store."""
        self.store.close()


def build_store(config: OrderEntryConfig) -> OrderStoreProtocol:
    """Create the store selected by config.store_backend."""
    if config.store_backend == "postgres":
        from apps.order_entry.database import PostgresOrderStore

        return PostgresOrderStore(config.database_url)
    return InMemoryOrderStore()


def build_context(
    config: OrderEntryConfig,
    *,
    store: OrderStoreProtocol | None = None,
    simulator: LegacyExecutionSimulator | None = None,
) -> AppContext:
    """Wire an AppContext from config, using any collaborators passed in.

    Args:
        config: Service configuration
        store: Optional store override (tests)
        simulator: Optional simulator override (tests)

    Returns:
        AppContext with a coordinator bound to the chosen store and simulator
    """
    store = store if store is not None else build_store(config)
    simulator = (
        simulator
        if simulator is not None
        else LegacyExecutionSimulator(
            latency=config.legacy_latency_seconds,
            failure_rate=config.legacy_failure_rate,
        )
    )
    coordinator = OrderLifecycleCoordinator(
        store,
        simulator,
        funds=config.funds,
        unit_price=config.unit_price,
        execution_timeout_seconds=config.legacy_timeout_seconds,
    )
    return AppContext(store=store, simulator=simulator, coordinator=coordinator)
