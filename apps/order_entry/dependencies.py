"""FastAPI dependency providers for the Order Entry service.

Usage:
    from apps.order_entry.dependencies import get_context, get_coordinator

    @router.get("/example")
    async def example_route(coordinator: OrderLifecycleCoordinator = Depends(get_coordinator)):
        return await coordinator.list_orders()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from fastapi import Request

if TYPE_CHECKING:
    from apps.order_entry.app_context import AppContext
    from apps.order_entry.config import OrderEntryConfig
    from apps.order_entry.coordinator import OrderLifecycleCoordinator


def get_context(request: Request) -> AppContext:
    """Get the AppContext stored on app.state during startup.

    Raises:
        RuntimeError: If the lifespan did not initialize app.state.context
    """
    ctx = getattr(request.app.state, "context", None)
    if ctx is None:
        raise RuntimeError(
            "AppContext not initialized in app.state. The lifespan handler in "
            "apps.order_entry.main sets it before routes are served."
        )
    return cast("AppContext", ctx)


def get_config(request: Request) -> OrderEntryConfig:
    """Get the OrderEntryConfig stored on app.state during startup.

    Raises:
        RuntimeError: If the lifespan did not initialize app.state.config
    """
    config = getattr(request.app.state, "config", None)
    if config is None:
        raise RuntimeError("OrderEntryConfig not initialized in app.state.")
    return cast("OrderEntryConfig", config)


def get_coordinator(request: Request) -> OrderLifecycleCoordinator:
    """Shortcut dependency for the lifecycle coordinator."""
    return get_context(request).coordinator
