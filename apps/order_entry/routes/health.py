"""Health check and root endpoints."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends

from apps.order_entry import __version__, metrics
from apps.order_entry.app_context import AppContext
from apps.order_entry.config import OrderEntryConfig
from apps.order_entry.dependencies import get_config, get_context
from apps.order_entry.schemas import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/")
async def root(config: OrderEntryConfig = Depends(get_config)) -> dict[str, Any]:
    """Root endpoint with basic service information."""
    return {
        "service": "order_entry",
        "version": __version__,
        "status": "running",
        "environment": config.environment,
        "docs": "/api-docs",
    }


@router.get("/health", response_model=HealthResponse)
async def health_check(ctx: AppContext = Depends(get_context)) -> HealthResponse:
    """
    Health check endpoint.

    healthy: store reachable
    unhealthy: store unreachable (orders can be neither created nor updated)
    """
    store_connected = await asyncio.to_thread(ctx.store.check_connection)
    metrics.store_connection_status.set(1 if store_connected else 0)

    return HealthResponse(
        status="healthy" if store_connected else "unhealthy",
        service="order_entry",
        version=__version__,
        store_backend=ctx.store.backend_name,
        store_connected=store_connected,
        execution_queue_depth=ctx.coordinator.queue_depth,
        timestamp=datetime.now(UTC),
        details={
            "legacy_in_flight": ctx.simulator.in_flight,
            "legacy_overlaps": ctx.simulator.overlap_count,
        },
    )
