"""Fund listing endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from apps.order_entry.coordinator import OrderLifecycleCoordinator
from apps.order_entry.dependencies import get_coordinator

router = APIRouter(prefix="/api", tags=["Funds"])


@router.get("/funds", response_model=list[str])
async def list_funds(
    coordinator: OrderLifecycleCoordinator = Depends(get_coordinator),
) -> list[str]:
    """Return the names of funds that accept orders."""
    return coordinator.funds
