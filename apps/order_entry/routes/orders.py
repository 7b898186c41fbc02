"""
Order endpoints for the Order Entry service.

- POST /api/orders - Create an order and execute it through the legacy system
- GET /api/orders - List orders, newest first
- GET /api/orders/{order_id} - Get a single order
- POST /api/orders/{order_id}/cancel - Cancel a Submitted order

Domain errors raised by the coordinator are translated to HTTP responses by
the exception handlers registered in apps.order_entry.main.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from apps.order_entry.coordinator import OrderLifecycleCoordinator
from apps.order_entry.dependencies import get_coordinator
from apps.order_entry.schemas import ErrorResponse, Order, OrderCreateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Orders"])


@router.post(
    "/orders",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def create_order(
    payload: OrderCreateRequest,
    coordinator: OrderLifecycleCoordinator = Depends(get_coordinator),
) -> Order:
    """
    Create a trade order and submit it to the legacy system.

    The response is sent once the legacy system has answered, so the
    returned record is in its final state (Completed).

    Raises:
        InvalidFundError, InvalidTransactionTypeError, InvalidQuantityError: 400
        DownstreamUnavailableError: 500 (order recorded as Failed)
    """
    return await coordinator.place_order(
        payload.fund_name, payload.transaction_type, payload.quantity
    )


@router.get("/orders", response_model=list[Order])
async def list_orders(
    coordinator: OrderLifecycleCoordinator = Depends(get_coordinator),
) -> list[Order]:
    """List all orders, newest first, including cancelled and failed ones."""
    return await coordinator.list_orders()


@router.get(
    "/orders/{order_id}",
    response_model=Order,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_order(
    order_id: str,
    coordinator: OrderLifecycleCoordinator = Depends(get_coordinator),
) -> Order:
    """Get a single order by id."""
    return await coordinator.get_order(order_id)


@router.post(
    "/orders/{order_id}/cancel",
    response_model=Order,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def cancel_order(
    order_id: str,
    coordinator: OrderLifecycleCoordinator = Depends(get_coordinator),
) -> Order:
    """
    Cancel an order that has not yet reached the legacy system.

    Raises:
        OrderNotFoundError: 404
        InvalidTransitionError: 400 (already executing, completed, failed or cancelled)
    """
    return await coordinator.cancel_order(order_id)
