"""
Pydantic schemas for the Order Entry API.

Field names are snake_case in Python and camelCase on the wire
(fundName, transactionType, orderValue, createdAt).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from libs.common.schemas import TimestampSerializerMixin

# ============================================================================
# Enumerations
# ============================================================================


class FundName(str, Enum):
    """Funds that accept orders (see config.universe.TRADABLE_FUNDS)."""

    FUND_A = "FundA"
    FUND_B = "FundB"
    FUND_C = "FundC"


class TransactionType(str, Enum):
    """Order direction."""

    BUY = "Buy"
    SELL = "Sell"


class OrderStatus(str, Enum):
    """
    Order lifecycle states.

    SUBMITTED: created, not yet handed to the legacy system (cancellable)
    EXECUTED: claimed by the execution slot, downstream call in flight
    COMPLETED: legacy system confirmed execution (terminal)
    CANCELLED: cancelled by the user before execution (terminal)
    FAILED: downstream call failed or timed out (terminal)
    """

    SUBMITTED = "Submitted"
    CANCELLED = "Cancelled"
    EXECUTED = "Executed"
    COMPLETED = "Completed"
    FAILED = "Failed"


# Allowed transitions; anything not listed is rejected by the coordinator
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.SUBMITTED: frozenset({OrderStatus.CANCELLED, OrderStatus.EXECUTED}),
    OrderStatus.EXECUTED: frozenset({OrderStatus.COMPLETED, OrderStatus.FAILED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.FAILED: frozenset(),
}


def is_allowed_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """Return True if the lifecycle graph has an edge current -> target."""
    return target in ALLOWED_TRANSITIONS[current]


def _decimal_to_number(value: Decimal) -> int | float:
    """JSON-friendly number: integral values as int, others as float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# ============================================================================
# Order Schemas
# ============================================================================


class OrderCreateRequest(BaseModel):
    """
    Request body for POST /api/orders.

    Fields are untyped here; the coordinator validates them and raises the
    typed errors that map to 400 responses.

    Example:
        >>> OrderCreateRequest.model_validate(
        ...     {"fundName": "FundA", "transactionType": "Buy", "quantity": 10}
        ... )
    """

    fund_name: Any = Field(default=None, alias="fundName", description="Fund to trade")
    transaction_type: Any = Field(
        default=None, alias="transactionType", description="Buy or Sell"
    )
    quantity: Any = Field(default=None, description="Units to trade (must be positive)")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [{"fundName": "FundA", "transactionType": "Buy", "quantity": 10}]
        },
    )


class Order(BaseModel):
    """
    Order record as stored and as returned by the API.

    Attributes:
        id: Unique identifier assigned at creation
        fund_name: Fund being traded (immutable)
        transaction_type: Buy or Sell (immutable)
        quantity: Units ordered (immutable, positive)
        order_value: quantity x unit price at creation (immutable)
        status: Current lifecycle status
        created_at: Creation timestamp (UTC), sort key for listings
    """

    id: str
    fund_name: FundName = Field(alias="fundName")
    transaction_type: TransactionType = Field(alias="transactionType")
    quantity: Decimal = Field(gt=0)
    order_value: Decimal = Field(alias="orderValue")
    status: OrderStatus = OrderStatus.SUBMITTED
    created_at: datetime = Field(alias="createdAt")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "5b0f4f0c-4e53-4a53-9a57-1f6c1f2f5d10",
                    "fundName": "FundA",
                    "transactionType": "Buy",
                    "quantity": 10,
                    "orderValue": 1000,
                    "status": "Completed",
                    "createdAt": "2024-10-17T16:30:00Z",
                }
            ]
        },
    )

    @field_serializer("quantity", "order_value", when_used="json")
    def serialize_amount(self, value: Decimal) -> int | float:
        return _decimal_to_number(value)

    @field_serializer("created_at", when_used="json")
    def serialize_created_at(self, value: datetime) -> str:
        return value.isoformat().replace("+00:00", "Z")

    def with_status(self, status: OrderStatus) -> Order:
        """Return a copy of this order carrying status; all other fields unchanged."""
        return self.model_copy(update={"status": status})


# ============================================================================
# Response Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Error body returned for every 4xx/5xx produced by the service."""

    message: str

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"message": "Order cannot be cancelled"}]}
    )


class HealthResponse(TimestampSerializerMixin, BaseModel):
    """Health check response."""

    status: str  # "healthy", "degraded", "unhealthy"
    service: str
    version: str
    store_backend: str
    store_connected: bool
    execution_queue_depth: int
    timestamp: datetime
    details: dict[str, Any] | None = None
