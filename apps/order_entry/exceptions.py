"""
Exception hierarchy for the Order Entry service.

Every error the order lifecycle can raise is typed so the API layer maps it
to a status code without inspecting messages:

- OrderValidationError (400): bad client input, raised before any persistence
- OrderNotFoundError (404): lookup miss
- InvalidTransitionError (400): lifecycle guard violation
- DownstreamUnavailableError (500): legacy execution failed or timed out;
  the order has already been recorded as Failed when this is raised
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from libs.common.exceptions import TradingPlatformError

if TYPE_CHECKING:
    from apps.order_entry.schemas import OrderStatus


class OrderEntryError(TradingPlatformError):
    """Base exception for Order Entry errors."""

    pass


# ============================================================================
# Validation
# ============================================================================


class OrderValidationError(OrderEntryError):
    """Client input rejected before an order was created.

    Attributes:
        field: Wire name of the offending field
        value: The rejected value
    """

    field: str = ""
    public_message: str = "Invalid order"

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"{self.public_message}: {self.field}={value!r}")


class InvalidFundError(OrderValidationError):
    """fundName is not in the tradable fund universe."""

    field = "fundName"
    public_message = "Invalid Security Name"


class InvalidTransactionTypeError(OrderValidationError):
    """transactionType is not Buy or Sell."""

    field = "transactionType"
    public_message = "Invalid Transaction Type"


class InvalidQuantityError(OrderValidationError):
    """quantity is not a finite positive number."""

    field = "quantity"
    public_message = "Invalid Quantity"


# ============================================================================
# Store / lifecycle
# ============================================================================


class OrderNotFoundError(OrderEntryError):
    """No order exists with the given identifier."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class DuplicateIdentifierError(OrderEntryError):
    """An order with the same identifier is already stored."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order already exists: {order_id}")


class InvalidTransitionError(OrderEntryError):
    """Requested status change is not allowed from the order's current status.

    Attributes:
        order_id: Order the transition was attempted on
        current_status: Status observed when the guard was evaluated
        target_status: Status the caller tried to move to
    """

    def __init__(
        self,
        order_id: str,
        current_status: OrderStatus,
        target_status: OrderStatus,
    ) -> None:
        self.order_id = order_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Order {order_id} cannot move from {current_status.value} to {target_status.value}"
        )


# ============================================================================
# Downstream execution
# ============================================================================


class LegacyRejectionError(OrderEntryError):
    """Legacy execution system rejected the order."""

    pass


class DownstreamUnavailableError(OrderEntryError):
    """Legacy execution failed or timed out; the order is now Failed.

    Attributes:
        order_id: Order whose execution failed
    """

    def __init__(self, order_id: str, reason: str) -> None:
        self.order_id = order_id
        self.reason = reason
        super().__init__(f"Execution of order {order_id} failed: {reason}")
