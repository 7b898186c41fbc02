"""
Order Store contract and in-memory implementation.

The store owns the durable representation of every order. It offers
create, point lookup, status update (optionally compare-and-set) and a
newest-first listing. It does not enforce the lifecycle graph; the
coordinator does, using expected_status to make check-and-update atomic.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from apps.order_entry.exceptions import DuplicateIdentifierError, OrderNotFoundError
from apps.order_entry.schemas import Order, OrderStatus

logger = logging.getLogger(__name__)


class OrderStoreProtocol(Protocol):
    """Protocol for order persistence.

    Lets the coordinator and API depend on the contract rather than a
    concrete backend, and lets tests swap in the in-memory store.
    """

    backend_name: str

    def persist(self, order: Order) -> Order:
        """Insert a new order; raise DuplicateIdentifierError if the id exists."""
        ...

    def get(self, order_id: str) -> Order:
        """Return the order; raise OrderNotFoundError on miss."""
        ...

    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        *,
        expected_status: OrderStatus | None = None,
    ) -> Order | None:
        """Set status atomically and return the updated order.

        With expected_status, the update applies only if the current status
        matches; otherwise nothing changes and None is returned.
        """
        ...

    def list_all(self) -> list[Order]:
        """Return every order, newest first."""
        ...

    def find_by_status(self, status: OrderStatus) -> list[Order]:
        """Return orders currently in status, newest first."""
        ...

    def count(self) -> int:
        """Return the number of stored orders."""
        ...

    def check_connection(self) -> bool:
        """Return True if the backend is reachable."""
        ...

    def close(self) -> None:
        """Release backend resources."""
        ...


class InMemoryOrderStore:
    """
    Thread-safe in-memory order store.

    Records are kept in a dict keyed by order id and guarded by a single
    lock, which makes each operation (including the compare-and-set) atomic
    across threads. Orders are pydantic models copied on the way in and out,
    so callers never hold a reference to stored state.

    Example:
        >>> store = InMemoryOrderStore()
        >>> store.persist(order)
        >>> store.update_status(order.id, OrderStatus.CANCELLED,
        ...                     expected_status=OrderStatus.SUBMITTED)
    """

    backend_name = "memory"

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.Lock()

    def persist(self, order: Order) -> Order:
        with self._lock:
            if order.id in self._orders:
                logger.warning("Order already exists: %s", order.id, extra={"order_id": order.id})
                raise DuplicateIdentifierError(order.id)
            self._orders[order.id] = order.model_copy()
        return order.model_copy()

    def get(self, order_id: str) -> Order:
        with self._lock:
            order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order.model_copy()

    def update_status(
        self,
        order_id: str,
        status: OrderStatus,
        *,
        expected_status: OrderStatus | None = None,
    ) -> Order | None:
        with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                raise OrderNotFoundError(order_id)
            if expected_status is not None and current.status != expected_status:
                return None
            updated = current.with_status(status)
            self._orders[order_id] = updated
        return updated.model_copy()

    def list_all(self) -> list[Order]:
        with self._lock:
            orders = list(self._orders.values())
        return [o.model_copy() for o in sorted(orders, key=lambda o: o.created_at, reverse=True)]

    def find_by_status(self, status: OrderStatus) -> list[Order]:
        return [o for o in self.list_all() if o.status == status]

    def count(self) -> int:
        with self._lock:
            return len(self._orders)

    def check_connection(self) -> bool:
        return True

    def close(self) -> None:
        pass
