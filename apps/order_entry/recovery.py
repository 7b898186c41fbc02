"""
Startup recovery for orders stranded mid-execution.

An order rests in Executed only while its legacy call is in flight. If the
process dies in that window the downstream outcome is unknown, so on the
next startup such orders are moved to Failed. Each move is a compare-and-set
from Executed, which makes recovery safe to run more than once.
"""

from __future__ import annotations

import logging

from apps.order_entry.schemas import OrderStatus
from apps.order_entry.store import OrderStoreProtocol

logger = logging.getLogger(__name__)


class OrderRecoveryManager:
    """
    Reconciles orders left in a transient state by a previous process.

    Example:
        >>> recovery = OrderRecoveryManager(store)
        >>> recovered = recovery.fail_stranded_executions()
        >>> len(recovered)
        0
    """

    def __init__(self, store: OrderStoreProtocol) -> None:
        self._store = store

    def fail_stranded_executions(self) -> list[str]:
        """
        Move every order still in Executed to Failed.

        Must run before the service accepts submissions; afterwards an
        Executed order belongs to a live execution.

        Returns:
            Ids of orders moved to Failed
        """
        stranded = self._store.find_by_status(OrderStatus.EXECUTED)
        if not stranded:
            logger.info("No stranded executions found")
            return []

        recovered: list[str] = []
        for order in stranded:
            updated = self._store.update_status(
                order.id, OrderStatus.FAILED, expected_status=OrderStatus.EXECUTED
            )
            if updated is None:
                continue
            recovered.append(order.id)
            logger.warning(
                f"AUDIT: Order {order.id} failed during recovery",
                extra={"order_id": order.id, "reason": "execution outcome unknown after restart"},
            )

        logger.info("Stranded execution recovery complete", extra={"recovered": len(recovered)})
        return recovered
