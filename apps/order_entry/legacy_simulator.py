"""
Simulated legacy trade-execution system.

The legacy system processes exactly one order at a time and answers within
a fixed SLA (1s by default). This simulator reproduces that contract:

- execute() awaits the configured latency, then reports the order Executed
- latency may be a constant or a callable for variable delays
- rejections can be injected with a failure rate or a predicate
- overlapping calls are detected and counted, since the real system would
  not tolerate them; callers are responsible for serializing access
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from apps.order_entry.exceptions import LegacyRejectionError
from apps.order_entry.schemas import Order, OrderStatus

logger = logging.getLogger(__name__)

LatencySource = float | Callable[[Order], float]


@dataclass(frozen=True)
class ExecutionReport:
    """Outcome reported by the legacy system for one order."""

    order_id: str
    status: OrderStatus
    started_at: datetime
    finished_at: datetime

    @property
    def latency_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()


class LegacyExecutionSimulator:
    """
    Single-threaded legacy execution stand-in.

    Attributes:
        in_flight: Number of execute() calls currently awaiting
        max_in_flight: Highest in_flight value observed
        overlap_count: Calls that started while another was in flight
        history: Most recent order ids (up to history_limit) in the order
            their execution started

    Example:
        >>> simulator = LegacyExecutionSimulator(latency=1.0)
        >>> report = await simulator.execute(order)
        >>> report.status
        <OrderStatus.EXECUTED: 'Executed'>
    """

    def __init__(
        self,
        latency: LatencySource = 1.0,
        failure_rate: float = 0.0,
        failure_predicate: Callable[[Order], bool] | None = None,
        rng: random.Random | None = None,
        history_limit: int = 1000,
    ) -> None:
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0.0 and 1.0")
        self._latency = latency
        self._failure_rate = failure_rate
        self._failure_predicate = failure_predicate
        self._rng = rng or random.Random()

        self.in_flight = 0
        self.max_in_flight = 0
        self.overlap_count = 0
        self.history: deque[str] = deque(maxlen=history_limit)

    def _latency_for(self, order: Order) -> float:
        if callable(self._latency):
            return max(0.0, float(self._latency(order)))
        return max(0.0, float(self._latency))

    def _should_reject(self, order: Order) -> bool:
        if self._failure_predicate is not None and self._failure_predicate(order):
            return True
        return self._failure_rate > 0.0 and self._rng.random() < self._failure_rate

    async def execute(self, order: Order) -> ExecutionReport:
        """
        Execute order downstream.

        Args:
            order: Order to execute (must already be claimed by the caller)

        Returns:
            ExecutionReport with status EXECUTED

        Raises:
            LegacyRejectionError: If the legacy system rejects the order
            asyncio.CancelledError: If the awaiting task is cancelled (timeout)
        """
        if self.in_flight > 0:
            self.overlap_count += 1
            logger.error(
                "Legacy system received overlapping execution request",
                extra={"order_id": order.id, "in_flight": self.in_flight},
            )

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.history.append(order.id)
        started_at = datetime.now(UTC)

        try:
            await asyncio.sleep(self._latency_for(order))
            if self._should_reject(order):
                raise LegacyRejectionError(f"Legacy system rejected order {order.id}")
        finally:
            self.in_flight -= 1

        report = ExecutionReport(
            order_id=order.id,
            status=OrderStatus.EXECUTED,
            started_at=started_at,
            finished_at=datetime.now(UTC),
        )
        logger.info(
            "Legacy system executed order",
            extra={"order_id": order.id, "latency_seconds": report.latency_seconds},
        )
        return report
