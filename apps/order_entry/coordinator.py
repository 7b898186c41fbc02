"""
Order lifecycle coordinator.

Owns every status transition of an order and its ordering against the
legacy execution system:

    Submitted --cancel--> Cancelled
    Submitted --claim--> Executed --success--> Completed
                                  --failure/timeout--> Failed

Rules enforced here:
1. Input is validated before anything is persisted
2. Only one order is inside the legacy system at a time; submissions queue
   for the execution slot in arrival order
3. An order is claimed (Submitted -> Executed) only once it holds the slot,
   so queued orders stay cancellable and in-flight ones do not
4. Every transition is a compare-and-set against the store; when a
   cancellation and an execution race, whichever commits first wins and the
   other fails with InvalidTransitionError
5. On downstream failure the order is written as Failed *before*
   DownstreamUnavailableError propagates
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
import uuid
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from numbers import Real

from apps.order_entry import metrics
from apps.order_entry.exceptions import (
    DownstreamUnavailableError,
    InvalidFundError,
    InvalidQuantityError,
    InvalidTransactionTypeError,
    InvalidTransitionError,
    LegacyRejectionError,
    OrderNotFoundError,
)
from apps.order_entry.legacy_simulator import LegacyExecutionSimulator
from apps.order_entry.schemas import (
    FundName,
    Order,
    OrderStatus,
    TransactionType,
    is_allowed_transition,
)
from apps.order_entry.store import OrderStoreProtocol
from config.universe import TRADABLE_FUNDS

logger = logging.getLogger(__name__)

DEFAULT_UNIT_PRICE = Decimal("100")
DEFAULT_EXECUTION_TIMEOUT_SECONDS = 5.0


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_order_id() -> str:
    return str(uuid.uuid4())


class OrderLifecycleCoordinator:
    """
    Orchestrates orders from intake to a terminal state.

    Store calls are blocking (psycopg or a lock-guarded dict) and run in a
    worker thread so the event loop keeps serving other requests while one
    order waits on the legacy system.

    Example:
        >>> coordinator = OrderLifecycleCoordinator(InMemoryOrderStore(), LegacyExecutionSimulator())
        >>> order = await coordinator.create_order("FundA", "Buy", 10)
        >>> order.order_value
        Decimal('1000')
        >>> (await coordinator.submit_for_execution(order)).status
        <OrderStatus.COMPLETED: 'Completed'>
    """

    def __init__(
        self,
        store: OrderStoreProtocol,
        simulator: LegacyExecutionSimulator,
        *,
        funds: Iterable[str] = TRADABLE_FUNDS,
        unit_price: Decimal = DEFAULT_UNIT_PRICE,
        execution_timeout_seconds: float = DEFAULT_EXECUTION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_order_id,
    ) -> None:
        self._funds = frozenset(funds)
        unknown = self._funds - {f.value for f in FundName}
        if unknown:
            raise ValueError(f"Funds not representable as FundName: {sorted(unknown)}")
        if unit_price <= 0:
            raise ValueError("unit_price must be positive")
        if not math.isfinite(execution_timeout_seconds) or execution_timeout_seconds <= 0:
            raise ValueError("execution_timeout_seconds must be positive")

        self._store = store
        self._simulator = simulator
        self._unit_price = unit_price
        self._execution_timeout = execution_timeout_seconds
        self._clock = clock
        self._id_factory = id_factory

        # asyncio.Lock wakes waiters in FIFO order
        self._execution_slot = asyncio.Lock()
        self._queue_depth = 0

    @property
    def funds(self) -> list[str]:
        """Tradable fund names in enum declaration order."""
        return [f.value for f in FundName if f.value in self._funds]

    @property
    def queue_depth(self) -> int:
        """Submissions waiting for or holding the execution slot."""
        return self._queue_depth

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_fund(self, fund_name: object) -> FundName:
        if not isinstance(fund_name, str) or fund_name not in self._funds:
            raise InvalidFundError(fund_name)
        return FundName(fund_name)

    @staticmethod
    def _validate_transaction_type(transaction_type: object) -> TransactionType:
        try:
            return TransactionType(transaction_type)
        except ValueError:
            raise InvalidTransactionTypeError(transaction_type) from None

    @staticmethod
    def _validate_quantity(quantity: object) -> Decimal:
        # bool is a Real subclass but never a quantity; strings are not numbers
        if isinstance(quantity, bool) or not isinstance(quantity, (Real, Decimal)):
            raise InvalidQuantityError(quantity)
        if isinstance(quantity, float) and not math.isfinite(quantity):
            raise InvalidQuantityError(quantity)
        try:
            value = quantity if isinstance(quantity, Decimal) else Decimal(str(quantity))
        except InvalidOperation:
            raise InvalidQuantityError(quantity) from None
        if not value.is_finite() or value <= 0:
            raise InvalidQuantityError(quantity)
        return value

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def create_order(
        self, fund_name: object, transaction_type: object, quantity: object
    ) -> Order:
        """
        Validate input and persist a new order in Submitted state.

        Args:
            fund_name: Must be one of the tradable funds
            transaction_type: "Buy" or "Sell"
            quantity: Finite positive number

        Returns:
            The persisted order

        Raises:
            InvalidFundError, InvalidTransactionTypeError, InvalidQuantityError:
                Input rejected; nothing was persisted
        """
        try:
            fund = self._validate_fund(fund_name)
            side = self._validate_transaction_type(transaction_type)
            qty = self._validate_quantity(quantity)
        except (InvalidFundError, InvalidTransactionTypeError, InvalidQuantityError) as e:
            metrics.orders_total.labels(status="rejected").inc()
            logger.info(
                "Order rejected at validation",
                extra={"field": e.field, "value": repr(e.value)},
            )
            raise

        order = Order(
            id=self._id_factory(),
            fund_name=fund,
            transaction_type=side,
            quantity=qty,
            order_value=qty * self._unit_price,
            status=OrderStatus.SUBMITTED,
            created_at=self._clock(),
        )
        persisted = await asyncio.to_thread(self._store.persist, order)

        metrics.orders_total.labels(status="submitted").inc()
        logger.info(
            f"AUDIT: Order {persisted.id} created",
            extra={
                "order_id": persisted.id,
                "fund_name": persisted.fund_name.value,
                "transaction_type": persisted.transaction_type.value,
                "quantity": str(persisted.quantity),
                "order_value": str(persisted.order_value),
            },
        )
        return persisted

    async def submit_for_execution(self, order: Order | str) -> Order:
        """
        Send a Submitted order through the legacy system.

        Waits for the execution slot, claims the order, calls the simulator
        exactly once (bounded by the execution timeout) and records the
        outcome.

        Args:
            order: Order (or its id) currently in Submitted state

        Returns:
            The order in Completed state

        Raises:
            OrderNotFoundError: If the order does not exist
            InvalidTransitionError: If the order left Submitted before it
                could be claimed (e.g. it was cancelled while queued)
            DownstreamUnavailableError: Execution failed or timed out; the
                order has been recorded as Failed
        """
        order_id = order if isinstance(order, str) else order.id

        self._queue_depth += 1
        metrics.execution_queue_depth.set(self._queue_depth)
        try:
            async with self._execution_slot:
                # The claim commits in a worker thread even if this task is cancelled
                claim = asyncio.ensure_future(
                    self._transition(order_id, OrderStatus.SUBMITTED, OrderStatus.EXECUTED)
                )
                try:
                    claimed = await asyncio.shield(claim)
                except asyncio.CancelledError:
                    await asyncio.shield(self._fail_interrupted_claim(claim))
                    raise
                return await self._execute_claimed(claimed)
        finally:
            self._queue_depth -= 1
            metrics.execution_queue_depth.set(self._queue_depth)

    async def cancel_order(self, order_id: str) -> Order:
        """
        Cancel an order that has not yet been handed to the legacy system.

        Raises:
            OrderNotFoundError: If the order does not exist
            InvalidTransitionError: If the order is not in Submitted state
        """
        try:
            cancelled = await self._transition(
                order_id, OrderStatus.SUBMITTED, OrderStatus.CANCELLED
            )
        except OrderNotFoundError:
            metrics.cancellations_total.labels(result="not_found").inc()
            raise
        except InvalidTransitionError:
            metrics.cancellations_total.labels(result="invalid_transition").inc()
            raise

        metrics.cancellations_total.labels(result="cancelled").inc()
        logger.info(f"AUDIT: Order {order_id} cancelled", extra={"order_id": order_id})
        return cancelled

    async def list_orders(self) -> list[Order]:
        """Return all orders, newest first, including cancelled and failed ones."""
        return await asyncio.to_thread(self._store.list_all)

    async def get_order(self, order_id: str) -> Order:
        """Return a single order; raise OrderNotFoundError on miss."""
        return await asyncio.to_thread(self._store.get, order_id)

    async def place_order(
        self, fund_name: object, transaction_type: object, quantity: object
    ) -> Order:
        """
        Create an order and run it through execution.

        Validation failures surface before anything is persisted; any
        failure after persistence is reconciled by submit_for_execution.
        """
        order = await self.create_order(fund_name, transaction_type, quantity)
        return await self.submit_for_execution(order)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _transition(
        self, order_id: str, expected: OrderStatus, target: OrderStatus
    ) -> Order:
        """Compare-and-set expected -> target; raise InvalidTransitionError on a miss."""
        if not is_allowed_transition(expected, target):
            raise ValueError(f"No lifecycle edge {expected.value} -> {target.value}")
        updated = await asyncio.to_thread(
            self._store.update_status, order_id, target, expected_status=expected
        )
        if updated is not None:
            return updated

        current = await asyncio.to_thread(self._store.get, order_id)
        logger.warning(
            "Rejected order status transition",
            extra={
                "order_id": order_id,
                "current_status": current.status.value,
                "target_status": target.value,
            },
        )
        raise InvalidTransitionError(order_id, current.status, target)

    async def _execute_claimed(self, claimed: Order) -> Order:
        started = time.monotonic()
        try:
            report = await asyncio.wait_for(
                self._simulator.execute(claimed), timeout=self._execution_timeout
            )
            if report.status != OrderStatus.EXECUTED:
                raise LegacyRejectionError(
                    f"Legacy system reported {report.status.value} for order {claimed.id}"
                )
        except TimeoutError as e:
            reason = f"timed out after {self._execution_timeout}s"
            cause: BaseException = e
        except asyncio.CancelledError:
            # Caller went away mid-flight; the outcome is unknown, so record Failed
            await asyncio.shield(self._record_failure(claimed.id, "execution cancelled"))
            raise
        except Exception as e:
            reason = str(e) or type(e).__name__
            cause = e
        else:
            metrics.execution_duration_seconds.observe(time.monotonic() - started)
            try:
                completed = await self._transition(
                    claimed.id, OrderStatus.EXECUTED, OrderStatus.COMPLETED
                )
            except InvalidTransitionError:
                raise
            except Exception as e:
                logger.exception(
                    "Could not confirm completion in store",
                    extra={"order_id": claimed.id},
                )
                reason = f"completion not recorded: {e}"
                cause = e
            else:
                metrics.orders_total.labels(status="completed").inc()
                logger.info(
                    f"AUDIT: Order {claimed.id} completed",
                    extra={"order_id": claimed.id},
                )
                return completed

        metrics.execution_duration_seconds.observe(time.monotonic() - started)
        await self._record_failure(claimed.id, reason)
        raise DownstreamUnavailableError(claimed.id, reason) from cause

    async def _record_failure(self, order_id: str, reason: str) -> None:
        """Move a claimed order to Failed.

        A store error here is logged rather than raised: the caller is about
        to raise DownstreamUnavailableError, and startup recovery fails any
        order left in Executed.
        """
        try:
            failed = await asyncio.to_thread(
                self._store.update_status,
                order_id,
                OrderStatus.FAILED,
                expected_status=OrderStatus.EXECUTED,
            )
        except Exception:
            logger.exception(
                "Could not record failed execution",
                extra={"order_id": order_id, "reason": reason},
            )
            return

        if failed is None:
            logger.warning(
                "Order left Executed before failure could be recorded",
                extra={"order_id": order_id, "reason": reason},
            )
            return

        metrics.orders_total.labels(status="failed").inc()
        logger.error(
            f"AUDIT: Order {order_id} failed",
            extra={"order_id": order_id, "reason": reason},
        )

    async def _fail_interrupted_claim(self, claim: asyncio.Future[Order]) -> None:
        """Record Failed for a claim whose submitter was cancelled mid-write.

        The legacy system was never called; if the claim did not commit the
        order is left as it was.
        """
        try:
            claimed = await claim
        except Exception as e:
            logger.info(
                "Cancelled submission did not claim order",
                extra={"error": type(e).__name__},
            )
            return
        await self._record_failure(claimed.id, "submission cancelled before execution")
