"""
Order Entry Service FastAPI Application.

Key Features:
- POST /api/orders - Create and execute a trade order
- GET /api/funds - List tradable funds
- POST /api/orders/{id}/cancel - Cancel a Submitted order
- GET /api/orders - List orders, newest first
- GET /api/orders/{id} - Get a single order
- GET /health - Health check
- GET /metrics - Prometheus metrics
- GET /api-docs - Swagger UI

Environment Variables:
    ORDER_STORE_BACKEND: "memory" (default) or "postgres"
    DATABASE_URL: PostgreSQL connection string
    LEGACY_LATENCY_SECONDS: Simulated legacy latency (default: 1.0)
    LEGACY_TIMEOUT_SECONDS: Execution timeout (default: 5.0)
    LEGACY_FAILURE_RATE: Simulated rejection probability (default: 0.0)
    UNIT_PRICE: Price per unit for orderValue (default: 100)
    LOG_LEVEL: Logging level (default: INFO)
    PORT: HTTP port when run as a module (default: 3000)

Usage:
    # Development
    $ uvicorn apps.order_entry.main:app --reload --port 3000

    # Or
    $ python -m apps.order_entry.main
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from apps.order_entry import __version__, metrics
from apps.order_entry.app_context import AppContext, build_context
from apps.order_entry.config import OrderEntryConfig, get_config
from apps.order_entry.exceptions import (
    DownstreamUnavailableError,
    DuplicateIdentifierError,
    InvalidTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from apps.order_entry.recovery import OrderRecoveryManager
from apps.order_entry.routes import funds, health, orders
from apps.order_entry.schemas import OrderStatus
from libs.common.logging import LogContext, add_trace_id_middleware, configure_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "order_entry"
LEGACY_ERROR_MESSAGE = "Legacy system error. Please try again later."


# ============================================================================
# Exception Handlers
# ============================================================================


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def _validation_error_handler(request: Request, exc: OrderValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, exc.public_message)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Malformed request body", extra={"path": request.url.path})
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def _not_found_handler(request: Request, exc: OrderNotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "Order not found")


async def _invalid_transition_handler(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    if exc.target_status == OrderStatus.CANCELLED:
        return _error(status.HTTP_400_BAD_REQUEST, "Order cannot be cancelled")
    return _error(
        status.HTTP_400_BAD_REQUEST,
        f"Order is {exc.current_status.value} and cannot be executed",
    )


async def _downstream_handler(request: Request, exc: DownstreamUnavailableError) -> JSONResponse:
    logger.error(
        "Legacy execution failed",
        extra={"order_id": exc.order_id, "reason": exc.reason},
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, LEGACY_ERROR_MESSAGE)


async def _duplicate_handler(request: Request, exc: DuplicateIdentifierError) -> JSONResponse:
    logger.error("Order identifier collision", extra={"order_id": exc.order_id})
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Map the order entry error taxonomy to HTTP responses."""
    app.add_exception_handler(OrderValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(OrderNotFoundError, _not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidTransitionError, _invalid_transition_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DownstreamUnavailableError, _downstream_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DuplicateIdentifierError, _duplicate_handler)  # type: ignore[arg-type]


# ============================================================================
# Application Factory
# ============================================================================


def create_app(
    *,
    context: AppContext | None = None,
    config: OrderEntryConfig | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        context: Optional pre-built AppContext (tests inject fakes here).
            When omitted, the lifespan builds one from config and configures
            JSON logging.
        config: Optional config; loaded from the environment when omitted

    Returns:
        FastAPI: Configured application instance

    Usage:
        # Production
        app = create_app()

        # Tests
        app = create_app(context=build_context(cfg, simulator=fast_sim), config=cfg)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app_config = config or get_config()
        if context is None:
            configure_logging(service_name=SERVICE_NAME, log_level=app_config.log_level)
        ctx = context or build_context(app_config)

        logger.info(
            f"Starting Order Entry Service (version={__version__})",
            extra={"store_backend": ctx.store.backend_name},
        )
        metrics.initialize_metrics()

        with LogContext("startup-recovery"):
            await asyncio.to_thread(OrderRecoveryManager(ctx.store).fail_stranded_executions)
        store_connected = await asyncio.to_thread(ctx.store.check_connection)
        metrics.store_connection_status.set(1 if store_connected else 0)

        app.state.config = app_config
        app.state.context = ctx
        try:
            yield
        finally:
            logger.info("Order Entry Service shutting down")
            ctx.close()

    app = FastAPI(
        title="Order Entry API",
        description="API documentation for Order Entry module",
        version=__version__,
        docs_url="/api-docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    add_trace_id_middleware(app)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(funds.router)
    app.include_router(orders.router)

    app.mount("/metrics", make_asgi_app())

    return app


app = create_app()


def main() -> None:
    """Run the service with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("apps.order_entry.main:app", host="0.0.0.0", port=get_config().port)


if __name__ == "__main__":
    main()
