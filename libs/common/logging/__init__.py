"""Structured logging for platform services.

JSON log lines on stdout, each tagged with the trace ID of the request that
produced it.

Usage:
    # At service startup
    from libs.common.logging import configure_logging
    configure_logging(service_name="order_entry", log_level="INFO")

    # In modules
    logger = logging.getLogger(__name__)
    logger.info("Order created", extra={"order_id": order.id})
"""

from libs.common.logging.config import (
    TraceIDFilter,
    configure_logging,
    log_with_context,
)
from libs.common.logging.context import (
    TRACE_ID_HEADER,
    LogContext,
    clear_trace_id,
    generate_trace_id,
    get_trace_id,
    set_trace_id,
)
from libs.common.logging.formatter import JSONFormatter
from libs.common.logging.middleware import ASGITraceIDMiddleware, add_trace_id_middleware

__all__ = [
    # Configuration
    "configure_logging",
    "log_with_context",
    "TraceIDFilter",
    # Trace ID management
    "generate_trace_id",
    "get_trace_id",
    "set_trace_id",
    "clear_trace_id",
    "LogContext",
    "TRACE_ID_HEADER",
    # Formatter and middleware
    "JSONFormatter",
    "ASGITraceIDMiddleware",
    "add_trace_id_middleware",
]
