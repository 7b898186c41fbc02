"""Trace ID propagation for request-scoped log correlation.

A trace ID is a UUID4 string held in a context variable, so every log record
emitted while serving one request (including from tasks it awaits) carries
the same ID.
"""

import contextvars
import uuid
from types import TracebackType

_trace_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("trace_id", default=None)

# HTTP header used to accept and echo trace IDs
TRACE_ID_HEADER = "X-Trace-ID"


def generate_trace_id() -> str:
    """Return a new UUID4 trace ID string."""
    return str(uuid.uuid4())


def get_trace_id() -> str | None:
    """Return the trace ID bound to the current context, if any."""
    return _trace_id_var.get()


def set_trace_id(trace_id: str) -> None:
    """Bind trace_id to the current context.

    Raises:
        ValueError: If trace_id is empty
    """
    if not trace_id:
        raise ValueError("Trace ID cannot be empty")
    _trace_id_var.set(trace_id)


def clear_trace_id() -> None:
    """Unbind the trace ID from the current context."""
    _trace_id_var.set(None)


class LogContext:
    """Scope a trace ID to a block, restoring the previous one on exit.

    Example:
        >>> with LogContext("recovery-startup"):
        ...     recover_stranded_orders()
    """

    def __init__(self, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or generate_trace_id()
        self.previous_trace_id: str | None = None

    def __enter__(self) -> str:
        self.previous_trace_id = get_trace_id()
        set_trace_id(self.trace_id)
        return self.trace_id

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.previous_trace_id is not None:
            set_trace_id(self.previous_trace_id)
        else:
            clear_trace_id()
