"""Common utilities and exceptions."""

from libs.common.exceptions import TradingPlatformError
from libs.common.schemas import TimestampSerializerMixin

__all__ = [
    "TradingPlatformError",
    "TimestampSerializerMixin",
]
