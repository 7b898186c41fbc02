"""
Exception hierarchy shared by platform services.

Service-specific errors subclass TradingPlatformError so callers can catch
every platform failure in one place while still handling each kind precisely.
"""


class TradingPlatformError(Exception):
    """
    Base exception for all trading platform errors.

    Example:
        >>> try:
        ...     await coordinator.place_order("FundA", "Buy", 10)
        ... except TradingPlatformError as e:
        ...     logger.error(f"Platform error: {e}")
    """

    pass
