"""Configuration module for the Order Entry service.

All environment variable parsing for the service happens here.

Usage:
    from apps.order_entry.config import get_config

    config = get_config()
    if config.store_backend == "postgres":
        ...
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from config.settings import get_settings
from config.universe import TRADABLE_FUNDS

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("memory", "postgres")


# ============================================================================
# Helper Functions
# ============================================================================


def _get_float_env(name: str, default: float) -> float:
    """Parse float from environment variable with fallback to default.

    Args:
        name: Environment variable name
        default: Default value if env var is missing or invalid

    Returns:
        Parsed float value or default
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid float for %s=%s; using default=%s", name, raw, default)
        return default


def _get_decimal_env(name: str, default: Decimal) -> Decimal:
    """Parse Decimal from environment variable with fallback to default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return Decimal(raw)
    except (ValueError, InvalidOperation):
        logger.warning("Invalid decimal for %s=%s; using default=%s", name, raw, default)
        return default


def _get_int_env(name: str, default: int) -> int:
    """Parse int from environment variable with fallback to default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid int for %s=%s; using default=%s", name, raw, default)
        return default


# ============================================================================
# Configuration Dataclass
# ============================================================================


@dataclass
class OrderEntryConfig:
    """Configuration for the Order Entry service.

    Attributes:
        log_level: Logging level (default: INFO)
        environment: Environment name (dev, staging, prod)
        store_backend: "memory" (default) or "postgres"
        database_url: PostgreSQL DSN, used when store_backend is "postgres"
        funds: Tradable fund names
        unit_price: Price per unit used to compute orderValue
        legacy_latency_seconds: Simulated legacy execution latency
        legacy_timeout_seconds: Upper bound on a single legacy execution
        legacy_failure_rate: Probability the simulator rejects an order
        port: HTTP port when run as a module
    """

    log_level: str = "INFO"
    environment: str = "dev"
    store_backend: str = "memory"
    database_url: str = ""
    funds: tuple[str, ...] = field(default_factory=lambda: TRADABLE_FUNDS)
    unit_price: Decimal = Decimal("100")
    legacy_latency_seconds: float = 1.0
    legacy_timeout_seconds: float = 5.0
    legacy_failure_rate: float = 0.0
    port: int = 3000

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"store_backend must be one of {STORE_BACKENDS}, got {self.store_backend!r}"
            )
        for name in ("legacy_latency_seconds", "legacy_timeout_seconds", "legacy_failure_rate"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number, got {getattr(self, name)}")
        if not self.unit_price.is_finite() or self.unit_price <= 0:
            raise ValueError(f"unit_price must be positive, got {self.unit_price}")
        if self.legacy_latency_seconds < 0:
            raise ValueError("legacy_latency_seconds must be >= 0")
        if self.legacy_timeout_seconds <= 0:
            raise ValueError("legacy_timeout_seconds must be > 0")
        if not 0.0 <= self.legacy_failure_rate <= 1.0:
            raise ValueError("legacy_failure_rate must be between 0.0 and 1.0")


def get_config() -> OrderEntryConfig:
    """Build OrderEntryConfig from the environment.

    Platform-wide values (DATABASE_URL, LOG_LEVEL, ENVIRONMENT) come from
    config.settings; service knobs are read directly here.

    Returns:
        OrderEntryConfig populated from environment variables

    Raises:
        ValueError: If a parsed value fails validation (e.g. unknown backend)
    """
    settings = get_settings()
    config = OrderEntryConfig(
        log_level=settings.log_level,
        environment=settings.environment,
        store_backend=os.getenv("ORDER_STORE_BACKEND", "memory").lower(),
        database_url=settings.database_url,
        unit_price=_get_decimal_env("UNIT_PRICE", Decimal("100")),
        legacy_latency_seconds=_get_float_env("LEGACY_LATENCY_SECONDS", 1.0),
        legacy_timeout_seconds=_get_float_env("LEGACY_TIMEOUT_SECONDS", 5.0),
        legacy_failure_rate=_get_float_env("LEGACY_FAILURE_RATE", 0.0),
        port=_get_int_env("PORT", 3000),
    )
    logger.info(
        "Order Entry config loaded",
        extra={
            "environment": config.environment,
            "store_backend": config.store_backend,
            "legacy_latency_seconds": config.legacy_latency_seconds,
            "legacy_timeout_seconds": config.legacy_timeout_seconds,
        },
    )
    return config
