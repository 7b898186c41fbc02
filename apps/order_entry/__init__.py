"""
Order Entry service.

Accepts buy/sell orders against a fixed set of funds, persists them, and
drives each one through a serialized legacy execution system.

Components:
- schemas: Pydantic models and lifecycle enums
- store / database: Order persistence (in-memory and PostgreSQL)
- legacy_simulator: Single-order-at-a-time legacy execution stand-in
- coordinator: Order lifecycle state machine
- recovery: Startup cleanup of orders stranded mid-execution
- main: FastAPI application
"""

__version__ = "1.0.0"
