"""Shared Pydantic schema utilities."""

from datetime import datetime

from pydantic import field_serializer


class TimestampSerializerMixin:
    """
    Serialize a datetime field named 'timestamp' with a 'Z' suffix.

    Usage:
        class MyResponse(TimestampSerializerMixin, BaseModel):
            timestamp: datetime

    Note: Mixin must be listed BEFORE BaseModel in inheritance order.
    """

    @field_serializer("timestamp")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.isoformat().replace("+00:00", "Z")
