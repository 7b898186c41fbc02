"""
Apps package - FastAPI services for the order platform.

- order_entry: Order submission, cancellation and queries, executed one at
  a time through the legacy execution system
"""
