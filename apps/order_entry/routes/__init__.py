"""Route modules for the Order Entry service.

- orders: order submission, cancellation and queries
- funds: tradable fund listing
- health: health check and root endpoints
"""
