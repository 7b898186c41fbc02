"""
Fund universe configuration.

Defines which funds accept orders. The set is fixed; adding a fund means
adding it here and to the FundName enum in the order entry schemas.
"""

TRADABLE_FUNDS: tuple[str, ...] = ("FundA", "FundB", "FundC")
