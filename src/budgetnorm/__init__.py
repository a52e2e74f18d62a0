"""
budgetnorm - Budget execution aggregation with time-aware normalization.

Aggregates public-sector budget line items into classification totals after
applying period-specific inflation, currency, per-capita and percent-of-GDP
transforms.
"""

__version__ = "0.1.0"
