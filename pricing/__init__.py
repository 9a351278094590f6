"""
Pricing — spot price client and the latest-price holder used by the dashboard.
"""

from .client import PriceFeedError, fetch_spot_price
from .feed import PriceFeed

__all__ = [
    "PriceFeedError",
    "fetch_spot_price",
    "PriceFeed",
]
