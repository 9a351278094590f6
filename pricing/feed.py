"""
Latest-known price holder for the periodic refresh done by the UI.

A failed refresh keeps the previous price (None until one has arrived); the
projection simply uses whatever is known at call time. One feed is shared by
every dashboard session, so refreshes are serialized behind a lock.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from core.config import PriceFeedSettings

from .client import PriceFeedError, fetch_spot_price

logger = logging.getLogger(__name__)


class PriceFeed:
    """
    Usage:
        feed = PriceFeed(PriceFeedSettings.from_env())
        feed.refresh()          # no-op until refresh_seconds have elapsed
        price = feed.latest()   # float or None
    """

    def __init__(
        self,
        settings: PriceFeedSettings,
        *,
        fetcher: Callable[..., float] = fetch_spot_price,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings
        self._fetcher = fetcher
        self._clock = clock
        self._lock = threading.Lock()
        self._price: Optional[float] = None
        self._last_attempt: Optional[float] = None
        self.last_error: Optional[PriceFeedError] = None

    def latest(self) -> Optional[float]:
        return self._price

    def is_due(self) -> bool:
        if self._last_attempt is None:
            return True
        return self._clock() - self._last_attempt >= self.settings.refresh_seconds

    def refresh(self, force: bool = False) -> Optional[float]:
        """Fetch when due (or forced); returns the latest known price either way."""
        with self._lock:
            if not (force or self.is_due()):
                return self._price

            s = self.settings
            self._last_attempt = self._clock()
            try:
                price = self._fetcher(
                    s.asset_id, s.currency, url=s.url, timeout_seconds=s.timeout_seconds
                )
            except PriceFeedError as error:
                self.last_error = error
                logger.warning(
                    "Price refresh for %s/%s failed (%s): %s",
                    s.asset_id, s.currency, error.code, error,
                )
                return self._price

            self._price = price
            self.last_error = None
            logger.debug("Price refreshed: %s/%s = %s", s.asset_id, s.currency, price)
            return price

    def tick(self, shown: Optional[float]) -> bool:
        """Timer hook: refresh when due, True when the latest price differs from `shown`."""
        return self.refresh() != shown
