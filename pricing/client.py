"""HTTP client for the spot price of the externally held asset."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

import requests
from requests.adapters import HTTPAdapter

PriceErrorCode = Literal["NETWORK", "UPSTREAM", "RATE_LIMIT", "BAD_RESPONSE"]

_SESSION = requests.Session()
_SESSION.mount("https://", HTTPAdapter(pool_connections=4, pool_maxsize=8))
_SESSION.mount("http://", HTTPAdapter(pool_connections=4, pool_maxsize=8))


@dataclass
class PriceFeedError(Exception):
    code: PriceErrorCode
    message: str
    status: Optional[int] = None

    def __str__(self) -> str:
        return self.message


def _status_to_code(status: int) -> PriceErrorCode:
    if status == 429:
        return "RATE_LIMIT"
    return "UPSTREAM"


def fetch_spot_price(
    asset_id: str,
    currency: str,
    *,
    url: str,
    timeout_seconds: float = 10.0,
    session: Optional[requests.Session] = None,
) -> float:
    """
    Fetch one unit price, e.g. bitcoin in eur.

    Expects a CoinGecko-style payload: {"bitcoin": {"eur": 61234.5}}.
    Any failure is raised as PriceFeedError.
    """
    sess = session or _SESSION
    params: Dict[str, str] = {"ids": asset_id, "vs_currencies": currency}
    try:
        response = sess.get(url, params=params, timeout=timeout_seconds)
    except requests.RequestException as error:
        raise PriceFeedError("NETWORK", "Price request failed due to network error.") from error

    if not response.ok:
        raise PriceFeedError(
            _status_to_code(response.status_code),
            f"Price request failed with status {response.status_code}.",
            response.status_code,
        )

    try:
        payload: Any = response.json()
    except ValueError as error:
        raise PriceFeedError(
            "BAD_RESPONSE", "Price source returned non-JSON content.", response.status_code
        ) from error

    try:
        price = float(payload[asset_id][currency])
    except (KeyError, TypeError, ValueError) as error:
        raise PriceFeedError(
            "BAD_RESPONSE",
            f"Price source response has no {asset_id}/{currency} quote.",
            response.status_code,
        ) from error

    if not math.isfinite(price) or price <= 0:
        raise PriceFeedError("BAD_RESPONSE", f"Price source returned an unusable price: {price}")
    return price
