import threading

import pytest
import requests

from core.config import PriceFeedSettings
from pricing.client import PriceFeedError, fetch_spot_price
from pricing.feed import PriceFeed

URL = "https://prices.example/simple/price"


class _FakeResponse:
    def __init__(self, status: int = 200, payload=None, bad_json: bool = False):
        self.status_code = status
        self.ok = 200 <= status < 400
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_fetch_spot_price_parses_quote() -> None:
    session = _FakeSession(_FakeResponse(payload={"bitcoin": {"eur": 61234.5}}))
    price = fetch_spot_price("bitcoin", "eur", url=URL, timeout_seconds=3, session=session)
    assert price == 61234.5
    assert session.calls == [(URL, {"ids": "bitcoin", "vs_currencies": "eur"}, 3)]


@pytest.mark.parametrize("response, code", [
    (_FakeResponse(status=429), "RATE_LIMIT"),
    (_FakeResponse(status=503), "UPSTREAM"),
    (_FakeResponse(bad_json=True), "BAD_RESPONSE"),
    (_FakeResponse(payload={"ethereum": {"eur": 1.0}}), "BAD_RESPONSE"),
    (_FakeResponse(payload={"bitcoin": {"eur": 0}}), "BAD_RESPONSE"),
])
def test_fetch_spot_price_error_mapping(response, code) -> None:
    with pytest.raises(PriceFeedError) as exc:
        fetch_spot_price("bitcoin", "eur", url=URL, session=_FakeSession(response))
    assert exc.value.code == code


def test_fetch_spot_price_network_error() -> None:
    session = _FakeSession(error=requests.ConnectionError("down"))
    with pytest.raises(PriceFeedError) as exc:
        fetch_spot_price("bitcoin", "eur", url=URL, session=session)
    assert exc.value.code == "NETWORK"


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_feed_refreshes_on_interval_and_keeps_last_price() -> None:
    quotes = [50_000.0, PriceFeedError("NETWORK", "down"), 52_000.0]
    calls = []

    def fetcher(asset_id, currency, *, url, timeout_seconds):
        calls.append(asset_id)
        q = quotes[len(calls) - 1]
        if isinstance(q, Exception):
            raise q
        return q

    clock = _Clock()
    feed = PriceFeed(PriceFeedSettings(refresh_seconds=20), fetcher=fetcher, clock=clock)
    assert feed.latest() is None

    assert feed.refresh() == 50_000.0
    clock.now += 5
    assert feed.refresh() == 50_000.0
    assert len(calls) == 1

    clock.now += 20
    assert feed.refresh() == 50_000.0
    assert feed.last_error is not None and feed.last_error.code == "NETWORK"
    assert len(calls) == 2

    assert feed.refresh(force=True) == 52_000.0
    assert feed.last_error is None
    assert feed.latest() == 52_000.0


def test_feed_without_any_success_stays_unknown() -> None:
    def fetcher(*args, **kwargs):
        raise PriceFeedError("UPSTREAM", "nope", 500)

    feed = PriceFeed(PriceFeedSettings(), fetcher=fetcher)
    assert feed.refresh() is None
    assert feed.latest() is None


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setattr("core.config.load_dotenv", lambda: None)
    monkeypatch.setenv("WEALTH_PRICE_ASSET", "ethereum")
    monkeypatch.setenv("WEALTH_PRICE_CURRENCY", "USD")
    monkeypatch.setenv("WEALTH_PRICE_REFRESH_SECONDS", "60")
    monkeypatch.delenv("WEALTH_PRICE_URL", raising=False)
    monkeypatch.delenv("WEALTH_PRICE_TIMEOUT_SECONDS", raising=False)
    s = PriceFeedSettings.from_env()
    assert s.asset_id == "ethereum"
    assert s.currency == "usd"
    assert s.refresh_seconds == 60.0
    assert s.url == PriceFeedSettings().url


def test_feed_tick_reports_price_changes() -> None:
    quotes = iter([100.0, 100.0, 120.0])
    clock = _Clock()
    feed = PriceFeed(
        PriceFeedSettings(refresh_seconds=20),
        fetcher=lambda *a, **k: next(quotes),
        clock=clock,
    )
    assert feed.tick(None) is True
    assert feed.tick(100.0) is False  # not due yet

    clock.now += 20
    assert feed.tick(100.0) is False  # same quote
    clock.now += 20
    assert feed.tick(100.0) is True
    assert feed.latest() == 120.0


def test_concurrent_refreshes_fetch_once() -> None:
    calls = []
    release = threading.Event()

    def fetcher(*args, **kwargs):
        calls.append(args)
        release.wait(timeout=2)
        return 100.0

    feed = PriceFeed(PriceFeedSettings(refresh_seconds=20), fetcher=fetcher, clock=lambda: 0.0)
    threads = [threading.Thread(target=feed.refresh) for _ in range(4)]
    for t in threads:
        t.start()
    release.set()
    for t in threads:
        t.join(timeout=5)

    assert len(calls) == 1
    assert feed.latest() == 100.0
