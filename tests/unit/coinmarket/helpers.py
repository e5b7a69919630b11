"""Test helpers for exchange client tests."""

import json
import struct
import zlib
from collections.abc import Callable
from typing import Any

import httpx

from src.coinmarket.adapters.coinmarketcap.client import CoinMarketCapClient
from src.coinmarket.config import ApiConfig
from src.coinmarket.errors import InvalidResponseError
from src.coinmarket.model.currency import Currency
from src.coinmarket.model.exchange import Exchange
from src.coinmarket.model.market import Market
from src.coinmarket.model.view_state import ViewState

TEST_API_KEY = "test-key"


def envelope(data: Any, error_message: str | None = None) -> dict[str, Any]:
    """Wrap ``data`` in the API's status envelope."""
    return {
        "status": {
            "timestamp": "2024-01-01T10:00:00.000Z",
            "error_code": 0 if error_message is None else 1002,
            "error_message": error_message,
            "elapsed": 10,
            "credit_count": 1,
        },
        "data": data,
    }


def json_response(status_code: int, body: Any) -> httpx.Response:
    """Build an httpx response with a JSON body."""
    return httpx.Response(status_code, content=json.dumps(body).encode())


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    **config: Any,
) -> CoinMarketCapClient:
    """Client whose requests are answered by ``handler``."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CoinMarketCapClient(ApiConfig(api_key=TEST_API_KEY, **config), http)


def png_bytes(width: int, height: int) -> bytes:
    """Smallest header-valid PNG with the given geometry."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    crc = zlib.crc32(b"IHDR" + ihdr) & 0xFFFFFFFF
    return (
        b"\x89PNG\r\n\x1a\n"
        + struct.pack(">I", len(ihdr))
        + b"IHDR"
        + ihdr
        + struct.pack(">I", crc)
    )


class ExchangeInfoBuilder:
    """Builder for exchange-info wire records."""

    def __init__(self, exchange_id: int = 270) -> None:
        """Initialize with sensible defaults."""
        self._data: dict[str, Any] = {
            "id": exchange_id,
            "name": f"Exchange {exchange_id}",
            "slug": f"exchange-{exchange_id}",
            "logo": f"https://s2.coinmarketcap.com/static/img/exchanges/64x64/{exchange_id}.png",
            "description": "A test exchange.",
            "date_launched": "2017-07-14T00:00:00.000Z",
            "urls": {"website": [f"https://exchange-{exchange_id}.example"]},
            "spot_volume_usd": 1_000_000.0,
            "maker_fee": 0.1,
            "taker_fee": 0.2,
        }

    def with_name(self, name: str) -> "ExchangeInfoBuilder":
        """Set the name."""
        self._data["name"] = name
        return self

    def with_volume(self, volume: float | None) -> "ExchangeInfoBuilder":
        """Set the spot volume (None removes it)."""
        if volume is None:
            self._data.pop("spot_volume_usd", None)
        else:
            self._data["spot_volume_usd"] = volume
        return self

    def with_fiats(self, symbols: list[str]) -> "ExchangeInfoBuilder":
        """Set the symbol-only fiat list."""
        self._data["fiats"] = symbols
        return self

    def without(self, *fields: str) -> "ExchangeInfoBuilder":
        """Drop fields from the record."""
        for field in fields:
            self._data.pop(field, None)
        return self

    def with_field(self, field: str, value: Any) -> "ExchangeInfoBuilder":
        """Set an arbitrary field."""
        self._data[field] = value
        return self

    def build_json(self) -> dict[str, Any]:
        """Build as raw JSON data."""
        return dict(self._data)

    def build(self) -> Exchange:
        """Build as Exchange model."""
        return Exchange.model_validate(self._data)


def make_exchange(exchange_id: int, volume: float | None = None, name: str | None = None) -> Exchange:
    """Shorthand for a minimal exchange record."""
    return Exchange(
        id=exchange_id,
        name=name or f"Exchange {exchange_id:03d}",
        spot_volume_usd=volume,
    )


def make_exchanges(count: int) -> list[Exchange]:
    """``count`` exchanges with descending volume."""
    return [make_exchange(i, volume=float(10_000 - i)) for i in range(1, count + 1)]


class FakeMarketDataClient:
    """
    In-memory client satisfying MarketDataClientProtocol.

    Results and failures are configured per method; calls are recorded.
    """

    def __init__(self) -> None:
        self.exchanges: list[Exchange] = []
        self.exchange_info: Exchange | None = None
        self.currencies: list[Currency] = []
        self.markets: list[Market] = []

        self.error: Exception | None = None
        self.errors: list[Exception] = []
        self.calls: list[tuple[str, Any]] = []

    def _maybe_fail(self) -> None:
        if self.errors:
            raise self.errors.pop(0)
        if self.error is not None:
            raise self.error

    async def fetch_exchanges(self, limit: int = 50) -> list[Exchange]:
        self.calls.append(("fetch_exchanges", limit))
        self._maybe_fail()
        return list(self.exchanges)

    async def fetch_exchange_info(self, exchange_id: int) -> Exchange:
        self.calls.append(("fetch_exchange_info", exchange_id))
        self._maybe_fail()
        if self.exchange_info is None:
            raise InvalidResponseError()
        return self.exchange_info

    async def fetch_exchange_assets(self, exchange_id: int) -> list[Currency]:
        self.calls.append(("fetch_exchange_assets", exchange_id))
        self._maybe_fail()
        return list(self.currencies)

    async def fetch_exchange_market_pairs(
        self, exchange_id: int, limit: int = 100
    ) -> list[Market]:
        self.calls.append(("fetch_exchange_market_pairs", (exchange_id, limit)))
        self._maybe_fail()
        return list(self.markets)

    def call_count(self, name: str) -> int:
        return sum(1 for called, _ in self.calls if called == name)


class RecordingListObserver:
    """Collects every list state transition."""

    def __init__(self) -> None:
        self.states: list[ViewState[list[Exchange]]] = []

    def on_state_changed(self, state: ViewState[list[Exchange]]) -> None:
        self.states.append(state)

    @property
    def kinds(self) -> list[str]:
        return [state.kind.value for state in self.states]


class RecordingDetailObserver:
    """Collects detail notifications in order."""

    def __init__(self) -> None:
        self.events: list[str] = []
        self.failures: list[Exception] = []

    def on_details_updated(self) -> None:
        self.events.append("details")

    def on_markets_updated(self) -> None:
        self.events.append("markets")

    def on_failure(self, error: Exception) -> None:
        self.events.append("failure")
        self.failures.append(error)


class RecordingSleep:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
