"""
Tests for the CoinMarketCap client.

Requests are answered by an httpx.MockTransport; no network is used.
"""

import asyncio
import errno

import httpx
import pytest

from src.coinmarket.errors import (
    APIError,
    DecodingError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NoConnectionError,
)
from src.coinmarket.protocols.client import MarketDataClientProtocol
from tests.unit.coinmarket.helpers import (
    TEST_API_KEY,
    ExchangeInfoBuilder,
    envelope,
    json_response,
    make_client,
)


def map_entries(*ids: int) -> list[dict]:
    return [{"id": i, "name": f"Exchange {i}", "slug": f"exchange-{i}"} for i in ids]


class RecordingHandler:
    """MockTransport handler routing by endpoint path."""

    def __init__(self, routes: dict[str, httpx.Response]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, response in self.routes.items():
            if request.url.path.endswith(suffix):
                return response
        return json_response(404, envelope(None, "Not found"))


class TestRequestConstruction:
    """Test headers, URLs and query parameters."""

    @pytest.mark.asyncio
    async def test_headers_and_params(self) -> None:
        """Test API key header, accept header and discovery params."""
        handler = RecordingHandler({"/exchange/map": json_response(200, envelope([]))})
        client = make_client(handler)

        await client.fetch_exchanges(limit=50)

        request = handler.requests[0]
        assert request.url.path == "/v1/exchange/map"
        assert request.headers["X-CMC_PRO_API_KEY"] == TEST_API_KEY
        assert request.headers["Accept"] == "application/json"
        assert request.url.params["limit"] == "50"
        assert request.url.params["sort"] == "volume_24h"

    def test_satisfies_client_protocol(self) -> None:
        """Test structural conformance with the client protocol."""
        client = make_client(RecordingHandler({}))

        assert isinstance(client, MarketDataClientProtocol)

    @pytest.mark.asyncio
    async def test_invalid_base_url(self) -> None:
        """Test that an unusable base URL fails before any request."""
        handler = RecordingHandler({})
        client = make_client(handler, base_url="not a url")

        with pytest.raises(InvalidURLError):
            await client.fetch_exchange_info(1)

        assert handler.requests == []


class TestFetchExchanges:
    """Test discovery plus batched enrichment."""

    @pytest.mark.asyncio
    async def test_discovery_capped_at_twenty_ids(self) -> None:
        """Test that only the first twenty discovered ids are enriched."""
        info = {str(i): ExchangeInfoBuilder(i).build_json() for i in range(1, 21)}
        handler = RecordingHandler(
            {
                "/exchange/map": json_response(200, envelope(map_entries(*range(1, 26)))),
                "/exchange/info": json_response(200, envelope(info)),
            }
        )
        client = make_client(handler)

        exchanges = await client.fetch_exchanges(limit=50)

        info_request = handler.requests[1]
        assert info_request.url.params["id"] == ",".join(str(i) for i in range(1, 21))
        assert len(exchanges) == 20

    @pytest.mark.asyncio
    async def test_results_sorted_by_volume(self) -> None:
        """Test volume-descending order of the enriched records."""
        info = {
            "1": ExchangeInfoBuilder(1).with_name("Small").with_volume(10.0).build_json(),
            "2": ExchangeInfoBuilder(2).with_name("Big").with_volume(500.0).build_json(),
            "3": ExchangeInfoBuilder(3).with_name("Mid").with_volume(50.0).build_json(),
        }
        handler = RecordingHandler(
            {
                "/exchange/map": json_response(200, envelope(map_entries(1, 2, 3))),
                "/exchange/info": json_response(200, envelope(info)),
            }
        )
        client = make_client(handler)

        exchanges = await client.fetch_exchanges()

        assert [e.name for e in exchanges] == ["Big", "Mid", "Small"]

    @pytest.mark.asyncio
    async def test_bad_fields_degrade_to_none(self) -> None:
        """Test that a wrongly typed field does not drop its record."""
        info = {
            "270": ExchangeInfoBuilder(270)
            .with_name("Alpha")
            .with_field("spot_volume_usd", "n/a")
            .build_json(),
            "311": ExchangeInfoBuilder(311)
            .with_name("Beta")
            .with_volume(5.0)
            .with_field("urls", {"website": "https://c"})
            .build_json(),
            "24": ExchangeInfoBuilder(24).with_name("Gamma").with_volume(9.0).build_json(),
        }
        handler = RecordingHandler(
            {
                "/exchange/map": json_response(200, envelope(map_entries(270, 311, 24))),
                "/exchange/info": json_response(200, envelope(info)),
            }
        )
        client = make_client(handler)

        exchanges = await client.fetch_exchanges()

        by_id = {e.id: e for e in exchanges}
        assert sorted(by_id) == [24, 270, 311]
        assert by_id[270].spot_volume_usd is None
        assert by_id[270].name == "Alpha"
        assert by_id[311].website is None
        assert by_id[311].spot_volume_usd == 5.0
        assert by_id[24].website == "https://exchange-24.example"

    @pytest.mark.asyncio
    async def test_non_object_records_are_skipped(self) -> None:
        """Test that only entries which are not objects are dropped."""
        info = {
            "1": ExchangeInfoBuilder(1).build_json(),
            "2": ExchangeInfoBuilder(2).with_field("spot_volume_usd", "lots").build_json(),
            "3": "not an object",
        }
        handler = RecordingHandler(
            {
                "/exchange/map": json_response(200, envelope(map_entries(1, 2, 3))),
                "/exchange/info": json_response(200, envelope(info)),
            }
        )
        client = make_client(handler)

        exchanges = await client.fetch_exchanges()

        assert [e.id for e in exchanges] == [1, 2]
        assert exchanges[1].spot_volume_usd is None

    @pytest.mark.asyncio
    async def test_no_discovered_ids_skips_enrichment(self) -> None:
        """Test that an empty discovery returns no exchanges."""
        handler = RecordingHandler({"/exchange/map": json_response(200, envelope([]))})
        client = make_client(handler)

        assert await client.fetch_exchanges() == []
        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_discovery_without_list_is_invalid(self) -> None:
        """Test a discovery response whose data is not a list."""
        handler = RecordingHandler(
            {"/exchange/map": json_response(200, envelope({"unexpected": True}))}
        )
        client = make_client(handler)

        with pytest.raises(InvalidResponseError):
            await client.fetch_exchanges()


class TestFetchExchangeInfo:
    """Test single-record enrichment."""

    @pytest.mark.asyncio
    async def test_decodes_record(self) -> None:
        """Test a full info record with fiats."""
        record = ExchangeInfoBuilder(270).with_name("Binance").with_fiats(["USD"]).build_json()
        handler = RecordingHandler(
            {"/exchange/info": json_response(200, envelope({"270": record}))}
        )
        client = make_client(handler)

        exchange = await client.fetch_exchange_info(270)

        assert exchange.name == "Binance"
        assert exchange.fiats is not None
        assert exchange.fiats[0].symbol == "USD"
        assert handler.requests[0].url.params["id"] == "270"

    @pytest.mark.asyncio
    async def test_missing_record(self) -> None:
        """Test a response without the requested id."""
        handler = RecordingHandler({"/exchange/info": json_response(200, envelope({}))})
        client = make_client(handler)

        with pytest.raises(InvalidResponseError):
            await client.fetch_exchange_info(270)

    @pytest.mark.asyncio
    async def test_undecodable_record(self) -> None:
        """Test a record without a name."""
        record = ExchangeInfoBuilder(270).without("name").build_json()
        handler = RecordingHandler(
            {"/exchange/info": json_response(200, envelope({"270": record}))}
        )
        client = make_client(handler)

        with pytest.raises(DecodingError):
            await client.fetch_exchange_info(270)


class TestFetchExchangeAssets:
    """Test both accepted asset payload shapes."""

    ENTRIES = [
        {"currency": {"crypto_id": 1, "name": "Bitcoin", "symbol": "BTC", "price_usd": 50000.0}},
        {"currency": {"crypto_id": 1027, "name": "Ethereum", "symbol": "ETH", "price_usd": "3000.5"}},
        {"currency": {"name": "No symbol"}},
        {"balance": 12.0},
    ]

    @pytest.mark.asyncio
    async def test_list_and_keyed_map_decode_identically(self) -> None:
        """Test that a bare list and a map keyed by id give the same currencies."""
        as_list = make_client(
            RecordingHandler({"/exchange/assets": json_response(200, envelope(self.ENTRIES))})
        )
        as_map = make_client(
            RecordingHandler(
                {"/exchange/assets": json_response(200, envelope({"270": self.ENTRIES}))}
            )
        )

        from_list = await as_list.fetch_exchange_assets(270)
        from_map = await as_map.fetch_exchange_assets(270)

        assert from_list == from_map
        assert [c.symbol for c in from_list] == ["BTC", "ETH"]
        assert from_list[0].id == 1
        assert from_list[0].slug == "btc"
        assert from_list[1].price_usd == 3000.5

    @pytest.mark.asyncio
    async def test_unrecognised_shape_is_empty(self) -> None:
        """Test data that is neither a list nor a keyed list."""
        client = make_client(
            RecordingHandler(
                {"/exchange/assets": json_response(200, envelope({"other": "value"}))}
            )
        )

        assert await client.fetch_exchange_assets(270) == []


class TestFetchMarketPairs:
    """Test market pair decoding."""

    @pytest.mark.asyncio
    async def test_pairs_with_positional_ids(self) -> None:
        """Test synthesized ids and the USD quote."""
        pairs = [
            {
                "market_pair": "BTC/USDT",
                "category": "spot",
                "fee_type": "percentage",
                "quote": {"USD": {"price": 50000.0, "volume_24h": 1_000_000.0}},
            },
            "garbage",
            {"market_pair": "ETH/BTC", "quote": {}},
            {"market_pair": "SOL/USD", "quote": None},
            {"market_pair": 42, "category": "spot"},
        ]
        handler = RecordingHandler(
            {
                "/exchange/market-pairs/latest": json_response(
                    200, envelope({"id": 270, "market_pairs": pairs})
                )
            }
        )
        client = make_client(handler)

        markets = await client.fetch_exchange_market_pairs(270, limit=50)

        assert [m.id for m in markets] == ["270_0", "270_2", "270_3", "270_4"]
        assert markets[0].price_usd == 50000.0
        assert markets[0].volume_usd == 1_000_000.0
        assert markets[0].category == "spot"
        assert markets[0].price_quote is None
        assert markets[1].price_usd is None
        assert markets[2].market_pair == "SOL/USD"
        assert markets[2].volume_usd is None
        assert markets[3].market_pair is None
        assert markets[3].category == "spot"
        assert handler.requests[0].url.params["limit"] == "50"

    @pytest.mark.asyncio
    async def test_missing_pairs_is_empty(self) -> None:
        """Test a payload without market_pairs."""
        client = make_client(
            RecordingHandler(
                {"/exchange/market-pairs/latest": json_response(200, envelope({"id": 270}))}
            )
        )

        assert await client.fetch_exchange_market_pairs(270) == []


class TestErrorClassification:
    """Test mapping of transport and HTTP failures."""

    @pytest.mark.asyncio
    async def test_status_with_message_is_api_error(self) -> None:
        """Test a structured server error."""
        client = make_client(
            RecordingHandler(
                {"/exchange/info": json_response(401, envelope(None, "API key missing."))}
            )
        )

        with pytest.raises(APIError) as exc_info:
            await client.fetch_exchange_info(1)

        assert exc_info.value.message == "API key missing."

    @pytest.mark.asyncio
    async def test_status_without_message_is_invalid_response(self) -> None:
        """Test an unstructured server error."""
        client = make_client(
            RecordingHandler({"/exchange/info": httpx.Response(502, content=b"Bad gateway")})
        )

        with pytest.raises(InvalidResponseError):
            await client.fetch_exchange_info(1)

    @pytest.mark.asyncio
    async def test_malformed_json_is_invalid_response(self) -> None:
        """Test a success status with a non-JSON body."""
        client = make_client(
            RecordingHandler({"/exchange/info": httpx.Response(200, content=b"<html>")})
        )

        with pytest.raises(InvalidResponseError):
            await client.fetch_exchange_info(1)

    @pytest.mark.asyncio
    async def test_transport_failure_is_network_error(self) -> None:
        """Test a connection failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(NetworkError) as exc_info:
            await client.fetch_exchange_info(1)

        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_offline_is_no_connection(self) -> None:
        """Test an unreachable network."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request) from OSError(
                errno.ENETUNREACH, "Network is unreachable"
            )

        client = make_client(handler)

        with pytest.raises(NoConnectionError):
            await client.fetch_exchange_info(1)

    @pytest.mark.asyncio
    async def test_resource_timeout_is_network_error(self) -> None:
        """Test the overall request deadline."""

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1.0)
            return json_response(200, envelope({}))

        client = make_client(handler, resource_timeout=0.01)

        with pytest.raises(NetworkError):
            await client.fetch_exchange_info(1)
