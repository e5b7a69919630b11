"""
CoinMarketCap REST client.

This module talks to the remote market-data API over httpx. It owns request
construction (API-key header, JSON accept header, fixed base URL, timeouts),
response classification into the MarketDataError taxonomy, and decoding of
every endpoint's ``data`` shape into domain records.

None of the methods retry on their own; callers compose a RetryPolicy around
them where retrying is wanted.
"""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from src.coinmarket.adapters.coinmarketcap.data import (
    AssetEntry,
    CmcErrorEnvelope,
    ExchangeInfoData,
    ExchangeMapEntry,
    MarketPairData,
)
from src.coinmarket.config import ApiConfig
from src.coinmarket.enums import Endpoint, SortOrder
from src.coinmarket.errors import (
    APIError,
    DecodingError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NoConnectionError,
    is_offline_error,
)
from src.coinmarket.model.currency import Currency
from src.coinmarket.model.exchange import Exchange, sort_by_volume
from src.coinmarket.model.market import Market

logger = logging.getLogger(__name__)


class CoinMarketCapClient:
    """
    Asynchronous client for the CoinMarketCap exchange endpoints.

    Satisfies MarketDataClientProtocol. One instance is meant to be shared by
    the whole process; pass ``http_client`` to substitute the transport.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: API settings (defaults read from the environment)
            http_client: Preconfigured httpx client, e.g. with a mock transport

        """
        self.config = config or ApiConfig()
        self._headers = {
            self.config.api_key_header: self.config.api_key,
            "Accept": "application/json",
        }
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.request_timeout),
        )

    async def __aenter__(self) -> "CoinMarketCapClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    # =========================================================
    # ENDPOINTS
    # =========================================================

    async def fetch_exchanges(self, limit: int = 50) -> list[Exchange]:
        """
        Discover exchanges, then enrich them with one batched info request.

        Args:
            limit: Discovery limit

        Returns:
            Exchanges sorted by volume descending, name as fallback

        Raises:
            MarketDataError: If either request fails as a whole

        """
        payload = await self._get(
            Endpoint.EXCHANGE_MAP,
            {"limit": limit, "sort": SortOrder.VOLUME_24H.value},
        )
        entries = payload.get("data")
        if not isinstance(entries, list):
            raise InvalidResponseError()

        exchange_ids = []
        for entry in entries:
            try:
                exchange_ids.append(ExchangeMapEntry.model_validate(entry).id)
            except ValidationError:
                continue

        cap = min(self.config.discovery_cap, len(exchange_ids))
        exchange_ids = exchange_ids[:cap]
        if not exchange_ids:
            return []

        info = await self._get(
            Endpoint.EXCHANGE_INFO,
            {"id": ",".join(str(exchange_id) for exchange_id in exchange_ids)},
        )
        records = info.get("data")
        if not isinstance(records, dict):
            raise InvalidResponseError()

        exchanges = []
        for key, record in records.items():
            if not isinstance(record, dict):
                logger.warning(f"Skipping exchange {key}: record is not an object")
                continue
            exchanges.append(ExchangeInfoData.model_validate(record).to_exchange(key))

        return sort_by_volume(exchanges)

    async def fetch_exchange_info(self, exchange_id: int) -> Exchange:
        """
        Fetch and decode the info record of one exchange.

        Raises:
            InvalidResponseError: If the record for ``exchange_id`` is absent
            DecodingError: If the record cannot be decoded

        """
        payload = await self._get(Endpoint.EXCHANGE_INFO, {"id": str(exchange_id)})
        records = payload.get("data")
        if not isinstance(records, dict) or str(exchange_id) not in records:
            raise InvalidResponseError()

        try:
            return Exchange.model_validate(records[str(exchange_id)])
        except ValidationError as e:
            raise DecodingError(e) from e

    async def fetch_exchange_assets(self, exchange_id: int) -> list[Currency]:
        """
        Fetch the currencies held by an exchange.

        ``data`` is either a list of asset entries or a map keyed by the
        exchange id (falling back to the whole map) holding such a list.
        Unrecognised shapes yield an empty list.
        """
        payload = await self._get(Endpoint.EXCHANGE_ASSETS, {"id": str(exchange_id)})
        data = payload.get("data")

        entries: Any
        if isinstance(data, list):
            entries = data
        elif isinstance(data, dict):
            entries = data.get(str(exchange_id), data)
        else:
            entries = None

        if not isinstance(entries, list):
            return []
        return self._decode_assets(entries)

    async def fetch_exchange_market_pairs(
        self, exchange_id: int, limit: int = 100
    ) -> list[Market]:
        """
        Fetch the market pairs of an exchange.

        Market ids are ``"{exchange_id}_{index}"`` where ``index`` is the
        position of the pair in the response.
        """
        payload = await self._get(
            Endpoint.EXCHANGE_MARKET_PAIRS,
            {"id": str(exchange_id), "limit": limit},
        )
        data = payload.get("data")
        pairs = data.get("market_pairs") if isinstance(data, dict) else None
        if not isinstance(pairs, list):
            return []

        markets = []
        for index, raw_pair in enumerate(pairs):
            if not isinstance(raw_pair, dict):
                logger.debug(f"Skipping market pair {exchange_id}_{index}: not an object")
                continue
            pair = MarketPairData.model_validate(raw_pair)
            markets.append(pair.to_market(exchange_id, index))
        return markets

    # =========================================================
    # REQUEST PLUMBING
    # =========================================================

    def _build_url(self, endpoint: Endpoint) -> httpx.URL:
        """Join the base URL and an endpoint path."""
        try:
            url = httpx.URL(self.config.base_url.rstrip("/") + endpoint.value)
        except httpx.InvalidURL as e:
            raise InvalidURLError() from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURLError()
        return url

    async def _get(self, endpoint: Endpoint, params: dict[str, Any]) -> dict[str, Any]:
        """
        Perform a GET request and return the decoded top-level JSON object.

        Raises:
            APIError: Non-2xx status with a structured error message
            InvalidResponseError: Other non-2xx status or malformed JSON
            NoConnectionError: The host has no network
            NetworkError: Any other transport failure

        """
        url = self._build_url(endpoint)

        try:
            async with asyncio.timeout(self.config.resource_timeout):
                response = await self._http.get(url, params=params, headers=self._headers)
        except TimeoutError as e:
            raise NetworkError(e) from e
        except httpx.TransportError as e:
            if is_offline_error(e):
                raise NoConnectionError() from e
            raise NetworkError(e) from e

        logger.debug(f"GET {endpoint.value} -> {response.status_code}")

        if not response.is_success:
            raise self._status_error(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise InvalidResponseError() from e
        if not isinstance(payload, dict):
            raise InvalidResponseError()
        return payload

    @staticmethod
    def _status_error(response: httpx.Response) -> APIError | InvalidResponseError:
        """Classify a non-2xx response."""
        try:
            envelope = CmcErrorEnvelope.model_validate(response.json())
        except (ValueError, ValidationError):
            return InvalidResponseError()
        if envelope.message is None:
            return InvalidResponseError()
        return APIError(envelope.message)

    @staticmethod
    def _decode_assets(entries: list[Any]) -> list[Currency]:
        """Decode asset entries, dropping those without name or symbol."""
        currencies = []
        for entry in entries:
            try:
                currencies.append(AssetEntry.model_validate(entry).to_currency())
            except ValidationError:
                continue
        return currencies
