"""
Composition root for the exchange client.

Builds the long-lived shared instances once (market-data client, image cache,
image loader, retry policy) and hands them to the view-models it creates.
The presentation shell holds one CoinMarketApp for the life of the process.
"""

import logging

import httpx

from src.coinmarket.adapters.coinmarketcap.client import CoinMarketCapClient
from src.coinmarket.cache.image_cache import ImageCache
from src.coinmarket.cache.loader import ImageLoader
from src.coinmarket.config import CoinMarketConfig, configure_logging
from src.coinmarket.connection.retry import RetryPolicy
from src.coinmarket.model.exchange import Exchange
from src.coinmarket.protocols.client import MarketDataClientProtocol
from src.coinmarket.service.exchange_detail import ExchangeDetailState
from src.coinmarket.service.exchange_list import ExchangeListState

logger = logging.getLogger(__name__)


class CoinMarketApp:
    """Owner of the process-wide shared instances."""

    def __init__(
        self,
        config: CoinMarketConfig | None = None,
        client: MarketDataClientProtocol | None = None,
        image_cache: ImageCache | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the application container.

        Args:
            config: Root configuration (defaults read from the environment)
            client: Market-data client; a CoinMarketCapClient by default
            image_cache: Image cache; built from ``config.cache`` by default
            http_client: httpx client shared by the default client and loader

        """
        self.config = config or CoinMarketConfig.from_env()
        configure_logging(self.config.log_level)

        self.retry = RetryPolicy.from_config(self.config.retry)
        self._owned_client: CoinMarketCapClient | None = None
        if client is None:
            self._owned_client = CoinMarketCapClient(self.config.api, http_client)
            client = self._owned_client
        self.client = client
        self.image_cache = image_cache or ImageCache(self.config.cache)
        self.image_loader = ImageLoader(
            self.image_cache,
            http_client=http_client,
            timeout=self.config.api.request_timeout,
        )

    async def __aenter__(self) -> "CoinMarketApp":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def exchange_list(self) -> ExchangeListState:
        """Create the list view-model."""
        return ExchangeListState(
            self.client,
            retry=self.retry,
            config=self.config.pagination,
        )

    def exchange_detail(self, exchange: Exchange) -> ExchangeDetailState:
        """Create a detail view-model for a selected exchange."""
        return ExchangeDetailState(
            exchange,
            self.client,
            retry=self.retry,
            config=self.config.pagination,
        )

    async def aclose(self) -> None:
        """Release network clients and stop the disk I/O worker."""
        if self._owned_client is not None:
            await self._owned_client.aclose()
        await self.image_loader.aclose()
        self.image_cache.close()
        logger.debug("CoinMarketApp closed")
