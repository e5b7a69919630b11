"""
Exchange detail view-model.

Holds one exchange plus its independently loaded markets and currencies.
Two in-flight guards prevent duplicate fetches of the same kind:
``is_loading_details`` for the info record, ``is_loading_markets`` shared
by the asset-holding and market-pair fetches. The guards are per kind, so a
details fetch and a markets fetch may run at the same time.

Results are reported to observers through on_details_updated,
on_markets_updated and on_failure. Every failure clears its guard.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from src.coinmarket.config import PaginationConfig
from src.coinmarket.connection.retry import RetryPolicy
from src.coinmarket.domain.primitives import (
    NOT_AVAILABLE,
    format_fee,
    format_launch_date,
    format_price,
)
from src.coinmarket.model.currency import Currency, merge_by_symbol
from src.coinmarket.model.exchange import Exchange
from src.coinmarket.model.market import Market
from src.coinmarket.protocols.client import (
    ExchangeDetailObserver,
    MarketDataClientProtocol,
)
from src.coinmarket.service.scope import TaskScope

logger = logging.getLogger(__name__)

T = TypeVar("T")


def currencies_from_markets(markets: Iterable[Market]) -> list[Currency]:
    """
    Derive currencies from ``BASE/QUOTE`` pair strings.

    Symbols are trimmed and deduplicated with the first occurrence winning.
    Only a quote-side occurrence carries the market's USD price.
    """
    found: dict[str, Currency] = {}
    for market in markets:
        for index, symbol in enumerate(market.symbols):
            if not symbol or symbol in found:
                continue
            found[symbol] = Currency.from_symbol(
                symbol,
                price_usd=market.price_usd if index == 1 else None,
            )
    return list(found.values())


class ExchangeDetailState(TaskScope):
    """Detail enrichment view-model for a single exchange."""

    def __init__(
        self,
        exchange: Exchange,
        client: MarketDataClientProtocol,
        retry: RetryPolicy | None = None,
        config: PaginationConfig | None = None,
    ) -> None:
        """
        Initialize the detail state.

        Args:
            exchange: Record selected in the list
            client: Market-data client
            retry: Optional retry policy composed around every fetch
            config: Pagination settings (market pair limit)

        """
        super().__init__()
        self._client = client
        self._retry = retry
        self.config = config or PaginationConfig()
        self._observers: list[ExchangeDetailObserver] = []

        self.exchange = exchange
        self.markets: list[Market] = []
        self.currencies: list[Currency] = []
        self.is_loading_details = False
        self.is_loading_markets = False

    # =========================================================
    # OBSERVATION
    # =========================================================

    def subscribe(self, observer: ExchangeDetailObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: ExchangeDetailObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def invalidate(self) -> None:
        super().invalidate()
        self._observers.clear()

    def _notify_details_updated(self) -> None:
        for observer in list(self._observers):
            observer.on_details_updated()

    def _notify_markets_updated(self) -> None:
        for observer in list(self._observers):
            observer.on_markets_updated()

    def _notify_failure(self, error: Exception) -> None:
        for observer in list(self._observers):
            observer.on_failure(error)

    # =========================================================
    # INTENTS
    # =========================================================

    def fetch_exchange_details(self) -> asyncio.Task[None] | None:
        """Replace the held exchange with its full info record."""
        if self.is_loading_details or not self.is_alive:
            return None
        self.is_loading_details = True
        return self._spawn(self._run_details())

    def fetch_currencies(self) -> asyncio.Task[None] | None:
        """Replace currencies with the exchange's asset holdings."""
        if self.is_loading_markets or not self.is_alive:
            return None
        self.is_loading_markets = True
        return self._spawn(self._run_currencies())

    def fetch_markets(self) -> asyncio.Task[None] | None:
        """Replace markets and merge in currencies derived from their pairs."""
        if self.is_loading_markets or not self.is_alive:
            return None
        self.is_loading_markets = True
        return self._spawn(self._run_markets())

    async def _call(self, operation: Callable[[], Awaitable[T]]) -> T:
        if self._retry is None:
            return await operation()
        return await self._retry.execute(operation)

    async def _run_details(self) -> None:
        exchange_id = self.exchange.id
        try:
            info = await self._call(lambda: self._client.fetch_exchange_info(exchange_id))
        except Exception as e:
            if self.is_alive:
                self.is_loading_details = False
                logger.error(f"Loading details of exchange {exchange_id} failed: {e}")
                self._notify_failure(e)
            return

        if not self.is_alive:
            return
        self.exchange = info
        if info.fiats is not None:
            self.currencies = list(info.fiats)
        self.is_loading_details = False
        self._notify_details_updated()

    async def _run_currencies(self) -> None:
        exchange_id = self.exchange.id
        try:
            currencies = await self._call(
                lambda: self._client.fetch_exchange_assets(exchange_id)
            )
        except Exception as e:
            if self.is_alive:
                self.is_loading_markets = False
                logger.error(f"Loading assets of exchange {exchange_id} failed: {e}")
                self._notify_failure(e)
            return

        if not self.is_alive:
            return
        self.currencies = list(currencies)
        self.is_loading_markets = False
        self._notify_markets_updated()

    async def _run_markets(self) -> None:
        exchange_id = self.exchange.id
        try:
            markets = await self._call(
                lambda: self._client.fetch_exchange_market_pairs(
                    exchange_id, limit=self.config.market_pairs_limit
                )
            )
        except Exception as e:
            if self.is_alive:
                self.is_loading_markets = False
                logger.error(f"Loading markets of exchange {exchange_id} failed: {e}")
                self._notify_failure(e)
            return

        if not self.is_alive:
            return
        self.markets = list(markets)
        self.currencies = merge_by_symbol(
            self.currencies, currencies_from_markets(self.markets)
        )
        self.is_loading_markets = False
        self._notify_markets_updated()

    # =========================================================
    # ACCESSORS
    # =========================================================

    @property
    def number_of_currencies(self) -> int:
        return len(self.currencies)

    def currency_at(self, index: int) -> Currency | None:
        if 0 <= index < len(self.currencies):
            return self.currencies[index]
        return None

    def formatted_website(self) -> str:
        return self.exchange.website or NOT_AVAILABLE

    def formatted_maker_fee(self) -> str:
        return format_fee(self.exchange.maker_fee)

    def formatted_taker_fee(self) -> str:
        return format_fee(self.exchange.taker_fee)

    def formatted_date(self) -> str:
        return format_launch_date(self.exchange.launch_date, long=True)

    def formatted_price(self, currency: Currency) -> str:
        return format_price(currency.price_usd)
