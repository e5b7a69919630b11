"""
Exchange list state machine.

Owns the paginated collection of exchanges and publishes a ViewState to its
observers:

    idle -> loading -> loaded(page) -> loaded(more) ... | empty | error

The first page fetches the whole result set once (under the retry policy)
and caches it; every page, including the first, is a window of
``page_size`` items over that cached set. A failure on the first page is
published as ``error``; a failure on a later page is logged and swallowed so
the rows already shown stay valid.

All methods must be called from the event loop that owns the instance; state
is only mutated there, so observers see transitions in order.
"""

import asyncio
import logging

from src.coinmarket.config import PaginationConfig
from src.coinmarket.connection.retry import RetryPolicy
from src.coinmarket.domain.primitives import format_launch_date, format_volume
from src.coinmarket.model.exchange import Exchange
from src.coinmarket.model.samples import SAMPLE_EXCHANGES
from src.coinmarket.model.view_state import ViewState
from src.coinmarket.protocols.client import (
    ExchangeListObserver,
    MarketDataClientProtocol,
)
from src.coinmarket.service.scope import TaskScope

logger = logging.getLogger(__name__)


class ExchangeListState(TaskScope):
    """List pagination view-model."""

    def __init__(
        self,
        client: MarketDataClientProtocol,
        retry: RetryPolicy | None = None,
        config: PaginationConfig | None = None,
        samples: tuple[Exchange, ...] = SAMPLE_EXCHANGES,
    ) -> None:
        """
        Initialize the list state.

        Args:
            client: Market-data client
            retry: Retry policy composed around the first-page fetch
            config: Pagination settings
            samples: Records served by the offline load path

        """
        super().__init__()
        self._client = client
        self._retry = retry or RetryPolicy.with_defaults()
        self.config = config or PaginationConfig()
        self._samples = samples

        self._state: ViewState[list[Exchange]] = ViewState.idle()
        self._observers: list[ExchangeListObserver] = []

        # Pagination cursor over the cached result set
        self._all_exchanges: list[Exchange] = []
        self._current_page = 0
        self._page_task: asyncio.Task[None] | None = None
        self.is_loading_more = False
        self.has_more_pages = True

    # =========================================================
    # OBSERVATION
    # =========================================================

    @property
    def state(self) -> ViewState[list[Exchange]]:
        return self._state

    def subscribe(self, observer: ExchangeListObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: ExchangeListObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def invalidate(self) -> None:
        super().invalidate()
        self._observers.clear()

    def _set_state(self, state: ViewState[list[Exchange]]) -> None:
        self._state = state
        logger.debug(f"Exchange list -> {state.kind.value}")
        for observer in list(self._observers):
            observer.on_state_changed(state)

    # =========================================================
    # ACCESSORS
    # =========================================================

    @property
    def exchanges(self) -> list[Exchange]:
        """Rows currently displayed."""
        return list(self._state.data or [])

    @property
    def number_of_exchanges(self) -> int:
        return len(self._state.data or [])

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def total_available(self) -> int:
        """Size of the cached result set."""
        return len(self._all_exchanges)

    def exchange_at(self, index: int) -> Exchange | None:
        rows = self._state.data or []
        if 0 <= index < len(rows):
            return rows[index]
        return None

    def formatted_volume(self, exchange: Exchange) -> str:
        return format_volume(exchange.spot_volume_usd)

    def formatted_date(self, exchange: Exchange) -> str:
        return format_launch_date(exchange.launch_date)

    # =========================================================
    # INTENTS
    # =========================================================

    def fetch_exchanges(self, use_mock: bool = False) -> asyncio.Task[None] | None:
        """
        Start a fresh load from the first page.

        Ignored while a base load is running. A later-page load still in
        flight is cancelled.

        Args:
            use_mock: Serve the static sample records instead of the network

        Returns:
            The scheduled task, or None when the intent was ignored

        """
        if not self.is_alive or self._state.is_loading:
            return None

        if self._page_task is not None and not self._page_task.done():
            self._page_task.cancel()
        self._page_task = None
        self.is_loading_more = False

        self._current_page = 0
        self._all_exchanges = []
        self.has_more_pages = True
        self._set_state(ViewState.loading())

        if use_mock:
            return self._spawn(self._load_samples())
        return self._load_page()

    def load_more_if_needed(self, current_index: int) -> asyncio.Task[None] | None:
        """
        Load the next page when the shell nears the end of the list.

        Returns:
            The scheduled task, or None when nothing needs loading

        """
        if (
            self.is_loading_more
            or self._state.is_loading
            or not self.has_more_pages
            or current_index < self.number_of_exchanges - self.config.prefetch_threshold
        ):
            return None
        return self._load_page()

    # =========================================================
    # PAGE LOADING
    # =========================================================

    def _load_page(self) -> asyncio.Task[None] | None:
        if self.is_loading_more or not self.is_alive:
            return None

        self.is_loading_more = True
        self._page_task = self._spawn(self._run_page(self._current_page == 0))
        return self._page_task

    async def _run_page(self, is_first_page: bool) -> None:
        try:
            if is_first_page:
                all_data = await self._retry.execute(
                    lambda: self._client.fetch_exchanges(limit=self.config.fetch_limit)
                )
            else:
                all_data = self._all_exchanges
        except Exception as e:
            if not self.is_alive:
                return
            self.is_loading_more = False
            if is_first_page:
                logger.error(f"Loading exchanges failed: {e}")
                self._set_state(ViewState.error(e))
            else:
                logger.warning(f"Loading page {self._current_page + 1} failed: {e}")
            return

        if not self.is_alive:
            return
        if is_first_page:
            self._all_exchanges = list(all_data)
        self._apply_window(is_first_page)

    def _apply_window(self, is_first_page: bool) -> None:
        total = len(self._all_exchanges)
        start = self._current_page * self.config.page_size
        end = min(start + self.config.page_size, total)

        if start >= total:
            self.has_more_pages = False
            self.is_loading_more = False
            if is_first_page:
                self._set_state(ViewState.empty())
            return

        displayed = self.exchanges + self._all_exchanges[start:end]
        self._current_page += 1
        self.is_loading_more = False
        if end >= total:
            self.has_more_pages = False

        if displayed:
            self._set_state(ViewState.loaded(displayed))
        else:
            self._set_state(ViewState.empty())

    async def _load_samples(self) -> None:
        await asyncio.sleep(self.config.mock_delay)
        if not self.is_alive:
            return

        samples = list(self._samples)
        self.has_more_pages = False
        if not samples:
            self._set_state(ViewState.empty())
            return

        self._all_exchanges = samples
        self._current_page = 1
        self._set_state(ViewState.loaded(samples))
