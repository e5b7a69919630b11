"""
Protocol Layer for the Exchange Client.

This module defines the contracts between the view-models, the market-data
client and the presentation shell. Production and test implementations are
interchangeable variants behind these protocols; nothing inherits from them.

Key design principles:
- Capability sets: a client is anything offering the four fetch coroutines
- Message passing: observers receive one of a closed set of notifications
- Structural typing: implementations satisfy protocols by shape
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.coinmarket.model.currency import Currency
    from src.coinmarket.model.exchange import Exchange
    from src.coinmarket.model.market import Market
    from src.coinmarket.model.view_state import ViewState


# =============================================================================
# CLIENT PROTOCOLS
# =============================================================================


@runtime_checkable
class MarketDataClientProtocol(Protocol):
    """
    Protocol for the remote market-data client.

    Semantic Role: Single authority for remote calls
    Relationships:
    - Used by: ExchangeListState, ExchangeDetailState
    - Produces: Exchange, Currency and Market records
    - Failure contract: raises MarketDataError subclasses
    """

    async def fetch_exchanges(self, limit: int = 50) -> list[Exchange]:
        """
        Discover exchanges and enrich them with their info records.

        Semantic Role: Exchange listing
        Relationships:
        - Two stages: discovery, then one batched info request
        - Ordering: volume descending, name as fallback

        Args:
            limit: Discovery limit

        Returns:
            At most the discovery cap of exchanges

        """
        ...

    async def fetch_exchange_info(self, exchange_id: int) -> Exchange:
        """
        Fetch the full info record of one exchange.

        Semantic Role: Detail enrichment
        Relationships:
        - Replaces: the list-level record held by a detail view-model

        Args:
            exchange_id: Server-assigned exchange id

        Returns:
            The decoded exchange

        """
        ...

    async def fetch_exchange_assets(self, exchange_id: int) -> list[Currency]:
        """
        Fetch the currencies held by an exchange.

        Semantic Role: Asset holdings
        Relationships:
        - Partial data: entries without name or symbol are dropped

        Args:
            exchange_id: Server-assigned exchange id

        Returns:
            Held currencies, possibly empty

        """
        ...

    async def fetch_exchange_market_pairs(
        self, exchange_id: int, limit: int = 100
    ) -> list[Market]:
        """
        Fetch the market pairs listed on an exchange.

        Semantic Role: Market listing
        Relationships:
        - Identity: market ids are synthesized from exchange id and position

        Args:
            exchange_id: Server-assigned exchange id
            limit: Maximum number of pairs

        Returns:
            Markets in server order

        """
        ...


# =============================================================================
# OBSERVER PROTOCOLS
# =============================================================================


@runtime_checkable
class ExchangeListObserver(Protocol):
    """
    Protocol for consumers of the exchange list state machine.

    Semantic Role: Presentation sink
    Relationships:
    - Notified by: ExchangeListState on every state transition
    - Ordering: transitions arrive in the order they happened
    """

    def on_state_changed(self, state: ViewState[list[Exchange]]) -> None:
        """Receive the new list view-state."""
        ...


@runtime_checkable
class ExchangeDetailObserver(Protocol):
    """
    Protocol for consumers of the exchange detail view-model.

    Semantic Role: Presentation sink
    Relationships:
    - Notified by: ExchangeDetailState after each fetch completes
    - Variants: details updated, markets updated, failure
    """

    def on_details_updated(self) -> None:
        """The held exchange was replaced by a fresh info record."""
        ...

    def on_markets_updated(self) -> None:
        """Markets or currencies were replaced."""
        ...

    def on_failure(self, error: Exception) -> None:
        """A fetch failed; the previous data is still held."""
        ...
