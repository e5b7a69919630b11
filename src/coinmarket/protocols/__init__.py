"""Exchange client protocols."""

from src.coinmarket.protocols.client import (
    ExchangeDetailObserver,
    ExchangeListObserver,
    MarketDataClientProtocol,
)

__all__ = [
    "ExchangeDetailObserver",
    "ExchangeListObserver",
    "MarketDataClientProtocol",
]
