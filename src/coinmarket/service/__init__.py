"""View-model state machines consumed by the presentation shell."""

from src.coinmarket.service.exchange_detail import (
    ExchangeDetailState,
    currencies_from_markets,
)
from src.coinmarket.service.exchange_list import ExchangeListState

__all__ = [
    "ExchangeDetailState",
    "ExchangeListState",
    "currencies_from_markets",
]
