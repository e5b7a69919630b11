"""Exchange data models."""

from src.coinmarket.model.currency import Currency, merge_by_symbol
from src.coinmarket.model.exchange import (
    Exchange,
    ExchangeUrls,
    compare_by_volume,
    sort_by_volume,
)
from src.coinmarket.model.market import Market
from src.coinmarket.model.samples import SAMPLE_EXCHANGES
from src.coinmarket.model.view_state import ViewState

__all__ = [
    "SAMPLE_EXCHANGES",
    "Currency",
    "Exchange",
    "ExchangeUrls",
    "Market",
    "ViewState",
    "compare_by_volume",
    "merge_by_symbol",
    "sort_by_volume",
]
