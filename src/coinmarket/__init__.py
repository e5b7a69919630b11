"""Exchange listing client package."""

from src.coinmarket.app import CoinMarketApp
from src.coinmarket.model import Exchange, ViewState

__all__ = ["CoinMarketApp", "Exchange", "ViewState"]
