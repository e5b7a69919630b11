"""CoinMarketCap REST adapter."""

from src.coinmarket.adapters.coinmarketcap.client import CoinMarketCapClient

__all__ = ["CoinMarketCapClient"]
