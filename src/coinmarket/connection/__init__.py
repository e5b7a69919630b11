"""Retrying connection helpers."""

from src.coinmarket.connection.retry import RetryPolicy, with_retry

__all__ = [
    "RetryPolicy",
    "with_retry",
]
