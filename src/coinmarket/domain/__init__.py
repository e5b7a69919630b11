"""
Exchange Domain Layer.

This package contains display primitives that give semantic meaning and
formatting behaviour to exchange values. Records store raw numbers; the
primitives render them for the presentation shell.
"""

from src.coinmarket.domain.primitives import (
    NOT_AVAILABLE,
    LaunchDate,
    Percentage,
    Price,
    Volume,
    format_fee,
    format_launch_date,
    format_price,
    format_volume,
)

__all__ = [
    "NOT_AVAILABLE",
    "LaunchDate",
    "Percentage",
    "Price",
    "Volume",
    "format_fee",
    "format_launch_date",
    "format_price",
    "format_volume",
]
