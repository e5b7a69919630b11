"""
Exchange domain model.

This model represents a cryptocurrency trading venue with its metadata, fees
and volume. It is immutable and rebuilt wholesale on every fetch; view-models
replace their copy atomically instead of mutating it.

Two decode paths exist:
- ``Exchange.model_validate`` is the strict path used for a single info
  record; a missing ``id`` or ``name`` is a validation error.
- ``ExchangeInfoData.to_exchange`` in the CoinMarketCap adapter is the
  permissive path used for batched info records; each field is decoded on
  its own and missing ``name``/``slug`` become empty strings.
"""

import functools
from collections.abc import Iterable
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.coinmarket.model.currency import Currency
from src.coinmarket.model.market import Market


class ExchangeUrls(BaseModel):
    """Categorized link lists published by an exchange."""

    website: list[str] | None = None
    twitter: list[str] | None = None
    blog: list[str] | None = None
    chat: list[str] | None = None
    fee: list[str] | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class Exchange(BaseModel):
    """Immutable exchange record."""

    id: int
    name: str
    slug: str | None = None
    logo: str | None = None
    description: str | None = None
    launch_date: str | None = Field(default=None, alias="date_launched")
    urls: ExchangeUrls | None = None
    spot_volume_usd: float | None = None
    maker_fee: float | None = None
    taker_fee: float | None = None
    weekly_visits: int | None = None
    num_markets: int | None = Field(
        default=None,
        validation_alias=AliasChoices("num_markets", "num_market_pairs"),
    )
    num_coins: int | None = None
    fiats: list[Currency] | None = None
    markets: list[Market] | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("fiats", mode="before")
    @classmethod
    def synthesize_fiats(cls, value: Any) -> Any:
        """
        Build currencies from a symbol-only list.

        The synthetic id is the 1-based position, the slug is the lowercased
        symbol and no USD price is known.
        """
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return [
                Currency.from_symbol(symbol, id=index)
                for index, symbol in enumerate(value, start=1)
            ]
        return value

    @property
    def website(self) -> str | None:
        """First published website URL."""
        if self.urls is None or not self.urls.website:
            return None
        return self.urls.website[0]


def compare_by_volume(left: Exchange, right: Exchange) -> int:
    """
    Order by spot volume descending when both sides have one, else by name.

    This is not a strict total order over mixed inputs; use it with a stable
    sort so that ties keep their incoming order.
    """
    if left.spot_volume_usd is not None and right.spot_volume_usd is not None:
        if left.spot_volume_usd > right.spot_volume_usd:
            return -1
        if left.spot_volume_usd < right.spot_volume_usd:
            return 1
        return 0
    if left.name < right.name:
        return -1
    if left.name > right.name:
        return 1
    return 0


def sort_by_volume(exchanges: Iterable[Exchange]) -> list[Exchange]:
    """Return exchanges stably sorted with ``compare_by_volume``."""
    return sorted(exchanges, key=functools.cmp_to_key(compare_by_volume))
