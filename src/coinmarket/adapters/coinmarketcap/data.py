"""
CoinMarketCap REST API Pydantic Models.

This module implements Pydantic models that parse CoinMarketCap responses and
translate them into domain records. Every response is an object of shape
``{status: {...}, data: ...}`` where the shape of ``data`` depends on the
endpoint.

Key design principles:
- Wire models inherit ONLY from BaseModel
- Fields mirror the wire names; conversion methods build domain models
- Batch-path fields are lenient: a value of the wrong type decodes as None
- Entries are validated one at a time so a bad entry never sinks a batch
"""

from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from src.coinmarket.model.currency import Currency
from src.coinmarket.model.exchange import Exchange, ExchangeUrls
from src.coinmarket.model.market import Market


def _lenient_float(value: Any) -> float | None:
    """Convert numbers and numeric strings to float, anything else to None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _lenient_int(value: Any) -> int | None:
    """Accept integers only; anything else decodes as None."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _lenient_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _lenient_str_list(value: Any) -> list[str] | None:
    """Accept a list made only of strings; anything else decodes as None."""
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    return None


def _lenient_object(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


LenientFloat = Annotated[float | None, BeforeValidator(_lenient_float)]
LenientInt = Annotated[int | None, BeforeValidator(_lenient_int)]
LenientStr = Annotated[str | None, BeforeValidator(_lenient_str)]
LenientStrList = Annotated[list[str] | None, BeforeValidator(_lenient_str_list)]


# Envelope Models
class CmcStatus(BaseModel):
    """Status block present on every response, including error responses."""

    timestamp: str | None = None
    error_code: int | None = None
    error_message: str | None = None
    elapsed: int | None = None
    credit_count: int | None = None

    model_config = ConfigDict(extra="ignore")


class CmcErrorEnvelope(BaseModel):
    """Body of a non-2xx response that carries a structured error message."""

    status: CmcStatus

    model_config = ConfigDict(extra="ignore")

    @property
    def message(self) -> str | None:
        """Server-reported error message."""
        return self.status.error_message


# Exchange Map Models
class ExchangeMapEntry(BaseModel):
    """One record of the discovery endpoint; only the id is used."""

    id: int
    name: str | None = None
    slug: str | None = None

    model_config = ConfigDict(extra="ignore")


# Exchange Info Models
class ExchangeUrlsData(BaseModel):
    """Link lists of an info record; a non-list category decodes as None."""

    website: LenientStrList = None
    twitter: LenientStrList = None
    blog: LenientStrList = None
    chat: LenientStrList = None
    fee: LenientStrList = None

    model_config = ConfigDict(extra="ignore")

    def to_urls(self) -> ExchangeUrls:
        """Transform to the domain link record."""
        return ExchangeUrls(
            website=self.website,
            twitter=self.twitter,
            blog=self.blog,
            chat=self.chat,
            fee=self.fee,
        )


class ExchangeInfoData(BaseModel):
    """
    One entry of a batched info response.

    Every field is optional and decoded on its own: a value of the wrong
    type becomes None without discarding the rest of the record.
    """

    id: LenientInt = None
    name: LenientStr = None
    slug: LenientStr = None
    logo: LenientStr = None
    description: LenientStr = None
    date_launched: LenientStr = None
    urls: Annotated[ExchangeUrlsData | None, BeforeValidator(_lenient_object)] = None
    spot_volume_usd: LenientFloat = None
    maker_fee: LenientFloat = None
    taker_fee: LenientFloat = None
    weekly_visits: LenientInt = None
    num_market_pairs: LenientInt = Field(
        default=None,
        validation_alias=AliasChoices("num_market_pairs", "num_markets"),
    )
    num_coins: LenientInt = None
    fiats: LenientStrList = None

    model_config = ConfigDict(extra="ignore")

    def to_exchange(self, key: str) -> Exchange:
        """
        Transform to the domain exchange.

        The id comes from the map key when it is numeric, otherwise from the
        record itself (0 when absent). Missing name and slug become empty
        strings.
        """
        try:
            exchange_id = int(key)
        except ValueError:
            exchange_id = self.id or 0
        return Exchange(
            id=exchange_id,
            name=self.name or "",
            slug=self.slug or "",
            logo=self.logo,
            description=self.description,
            launch_date=self.date_launched,
            urls=self.urls.to_urls() if self.urls else None,
            spot_volume_usd=self.spot_volume_usd,
            maker_fee=self.maker_fee,
            taker_fee=self.taker_fee,
            weekly_visits=self.weekly_visits,
            num_markets=self.num_market_pairs,
            num_coins=self.num_coins,
            fiats=self.fiats,
        )


# Asset Holding Models
class AssetCurrency(BaseModel):
    """Currency block nested in an asset-holding entry."""

    name: str
    symbol: str
    crypto_id: LenientInt = None
    price_usd: LenientFloat = None

    model_config = ConfigDict(extra="ignore")

    def to_currency(self) -> Currency:
        """Transform to the domain currency."""
        return Currency(
            id=self.crypto_id,
            name=self.name,
            symbol=self.symbol,
            slug=self.symbol.lower(),
            price_usd=self.price_usd,
        )


class AssetEntry(BaseModel):
    """One asset-holding entry: ``{currency: {...}, balance: ...}``."""

    currency: AssetCurrency

    model_config = ConfigDict(extra="ignore")


# Market Pair Models
class UsdQuote(BaseModel):
    """USD quote of a market pair."""

    price: LenientFloat = None
    volume_24h: LenientFloat = None

    model_config = ConfigDict(extra="ignore")


class MarketPairData(BaseModel):
    """One entry of the ``market_pairs`` array."""

    market_pair: LenientStr = None
    category: LenientStr = None
    fee_type: LenientStr = None
    quote: Annotated[dict[str, Any] | None, BeforeValidator(_lenient_object)] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def usd(self) -> UsdQuote | None:
        """USD quote, when the nested object is present."""
        if self.quote is None:
            return None
        usd = self.quote.get("USD")
        if not isinstance(usd, dict):
            return None
        return UsdQuote.model_validate(usd)

    def to_market(self, exchange_id: int, index: int) -> Market:
        """Transform to the domain market with a synthesized id."""
        usd = self.usd
        return Market(
            id=f"{exchange_id}_{index}",
            market_pair=self.market_pair,
            category=self.category,
            fee_type=self.fee_type,
            volume_usd=usd.volume_24h if usd else None,
            price_usd=usd.price if usd else None,
            price_quote=None,
        )
