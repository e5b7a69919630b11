"""Market pair domain model."""

from pydantic import BaseModel, ConfigDict, Field


class Market(BaseModel):
    """
    One tradable base/quote combination on an exchange.

    The id is synthesized as ``"{exchange_id}_{index}"`` when the source has no
    stable identifier.
    """

    id: str = Field(alias="market_id")
    market_pair: str | None = None
    category: str | None = None
    fee_type: str | None = None
    volume_usd: float | None = None
    price_usd: float | None = None
    price_quote: float | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @property
    def symbols(self) -> list[str]:
        """Whitespace-trimmed components of the pair, base first."""
        if not self.market_pair:
            return []
        return [part.strip() for part in self.market_pair.split("/")]

    @property
    def base_symbol(self) -> str | None:
        """Base-side symbol of the pair."""
        parts = self.symbols
        return parts[0] if parts else None

    @property
    def quote_symbol(self) -> str | None:
        """Quote-side symbol of the pair."""
        parts = self.symbols
        return parts[1] if len(parts) > 1 else None
