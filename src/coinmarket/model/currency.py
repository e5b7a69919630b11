"""
Currency domain model.

A currency is a tradable asset or fiat unit. Entries synthesized from partial
wire data (fiat symbol lists, market pair strings) carry no server id and may
lack a USD price. Within a collection currencies are unique by symbol.
"""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict


class Currency(BaseModel):
    """Immutable currency record."""

    id: int | None = None
    name: str | None = None
    symbol: str | None = None
    slug: str | None = None
    price_usd: float | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @classmethod
    def from_symbol(
        cls,
        symbol: str,
        *,
        id: int | None = None,
        price_usd: float | None = None,
    ) -> "Currency":
        """Synthesize a currency when the wire format only supplies a symbol."""
        return cls(
            id=id,
            name=symbol,
            symbol=symbol,
            slug=symbol.lower(),
            price_usd=price_usd,
        )


def merge_by_symbol(
    existing: Iterable[Currency], additions: Iterable[Currency]
) -> list[Currency]:
    """
    Append currencies whose symbol is not already present.

    Existing entries are never replaced; order is preserved.
    """
    merged = list(existing)
    seen = {currency.symbol for currency in merged}
    for currency in additions:
        if currency.symbol not in seen:
            merged.append(currency)
            seen.add(currency.symbol)
    return merged
