"""
Display primitives for exchange data.

These primitives give semantic meaning and formatting behaviour to the plain
numbers and strings stored on the domain records. Records keep raw values;
view-models wrap them in a primitive only to render them.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

NOT_AVAILABLE = "N/A"


class Volume(BaseModel):
    """
    Trading volume in USD.

    Large values are abbreviated with a B/M/K suffix.
    """

    value: float = Field(description="Volume in USD")

    model_config = ConfigDict(frozen=True)

    def format_display(self) -> str:
        """Format volume for display."""
        if self.value >= 1_000_000_000:
            return f"${self.value / 1_000_000_000:.2f}B"
        if self.value >= 1_000_000:
            return f"${self.value / 1_000_000:.2f}M"
        if self.value >= 1_000:
            return f"${self.value / 1_000:.2f}K"
        return f"${self.value:,.2f}"

    def __str__(self) -> str:
        """String representation."""
        return self.format_display()


class Price(BaseModel):
    """A USD price."""

    value: float = Field(description="Price in USD")

    model_config = ConfigDict(frozen=True)

    def format_display(self, decimals: int = 4) -> str:
        """Format price for display."""
        return f"${self.value:.{decimals}f}"

    def __str__(self) -> str:
        """String representation."""
        return self.format_display()


class Percentage(BaseModel):
    """
    Represents a percentage in percent units (0.1 = 0.1%, 50 = 50%).

    Exchange fees arrive as plain percentages, not fractions.
    """

    value: float = Field(description="Percentage in percent units (0.1 = 0.1%)")

    model_config = ConfigDict(frozen=True)

    def as_fraction(self) -> float:
        """Convert to a fraction (0.1% -> 0.001)."""
        return self.value / 100

    def format_display(self, decimals: int = 2) -> str:
        """Format percentage for display."""
        return f"{self.value:.{decimals}f}%"

    def __str__(self) -> str:
        """String representation."""
        return self.format_display()


class LaunchDate(BaseModel):
    """
    An ISO-8601 launch timestamp as sent by the API.

    The raw string is kept; rendering falls back to it when it cannot be
    parsed.
    """

    raw: str

    model_config = ConfigDict(frozen=True)

    def parse(self) -> datetime | None:
        """Parse the timestamp, accepting a trailing Z."""
        try:
            return datetime.fromisoformat(self.raw.replace("Z", "+00:00"))
        except ValueError:
            return None

    def format_medium(self) -> str:
        """Render as e.g. ``Jul 14, 2017``."""
        parsed = self.parse()
        if parsed is None:
            return self.raw
        return f"{parsed:%b} {parsed.day}, {parsed.year}"

    def format_long(self) -> str:
        """Render as e.g. ``July 14, 2017``."""
        parsed = self.parse()
        if parsed is None:
            return self.raw
        return f"{parsed:%B} {parsed.day}, {parsed.year}"

    def __str__(self) -> str:
        """String representation."""
        return self.format_medium()


def format_volume(value: float | None) -> str:
    """Abbreviated USD volume, or N/A."""
    return NOT_AVAILABLE if value is None else Volume(value=value).format_display()


def format_price(value: float | None) -> str:
    """USD price with four decimals, or N/A."""
    return NOT_AVAILABLE if value is None else Price(value=value).format_display()


def format_fee(value: float | None) -> str:
    """Fee percentage with two decimals, or N/A."""
    return NOT_AVAILABLE if value is None else Percentage(value=value).format_display()


def format_launch_date(value: str | None, long: bool = False) -> str:
    """Launch date in medium (or long) style, or N/A."""
    if value is None:
        return NOT_AVAILABLE
    date = LaunchDate(raw=value)
    return date.format_long() if long else date.format_medium()
