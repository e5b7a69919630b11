"""
CoinMarket client configuration using Pydantic Settings.

This module provides configuration management for the exchange client,
allowing environment-based configuration with type validation and defaults.
Every default matches the behaviour of an unconfigured process.
"""

import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CACHE_DIRECTORY = Path.home() / ".cache" / "coinmarket" / "ImageCache"


class ApiConfig(BaseSettings):
    """Remote market-data API configuration."""

    model_config = SettingsConfigDict(env_prefix="COINMARKET_API_")

    base_url: str = "https://pro-api.coinmarketcap.com/v1"
    api_key: str = Field(default="", description="CoinMarketCap API key")
    api_key_header: str = "X-CMC_PRO_API_KEY"

    # Timeouts
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request (connect/read/write) timeout in seconds",
    )
    resource_timeout: float = Field(
        default=60.0,
        gt=0.0,
        description="Upper bound for a whole request in seconds",
    )

    # Exchange discovery
    discovery_cap: int = Field(
        default=20,
        ge=1,
        description="Maximum number of discovered ids sent to the info endpoint",
    )


class RetryConfig(BaseSettings):
    """Retry and backoff configuration."""

    model_config = SettingsConfigDict(env_prefix="COINMARKET_RETRY_")

    max_attempts: int = Field(default=3, ge=1, le=20)
    initial_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Delay before the second attempt in seconds",
    )
    max_delay: float = Field(
        default=8.0,
        ge=0.0,
        description="Backoff ceiling in seconds",
    )


class CacheConfig(BaseSettings):
    """Image cache configuration."""

    model_config = SettingsConfigDict(env_prefix="COINMARKET_CACHE_")

    count_limit: int = Field(default=100, ge=1, description="Maximum images in memory")
    total_cost_limit: int = Field(
        default=50 * 1024 * 1024,
        ge=1,
        description="Maximum total memory cost in bytes",
    )
    directory: Path = Field(
        default=DEFAULT_CACHE_DIRECTORY,
        description="Directory holding one file per cached image",
    )
    file_suffix: str = ".jpg"


class PaginationConfig(BaseSettings):
    """Exchange list pagination configuration."""

    model_config = SettingsConfigDict(env_prefix="COINMARKET_PAGINATION_")

    page_size: int = Field(default=20, ge=1, le=500)
    prefetch_threshold: int = Field(
        default=5,
        ge=0,
        description="Rows from the end of the list that trigger the next page",
    )
    fetch_limit: int = Field(
        default=50,
        ge=1,
        description="Discovery limit used for the first page",
    )
    market_pairs_limit: int = Field(default=50, ge=1, le=5000)
    mock_delay: float = Field(
        default=0.5,
        ge=0.0,
        description="Simulated latency of the sample-data load path",
    )


class CoinMarketConfig(BaseSettings):
    """Root configuration combining all sub-configs."""

    model_config = SettingsConfigDict(env_prefix="COINMARKET_")

    # Sub-configurations
    api: ApiConfig = Field(default_factory=ApiConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)

    # Global settings
    debug: bool = False
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )

    @model_validator(mode="after")
    def check_retry_ceiling(self) -> "CoinMarketConfig":
        """Reject a backoff ceiling below the initial delay."""
        if self.retry.max_delay < self.retry.initial_delay:
            raise ValueError("retry.max_delay must be >= retry.initial_delay")
        return self

    @classmethod
    def from_env(cls) -> "CoinMarketConfig":
        """
        Load configuration from environment variables.

        Returns:
            Configured CoinMarketConfig instance

        """
        return cls(
            api=ApiConfig(),
            retry=RetryConfig(),
            cache=CacheConfig(),
            pagination=PaginationConfig(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
