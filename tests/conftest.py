"""Test configuration and fixtures for the entire test suite."""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from dotenv import load_dotenv

from src.coinmarket.cache.image_cache import ImageCache
from src.coinmarket.config import CacheConfig, PaginationConfig


# Add the project root to the Python path
@pytest.fixture(scope="session", autouse=True)
def setup_path() -> None:
    """Add the project root to the Python path."""
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

    # Load environment variables from .env file
    load_dotenv()


@pytest.fixture
def cache_config(tmp_path: Path) -> CacheConfig:
    """Image cache settings rooted in a temporary directory."""
    return CacheConfig(directory=tmp_path / "ImageCache")


@pytest.fixture
def image_cache(cache_config: CacheConfig) -> Iterator[ImageCache]:
    """Image cache whose I/O worker is stopped after the test."""
    cache = ImageCache(cache_config)
    yield cache
    cache.close()


@pytest.fixture
def fast_pagination() -> PaginationConfig:
    """Pagination settings without simulated latency."""
    return PaginationConfig(mock_delay=0.0)
