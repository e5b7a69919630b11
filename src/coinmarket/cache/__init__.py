"""Image caching."""

from src.coinmarket.cache.image import CachedImage
from src.coinmarket.cache.image_cache import ImageCache
from src.coinmarket.cache.loader import ImageLoader

__all__ = [
    "CachedImage",
    "ImageCache",
    "ImageLoader",
]
