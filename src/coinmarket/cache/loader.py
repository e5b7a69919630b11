"""Network image loading through the shared image cache."""

import logging

import httpx

from src.coinmarket.cache.image import CachedImage
from src.coinmarket.cache.image_cache import ImageCache

logger = logging.getLogger(__name__)


class ImageLoader:
    """
    Resolve image URLs from the cache, falling back to an HTTP fetch.

    Failures never propagate: a URL that cannot be fetched or decoded simply
    yields None and the caller shows its placeholder.
    """

    def __init__(
        self,
        cache: ImageCache,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.cache = cache
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def load(self, url: str) -> CachedImage | None:
        """Return the image for ``url`` or None."""
        cached = await self.cache.get(url)
        if cached is not None:
            return cached

        try:
            response = await self._http.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug(f"Image fetch failed for {url}: {e}")
            return None

        if not response.is_success:
            logger.debug(f"Image fetch for {url} returned {response.status_code}")
            return None

        image = CachedImage.from_bytes(response.content)
        if image is None:
            logger.debug(f"Unrecognised image payload at {url}")
            return None

        self.cache.set(image, url)
        return image
