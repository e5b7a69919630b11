"""
Two-tier image cache keyed by absolute URL.

The memory tier is an LRU bounded by entry count and total cost. The disk
tier keeps one file per image and is written on every insert. All disk I/O
runs on a single background worker, so it never blocks the caller and
operations reach the disk in the order they were issued.
"""

import asyncio
import hashlib
import logging
import shutil
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from cachetools import LRUCache

from src.coinmarket.cache.image import CachedImage
from src.coinmarket.config import CacheConfig

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 200


class BoundedImageLRU(LRUCache):
    """LRU cache bounded by total image cost and by entry count."""

    def __init__(self, count_limit: int, cost_limit: int) -> None:
        super().__init__(maxsize=cost_limit, getsizeof=lambda image: image.cost)
        self.count_limit = count_limit

    def __setitem__(self, key: str, value: CachedImage) -> None:  # type: ignore[override]
        if self.getsizeof(value) > self.maxsize:
            raise ValueError("value too large")
        if key not in self:
            while len(self) >= self.count_limit:
                self.popitem()
        super().__setitem__(key, value)


def sanitize_filename(url: str) -> str:
    """
    Encode a URL as a filename.

    ASCII letters and digits are kept; every other byte becomes ``_XX``.
    """
    encoded = "".join(
        char if char.isascii() and char.isalnum() else "".join(
            f"_{byte:02X}" for byte in char.encode("utf-8")
        )
        for char in url
    )
    if len(encoded) > MAX_FILENAME_LENGTH:
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
        encoded = f"{encoded[: MAX_FILENAME_LENGTH - 17]}_{digest}"
    return encoded


class ImageCache:
    """
    Memory plus disk cache for image payloads.

    One instance is meant to be shared by the whole process. ``set``,
    ``remove`` and ``clear`` act on memory immediately and queue their disk
    work; ``get`` reads disk through the same queue after a memory miss.
    """

    def __init__(self, config: CacheConfig | None = None) -> None:
        """
        Initialize the cache.

        Args:
            config: Cache settings (defaults read from the environment)

        """
        self.config = config or CacheConfig()
        self.directory = Path(self.config.directory)

        self._memory = BoundedImageLRU(
            count_limit=self.config.count_limit,
            cost_limit=self.config.total_cost_limit,
        )
        self._lock = threading.Lock()
        self._clears = 0
        self._removals: dict[str, int] = {}
        self._io = ThreadPoolExecutor(max_workers=1, thread_name_prefix="image-cache-io")
        self._submit(self._create_directory)

    def __len__(self) -> int:
        """Number of images in the memory tier."""
        with self._lock:
            return len(self._memory)

    @property
    def total_cost(self) -> int:
        """Current total cost of the memory tier."""
        with self._lock:
            return int(self._memory.currsize)

    def disk_path(self, url: str) -> Path:
        """File backing the image for ``url``."""
        return self.directory / f"{sanitize_filename(url)}{self.config.file_suffix}"

    def cached(self, url: str) -> CachedImage | None:
        """Memory-tier lookup only; never touches the disk."""
        with self._lock:
            return self._memory.get(url)

    async def get(self, url: str) -> CachedImage | None:
        """
        Look up an image.

        A memory hit returns without suspending. On a miss the disk file is
        read on the I/O worker and, when present, promoted to memory.
        """
        with self._lock:
            image = self._memory.get(url)
            generation = self._generation(url)
        if image is not None:
            return image

        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(
                self._io, self._read_file, self.disk_path(url)
            )
        except RuntimeError as e:
            logger.debug(f"Image cache closed, treating {url} as a miss: {e}")
            return None
        if data is None:
            return None

        image = CachedImage.from_bytes(data)
        if image is None:
            return None

        with self._lock:
            # removed or cleared while the read was in flight
            if self._generation(url) != generation:
                return None
            current = self._memory.get(url)
            if current is not None:
                return current
            self._insert(url, image)
        return image

    def set(self, image: CachedImage, url: str) -> None:
        """Insert into memory now and persist to disk in the background."""
        with self._lock:
            self._insert(url, image)
        self._submit(self._write_file, self.disk_path(url), image.data)

    def remove(self, url: str) -> None:
        """Drop one image from memory now and from disk in the background."""
        with self._lock:
            self._memory.pop(url, None)
            self._removals[url] = self._removals.get(url, 0) + 1
        self._submit(self._delete_file, self.disk_path(url))

    def clear(self) -> None:
        """Drop the memory tier now and recreate the disk directory in the background."""
        with self._lock:
            self._memory.clear()
            self._removals.clear()
            self._clears += 1
        self._submit(self._reset_directory)

    async def flush(self) -> None:
        """Wait until all disk work queued so far has run."""
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(self._io, lambda: None)
        except RuntimeError as e:
            logger.debug(f"Image cache closed, nothing to flush: {e}")

    def close(self) -> None:
        """Finish queued disk work and stop the I/O worker."""
        self._io.shutdown(wait=True)

    def _generation(self, url: str) -> tuple[int, int]:
        """Invalidation counter for ``url``; caller holds the lock."""
        return self._clears, self._removals.get(url, 0)

    def _insert(self, url: str, image: CachedImage) -> None:
        """Memory-tier insert; caller holds the lock."""
        try:
            self._memory[url] = image
        except ValueError:
            # cost above the whole tier's limit
            logger.debug(f"Image too large for memory tier: {url}")

    def _submit(self, fn: Callable[..., None], *args: object) -> None:
        """Queue disk work; dropped once the worker has been shut down."""
        try:
            self._io.submit(fn, *args)
        except RuntimeError as e:
            logger.debug(f"Image cache closed, skipping {fn.__name__}: {e}")

    # I/O worker only

    def _create_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug(f"Cannot create image cache directory: {e}")

    def _read_file(self, path: Path) -> bytes | None:
        try:
            return path.read_bytes()
        except OSError:
            return None

    def _write_file(self, path: Path, data: bytes) -> None:
        try:
            path.write_bytes(data)
        except OSError as e:
            logger.debug(f"Disk cache write failed for {path.name}: {e}")

    def _delete_file(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Disk cache delete failed for {path.name}: {e}")

    def _reset_directory(self) -> None:
        shutil.rmtree(self.directory, ignore_errors=True)
        self._create_directory()
