"""
Cached image payloads.

An image is an opaque encoded payload plus the pixel geometry used to weigh
it in the memory tier. Geometry is read from the PNG header when available;
other formats fall back to their encoded size as cost.
"""

import struct

from pydantic import BaseModel, ConfigDict, Field

from src.coinmarket.enums import ImageFormat

BYTES_PER_PIXEL = 4

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

MAGIC_SIGNATURES: tuple[tuple[bytes, ImageFormat], ...] = (
    (PNG_SIGNATURE, ImageFormat.PNG),
    (b"\xff\xd8", ImageFormat.JPEG),
    (b"GIF8", ImageFormat.GIF),
)


def sniff_format(data: bytes) -> ImageFormat | None:
    """Identify an image format from its leading bytes."""
    for signature, image_format in MAGIC_SIGNATURES:
        if data.startswith(signature):
            return image_format
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ImageFormat.WEBP
    return None


def png_dimensions(data: bytes) -> tuple[int, int] | None:
    """Read width and height from a PNG IHDR chunk."""
    if len(data) < 24 or not data.startswith(PNG_SIGNATURE) or data[12:16] != b"IHDR":
        return None
    width, height = struct.unpack(">II", data[16:24])
    return width, height


class CachedImage(BaseModel):
    """Encoded image bytes with optional pixel geometry."""

    data: bytes
    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    scale: float = Field(default=1.0, gt=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_bytes(cls, data: bytes, scale: float = 1.0) -> "CachedImage | None":
        """Wrap a recognised image payload; None for anything else."""
        if sniff_format(data) is None:
            return None
        dimensions = png_dimensions(data)
        if dimensions is None:
            return cls(data=data, scale=scale)
        width, height = dimensions
        return cls(data=data, width=width, height=height, scale=scale)

    @property
    def cost(self) -> int:
        """Memory cost in bytes: width * height * scale^2 * 4."""
        if self.width is None or self.height is None:
            return len(self.data)
        return int(self.width * self.height * self.scale * self.scale) * BYTES_PER_PIXEL
