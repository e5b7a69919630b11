"""
Enums for the exchange client.

This module defines the standardized enum values used throughout the client.
These enums represent the vocabulary shared by the view-models and the
presentation shell that observes them.

"""

from __future__ import annotations

import enum

# =============================================================================
# VIEW STATE ENUMS
# =============================================================================


class ViewStateKind(str, enum.Enum):
    """
    Tags of the view-state union.

    Exactly one tag is active on a ViewState at a time.
    """

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    ERROR = "error"


# =============================================================================
# REMOTE API ENUMS
# =============================================================================


class Endpoint(str, enum.Enum):
    """Paths of the remote API endpoints, relative to the base URL."""

    EXCHANGE_MAP = "/exchange/map"
    EXCHANGE_INFO = "/exchange/info"
    EXCHANGE_ASSETS = "/exchange/assets"
    EXCHANGE_MARKET_PAIRS = "/exchange/market-pairs/latest"


class SortOrder(str, enum.Enum):
    """Sort hints accepted by the discovery endpoint."""

    VOLUME_24H = "volume_24h"
    ID = "id"


class ImageFormat(str, enum.Enum):
    """Image formats recognised by their leading signature bytes."""

    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"
    WEBP = "webp"
