"""Image asset loading.

Card art, chip icons, edition logos and the background template are all
image references: an http(s) URL, a ``data:`` URI or a local path.
Loading is best-effort per asset. ``AssetLoader.load`` returns ``None``
instead of raising, so a broken link only empties its own draw slot.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Optional, Protocol

import requests
from PIL import Image, UnidentifiedImageError

from deckexport.errors import AssetUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
USER_AGENT = "deckexport/0.1"


class ImageSource(Protocol):
    """Anything that turns an image reference into a bitmap or None."""

    def load(self, ref: str) -> Optional[Image.Image]:
        ...


class AssetLoader:
    """Fetch and decode images over HTTP or from disk."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
        base_dir: Optional[Path] = None,
    ):
        self.timeout = timeout
        self.base_dir = base_dir
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    def _read_bytes(self, ref: str) -> bytes:
        if ref.startswith(("http://", "https://")):
            try:
                response = self._session.get(ref, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as e:
                raise AssetUnavailable(ref, str(e)) from e
            return response.content

        if ref.startswith("data:"):
            _, _, payload = ref.partition(",")
            try:
                return base64.b64decode(payload, validate=True)
            except (binascii.Error, ValueError) as e:
                raise AssetUnavailable(ref[:40], f"bad data URI: {e}") from e

        path = Path(ref)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        try:
            return path.read_bytes()
        except (OSError, ValueError) as e:
            raise AssetUnavailable(ref, str(e)) from e

    def fetch(self, ref: str) -> Image.Image:
        """Load and decode one image as RGBA.

        Raises:
            AssetUnavailable: on network, file or decode errors
        """
        if not ref:
            raise AssetUnavailable(ref, "empty reference")
        data = self._read_bytes(ref)
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise AssetUnavailable(ref, f"decode failed: {e}") from e
        return image.convert("RGBA")

    def load(self, ref: str) -> Optional[Image.Image]:
        """Like ``fetch`` but returns None when the asset is unavailable."""
        try:
            return self.fetch(ref)
        except AssetUnavailable as e:
            logger.warning(f"Asset unavailable: {e}")
            return None


class AssetScope:
    """Per-export view of an image source.

    Each reference is loaded at most once per export; failures are
    remembered too, so a dead link is not retried for every copy of a
    card. Create one per export call and drop it afterwards.
    """

    def __init__(self, source: ImageSource):
        self._source = source
        self._images: dict[str, Optional[Image.Image]] = {}

    def get(self, ref: Optional[str]) -> Optional[Image.Image]:
        if not ref:
            return None
        if ref not in self._images:
            self._images[ref] = self._source.load(ref)
        return self._images[ref]
