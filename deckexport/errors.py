"""Exceptions raised by the deck export engine."""


class DeckExportError(Exception):
    """Base class for deck export errors."""
    pass


class AssetUnavailable(DeckExportError):
    """An image reference could not be fetched or decoded.

    Only raised inside the asset loader; ``AssetLoader.load`` turns it
    into ``None`` so callers can skip the draw slot.
    """

    def __init__(self, ref: str, reason: str):
        super().__init__(f"{ref}: {reason}")
        self.ref = ref
        self.reason = reason


class CatalogError(DeckExportError):
    """Malformed catalog or deck input."""
    pass


class ConfigError(DeckExportError):
    """Invalid asset manifest or export configuration."""
    pass


class RenderError(DeckExportError):
    """The export could not produce an image at all."""
    pass
