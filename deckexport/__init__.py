"""deckexport - shareable deck images for the card game deck builder."""

__version__ = "0.1.0"
