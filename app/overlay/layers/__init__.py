"""Слои оверлея."""

from app.overlay.layers.caption import CaptionLayer

__all__ = ["CaptionLayer"]
