"""Наложение графики (надписей) на кадры экрана."""

from app.overlay.base import Layer
from app.overlay.cv_renderer import CvOverlayRenderer
from app.overlay.layers import CaptionLayer

__all__ = [
    "Layer",
    "CvOverlayRenderer",
    "CaptionLayer",
]
