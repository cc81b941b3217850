"""Webcam viewer with a live pose skeleton overlay."""

__version__ = "0.1.0"
