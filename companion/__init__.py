"""Watchface settings companion service."""

__version__ = "1.0.0"
