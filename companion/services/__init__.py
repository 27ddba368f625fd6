"""Service layer exports."""

from . import device_channel

__all__ = ["device_channel"]
