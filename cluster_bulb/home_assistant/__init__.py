"""Home Assistant integration for the indicator light."""

from .client import LightClient, LightError

__all__ = ["LightClient", "LightError"]
