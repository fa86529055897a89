"""ntfy integration for push notifications."""

from .client import NotificationError, NtfyClient

__all__ = ["NotificationError", "NtfyClient"]
