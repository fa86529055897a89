"""ntfy client for push notifications."""

import logging

import httpx

from ..config import NotifySettings

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10.0
MIN_PRIORITY = 1
MAX_PRIORITY = 5


class NotificationError(Exception):
    """Raised when a notification is invalid or could not be delivered."""


class NtfyClient:
    """Publishes messages to an ntfy topic."""

    def __init__(
        self, settings: NotifySettings, http_client: httpx.Client | None = None
    ) -> None:
        self.settings = settings
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.Client:
        """Get or create the underlying httpx client."""
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=REQUEST_TIMEOUT)
        return self._http_client

    def is_configured(self) -> bool:
        return self.settings.is_configured()

    def send(
        self,
        message: str,
        title: str | None = None,
        priority: int | None = None,
        tags: list[str] | None = None,
    ) -> bool:
        """Publish a message.

        Args:
            message: Notification body
            title: Title, defaults to the configured title
            priority: 1 (min) to 5 (max), defaults to the configured priority
            tags: Tags or emoji shortcodes, defaults to the configured tags

        Returns:
            True if the message was published, False if no server is set

        Raises:
            NotificationError: If the destination or priority is invalid, or
                the server rejects the message
        """
        if not self.settings.server:
            return False
        if not self.settings.topic:
            raise NotificationError("ntfy topic is required when a server is set")

        priority = self.settings.priority if priority is None else priority
        if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
            raise NotificationError(
                f"Priority {priority} out of range ({MIN_PRIORITY}-{MAX_PRIORITY})"
            )

        payload = {
            "topic": self.settings.topic,
            "message": message,
            "title": title or self.settings.title,
            "priority": priority,
            "tags": self.settings.tags if tags is None else tags,
        }
        headers = {}
        if self.settings.token:
            headers["Authorization"] = f"Bearer {self.settings.token}"

        try:
            response = self.http_client.post(
                self.settings.server.rstrip("/"), json=payload, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"ntfy returned status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise NotificationError(f"Error sending notification: {e}") from e

        logger.info("Notification published to topic %s", self.settings.topic)
        return True

    def close(self) -> None:
        if self._http_client is not None:
            self._http_client.close()
