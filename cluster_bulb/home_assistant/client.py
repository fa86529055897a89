"""Home Assistant client for driving the indicator light."""

import logging

import httpx

from ..config import LightSettings
from ..models import Color

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5.0


class LightError(Exception):
    """Raised when a light command could not be delivered."""


class LightClient:
    """Sends color commands to a Home Assistant light entity."""

    def __init__(
        self, settings: LightSettings, http_client: httpx.Client | None = None
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

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.token}",
            "Content-Type": "application/json",
        }

    def set_color(self, color: Color) -> bool:
        """Turn the light on with the given color and configured brightness.

        Args:
            color: RGB color to show

        Returns:
            True if a command was sent, False if the light is not configured

        Raises:
            LightError: If the request fails or Home Assistant rejects it
        """
        if not self.is_configured():
            return False

        payload = {
            "entity_id": self.settings.entity_id,
            "rgb_color": list(color),
            "brightness": self.settings.brightness,
        }
        url = f"{self.settings.url}/api/services/light/turn_on"
        try:
            response = self.http_client.post(url, json=payload, headers=self.headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LightError(
                f"Home Assistant returned status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise LightError(f"Error sending light command: {e}") from e

        logger.debug("Light %s set to %s", self.settings.entity_id, tuple(color))
        return True

    def close(self) -> None:
        if self._http_client is not None:
            self._http_client.close()
