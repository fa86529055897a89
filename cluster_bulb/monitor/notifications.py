"""Edge-triggered "pull requests open" alert."""

import logging

from ..models import Issue
from ..ntfy.client import NotificationError, NtfyClient

logger = logging.getLogger(__name__)

MAX_LISTED_PULL_REQUESTS = 5


class NotificationGate:
    """Sends one alert per transition from no open pull requests to some.

    The gate remembers the last observed flag, so it fires again only after
    an observation with no open pull requests. Send failures are logged and
    never reported to the caller as errors.
    """

    def __init__(self, client: NtfyClient | None, repository: str = ""):
        self.client = client
        self.repository = repository
        self._open = False
        self.sent = 0

    def observe(self, pull_requests_open: bool, issues: list[Issue]) -> bool:
        """Record the current flag and alert on a rising edge.

        Args:
            pull_requests_open: Whether pull requests are open now
            issues: The open pull requests as issues

        Returns:
            True if this observation was a none-to-open transition
        """
        rising = pull_requests_open and not self._open
        if rising:
            self._send(issues)
        self._open = pull_requests_open
        return rising

    def format_message(self, issues: list[Issue]) -> str:
        where = f" in {self.repository}" if self.repository else ""
        lines = [f"{len(issues)} open pull request(s){where}"]
        for issue in issues[:MAX_LISTED_PULL_REQUESTS]:
            number = issue.key.removeprefix("pr/")
            lines.append(f"#{number} {issue.message}")
        if len(issues) > MAX_LISTED_PULL_REQUESTS:
            lines.append(f"... and {len(issues) - MAX_LISTED_PULL_REQUESTS} more")
        return "\n".join(lines)

    def _send(self, issues: list[Issue]) -> None:
        if self.client is None or not self.client.is_configured():
            logger.debug("Notifications not configured, skipping alert")
            return
        try:
            if self.client.send(self.format_message(issues)):
                self.sent += 1
        except NotificationError as e:
            logger.error("Failed to send pull request notification: %s", e)
