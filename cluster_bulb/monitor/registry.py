"""Liveness tracking for detected issues."""

import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class IssueRegistry:
    """Maps issue keys to the time they were last seen unhealthy.

    A key is present only while the most recent collector pass that looked
    at it found it unhealthy. Both ``report`` and ``clear`` are idempotent.
    Callers must hold ``MonitorState.lock`` while mutating.
    """

    def __init__(self) -> None:
        self._issues: dict[str, datetime] = {}

    def report(self, key: str, now: datetime | None = None) -> None:
        """Mark key alive now."""
        if key not in self._issues:
            logger.warning("Issue detected: %s", key)
        self._issues[key] = now or datetime.now(timezone.utc)

    def clear(self, key: str) -> None:
        """Mark key resolved."""
        if self._issues.pop(key, None) is not None:
            logger.info("Issue resolved: %s", key)

    def count(self) -> int:
        return len(self._issues)

    def is_known(self, key: str) -> bool:
        return key in self._issues

    def last_seen(self, key: str) -> datetime | None:
        return self._issues.get(key)

    def keys(self) -> list[str]:
        return sorted(self._issues)
