"""Cumulative failure budget for collaborator calls."""

import logging

logger = logging.getLogger(__name__)


class ErrorBudget:
    """Counts failures of one collaborator for the lifetime of the process.

    Successes never reset the count. Once ``limit`` failures have been
    recorded the budget is exhausted and the caller is expected to stop the
    process; the budget itself never exits.
    """

    def __init__(self, name: str, limit: int):
        if limit < 1:
            raise ValueError(f"Error budget limit must be at least 1, got {limit}")
        self.name = name
        self.limit = limit
        self.failures = 0

    @property
    def exhausted(self) -> bool:
        return self.failures >= self.limit

    @property
    def remaining(self) -> int:
        return max(self.limit - self.failures, 0)

    def record_failure(self) -> bool:
        """Count one failure.

        Returns:
            True if this failure exhausted the budget
        """
        self.failures += 1
        if self.exhausted:
            logger.error(
                "%s error budget exhausted after %d failures", self.name, self.failures
            )
            return True
        logger.warning(
            "%s failure %d/%d recorded", self.name, self.failures, self.limit
        )
        return False
