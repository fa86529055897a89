"""Open pull request polling."""

import logging
from datetime import datetime, timezone
from enum import Enum

from ..config import GitHubSettings
from ..github_client.client import GitHubClient, GitHubClientError
from ..models import Issue, IssueType
from .budget import ErrorBudget
from .notifications import NotificationGate
from .state import MonitorState

logger = logging.getLogger(__name__)


class PollOutcome(str, Enum):
    """Result of one pull request poll."""

    SKIPPED = "skipped"
    UPDATED = "updated"
    FAILED = "failed"
    BUDGET_EXHAUSTED = "budget_exhausted"


class PullRequestWatcher:
    """Keeps the "pull requests open" flag in sync with the repository."""

    def __init__(
        self,
        settings: GitHubSettings,
        state: MonitorState,
        client: GitHubClient | None,
        budget: ErrorBudget,
        gate: NotificationGate | None = None,
    ):
        self.settings = settings
        self.state = state
        self.client = client
        self.budget = budget
        self.gate = gate

    def poll(self, now: datetime | None = None) -> PollOutcome:
        """Fetch open pull requests and update the shared flag.

        A failed fetch leaves the flag and pull request list untouched and
        is charged to the error budget.
        """
        if not self.settings.is_configured() or self.client is None:
            return PollOutcome.SKIPPED

        now = now or datetime.now(timezone.utc)
        try:
            pulls = self.client.list_open_pull_requests(
                self.settings.owner, self.settings.repo
            )
        except GitHubClientError as e:
            logger.error("Error checking pull requests: %s", e)
            if self.budget.record_failure():
                return PollOutcome.BUDGET_EXHAUSTED
            return PollOutcome.FAILED

        issues = [
            Issue(
                key=f"pr/{pr.number}",
                type=IssueType.PULL_REQUEST,
                message=pr.title,
                timestamp=now,
            )
            for pr in pulls
        ]
        pull_requests_open = bool(issues)

        if self.gate is not None:
            self.gate.observe(pull_requests_open, issues)

        with self.state.lock:
            if pull_requests_open != self.state.pull_requests_open:
                logger.info(
                    "Open pull requests in %s: %d",
                    self.settings.full_name,
                    len(issues),
                )
            self.state.pull_requests_open = pull_requests_open
            self.state.pull_request_issues = issues

        return PollOutcome.UPDATED
