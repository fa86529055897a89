"""Tests for the pull request notification gate."""

from datetime import datetime
from unittest.mock import Mock

import pytest

from cluster_bulb.models import Issue, IssueType
from cluster_bulb.monitor.notifications import NotificationGate
from cluster_bulb.ntfy.client import NotificationError


def pr_issue(number: int, title: str, now: datetime) -> Issue:
    return Issue(
        key=f"pr/{number}", type=IssueType.PULL_REQUEST, message=title, timestamp=now
    )


@pytest.fixture
def client() -> Mock:
    client = Mock()
    client.is_configured.return_value = True
    client.send.return_value = True
    return client


class TestNotificationGate:
    """Test NotificationGate edge triggering."""

    def test_fires_only_on_rising_edges(self, client: Mock, now: datetime) -> None:
        """Test none, open, open, open, none, open fires at 2 and 6."""
        gate = NotificationGate(client, "acme/widgets")
        issues = [pr_issue(1, "Add feature", now)]
        flags = [False, True, True, True, False, True]

        fired = [gate.observe(flag, issues if flag else []) for flag in flags]

        assert fired == [False, True, False, False, False, True]
        assert client.send.call_count == 2
        assert gate.sent == 2

    def test_more_pull_requests_while_open(self, client: Mock, now: datetime) -> None:
        """Test new pull requests during the open state do not re-fire."""
        gate = NotificationGate(client)
        gate.observe(True, [pr_issue(1, "One", now)])
        gate.observe(True, [pr_issue(1, "One", now), pr_issue(2, "Two", now)])

        assert client.send.call_count == 1

    def test_message_lists_pull_requests(self, client: Mock, now: datetime) -> None:
        """Test the message names the repository and titles."""
        gate = NotificationGate(client, "acme/widgets")
        gate.observe(True, [pr_issue(7, "Fix bug", now), pr_issue(9, "Docs", now)])

        message = client.send.call_args.args[0]
        assert message == "2 open pull request(s) in acme/widgets\n#7 Fix bug\n#9 Docs"

    def test_message_truncates_long_lists(self, client: Mock, now: datetime) -> None:
        """Test only the first few titles are listed."""
        gate = NotificationGate(client)
        issues = [pr_issue(n, f"PR {n}", now) for n in range(1, 9)]

        message = gate.format_message(issues)

        assert message.splitlines()[0] == "8 open pull request(s)"
        assert message.splitlines()[-1] == "... and 3 more"

    def test_unconfigured_client_is_silent(self, now: datetime) -> None:
        """Test no send happens without a destination."""
        client = Mock()
        client.is_configured.return_value = False
        gate = NotificationGate(client)

        assert gate.observe(True, [pr_issue(1, "One", now)]) is True
        client.send.assert_not_called()

    def test_send_failure_is_logged(
        self, client: Mock, now: datetime, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test send errors are logged and the edge is still consumed."""
        client.send.side_effect = NotificationError("ntfy returned status 500")
        gate = NotificationGate(client)

        assert gate.observe(True, [pr_issue(1, "One", now)]) is True
        assert gate.observe(True, [pr_issue(1, "One", now)]) is False
        assert client.send.call_count == 1
        assert "ntfy returned status 500" in caplog.text
