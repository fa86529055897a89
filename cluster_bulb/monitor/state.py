"""Shared monitor state and cluster state derivation."""

import threading
from dataclasses import dataclass, field

from ..models import ClusterState, HealthReport, Issue
from .registry import IssueRegistry


def derive_cluster_state(total_issues: int, pull_requests_open: bool) -> ClusterState:
    """Combine the issue count and pull request flag into one state."""
    if total_issues == 0:
        if pull_requests_open:
            return ClusterState.PULL_REQUESTS_OPEN
        return ClusterState.HEALTHY
    if pull_requests_open:
        return ClusterState.BOTH
    return ClusterState.ISSUES_DETECTED


@dataclass
class MonitorState:
    """Mutable state shared by the scheduled tasks.

    Every field is read and written only while holding ``lock``. Collection
    passes run in worker threads, so the lock is a threading lock rather
    than an asyncio one.
    """

    registry: IssueRegistry = field(default_factory=IssueRegistry)
    cluster_state: ClusterState = ClusterState.HEALTHY
    pull_requests_open: bool = False
    pull_request_issues: list[Issue] = field(default_factory=list)
    last_report: HealthReport | None = None
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def snapshot_cluster_state(self) -> ClusterState:
        with self.lock:
            return self.cluster_state
