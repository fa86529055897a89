"""Pydantic models for cluster health data structures.

Issues are snapshot values produced by a single collector invocation. The
registry in ``cluster_bulb.monitor.registry`` only tracks their liveness.
"""

from datetime import datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class IssueType(str, Enum):
    """Source of a detected issue."""

    NODE = "Node"
    POD = "Pod"
    EVENT = "Event"
    PULL_REQUEST = "PullRequest"


class ClusterState(str, Enum):
    """Overall status driving the indicator."""

    HEALTHY = "healthy"
    PULL_REQUESTS_OPEN = "pull_requests_open"
    ISSUES_DETECTED = "issues_detected"
    BOTH = "pull_requests_open|issues_detected"


class Issue(BaseModel):
    """A detected unhealthy condition with a stable identity key."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(
        ..., description="Stable identity, e.g. 'node/<name>' or 'pr/<number>'"
    )
    type: IssueType = Field(..., description="Kind of resource the issue is about")
    message: str = Field(..., description="Human-readable description")
    timestamp: datetime = Field(..., description="Time of last detection")


class HealthReport(BaseModel):
    """Read-only snapshot of one collection pass."""

    timestamp: datetime = Field(..., description="Time the pass started")
    node_issues: list[Issue] = Field(default_factory=list)
    pod_issues: list[Issue] = Field(default_factory=list)
    event_issues: list[Issue] = Field(default_factory=list)
    pull_requests: list[Issue] = Field(
        default_factory=list, description="Open pull requests known at pass time"
    )
    total_issues: int = Field(
        0, description="Node, pod and event issues found in this pass"
    )
    cluster_state: ClusterState = Field(ClusterState.HEALTHY)


class Color(NamedTuple):
    """RGB triple, each channel 0-255."""

    red: int
    green: int
    blue: int


GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)
RED = Color(255, 0, 0)
