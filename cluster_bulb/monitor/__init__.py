"""Health aggregation and scheduling engine."""

from .budget import ErrorBudget
from .collectors import EventCollector, NodeCollector, PodCollector
from .emitter import ColorEmitter, ColorOutputState
from .notifications import NotificationGate
from .pull_requests import PollOutcome, PullRequestWatcher
from .registry import IssueRegistry
from .scheduler import ExitCode, Scheduler, run_collection_pass
from .state import MonitorState, derive_cluster_state

__all__ = [
    "ColorEmitter",
    "ColorOutputState",
    "ErrorBudget",
    "EventCollector",
    "ExitCode",
    "IssueRegistry",
    "MonitorState",
    "NodeCollector",
    "NotificationGate",
    "PodCollector",
    "PollOutcome",
    "PullRequestWatcher",
    "Scheduler",
    "derive_cluster_state",
    "run_collection_pass",
]
