"""Node, pod and event health collectors.

Each collector runs once per collection pass. It lists its resources,
reports or clears every key it is responsible for in the registry, and
returns the issues found in this pass. A listing failure returns no issues
and leaves the registry untouched so a transient API error never looks
like the cluster healed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from kubernetes.client.models import CoreV1Event, V1Node, V1Pod

from ..config import DEFAULT_EVENT_DEDUP_WINDOW, DEFAULT_EVENT_LOOKBACK
from ..kube.client import ClusterClientError
from ..models import Issue, IssueType
from .registry import IssueRegistry

logger = logging.getLogger(__name__)

POD_SUCCEEDED = "Succeeded"
POD_RUNNING = "Running"
EVENT_WARNING = "Warning"


def node_is_ready(node: V1Node) -> bool:
    """A node is healthy only if its Ready condition is True."""
    conditions = (node.status.conditions if node.status else None) or []
    return any(c.type == "Ready" and c.status == "True" for c in conditions)


def pod_problem(pod: V1Pod) -> str | None:
    """Describe why a pod is unhealthy.

    Returns:
        None if the pod is healthy, otherwise the issue message
    """
    namespace = pod.metadata.namespace
    name = pod.metadata.name
    phase = pod.status.phase if pod.status else None

    if phase == POD_SUCCEEDED:
        return None
    if phase == POD_RUNNING:
        statuses = pod.status.container_statuses or []
        if all(cs.ready for cs in statuses):
            return None
        return f"{namespace}/{name} has containers not ready"
    return f"{namespace}/{name} in unexpected phase: {phase}"


def event_last_seen(event: CoreV1Event) -> datetime | None:
    """Most recent time an event was observed."""
    if event.last_timestamp is not None:
        return event.last_timestamp
    if event.event_time is not None:
        return event.event_time
    return event.metadata.creation_timestamp if event.metadata else None


class Collector:
    """Base class for a per-pass health collector."""

    name = "resources"
    issue_type: IssueType

    def __init__(self, cluster: Any):
        self.cluster = cluster

    def list_resources(self) -> list[Any]:
        raise NotImplementedError

    def evaluate(
        self, resources: list[Any], registry: IssueRegistry, now: datetime
    ) -> list[Issue]:
        raise NotImplementedError

    def collect(
        self, registry: IssueRegistry, now: datetime | None = None
    ) -> list[Issue]:
        """Run one pass of this collector.

        Args:
            registry: Registry to report and clear keys in
            now: Time of the pass, defaults to the current UTC time

        Returns:
            Issues detected in this pass, empty if listing failed
        """
        now = now or datetime.now(timezone.utc)
        try:
            resources = self.list_resources()
        except ClusterClientError as e:
            logger.error("Error fetching %s: %s", self.name, e)
            return []
        return self.evaluate(resources, registry, now)

    def _issue(self, key: str, message: str, now: datetime) -> Issue:
        return Issue(key=key, type=self.issue_type, message=message, timestamp=now)


class NodeCollector(Collector):
    name = "nodes"
    issue_type = IssueType.NODE

    def list_resources(self) -> list[V1Node]:
        return self.cluster.list_nodes()

    def evaluate(
        self, resources: list[V1Node], registry: IssueRegistry, now: datetime
    ) -> list[Issue]:
        issues = []
        for node in resources:
            key = f"node/{node.metadata.name}"
            if node_is_ready(node):
                registry.clear(key)
                continue
            registry.report(key, now)
            issues.append(self._issue(key, f"{node.metadata.name} is not ready", now))
        return issues


class PodCollector(Collector):
    name = "pods"
    issue_type = IssueType.POD

    def list_resources(self) -> list[V1Pod]:
        return self.cluster.list_pods()

    def evaluate(
        self, resources: list[V1Pod], registry: IssueRegistry, now: datetime
    ) -> list[Issue]:
        issues = []
        for pod in resources:
            key = f"pod/{pod.metadata.namespace}/{pod.metadata.name}"
            problem = pod_problem(pod)
            if problem is None:
                registry.clear(key)
                continue
            registry.report(key, now)
            issues.append(self._issue(key, problem, now))
        return issues


class EventCollector(Collector):
    """Escalates recent warning events whose object is still unhealthy."""

    name = "events"
    issue_type = IssueType.EVENT

    def __init__(
        self,
        cluster: Any,
        lookback: timedelta = timedelta(seconds=DEFAULT_EVENT_LOOKBACK),
        dedup_window: timedelta = timedelta(seconds=DEFAULT_EVENT_DEDUP_WINDOW),
    ):
        super().__init__(cluster)
        self.lookback = lookback
        self.dedup_window = dedup_window

    def list_resources(self) -> list[CoreV1Event]:
        return self.cluster.list_warning_events()

    def evaluate(
        self, resources: list[CoreV1Event], registry: IssueRegistry, now: datetime
    ) -> list[Issue]:
        since = now - self.lookback
        seen: dict[str, datetime] = {}
        issues = []

        for event in resources:
            if event.type != EVENT_WARNING:
                continue
            last_seen = event_last_seen(event)
            if last_seen is None or last_seen < since:
                continue

            namespace = event.metadata.namespace
            obj = event.involved_object
            key = f"{namespace}/{obj.name}:{event.reason}"
            first_seen = seen.get(key)
            if first_seen is not None and now - first_seen < self.dedup_window:
                continue
            seen[key] = last_seen

            if not self.involved_object_unhealthy(event):
                registry.clear(key)
                continue

            registry.report(key, now)
            message = f"{namespace}/{obj.name}: {event.reason} - {event.message}"
            issues.append(self._issue(key, message, now))

        return issues

    def involved_object_unhealthy(self, event: CoreV1Event) -> bool:
        """Re-check the object an event refers to.

        Objects that cannot be read, and kinds other than Pod and Node, are
        treated as unhealthy.
        """
        obj = event.involved_object
        if obj.kind == "Pod":
            namespace = obj.namespace or event.metadata.namespace
            try:
                pod = self.cluster.get_pod(namespace, obj.name)
            except ClusterClientError as e:
                logger.debug("Could not read pod %s/%s: %s", namespace, obj.name, e)
                return True
            return pod_problem(pod) is not None

        if obj.kind == "Node":
            try:
                node = self.cluster.get_node(obj.name)
            except ClusterClientError as e:
                logger.debug("Could not read node %s: %s", obj.name, e)
                return True
            return not node_is_ready(node)

        return True
