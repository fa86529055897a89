"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest
from kubernetes.client.models import (
    CoreV1Event,
    V1ContainerStatus,
    V1Node,
    V1NodeCondition,
    V1NodeStatus,
    V1ObjectMeta,
    V1ObjectReference,
    V1Pod,
    V1PodStatus,
)

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_node(name: str, ready: bool = True) -> V1Node:
    """Build a node with a Ready condition."""
    condition = V1NodeCondition(type="Ready", status="True" if ready else "False")
    return V1Node(
        metadata=V1ObjectMeta(name=name),
        status=V1NodeStatus(conditions=[condition]),
    )


def make_container_status(name: str, ready: bool) -> V1ContainerStatus:
    return V1ContainerStatus(
        name=name, ready=ready, restart_count=0, image="busybox", image_id=""
    )


def make_pod(
    namespace: str,
    name: str,
    phase: str = "Running",
    ready: list[bool] | None = None,
) -> V1Pod:
    """Build a pod with one container status per entry in ``ready``."""
    statuses = [
        make_container_status(f"c{i}", is_ready)
        for i, is_ready in enumerate([True] if ready is None else ready)
    ]
    return V1Pod(
        metadata=V1ObjectMeta(namespace=namespace, name=name),
        status=V1PodStatus(phase=phase, container_statuses=statuses),
    )


def make_event(
    namespace: str,
    name: str,
    reason: str,
    kind: str = "Pod",
    event_type: str = "Warning",
    message: str = "something went wrong",
    last_timestamp: datetime | None = None,
) -> CoreV1Event:
    return CoreV1Event(
        metadata=V1ObjectMeta(namespace=namespace, name=f"{name}.{reason.lower()}"),
        involved_object=V1ObjectReference(kind=kind, name=name, namespace=namespace),
        reason=reason,
        message=message,
        type=event_type,
        last_timestamp=last_timestamp or NOW - timedelta(seconds=2),
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def node_factory() -> Callable[..., V1Node]:
    return make_node


@pytest.fixture
def pod_factory() -> Callable[..., V1Pod]:
    return make_pod


@pytest.fixture
def event_factory() -> Callable[..., CoreV1Event]:
    return make_event
