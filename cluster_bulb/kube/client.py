"""Read-only Kubernetes API client using the official python client."""

import logging

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.client.models import CoreV1Event, V1Node, V1Pod
from urllib3.exceptions import HTTPError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


class ClusterClientError(Exception):
    """Raised when the cluster API cannot be reached or answers with an error."""


def load_cluster_config() -> None:
    """Load in-cluster configuration, falling back to the local kubeconfig.

    Raises:
        ClusterClientError: If neither configuration is available
    """
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
        return
    except config.ConfigException:
        pass

    try:
        config.load_kube_config()
        logger.info("Loaded kubeconfig")
    except config.ConfigException as e:
        raise ClusterClientError(f"No Kubernetes config available: {e}") from e


class ClusterClient:
    """Lists and reads the resources the collectors inspect."""

    def __init__(self, core_api: client.CoreV1Api | None = None):
        """Initialize the client.

        Args:
            core_api: Preconfigured CoreV1Api. If None, cluster config is
                loaded and a default API client is created.
        """
        if core_api is None:
            load_cluster_config()
            core_api = client.CoreV1Api()
        self.core_api = core_api

    def _call(self, description: str, func, *args, **kwargs):
        try:
            return func(*args, _request_timeout=REQUEST_TIMEOUT, **kwargs)
        except ApiException as e:
            raise ClusterClientError(
                f"Error {description}: {e.status} {e.reason}"
            ) from e
        except (HTTPError, OSError) as e:
            raise ClusterClientError(f"Error {description}: {e}") from e

    def list_nodes(self) -> list[V1Node]:
        return self._call("listing nodes", self.core_api.list_node).items

    def list_pods(self) -> list[V1Pod]:
        """List pods in all namespaces."""
        return self._call(
            "listing pods", self.core_api.list_pod_for_all_namespaces
        ).items

    def list_warning_events(self) -> list[CoreV1Event]:
        """List warning events in all namespaces."""
        return self._call(
            "listing events",
            self.core_api.list_event_for_all_namespaces,
            field_selector="type=Warning",
        ).items

    def get_pod(self, namespace: str, name: str) -> V1Pod:
        return self._call(
            f"reading pod {namespace}/{name}",
            self.core_api.read_namespaced_pod,
            name,
            namespace,
        )

    def get_node(self, name: str) -> V1Node:
        return self._call(f"reading node {name}", self.core_api.read_node, name)
