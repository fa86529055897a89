"""Kubernetes cluster inspection."""

from .client import ClusterClient, ClusterClientError, load_cluster_config

__all__ = ["ClusterClient", "ClusterClientError", "load_cluster_config"]
