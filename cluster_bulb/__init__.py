"""Kubernetes cluster health indicator."""

__version__ = "0.1.0"
