"""GitHub client package for API interaction."""

from .client import GitHubClient, GitHubClientError
from .models import GitHubUser, PullRequest

__all__ = [
    "GitHubClient",
    "GitHubClientError",
    "GitHubUser",
    "PullRequest",
]
