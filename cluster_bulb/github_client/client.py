"""GitHub API client using PyGitHub."""

import logging

from github import Auth, Github
from github.GithubException import GithubException, UnknownObjectException
from github.NamedUser import NamedUser
from github.PullRequest import PullRequest as GithubPullRequest
from github.Repository import Repository
from requests.exceptions import RequestException

from .models import GitHubUser, PullRequest

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10


class GitHubClientError(Exception):
    """Raised when pull requests cannot be fetched or decoded."""


class GitHubClient:
    """GitHub API client for polling one repository's pull requests."""

    def __init__(self, token: str | None = None):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token. Optional, but anonymous
                requests are subject to much lower rate limits.
        """
        self.token = token
        auth = Auth.Token(token) if token else None
        self.github = Github(auth=auth, timeout=REQUEST_TIMEOUT, retry=None)

    def _convert_user(self, github_user: NamedUser) -> GitHubUser:
        """Convert PyGitHub user to our model."""
        return GitHubUser(login=github_user.login, id=github_user.id)

    def _convert_pull_request(self, github_pr: GithubPullRequest) -> PullRequest:
        """Convert PyGitHub pull request to our model."""
        return PullRequest(
            number=github_pr.number,
            title=github_pr.title,
            user=self._convert_user(github_pr.user),
            state=github_pr.state,
            html_url=github_pr.html_url,
            created_at=github_pr.created_at,
            updated_at=github_pr.updated_at,
        )

    def get_repository(self, owner: str, repo: str) -> Repository:
        """Get repository object."""
        try:
            return self.github.get_repo(f"{owner}/{repo}")
        except UnknownObjectException as e:
            raise GitHubClientError(f"Repository {owner}/{repo} not found") from e

    def list_open_pull_requests(self, owner: str, repo: str) -> list[PullRequest]:
        """List currently open pull requests.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name

        Returns:
            List of PullRequest objects

        Raises:
            GitHubClientError: On network errors, API errors or
                undecodable responses
        """
        try:
            repository = self.get_repository(owner, repo)
            return [
                self._convert_pull_request(pr)
                for pr in repository.get_pulls(state="open")
            ]
        except GithubException as e:
            raise GitHubClientError(
                f"GitHub API returned status {e.status} for {owner}/{repo}"
            ) from e
        except (RequestException, ValueError) as e:
            raise GitHubClientError(
                f"Error fetching pull requests for {owner}/{repo}: {e}"
            ) from e

    def close(self) -> None:
        self.github.close()
