"""Pydantic models for GitHub data structures.

These models map directly to GitHub's REST API v3 response structures.
API Reference: https://docs.github.com/en/rest/pulls
"""

from datetime import datetime

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    """GitHub user model representing a user account.

    Maps to GitHub REST API User object.
    API Reference: https://docs.github.com/en/rest/users/users
    """

    login: str = Field(..., description="GitHub username/login (string)")
    id: int = Field(..., description="Unique user identifier (integer)")


class PullRequest(BaseModel):
    """GitHub pull request model.

    Maps to GitHub REST API Pull Request object. Only ``number`` and
    ``title`` feed the monitor; the rest is passthrough metadata.
    API Reference: https://docs.github.com/en/rest/pulls/pulls
    """

    number: int = Field(..., description="Pull request number within the repository")
    title: str = Field(..., description="Title of the pull request (string)")
    user: GitHubUser = Field(..., description="Author of the pull request")
    state: str = Field("open", description="Current state: 'open', 'closed' (string)")
    html_url: str = Field("", description="Browser URL of the pull request")
    created_at: datetime | None = Field(
        None, description="Timestamp of pull request creation (ISO 8601)"
    )
    updated_at: datetime | None = Field(
        None, description="Timestamp of last pull request update (ISO 8601)"
    )
