"""Configuration loaded from environment variables.

Every section is a pydantic model so range checks live next to the field
they constrain. ``load_settings`` collects all violations into a single
``ConfigError`` which the CLI treats as fatal.
"""

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

DEFAULT_BRIGHTNESS = 255
DEFAULT_PR_CHECK_INTERVAL = 300
DEFAULT_ERROR_BUDGET = 5
DEFAULT_NOTIFY_PRIORITY = 3
DEFAULT_NOTIFY_TITLE = "Pull Requests Open"
DEFAULT_EVENT_LOOKBACK = 10
DEFAULT_EVENT_DEDUP_WINDOW = 300

# section -> field -> environment variable
ENV_VARS: dict[str, dict[str, str]] = {
    "light": {
        "token": "HA_TOKEN",
        "url": "HA_URL",
        "entity_id": "HA_LIGHT_ENTITY_ID",
        "brightness": "HA_LIGHT_BRIGHTNESS",
    },
    "github": {
        "owner": "GH_OWNER",
        "repo": "GH_REPO",
        "token": "GH_TOKEN",
        "check_interval": "GH_PR_CHECK_INTERVAL",
        "error_budget": "GH_ERROR_BUDGET",
    },
    "notify": {
        "server": "NTFY_SERVER",
        "topic": "NTFY_TOPIC",
        "token": "NTFY_TOKEN",
        "priority": "NTFY_PRIORITY",
        "tags": "NTFY_TAGS",
        "title": "NTFY_TITLE",
    },
    "monitor": {
        "event_lookback": "EVENT_LOOKBACK_SECONDS",
        "event_dedup_window": "EVENT_DEDUP_WINDOW_SECONDS",
    },
}


class ConfigError(ValueError):
    """Raised when the environment holds an invalid configuration."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid configuration:\n" + "\n".join(errors))


class LightSettings(BaseModel):
    """Home Assistant light used as the indicator."""

    token: str | None = None
    url: str | None = None
    entity_id: str | None = None
    brightness: int = Field(DEFAULT_BRIGHTNESS, ge=1, le=255)

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        return value.rstrip("/") if value else value

    def is_configured(self) -> bool:
        """Check if every value needed to drive the light is present."""
        return bool(self.token and self.url and self.entity_id)


class GitHubSettings(BaseModel):
    """Repository watched for open pull requests."""

    owner: str | None = None
    repo: str | None = None
    token: str | None = None
    check_interval: int = Field(DEFAULT_PR_CHECK_INTERVAL, gt=0)
    error_budget: int = Field(DEFAULT_ERROR_BUDGET, ge=1)

    def is_configured(self) -> bool:
        return bool(self.owner and self.repo)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class NotifySettings(BaseModel):
    """ntfy destination for the "pull requests open" alert."""

    server: str | None = None
    topic: str | None = None
    token: str | None = None
    priority: int = Field(DEFAULT_NOTIFY_PRIORITY, ge=1, le=5)
    tags: list[str] = Field(default_factory=list)
    title: str = DEFAULT_NOTIFY_TITLE

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value

    @model_validator(mode="after")
    def require_topic_with_server(self) -> "NotifySettings":
        if self.server and not self.topic:
            raise ValueError("topic is required when a server is set")
        return self

    def is_configured(self) -> bool:
        return bool(self.server)


class MonitorSettings(BaseModel):
    """Collection tuning."""

    event_lookback: int = Field(DEFAULT_EVENT_LOOKBACK, gt=0)
    event_dedup_window: int = Field(DEFAULT_EVENT_DEDUP_WINDOW, gt=0)


class Settings(BaseModel):
    """Complete process configuration."""

    light: LightSettings = Field(default_factory=LightSettings)
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    notify: NotifySettings = Field(default_factory=NotifySettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)


def _format_error(section: str, error: Any) -> str:
    loc = error["loc"]
    field = loc[0] if loc else None
    variable = ENV_VARS[section].get(str(field)) if field is not None else None
    if variable is None:
        variable = ", ".join(ENV_VARS[section].values())
    value = error.get("input")
    if isinstance(value, (dict, BaseModel)):
        return f"{variable}: {error['msg']}"
    return f"{variable}: {error['msg']} (got {value!r})"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read from, defaults to ``os.environ``

    Returns:
        Validated Settings

    Raises:
        ConfigError: If any value is malformed or out of range
    """
    environ = os.environ if environ is None else environ
    errors: list[str] = []
    sections: dict[str, BaseModel] = {}
    models: dict[str, type[BaseModel]] = {
        "light": LightSettings,
        "github": GitHubSettings,
        "notify": NotifySettings,
        "monitor": MonitorSettings,
    }

    for section, model in models.items():
        # Empty values behave as if the variable were unset
        raw = {
            field: environ[variable].strip()
            for field, variable in ENV_VARS[section].items()
            if environ.get(variable, "").strip()
        }
        try:
            sections[section] = model.model_validate(raw)
        except ValidationError as e:
            errors.extend(_format_error(section, err) for err in e.errors())

    if errors:
        raise ConfigError(errors)

    return Settings(**sections)
