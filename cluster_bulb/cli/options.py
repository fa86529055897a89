"""Shared CLI option definitions."""

from enum import Enum

import typer


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


LOG_LEVEL_OPTION = typer.Option(
    LogLevel.INFO,
    "--log-level",
    "-l",
    case_sensitive=False,
    help="Log level: DEBUG, INFO, WARNING or ERROR",
)

JSON_OPTION = typer.Option(
    False, "--json", "-j", help="Print the health report as JSON"
)
