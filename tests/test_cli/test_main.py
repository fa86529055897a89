"""Test main CLI functionality."""

import asyncio
import json
import signal
from unittest.mock import AsyncMock, Mock, patch

import pytest
from typer.testing import CliRunner

from cluster_bulb.cli.main import app
from cluster_bulb.cli.run import build_scheduler, serve
from cluster_bulb.config import ConfigError, load_settings
from cluster_bulb.monitor.scheduler import ExitCode, Task

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep CLI commands from reconfiguring the root logger."""
    with patch("cluster_bulb.cli.run.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def healthy_cluster():
    cluster = Mock()
    cluster.list_nodes.return_value = []
    cluster.list_pods.return_value = []
    cluster.list_warning_events.return_value = []
    with patch("cluster_bulb.cli.run.ClusterClient", return_value=cluster):
        yield cluster


def test_version_command() -> None:
    """Test version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Cluster Bulb v" in result.stdout


def test_help_command() -> None:
    """Test the app help lists its commands."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Kubernetes cluster health indicator" in result.stdout
    assert "check" in result.stdout


@pytest.mark.parametrize("command", ["run", "check"])
def test_refuses_superuser(command: str, quiet_logging: Mock) -> None:
    """Test commands exit before doing any work as root."""
    with (
        patch("cluster_bulb.cli.run.is_superuser", return_value=True),
        patch("cluster_bulb.cli.run.load_settings") as mock_load,
    ):
        result = runner.invoke(app, [command])

    assert result.exit_code == 3
    mock_load.assert_not_called()
    quiet_logging.assert_not_called()


def test_invalid_configuration() -> None:
    """Test a malformed environment variable is fatal."""
    with (
        patch("cluster_bulb.cli.run.is_superuser", return_value=False),
        patch(
            "cluster_bulb.cli.run.load_settings",
            side_effect=ConfigError(["HA_LIGHT_BRIGHTNESS: bad value"]),
        ),
    ):
        result = runner.invoke(app, ["run"])

    assert result.exit_code == 1
    assert "HA_LIGHT_BRIGHTNESS" in result.stdout


def test_check_json(healthy_cluster: Mock) -> None:
    """Test check prints a healthy report as JSON."""
    with (
        patch("cluster_bulb.cli.run.is_superuser", return_value=False),
        patch("cluster_bulb.cli.run.load_settings", return_value=load_settings({})),
    ):
        result = runner.invoke(app, ["check", "--json"])

    assert result.exit_code == 0
    report = json.loads(result.stdout)
    assert report["cluster_state"] == "healthy"
    assert report["total_issues"] == 0


def test_check_table(healthy_cluster: Mock, node_factory) -> None:
    """Test check lists issues in a table."""
    healthy_cluster.list_nodes.return_value = [node_factory("worker-1", ready=False)]
    with (
        patch("cluster_bulb.cli.run.is_superuser", return_value=False),
        patch("cluster_bulb.cli.run.load_settings", return_value=load_settings({})),
    ):
        result = runner.invoke(app, ["check"])

    assert result.exit_code == 0
    assert "issues_detected" in result.stdout
    assert "node/worker-1" in result.stdout
    assert "Total issues: 1" in result.stdout


def test_check_warns_when_pull_requests_unavailable(healthy_cluster: Mock) -> None:
    """Test a failed pull request fetch is reported but not fatal."""
    settings = load_settings({"GH_OWNER": "acme", "GH_REPO": "widgets"})
    with (
        patch("cluster_bulb.cli.run.is_superuser", return_value=False),
        patch("cluster_bulb.cli.run.load_settings", return_value=settings),
        patch("cluster_bulb.cli.run._github_client", return_value=None),
    ):
        result = runner.invoke(app, ["check"])

    assert result.exit_code == 0
    assert "Could not fetch pull requests" in result.stdout


def test_build_scheduler_wiring() -> None:
    """Test settings flow into the scheduler collaborators."""
    settings = load_settings(
        {
            "GH_OWNER": "acme",
            "GH_REPO": "widgets",
            "GH_PR_CHECK_INTERVAL": "60",
            "GH_ERROR_BUDGET": "2",
            "EVENT_LOOKBACK_SECONDS": "30",
        }
    )
    github = Mock()

    scheduler = build_scheduler(settings, Mock(), Mock(), Mock(), github)

    assert scheduler.periods[Task.PULL_REQUESTS] == 60
    assert scheduler.pr_watcher.client is github
    assert scheduler.pr_watcher.budget.limit == 2
    assert scheduler.pr_watcher.gate.repository == "acme/widgets"
    assert scheduler.pr_watcher.state is scheduler.state
    assert scheduler.event_collector.lookback.total_seconds() == 30


@pytest.fixture
def run_clients():
    """Replace the outbound clients built by the run command."""
    with (
        patch("cluster_bulb.cli.run.is_superuser", return_value=False),
        patch(
            "cluster_bulb.cli.run.load_settings",
            return_value=load_settings({"GH_OWNER": "acme", "GH_REPO": "widgets"}),
        ),
        patch("cluster_bulb.cli.run.ClusterClient"),
        patch("cluster_bulb.cli.run.LightClient") as light_class,
        patch("cluster_bulb.cli.run.NtfyClient") as ntfy_class,
        patch("cluster_bulb.cli.run.GitHubClient") as github_class,
    ):
        yield {
            "light": light_class.return_value,
            "ntfy": ntfy_class.return_value,
            "github": github_class.return_value,
        }


@pytest.mark.parametrize(
    "scheduler_exit,expected",
    [(ExitCode.OK, 0), (ExitCode.ERROR_BUDGET_EXHAUSTED, 4)],
)
def test_run_exit_status(
    run_clients: dict[str, Mock], scheduler_exit: ExitCode, expected: int
) -> None:
    """Test the scheduler result becomes the exit status and clients are closed."""
    with patch(
        "cluster_bulb.cli.run.Scheduler.run",
        new=AsyncMock(return_value=scheduler_exit),
    ):
        result = runner.invoke(app, ["run"])

    assert result.exit_code == expected
    run_clients["light"].close.assert_called_once()
    run_clients["ntfy"].close.assert_called_once()
    run_clients["github"].close.assert_called_once()


def test_run_closes_clients_on_error(run_clients: dict[str, Mock]) -> None:
    """Test clients are closed when the loop fails."""
    with patch(
        "cluster_bulb.cli.run.Scheduler.run",
        new=AsyncMock(side_effect=RuntimeError("loop died")),
    ):
        result = runner.invoke(app, ["run"])

    assert result.exit_code != 0
    run_clients["light"].close.assert_called_once()
    run_clients["ntfy"].close.assert_called_once()
    run_clients["github"].close.assert_called_once()


def test_invalid_log_level() -> None:
    """Test an unknown log level is a usage error."""
    with patch("cluster_bulb.cli.run.is_superuser", return_value=False):
        result = runner.invoke(app, ["check", "--log-level", "LOUD"])

    assert result.exit_code == 2


def test_log_level_is_case_insensitive(
    healthy_cluster: Mock, quiet_logging: Mock
) -> None:
    """Test lower-case log levels are accepted."""
    with (
        patch("cluster_bulb.cli.run.is_superuser", return_value=False),
        patch("cluster_bulb.cli.run.load_settings", return_value=load_settings({})),
    ):
        result = runner.invoke(app, ["check", "--json", "--log-level", "debug"])

    assert result.exit_code == 0
    quiet_logging.assert_called_once_with("DEBUG")


@pytest.mark.asyncio
async def test_serve_wires_shutdown_signals() -> None:
    """Test SIGINT and SIGTERM are routed to the scheduler stop."""
    scheduler = Mock()
    scheduler.run = AsyncMock(return_value=ExitCode.OK)

    assert await serve(scheduler) is ExitCode.OK

    loop = asyncio.get_running_loop()
    assert loop.remove_signal_handler(signal.SIGINT) is True
    assert loop.remove_signal_handler(signal.SIGTERM) is True
