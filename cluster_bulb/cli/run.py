"""CLI commands for running the monitor."""

import asyncio
import signal
from datetime import timedelta

import typer
from rich.console import Console
from rich.table import Table

from ..config import ConfigError, Settings, load_settings
from ..github_client.client import GitHubClient
from ..home_assistant.client import LightClient
from ..kube.client import ClusterClient, ClusterClientError
from ..models import HealthReport
from ..monitor import (
    ColorEmitter,
    ErrorBudget,
    EventCollector,
    ExitCode,
    MonitorState,
    NodeCollector,
    NotificationGate,
    PodCollector,
    PollOutcome,
    PullRequestWatcher,
    Scheduler,
    run_collection_pass,
)
from ..ntfy.client import NtfyClient
from ..utils.log import configure_logging
from ..utils.privileges import is_superuser
from .options import JSON_OPTION, LOG_LEVEL_OPTION, LogLevel

console = Console()


def _refuse_superuser() -> None:
    if is_superuser():
        console.print("❌ Running with superuser privileges is not permitted.")
        raise typer.Exit(ExitCode.SUPERUSER)


def _load_settings() -> Settings:
    try:
        return load_settings()
    except ConfigError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)


def _connect_cluster() -> ClusterClient:
    try:
        return ClusterClient()
    except ClusterClientError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)


def _collectors(
    settings: Settings, cluster: ClusterClient
) -> tuple[NodeCollector, PodCollector, EventCollector]:
    return (
        NodeCollector(cluster),
        PodCollector(cluster),
        EventCollector(
            cluster,
            lookback=timedelta(seconds=settings.monitor.event_lookback),
            dedup_window=timedelta(seconds=settings.monitor.event_dedup_window),
        ),
    )


def _github_client(settings: Settings) -> GitHubClient | None:
    if not settings.github.is_configured():
        return None
    return GitHubClient(token=settings.github.token)


def build_scheduler(
    settings: Settings,
    cluster: ClusterClient,
    light: LightClient,
    ntfy: NtfyClient,
    github: GitHubClient | None,
) -> Scheduler:
    """Wire collectors, watcher and emitter around one shared state."""
    state = MonitorState()
    node_collector, pod_collector, event_collector = _collectors(settings, cluster)
    gate = NotificationGate(
        ntfy, settings.github.full_name if settings.github.is_configured() else ""
    )
    watcher = PullRequestWatcher(
        settings.github,
        state,
        github,
        ErrorBudget("GitHub", settings.github.error_budget),
        gate,
    )
    return Scheduler(
        state,
        node_collector,
        pod_collector,
        event_collector,
        watcher,
        ColorEmitter(light),
        pr_interval=settings.github.check_interval,
    )


async def serve(scheduler: Scheduler) -> ExitCode:
    """Run the scheduler until SIGINT or SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, scheduler.stop)
    return await scheduler.run()


def run(log_level: LogLevel = LOG_LEVEL_OPTION) -> None:
    """Monitor the cluster and drive the indicator light until stopped.

    Configuration is read from the environment (HA_*, GH_*, NTFY_*).
    """
    _refuse_superuser()
    configure_logging(log_level.value)
    settings = _load_settings()
    cluster = _connect_cluster()

    light = LightClient(settings.light)
    ntfy = NtfyClient(settings.notify)
    if not light.is_configured():
        console.print("💡 Light not configured, colors will not be sent")

    github = _github_client(settings)
    scheduler = build_scheduler(settings, cluster, light, ntfy, github)
    try:
        exit_code = asyncio.run(serve(scheduler))
    finally:
        light.close()
        ntfy.close()
        if github is not None:
            github.close()

    raise typer.Exit(int(exit_code))


def _report_table(report: HealthReport) -> Table:
    table = Table(title=f"Cluster Health: {report.cluster_state.value}")
    table.add_column("Type", style="cyan")
    table.add_column("Key", style="magenta")
    table.add_column("Message", style="red")

    for issue in (
        report.node_issues
        + report.pod_issues
        + report.event_issues
        + report.pull_requests
    ):
        table.add_row(issue.type.value, issue.key, issue.message)
    return table


def check(
    json_output: bool = JSON_OPTION,
    log_level: LogLevel = LOG_LEVEL_OPTION,
) -> None:
    """Run one collection pass and print the health report.

    The light is never touched and no notifications are sent.
    """
    _refuse_superuser()
    configure_logging(log_level.value)
    settings = _load_settings()
    cluster = _connect_cluster()

    state = MonitorState()
    github = _github_client(settings)
    watcher = PullRequestWatcher(
        settings.github,
        state,
        github,
        ErrorBudget("GitHub", settings.github.error_budget),
    )
    try:
        outcome = watcher.poll()
    finally:
        if github is not None:
            github.close()
    if outcome is not PollOutcome.UPDATED and settings.github.is_configured():
        console.print("⚠️  Could not fetch pull requests")

    report = run_collection_pass(state, *_collectors(settings, cluster))

    if json_output:
        console.print_json(report.model_dump_json())
        return

    console.print(_report_table(report))
    console.print(f"Total issues: {report.total_issues}")
