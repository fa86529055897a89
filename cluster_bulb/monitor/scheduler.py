"""Dispatch loop driving the emit, collect and pull request tasks.

Three periodic timers share one loop. Whichever timer is due first runs to
completion before the next one is considered, so tasks never overlap. Task
bodies run in a worker thread to keep the loop responsive to the shutdown
signal, and every access to shared state still goes through
``MonitorState.lock``.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum, IntEnum

from ..config import DEFAULT_PR_CHECK_INTERVAL
from ..models import HealthReport
from .collectors import EventCollector, NodeCollector, PodCollector
from .emitter import ColorEmitter
from .pull_requests import PollOutcome, PullRequestWatcher
from .state import MonitorState, derive_cluster_state

logger = logging.getLogger(__name__)

EMIT_INTERVAL = 1.0
COLLECT_INTERVAL = 10.0


class ExitCode(IntEnum):
    """Process exit codes."""

    OK = 0
    CONFIG_ERROR = 1
    SUPERUSER = 3
    ERROR_BUDGET_EXHAUSTED = 4


class Task(str, Enum):
    EMIT = "emit"
    COLLECT = "collect"
    PULL_REQUESTS = "pull_requests"


def run_collection_pass(
    state: MonitorState,
    node_collector: NodeCollector,
    pod_collector: PodCollector,
    event_collector: EventCollector,
    now: datetime | None = None,
) -> HealthReport:
    """Run all collectors, derive the cluster state and publish a report."""
    now = now or datetime.now(timezone.utc)

    with state.lock:
        node_issues = node_collector.collect(state.registry, now)
        pod_issues = pod_collector.collect(state.registry, now)
        event_issues = event_collector.collect(state.registry, now)
        total = len(node_issues) + len(pod_issues) + len(event_issues)

        cluster_state = derive_cluster_state(total, state.pull_requests_open)
        if cluster_state != state.cluster_state:
            logger.info(
                "Cluster state changed: %s -> %s",
                state.cluster_state.value,
                cluster_state.value,
            )
        state.cluster_state = cluster_state

        report = HealthReport(
            timestamp=now,
            node_issues=node_issues,
            pod_issues=pod_issues,
            event_issues=event_issues,
            pull_requests=list(state.pull_request_issues),
            total_issues=total,
            cluster_state=cluster_state,
        )
        state.last_report = report

    logger.debug("Health report: %s", report.model_dump_json())
    return report


class Scheduler:
    """Owns the timers, the shutdown signal and the shared state."""

    def __init__(
        self,
        state: MonitorState,
        node_collector: NodeCollector,
        pod_collector: PodCollector,
        event_collector: EventCollector,
        pr_watcher: PullRequestWatcher,
        emitter: ColorEmitter,
        emit_interval: float = EMIT_INTERVAL,
        collect_interval: float = COLLECT_INTERVAL,
        pr_interval: float = DEFAULT_PR_CHECK_INTERVAL,
    ):
        self.state = state
        self.node_collector = node_collector
        self.pod_collector = pod_collector
        self.event_collector = event_collector
        self.pr_watcher = pr_watcher
        self.emitter = emitter
        self.periods = {
            Task.EMIT: emit_interval,
            Task.COLLECT: collect_interval,
            Task.PULL_REQUESTS: pr_interval,
        }
        self._stop = asyncio.Event()

    def stop(self) -> None:
        """Signal the dispatch loop to exit after the current task."""
        self._stop.set()

    def collect_once(self) -> HealthReport:
        return run_collection_pass(
            self.state, self.node_collector, self.pod_collector, self.event_collector
        )

    def emit_once(self) -> None:
        self.emitter.tick(self.state.snapshot_cluster_state())

    async def run(self) -> ExitCode:
        """Dispatch timers until stopped or the error budget runs out."""
        loop = asyncio.get_running_loop()
        start = loop.time()
        next_due = {task: start + period for task, period in self.periods.items()}
        logger.info(
            "Scheduler started: emit=%ss collect=%ss pull_requests=%ss",
            *self.periods.values(),
        )

        while not self._stop.is_set():
            task = min(next_due, key=next_due.__getitem__)
            delay = next_due[task] - loop.time()
            if delay > 0:
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=delay)
                    break
                except asyncio.TimeoutError:
                    pass

            # Fires missed while another task ran are dropped, not queued
            now = loop.time()
            while next_due[task] <= now:
                next_due[task] += self.periods[task]

            exit_code = await self._run_task(task)
            if exit_code is not None:
                return exit_code

        logger.info("Scheduler stopped.")
        return ExitCode.OK

    async def _run_task(self, task: Task) -> ExitCode | None:
        try:
            if task is Task.EMIT:
                await asyncio.to_thread(self.emit_once)
            elif task is Task.COLLECT:
                await asyncio.to_thread(self.collect_once)
            else:
                outcome = await asyncio.to_thread(self.pr_watcher.poll)
                if outcome is PollOutcome.BUDGET_EXHAUSTED:
                    logger.critical("Giving up after repeated pull request failures")
                    return ExitCode.ERROR_BUDGET_EXHAUSTED
        except Exception:
            logger.exception("Scheduled %s task failed", task.value)
        return None
