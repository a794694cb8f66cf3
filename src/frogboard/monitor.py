"""Movement monitor - re-checks the board on a fixed interval.

The monitor is the only place that reads the real clock, once per tick.
It reports transitions and never writes to the repository itself.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters import RepositoryError
from .core.movement import MonitorStats, MovementTransition, monitor_stats, monitor_tick
from .core.timectx import Clock, now as zoned_now, resolve_zone
from .ports import TaskRepository

logger = logging.getLogger(__name__)

JOB_ID = "movement_monitor"
DEFAULT_INTERVAL_SECONDS = 60


@dataclass(frozen=True)
class TickResult:
    """Outcome of one monitor tick."""

    now: datetime
    transitions: list[MovementTransition]
    stats: MonitorStats


class MovementMonitor:
    """
    Periodic movement check for one user's board.

    tick() can be called directly (tests step a fake clock this way);
    start() runs it on an APScheduler interval job that never overlaps
    with itself.
    """

    def __init__(
        self,
        repository: TaskRepository,
        user_id: str,
        timezone: str,
        interval_seconds: int = DEFAULT_INTERVAL_SECONDS,
        clock: Clock | None = None,
        on_transitions: Callable[[list[MovementTransition]], None] | None = None,
        scheduler: BaseScheduler | None = None,
    ):
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.repository = repository
        self.user_id = user_id
        self.timezone = timezone
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.on_transitions = on_transitions
        # A caller-supplied scheduler may carry other jobs; only our own is shut down
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or BackgroundScheduler(timezone=resolve_zone(timezone))
        self.last_result: TickResult | None = None

    def set_timezone(self, timezone: str) -> None:
        """Swap the user's zone; takes effect from the next tick."""
        logger.info(f"Monitor timezone changed from {self.timezone} to {timezone}")
        self.timezone = timezone

    def tick(self) -> TickResult:
        """Re-check a fresh snapshot of the board."""
        timezone = self.timezone
        current = zoned_now(timezone, self.clock)
        tasks = self.repository.list(self.user_id)

        transitions = monitor_tick(tasks, current, timezone)
        stats = monitor_stats(tasks, current, timezone)
        self.last_result = TickResult(now=current, transitions=transitions, stats=stats)

        if transitions:
            logger.info(f"{len(transitions)} task(s) need to move ({stats.urgent} urgent)")
            if self.on_transitions:
                self.on_transitions(transitions)
        else:
            logger.debug(f"No movements; {stats.total} active task(s)")
        return self.last_result

    def _scheduled_tick(self) -> None:
        # A storage outage must not kill the interval job
        try:
            self.tick()
        except RepositoryError as e:
            logger.error(f"Movement check failed: {e}")

    @property
    def running(self) -> bool:
        return self.scheduler.get_job(JOB_ID) is not None

    def schedule(self) -> None:
        """Register the interval job without starting the scheduler."""
        self.scheduler.add_job(
            self._scheduled_tick,
            IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        logger.info(f"Scheduled movement monitor every {self.interval_seconds}s")

    def start(self) -> None:
        """Run one tick now, then keep ticking on the interval."""
        self._scheduled_tick()
        self.schedule()
        if not self.scheduler.running:
            self.scheduler.start()

    def stop(self) -> None:
        """Cancel the interval job, and shut the scheduler down if the monitor created it."""
        if self.scheduler.get_job(JOB_ID) is not None:
            self.scheduler.remove_job(JOB_ID)
        if self._owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Movement monitor stopped")
