"""Cron-style scheduling of periodic jobs."""

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from croniter import croniter
from loguru import logger

from archival_access.clock import SystemClock
from archival_access.errors import ConfigurationError
from archival_access.protocols import ClockProtocol

# Upper bound on a single sleep, so a stopped scheduler exits promptly.
MAX_SLEEP_SECONDS = 60.0


@dataclass
class _Entry:
    expression: str
    job: Callable[[], object]
    ticks: croniter
    next_run: datetime


class CronScheduler:
    """Runs each job on every tick of its cron expression."""

    def __init__(self, clock: ClockProtocol | None = None) -> None:
        self.clock = clock or SystemClock()
        self._entries: list[_Entry] = []
        self.running = False

    def schedule(self, expression: str, job: Callable[[], object]) -> None:
        """Register a job.

        Raises:
            ConfigurationError: If the cron expression is invalid.
        """
        if not croniter.is_valid(expression):
            msg = f"Invalid cron expression: {expression!r}"
            raise ConfigurationError(msg)
        ticks = croniter(expression, self.clock.now())
        self._entries.append(_Entry(expression, job, ticks, ticks.get_next(datetime)))

    def next_run(self) -> datetime | None:
        if not self._entries:
            return None
        return min(entry.next_run for entry in self._entries)

    def run_pending(self) -> int:
        """Run every due job once.

        Ticks missed while the process was suspended collapse into that one run.

        Returns:
            Number of job invocations.
        """
        now = self.clock.now()
        ran = 0
        for entry in self._entries:
            if entry.next_run > now:
                continue
            try:
                entry.job()
            except Exception:
                logger.exception("Scheduled job ({}) failed", entry.expression)
            ran += 1
            entry.ticks = croniter(entry.expression, now)
            entry.next_run = entry.ticks.get_next(datetime)
        return ran

    def run_forever(self) -> None:
        self.running = True
        while self.running:
            self.run_pending()
            upcoming = self.next_run()
            if upcoming is None:
                wait = MAX_SLEEP_SECONDS
            else:
                wait = (upcoming - self.clock.now()).total_seconds()
            time.sleep(min(max(wait, 0.5), MAX_SLEEP_SECONDS))

    def stop(self) -> None:
        self.running = False
