from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from threading import Event

from charge_finder.worker.job import Job, JobThrottle, run_if_needed

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 1.0


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Worker:
    """Polls its jobs on a fixed cadence and runs whichever are due."""

    def __init__(
        self,
        *,
        jobs: Sequence[Job],
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.jobs = list(jobs)
        self.poll_interval_seconds = poll_interval_seconds
        self.throttles = [JobThrottle(max_age=job.max_age) for job in self.jobs]
        self._clock = clock

    def run_pending(self, now: datetime | None = None) -> list[str]:
        """Run every due job once and return the names of those that ran."""
        now = now or self._clock()
        ran: list[str] = []
        for job, throttle in zip(self.jobs, self.throttles):
            try:
                if run_if_needed(job, throttle, now):
                    ran.append(job.name)
            except Exception:
                logger.exception("Unhandled error in job %s", job.name)
                ran.append(job.name)
        return ran

    def run_forever(self, stop_event: Event) -> None:
        logger.info(
            "Worker started with %d job(s), polling every %.1fs",
            len(self.jobs),
            self.poll_interval_seconds,
        )
        while not stop_event.is_set():
            self.run_pending()
            stop_event.wait(self.poll_interval_seconds)
        logger.info("Worker stopped")
