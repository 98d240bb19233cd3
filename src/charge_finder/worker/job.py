from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from charge_finder.errors import ChargeFinderError

logger = logging.getLogger(__name__)


class Job(Protocol):
    name: str
    max_age: timedelta

    def run(self, now: datetime) -> object: ...


@dataclass(slots=True)
class JobThrottle:
    """Tracks when a job last ran so it executes at most once per ``max_age``."""

    max_age: timedelta
    last_run_at: datetime | None = None

    def is_due(self, now: datetime) -> bool:
        if self.last_run_at is None:
            return True
        return now - self.last_run_at >= self.max_age

    def mark_run(self, now: datetime) -> None:
        self.last_run_at = now


def run_if_needed(job: Job, throttle: JobThrottle, now: datetime) -> bool:
    """Run ``job`` unless it is still cooling down. Returns whether it ran.

    The throttle is marked even when the job fails, so a failing job waits a
    full ``max_age`` before it is attempted again.
    """
    if not throttle.is_due(now):
        return False

    logger.debug("Running job %s", job.name)
    try:
        job.run(now)
    except ChargeFinderError as exc:
        logger.critical("Job %s failed: %s", job.name, exc)
    finally:
        throttle.mark_run(now)
    return True
