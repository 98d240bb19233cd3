from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from charge_finder.errors import NoSettingsError
from charge_finder.worker.job import JobThrottle, run_if_needed

T0 = datetime(2026, 1, 7, 12, 0, tzinfo=UTC)


class _RecordingJob:
    name = "recording"
    max_age = timedelta(minutes=10)

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[datetime] = []
        self._error = error

    def run(self, now: datetime) -> None:
        self.calls.append(now)
        if self._error is not None:
            raise self._error


def test_throttle_is_due_before_first_run() -> None:
    throttle = JobThrottle(max_age=timedelta(minutes=10))

    assert throttle.is_due(T0)


def test_run_within_max_age_is_skipped() -> None:
    job = _RecordingJob()
    throttle = JobThrottle(max_age=timedelta(minutes=10))

    assert run_if_needed(job, throttle, T0)
    assert not run_if_needed(job, throttle, T0 + timedelta(minutes=5))
    assert run_if_needed(job, throttle, T0 + timedelta(minutes=11))

    assert job.calls == [T0, T0 + timedelta(minutes=11)]
    assert throttle.last_run_at == T0 + timedelta(minutes=11)


def test_run_exactly_at_max_age_executes() -> None:
    job = _RecordingJob()
    throttle = JobThrottle(max_age=timedelta(minutes=10), last_run_at=T0)

    assert run_if_needed(job, throttle, T0 + timedelta(minutes=10))
    assert job.calls == [T0 + timedelta(minutes=10)]


def test_failed_run_still_updates_last_run() -> None:
    job = _RecordingJob(error=NoSettingsError())
    throttle = JobThrottle(max_age=timedelta(minutes=10))

    assert run_if_needed(job, throttle, T0)
    assert throttle.last_run_at == T0
    assert not run_if_needed(job, throttle, T0 + timedelta(seconds=1))
    assert job.calls == [T0]


def test_unexpected_error_propagates_after_marking() -> None:
    job = _RecordingJob(error=RuntimeError("boom"))
    throttle = JobThrottle(max_age=timedelta(minutes=10))

    with pytest.raises(RuntimeError, match="boom"):
        run_if_needed(job, throttle, T0)
    assert throttle.last_run_at == T0
