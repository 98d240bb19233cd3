"""Worker package for throttled background jobs."""

from charge_finder.worker.find_charging_ranges import (
    FindChargingRangesJob,
    FindChargingRangesResult,
)
from charge_finder.worker.job import Job, JobThrottle, run_if_needed
from charge_finder.worker.service import Worker

__all__ = [
    "FindChargingRangesJob",
    "FindChargingRangesResult",
    "Job",
    "JobThrottle",
    "Worker",
    "run_if_needed",
]
