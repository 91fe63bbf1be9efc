"""Permutation flow-shop scheduling with the NEH heuristic."""

from .neh import (
    ScheduleResult,
    as_processing_times,
    fss_makespan,
    fssb_makespan,
    load_processing_times,
    neh_schedule,
)

__all__ = [
    "ScheduleResult",
    "as_processing_times",
    "fss_makespan",
    "fssb_makespan",
    "load_processing_times",
    "neh_schedule",
]
