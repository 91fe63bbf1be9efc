"""NEH construction heuristic for the permutation flow shop.

Reference:
    Nawaz, M., Enscore, E. and Ham, I. (1983). A heuristic algorithm for the
    m-machine, n-job flow-shop sequencing problem. Omega 11(1), pp. 91-95.

Processing times are given as a ``machines x jobs`` matrix. Two makespan
evaluators are available: the classic flow shop with unlimited buffers
(:func:`fss_makespan`) and the flow shop with blocking, where a finished job
stays on its machine until the next machine is free (:func:`fssb_makespan`).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from metabench.foundation.exceptions import ConfigurationError, ExperimentFileError

__all__ = [
    "ScheduleResult",
    "as_processing_times",
    "fss_makespan",
    "fssb_makespan",
    "neh_schedule",
    "load_processing_times",
]

Makespan = Callable[[np.ndarray], int]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleResult:
    machines: int
    jobs: int
    makespan: int
    schedule: tuple[int, ...]
    blocking: bool = False


def as_processing_times(times: Sequence[Sequence[int]] | np.ndarray) -> np.ndarray:
    """Validate and convert a ``machines x jobs`` matrix of non-negative integers."""
    try:
        P = np.asarray(times)
    except ValueError as exc:
        raise ConfigurationError("Processing times must form a rectangular matrix.") from exc
    if P.ndim != 2 or P.shape[0] < 1 or P.shape[1] < 1:
        raise ConfigurationError(f"Processing times must be a non-empty machines x jobs matrix, got shape {P.shape}.")
    if not np.issubdtype(P.dtype, np.integer):
        if not np.issubdtype(P.dtype, np.number) or not np.all(np.equal(np.mod(P, 1), 0)):
            raise ConfigurationError("Processing times must be integers.")
    if np.any(P < 0):
        raise ConfigurationError("Processing times must be non-negative.")
    return P.astype(np.int64)


def fss_makespan(times: np.ndarray) -> int:
    """Completion time of the last job on the last machine, jobs in column order."""
    m, n = times.shape
    C = np.zeros((m, n), dtype=np.int64)
    for j in range(n):
        for i in range(m):
            up = C[i - 1, j] if i > 0 else 0
            left = C[i, j - 1] if j > 0 else 0
            C[i, j] = max(up, left) + times[i, j]
    return int(C[m - 1, n - 1])


def fssb_makespan(times: np.ndarray) -> int:
    """Departure time of the last job from the last machine under blocking.

    ``D[i, j]`` is when job ``j`` leaves machine ``i``: it cannot leave before
    it is processed, nor before job ``j - 1`` has left machine ``i + 1``.
    """
    m, n = times.shape
    D = np.zeros((m, n), dtype=np.int64)
    for j in range(n):
        for i in range(m):
            arrival = D[i - 1, j] if i > 0 else (D[0, j - 1] if j > 0 else 0)
            done = arrival + times[i, j]
            if i < m - 1 and j > 0:
                done = max(done, D[i + 1, j - 1])
            D[i, j] = done
    return int(D[m - 1, n - 1])


def neh_schedule(times: Sequence[Sequence[int]] | np.ndarray, *, blocking: bool = False) -> ScheduleResult:
    """Build a job permutation with NEH.

    Jobs are sorted by non-increasing total processing time (ties keep job
    order), then inserted one at a time at the position that minimizes the
    partial makespan; the earliest position wins ties.
    """
    P = as_processing_times(times)
    m, n = P.shape
    makespan: Makespan = fssb_makespan if blocking else fss_makespan
    totals = P.sum(axis=0)
    order = sorted(range(n), key=lambda job: -int(totals[job]))

    schedule = [order[0]]
    best_score = makespan(P[:, schedule])
    for job in order[1:]:
        candidates = [schedule[:pos] + [job] + schedule[pos:] for pos in range(len(schedule) + 1)]
        scores = [makespan(P[:, seq]) for seq in candidates]
        k = int(np.argmin(scores))
        schedule, best_score = candidates[k], scores[k]

    _logger().debug("[NEH] %d machines, %d jobs, makespan=%d", m, n, best_score)
    return ScheduleResult(
        machines=m,
        jobs=n,
        makespan=int(best_score),
        schedule=tuple(schedule),
        blocking=blocking,
    )


_TIMES_HINT = "First line: 'machines jobs', then one row of processing times per machine"


def load_processing_times(path: str | Path) -> np.ndarray:
    """Read ``machines jobs`` on the first line, then one row of times per machine."""
    src = Path(path).expanduser()
    if not src.exists():
        raise FileNotFoundError(f"Processing-time file '{src}' not found.")
    rows: list[list[int]] = []
    with src.open("r", encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            text = line.split("#", 1)[0].strip()
            if not text:
                continue
            try:
                rows.append([int(tok) for tok in text.split()])
            except ValueError as exc:
                raise ExperimentFileError(f"non-integer value in '{text}'.", str(src), lineno, suggestion=_TIMES_HINT) from exc
    if not rows or len(rows[0]) != 2:
        raise ExperimentFileError("first line must read 'machines jobs'.", str(src), 1, suggestion=_TIMES_HINT)
    machines, jobs = rows[0]
    body = rows[1:]
    if len(body) != machines or any(len(row) != jobs for row in body):
        raise ExperimentFileError(
            f"expected {machines} rows of {jobs} processing times.",
            str(src),
            suggestion=_TIMES_HINT,
        )
    return as_processing_times(body)
