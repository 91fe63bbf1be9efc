from __future__ import annotations

import csv
import logging
import time
from collections.abc import Iterable
from pathlib import Path

from .runner import ExperimentResult

__all__ = ["summary_text", "summary_row", "default_output_path", "write_summary_csv"]


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _format_number(value: float) -> str:
    return repr(float(value))


def summary_text(result: ExperimentResult) -> str:
    spec = result.spec
    return (
        f"Problem {int(spec.function_id)} with {spec.trials} experiments of dimension {spec.dimension} "
        f"in range [-{_format_number(spec.bound)}:{_format_number(spec.bound)}] "
        f"using the {spec.strategy_label} algorithm that took {result.elapsed_ms:.3f} milliseconds to run"
    )


def summary_row(result: ExperimentResult) -> list[str]:
    """Summary string followed by one fitness value per trial (``nan`` for failures)."""
    values = [_format_number(f) if f is not None else "nan" for f in result.fitness]
    return [summary_text(result), *values]


def default_output_path(output_dir: str | Path) -> Path:
    return Path(output_dir) / f"experiments{int(time.time() * 1000)}.csv"


def write_summary_csv(results: Iterable[ExperimentResult], path: str | Path) -> Path:
    """Write one record line per experiment; rejected experiments are skipped."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh, lineterminator="\n")
        for result in results:
            if result.rejected:
                continue
            writer.writerow(summary_row(result))
            written += 1
    _logger().info("[Results] %d experiment(s) written to %s", written, path)
    return path
