from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from metabench.foundation.exceptions import MetabenchError
from metabench.foundation.logging import configure_metabench_logging
from metabench.foundation.problem import function_specs
from metabench.experiment import (
    DEFAULT_SEED,
    default_output_path,
    load_experiments,
    run_experiments,
    summary_text,
    write_summary_csv,
)
from metabench.scheduling import load_processing_times, neh_schedule


def _logger() -> logging.Logger:
    return logging.getLogger(__name__)


def _configure_cli_logging(level: int = logging.INFO) -> None:
    configure_metabench_logging(level=level)


def _run_cmd(args: argparse.Namespace) -> int:
    specs = load_experiments(args.experiments)
    results = run_experiments(specs, seed=args.seed)
    for result in results:
        if result.rejected:
            continue
        _logger().info("%s", summary_text(result))
    path = Path(args.out_file) if args.out_file else default_output_path(args.output)
    write_summary_csv(results, path)
    rejected = sum(1 for result in results if result.rejected)
    _logger().info("Results: %s", path)
    return 1 if rejected else 0


def _schedule_cmd(args: argparse.Namespace) -> int:
    times = load_processing_times(args.times)
    result = neh_schedule(times, blocking=args.blocking)
    variant = "FSSB" if result.blocking else "FSS"
    _logger().info("%s: %d machines, %d jobs", variant, result.machines, result.jobs)
    _logger().info("Schedule: %s", " ".join(str(job) for job in result.schedule))
    _logger().info("Makespan: %d", result.makespan)
    return 0


def _problems_cmd(args: argparse.Namespace) -> int:
    for spec in function_specs():
        _logger().info(
            "%2d  %-15s | min_n_var=%d range=%g | %s",
            int(spec.id),
            spec.key,
            spec.min_n_var,
            spec.default_range,
            spec.description,
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="metabench", description="Single-objective metaheuristic benchmark runner.")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log per-trial details.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    sub = p.add_subparsers(dest="cmd")

    run_p = sub.add_parser("run", help="Run every experiment in a file and write the CSV summary")
    run_p.add_argument("experiments", help="Experiment file (line format, .yaml/.yml or .json).")
    run_p.add_argument("--output", default=".", help="Directory for experiments<epoch-ms>.csv (default: cwd).")
    run_p.add_argument("--out-file", help="Explicit CSV path; overrides --output.")
    run_p.add_argument("--seed", type=int, default=DEFAULT_SEED, help=f"Base seed (default: {DEFAULT_SEED}).")

    sched_p = sub.add_parser("schedule", help="Build a flow-shop schedule with NEH")
    sched_p.add_argument("times", help="File with 'machines jobs' then one row of processing times per machine.")
    sched_p.add_argument("--blocking", action="store_true", help="Use the flow shop with blocking (FSSB).")

    sub.add_parser("problems", help="List the benchmark functions")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.quiet:
        _configure_cli_logging(logging.WARNING)
    elif args.verbose:
        _configure_cli_logging(logging.DEBUG)
    else:
        _configure_cli_logging()

    handlers = {"run": _run_cmd, "schedule": _schedule_cmd, "problems": _problems_cmd}
    if args.cmd is None:
        parser.print_help()
        return 2
    try:
        return handlers[args.cmd](args)
    except (MetabenchError, FileNotFoundError) as exc:
        _logger().error("%s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
