from __future__ import annotations

import logging

import pytest

from metabench.cli import build_parser, main
from metabench.scheduling import load_processing_times, neh_schedule


@pytest.fixture
def experiments_file(tmp_path):
    path = tmp_path / "experiments.txt"
    path.write_text(
        "# algorithm method crosstype dimension population problem range trials\n"
        "3 1 2 2 10 4 5.12 3\n"
        "1 2 1 3 8 2 100 2\n",
        encoding="utf-8",
    )
    return path


@pytest.mark.cli
def test_help_lists_subcommands(capsys):
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args(["--help"])
    assert info.value.code == 0
    out = capsys.readouterr().out
    for name in ("run", "schedule", "problems"):
        assert name in out


@pytest.mark.cli
def test_no_command_prints_help():
    assert main([]) == 2


@pytest.mark.cli
def test_problems(caplog):
    with caplog.at_level(logging.INFO, logger="metabench"):
        assert main(["problems"]) == 0
    assert "rastrigin" in caplog.text
    assert "egg_holder" in caplog.text


@pytest.mark.cli
def test_run_writes_summary(tmp_path, experiments_file, caplog):
    out = tmp_path / "summary.csv"
    with caplog.at_level(logging.INFO, logger="metabench"):
        code = main(["run", str(experiments_file), "--out-file", str(out), "--seed", "3"])
    assert code == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("Problem 4 with 3 experiments of dimension 2 in range [-5.12:5.12] using the Blind Search")
    assert lines[1].split(",")[0].endswith("milliseconds to run")
    assert len(lines[1].split(",")) == 3
    assert "Problem 2 with 2 experiments" in caplog.text


@pytest.mark.cli
def test_run_default_output_dir(tmp_path, experiments_file):
    assert main(["-q", "run", str(experiments_file), "--output", str(tmp_path / "runs")]) == 0
    written = list((tmp_path / "runs").glob("experiments*.csv"))
    assert len(written) == 1


@pytest.mark.cli
def test_run_reports_rejected_experiment(tmp_path):
    path = tmp_path / "experiments.txt"
    path.write_text("3 1 2 2 4 4 5.12 9\n3 1 2 2 4 4 5.12 2\n", encoding="utf-8")
    out = tmp_path / "summary.csv"
    assert main(["run", str(path), "--out-file", str(out)]) == 1
    assert len(out.read_text(encoding="utf-8").splitlines()) == 1


@pytest.mark.cli
def test_run_bad_file(tmp_path, caplog):
    path = tmp_path / "experiments.txt"
    path.write_text("3 1 2\n", encoding="utf-8")
    with caplog.at_level(logging.ERROR, logger="metabench"):
        assert main(["run", str(path)]) == 2
    assert "expected 8 fields" in caplog.text
    assert main(["run", str(tmp_path / "missing.txt")]) == 2


@pytest.mark.cli
@pytest.mark.parametrize("blocking", [False, True])
def test_schedule(tmp_path, caplog, blocking):
    path = tmp_path / "times.txt"
    path.write_text("3 3\n1 1 5\n5 1 1\n1 1 1\n", encoding="utf-8")
    with caplog.at_level(logging.INFO, logger="metabench"):
        assert main(["schedule", str(path), *(["--blocking"] if blocking else [])]) == 0
    expected = neh_schedule(load_processing_times(path), blocking=blocking)
    assert f"Makespan: {expected.makespan}" in caplog.text
    assert ("FSSB" if blocking else "FSS:") in caplog.text
