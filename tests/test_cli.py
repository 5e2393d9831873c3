import os
import re
import subprocess
import sys

from schedsim.__main__ import EXIT_STALLED, EXIT_WORKLOAD_ERROR, main
from schedsim.engine import CPUScheduler, PriorityPolicy, load_workload
from schedsim.trace import render_trace

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


def test_cli_writes_trace_and_measurements(tmp_path):
    workload = _write(tmp_path, "input.txt", "1, 0, 5, 0, 0\n2, 0, 3, 0, 0\n")
    out = tmp_path / "execution.txt"

    env = dict(os.environ)
    env["PYTHONPATH"] = os.path.join(REPO_ROOT, "backend") + os.pathsep + env.get("PYTHONPATH", "")
    result = subprocess.run(
        [sys.executable, "-m", "schedsim", workload, "-p", "priority", "-o", str(out)],
        capture_output=True,
        text=True,
        cwd=str(tmp_path),
        env=env,
        check=False,
    )

    assert result.returncode == 0, f"Return code {result.returncode}, stderr: {result.stderr}"
    lines = [ln.strip() for ln in result.stdout.splitlines() if ln.strip()]
    assert lines[0] == "found 2 processes"
    assert re.match(r"^measurements\s+8\s+100$", lines[-1]), result.stdout

    expected = CPUScheduler(load_workload(workload), policy=PriorityPolicy()).run()
    assert out.read_text() == render_trace(expected)


def test_cli_round_robin_with_metrics(tmp_path, capsys):
    workload = _write(tmp_path, "input.txt", "1, 0, 250, 0, 0\n")
    out = tmp_path / "rr.txt"
    assert main([workload, "-p", "rr", "-q", "100", "-o", str(out), "--metrics"]) == 0

    stdout = capsys.readouterr().out
    assert "time quantum is 100" in stdout
    assert "avg waiting 0.00" in stdout
    assert out.read_text().count("RUNNING |      READY") == 2


def test_cli_rejects_bad_workload(tmp_path):
    dup = _write(tmp_path, "dup.txt", "1, 0, 5, 0, 0\n1, 0, 3, 0, 0\n")
    assert main([dup, "-o", str(tmp_path / "out.txt")]) == EXIT_WORKLOAD_ERROR
    assert not (tmp_path / "out.txt").exists()

    assert main([str(tmp_path / "missing.txt")]) == EXIT_WORKLOAD_ERROR

    ok = _write(tmp_path, "ok.txt", "1, 0, 5, 0, 0\n")
    assert main([ok, "-q", "0", "-o", str(tmp_path / "out.txt")]) == EXIT_WORKLOAD_ERROR


def test_cli_reports_stall(tmp_path, monkeypatch):
    workload = _write(tmp_path, "input.txt", "1, 4, 5, 0, 0\n")
    out = tmp_path / "out.txt"
    monkeypatch.setattr(CPUScheduler, "next_time", lambda self: None)
    assert main([workload, "-o", str(out)]) == EXIT_STALLED
    # header and footer are still written
    assert out.read_text().count("+-") == 3


def test_cli_policy_names_are_case_insensitive(tmp_path, capsys):
    workload = _write(tmp_path, "input.txt", "2, 0, 3, 0, 0\n1, 0, 5, 0, 0\n")
    assert main([workload, "-p", "EP", "-o", str(tmp_path / "ep.txt")]) == 0
    assert main([workload, "-p", "RR", "-q", "2", "-o", str(tmp_path / "rr.txt")]) == 0
    stdout = capsys.readouterr().out
    assert "policy is PRIORITY" in stdout
    assert "time quantum is 2" in stdout


def test_cli_reports_undecodable_workload_as_read_error(tmp_path, caplog):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe\x001, 0, 5, 0, 0\n")
    assert main([str(path), "-o", str(tmp_path / "out.txt")]) == EXIT_WORKLOAD_ERROR
    assert "cannot read workload" in caplog.text
    assert "invalid options" not in caplog.text
