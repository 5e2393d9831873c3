import json
import os
from typing import Any, Dict, Iterable, List, Optional

from .errors import WorkloadError
from .models import Process

WORKLOAD_FIELDS = ("pid", "arrival_time", "burst_time", "io_interval", "io_duration")


def _to_int(value: Any, name: str, pid: Optional[int] = None, lineno: Optional[int] = None) -> int:
    if isinstance(value, bool):
        raise WorkloadError(f"{name} must be an integer, got {value!r}", pid=pid, lineno=lineno)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise WorkloadError(f"{name} must be an integer, got {value!r}", pid=pid, lineno=lineno) from None


def parse_workload_line(line: str, lineno: Optional[int] = None) -> Process:
    """Parse ``id, arrival_time, cpu_burst, io_interval, io_duration``."""
    tokens = [tok.strip() for tok in line.strip().split(",")]
    if len(tokens) != len(WORKLOAD_FIELDS):
        raise WorkloadError(
            f"expected {len(WORKLOAD_FIELDS)} comma-separated fields, got {len(tokens)}",
            lineno=lineno,
        )
    values = [_to_int(tok, name, lineno=lineno) for tok, name in zip(tokens, WORKLOAD_FIELDS)]
    return _checked_process(dict(zip(WORKLOAD_FIELDS, values)), lineno=lineno)


def parse_workload(lines: Iterable[str]) -> List[Process]:
    processes: List[Process] = []
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        processes.append(parse_workload_line(line, lineno))
    validate_workload(processes)
    return processes


def process_from_dict(item: Dict[str, Any]) -> Process:
    if not isinstance(item, dict):
        raise WorkloadError(f"process entry must be an object, got {type(item).__name__}")
    if "pid" not in item:
        raise WorkloadError("pid is required")
    pid = _to_int(item["pid"], "pid")
    values = {
        "pid": pid,
        "arrival_time": _to_int(item.get("arrival_time", 0), "arrival_time", pid=pid),
        "burst_time": _to_int(item.get("burst_time", item.get("cpu_burst", 0)), "burst_time", pid=pid),
        "io_interval": _to_int(item.get("io_interval", 0), "io_interval", pid=pid),
        "io_duration": _to_int(item.get("io_duration", 0), "io_duration", pid=pid),
    }
    return _checked_process(values)


def _checked_process(values: Dict[str, int], lineno: Optional[int] = None) -> Process:
    pid = values["pid"]
    for name in WORKLOAD_FIELDS[1:]:
        if values[name] < 0:
            raise WorkloadError(f"pid {pid}: {name} must be >= 0, got {values[name]}", pid=pid, lineno=lineno)
    return Process(**values)


def validate_workload(processes: Iterable[Process]) -> None:
    seen = set()
    for p in processes:
        if p.pid in seen:
            raise WorkloadError(f"duplicate pid {p.pid}", pid=p.pid)
        seen.add(p.pid)
        for name in WORKLOAD_FIELDS[1:]:
            value = getattr(p, name)
            if value < 0:
                raise WorkloadError(f"pid {p.pid}: {name} must be >= 0, got {value}", pid=p.pid)


# Helper: clone process list (no runtime fields)
def clone_processes(procs: Iterable[Process]) -> List[Process]:
    return [
        Process(
            p.pid,
            p.arrival_time,
            p.burst_time,
            io_interval=p.io_interval,
            io_duration=p.io_duration,
        )
        for p in procs
    ]


# ------------------------------
# Workload loaders: presets, text, JSON
# ------------------------------
def load_preset(preset_id: int) -> List[Process]:
    if preset_id == 1:
        # Two CPU-bound jobs arriving together
        return [
            Process(1, arrival_time=0, burst_time=5),
            Process(2, arrival_time=0, burst_time=3),
        ]

    if preset_id == 2:
        # One long job sliced by the quantum
        return [Process(1, arrival_time=0, burst_time=250)]

    if preset_id == 3:
        # Periodic I/O
        return [Process(1, arrival_time=0, burst_time=10, io_interval=4, io_duration=20)]

    if preset_id == 4:
        return [
            Process(1, arrival_time=0, burst_time=300, io_interval=120, io_duration=50),
            Process(2, arrival_time=10, burst_time=80),
            Process(3, arrival_time=20, burst_time=150, io_interval=60, io_duration=30),
            Process(4, arrival_time=200, burst_time=40, io_interval=15, io_duration=10),
        ]

    return load_preset(1)


def load_processes_json(path: str) -> List[Process]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("processes", [])
    if not isinstance(data, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    processes = [process_from_dict(item) for item in data]
    validate_workload(processes)
    return processes


def load_workload(path: str) -> List[Process]:
    if os.path.splitext(path)[1].lower() == ".json":
        return load_processes_json(path)
    with open(path, "r", encoding="utf-8") as f:
        return parse_workload(f)
