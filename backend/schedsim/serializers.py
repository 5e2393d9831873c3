from typing import Any, Dict, List, Optional

from schedsim.engine.metrics import compute_metrics, cpu_utilization


def _safe_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return float(default)


def _safe_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


def _maybe_int(value: Any) -> Optional[int]:
    if value in {"-", None}:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _pid_of(item: Any) -> str:
    if item is None:
        return "IDLE"
    if hasattr(item, "pid"):
        return str(getattr(item, "pid"))
    return str(item)


def _pid_list(items: Any) -> List[str]:
    if items is None:
        return []
    return [_pid_of(item) for item in list(items)]


def serialize_metric_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {
            "pid": _safe_int(row.get("PID")),
            "at": _safe_int(row.get("AT")),
            "bt": _safe_int(row.get("BT")),
            "io": _safe_int(row.get("IO")),
            "st": _maybe_int(row.get("ST")),
            "ct": _maybe_int(row.get("CT")),
            "tat": _maybe_int(row.get("TAT")),
            "wt": _maybe_int(row.get("WT")),
            "rt": _maybe_int(row.get("RT")),
        }
        for row in rows
    ]


def normalize_compare_row(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "algorithm": str(raw.get("algorithm", "")),
        "avg_wt": _safe_float(raw.get("avg_wt", 0.0)),
        "avg_tat": _safe_float(raw.get("avg_tat", 0.0)),
        "avg_rt": _safe_float(raw.get("avg_rt", 0.0)),
        "cpu_util": _safe_float(raw.get("cpu_util", 0.0)),
        "makespan": _safe_int(raw.get("makespan", 0)),
        "throughput": _safe_float(raw.get("throughput", 0.0)),
        "transitions": _safe_int(raw.get("transitions", 0)),
        "per_process": serialize_metric_rows(raw.get("_rows") or []),
    }


def default_state(settings: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    cfg = settings or {}
    return {
        "time": 0,
        "algorithm": str(cfg.get("algorithm", "RR")),
        "quantum": _safe_int(cfg.get("quantum", 100), 100),
        "running": "IDLE",
        "slice_left": None,
        "ready_queue": [],
        "waiting": [],
        "pending": [],
        "completed": [],
        "done": False,
        "gantt": [],
        "transitions": [],
        "metrics": {
            "avg_wt": 0.0,
            "avg_tat": 0.0,
            "avg_rt": 0.0,
            "cpu_util": 0.0,
            "makespan": 0,
            "throughput": 0.0,
        },
        "per_process": [],
        "processes": [],
        "event_log": [],
    }


def serialize_state(
    scheduler: Any,
    settings: Dict[str, Any],
    event_log: Optional[List[str]] = None,
) -> Dict[str, Any]:
    state = default_state(settings)
    if scheduler is None:
        if event_log:
            state["event_log"] = [str(x) for x in event_log]
        return state

    processes = list(scheduler.processes)
    rows, avg_wt, avg_tat, avg_rt = compute_metrics(processes)
    makespan = _safe_int(scheduler.time, 0)
    throughput = (len(scheduler.completed) / makespan) if makespan > 0 else 0.0

    waiting = [
        {"pid": p.pid, "io_done_at": scheduler.io_finish_time.get(p.pid)}
        for p in scheduler.waiting
    ]
    process_summary = [
        {
            "pid": p.pid,
            "state": p.state.value,
            "arrival_time": p.arrival_time,
            "burst_time": p.burst_time,
            "remaining_time": p.remaining_time,
            "io_interval": p.io_interval,
            "io_countdown": p.io_countdown,
            "io_duration": p.io_duration,
            "start_time": p.start_time,
            "completion_time": p.completion_time,
        }
        for p in processes
    ]

    merged_log = [str(x) for x in scheduler.event_log]
    for entry in event_log or []:
        text = str(entry)
        if text and text not in merged_log:
            merged_log.append(text)

    state.update(
        {
            "time": makespan,
            "algorithm": scheduler.algorithm,
            "quantum": scheduler.quantum,
            "running": _pid_of(scheduler.running),
            "slice_left": (
                scheduler.slice_left if scheduler.quantum is not None and scheduler.running is not None else None
            ),
            "ready_queue": _pid_list(scheduler.ready_queue),
            "waiting": waiting,
            "pending": _pid_list(scheduler.pending),
            "completed": _pid_list(scheduler.completed),
            "done": scheduler.done(),
            "gantt": [
                {"pid": "IDLE" if pid is None else pid, "start": start, "end": end}
                for pid, start, end in scheduler.gantt_chart
            ],
            "transitions": [t.as_dict() for t in scheduler.transitions],
            "metrics": {
                "avg_wt": _safe_float(avg_wt),
                "avg_tat": _safe_float(avg_tat),
                "avg_rt": _safe_float(avg_rt),
                "cpu_util": _safe_float(cpu_utilization(scheduler.busy_time, makespan)),
                "makespan": makespan,
                "throughput": _safe_float(throughput),
            },
            "per_process": serialize_metric_rows(rows),
            "processes": process_summary,
            "event_log": merged_log,
        }
    )
    return state
