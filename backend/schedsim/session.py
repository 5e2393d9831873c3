import logging
from threading import Lock
from typing import Any, Dict, List, Optional

from schedsim.engine import (
    DEFAULT_MAX_STEPS,
    DEFAULT_QUANTUM,
    CPUScheduler,
    Process,
    StalledSimulationError,
    WorkloadError,
    clone_processes,
    make_policy,
    normalize_algorithm,
    process_from_dict,
    validate_workload,
)
from schedsim.serializers import default_state, serialize_state
from schedsim.trace import render_trace

logger = logging.getLogger(__name__)

_session_lock = Lock()

scheduler: Optional[CPUScheduler] = None
base_processes: List[Process] = []
settings: Dict[str, Any] = {
    "algorithm": "RR",
    "quantum": DEFAULT_QUANTUM,
    "max_steps": DEFAULT_MAX_STEPS,
}
event_log: List[str] = []
EVENT_LOG_LIMIT = 200


def _safe_int(value: Any, default: int) -> int:
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return int(default)
        try:
            return int(text, 10)
        except ValueError:
            return int(default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


def _apply_settings(data: Dict[str, Any]) -> None:
    # Validate everything before touching the shared settings
    algorithm = normalize_algorithm(data.get("algorithm", settings["algorithm"]))
    quantum = _safe_int(data.get("quantum", settings["quantum"]), settings["quantum"])
    if quantum < 1:
        raise ValueError("quantum must be >= 1")
    max_steps = max(1, _safe_int(data.get("max_steps", settings["max_steps"]), settings["max_steps"]))

    settings["algorithm"] = algorithm
    settings["quantum"] = quantum
    settings["max_steps"] = max_steps


def build_process_list(payload_processes: Any) -> List[Process]:
    if payload_processes is None:
        return []
    if not isinstance(payload_processes, list):
        raise WorkloadError("processes must be a list")
    processes = [process_from_dict(item) for item in payload_processes]
    validate_workload(processes)
    return processes


def _new_scheduler_from_base() -> CPUScheduler:
    return CPUScheduler(
        clone_processes(base_processes),
        policy=make_policy(settings["algorithm"], settings["quantum"]),
        max_steps=settings["max_steps"],
    )


def _trim_event_log() -> None:
    global event_log
    if len(event_log) > EVENT_LOG_LIMIT:
        event_log = event_log[-EVENT_LOG_LIMIT:]


def _state() -> Dict[str, Any]:
    return serialize_state(scheduler, settings, event_log)


def _step(steps: Optional[int]) -> int:
    """Advance the live scheduler; ``steps=None`` runs to completion."""
    count = 0
    try:
        while steps is None or count < steps:
            if not scheduler.tick():
                break
            count += 1
    except StalledSimulationError as exc:
        event_log.append(f"Stalled: {exc}")
        _trim_event_log()
        raise
    return count


def reset_session() -> Dict[str, Any]:
    global scheduler, event_log
    with _session_lock:
        if base_processes:
            scheduler = _new_scheduler_from_base()
            event_log = ["Session reset"]
            return _state()

        scheduler = None
        event_log = []
        return default_state(settings)


def init_session(payload: Dict[str, Any]) -> Dict[str, Any]:
    global scheduler, base_processes, event_log

    data = payload or {}
    processes = build_process_list(data.get("processes"))
    with _session_lock:
        _apply_settings(data)
        base_processes = processes
        scheduler = _new_scheduler_from_base()
        event_log = [
            f"Initialized algorithm={settings['algorithm']} quantum={settings['quantum']} processes={len(base_processes)}"
        ]
        logger.info(event_log[0])
        return _state()


def set_config(payload: Dict[str, Any]) -> Dict[str, Any]:
    global scheduler
    data = payload or {}
    with _session_lock:
        _apply_settings(data)
        # A policy cannot change mid-run; restart from the base workload
        if base_processes:
            scheduler = _new_scheduler_from_base()

        event_log.append(f"Config algorithm={settings['algorithm']} quantum={settings['quantum']}")
        _trim_event_log()
        logger.info(event_log[-1])

        return {
            "ok": True,
            "config": {
                "algorithm": settings["algorithm"],
                "quantum": int(settings["quantum"]),
                "max_steps": int(settings["max_steps"]),
            },
        }


def tick_session() -> Dict[str, Any]:
    with _session_lock:
        if scheduler is None:
            return default_state(settings)

        if _step(1):
            event_log.append(f"Tick -> t={scheduler.time}")
            _trim_event_log()

        return _state()


def run_session(steps: Optional[int]) -> Dict[str, Any]:
    with _session_lock:
        if scheduler is None:
            return default_state(settings)

        count = _step(None if steps is None else max(0, _safe_int(steps, 0)))
        event_log.append(f"Run steps={count} -> t={scheduler.time}")
        _trim_event_log()

        return _state()


def get_state() -> Dict[str, Any]:
    with _session_lock:
        if scheduler is None:
            return default_state(settings)
        return _state()


def get_trace() -> str:
    with _session_lock:
        if scheduler is None:
            return render_trace([])
        return render_trace(scheduler.transitions)


def get_compare_processes() -> List[Process]:
    with _session_lock:
        return clone_processes(base_processes)


def get_settings() -> Dict[str, Any]:
    with _session_lock:
        return dict(settings)
