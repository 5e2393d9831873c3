from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import PlainTextResponse

from schedsim.engine import (
    DEFAULT_QUANTUM,
    CPUScheduler,
    Process,
    StalledSimulationError,
    compare_all_algorithms,
    compute_metrics,
    cpu_utilization,
    make_policy,
)
from schedsim.serializers import normalize_compare_row, serialize_metric_rows
from schedsim.session import (
    build_process_list,
    get_compare_processes,
    get_settings,
    get_state,
    get_trace,
    init_session,
    reset_session,
    run_session,
    set_config,
    tick_session,
)
from schedsim.trace import render_trace

router = APIRouter()


def _compute_workload(processes: List[Process]) -> Dict[str, float]:
    total_cpu = sum(p.burst_time for p in processes)
    arrivals = [p.arrival_time for p in processes]
    io_bound = sum(1 for p in processes if p.does_io)
    return {
        "n_procs": float(len(processes)),
        "total_cpu": float(total_cpu),
        "avg_cpu_burst": float(total_cpu / len(processes)) if processes else 0.0,
        "io_bound": float(io_bound),
        "arrival_spread": float(max(arrivals) - min(arrivals)) if arrivals else 0.0,
    }


def _stalled(exc: StalledSimulationError) -> HTTPException:
    return HTTPException(
        status_code=409,
        detail={"error": "stalled", "time": exc.time, "pending": exc.pending, "reason": exc.reason},
    )


@router.get("/health")
def health() -> Dict[str, bool]:
    return {"ok": True}


@router.post("/sim/init")
def sim_init(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return init_session(payload)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.post("/sim/tick")
def sim_tick() -> Dict[str, Any]:
    try:
        return tick_session()
    except StalledSimulationError as exc:
        raise _stalled(exc)


@router.post("/sim/run")
def sim_run(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return run_session(int(payload.get("steps", 1)))
    except (TypeError, ValueError):
        raise HTTPException(status_code=422, detail="steps must be an integer")
    except StalledSimulationError as exc:
        raise _stalled(exc)


@router.post("/sim/finish")
def sim_finish() -> Dict[str, Any]:
    try:
        return run_session(None)
    except StalledSimulationError as exc:
        raise _stalled(exc)


@router.post("/sim/config")
def sim_config(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return set_config(payload)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/sim/state")
def sim_state() -> Dict[str, Any]:
    return get_state()


@router.get("/sim/trace", response_class=PlainTextResponse)
def sim_trace() -> str:
    return get_trace()


@router.post("/sim/reset")
def sim_reset() -> Dict[str, Any]:
    return reset_session()


@router.post("/sim/simulate")
def sim_simulate(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    """One-shot run that leaves the interactive session untouched."""
    settings = get_settings()
    try:
        processes = build_process_list(payload.get("processes"))
        policy = make_policy(
            payload.get("algorithm", settings["algorithm"]),
            int(payload.get("quantum", settings["quantum"])),
        )
        sched = CPUScheduler(processes, policy=policy, max_steps=settings["max_steps"])
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    try:
        transitions = sched.run()
    except StalledSimulationError as exc:
        raise _stalled(exc)

    rows, avg_wt, avg_tat, avg_rt = compute_metrics(sched.processes)
    return {
        "algorithm": sched.algorithm,
        "quantum": sched.quantum,
        "makespan": sched.time,
        "transitions": [t.as_dict() for t in transitions],
        "trace": render_trace(transitions),
        "metrics": {
            "avg_wt": float(avg_wt),
            "avg_tat": float(avg_tat),
            "avg_rt": float(avg_rt),
            "cpu_util": cpu_utilization(sched.busy_time, sched.time),
        },
        "per_process": serialize_metric_rows(rows),
    }


@router.post("/sim/compare")
def sim_compare(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        payload_processes = payload.get("processes")
        if isinstance(payload_processes, list) and payload_processes:
            processes = build_process_list(payload_processes)
        else:
            processes = get_compare_processes()
        rr_quantum = int(payload.get("rr_quantum", get_settings().get("quantum", DEFAULT_QUANTUM)))
        results = compare_all_algorithms(processes, rr_quantum=rr_quantum)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except StalledSimulationError as exc:
        raise _stalled(exc)

    return {
        "results": [normalize_compare_row(result) for result in results],
        "workload": _compute_workload(processes),
    }
