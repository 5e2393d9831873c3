from typing import List

from .metrics import compute_metrics, cpu_utilization
from .models import Process
from .policies import DEFAULT_QUANTUM, SUPPORTED_ALGOS, make_policy
from .scheduler import DEFAULT_MAX_STEPS, CPUScheduler
from .workload import clone_processes


def run_algorithm_once(
    processes: List[Process],
    algorithm: str,
    quantum: int = DEFAULT_QUANTUM,
    max_steps: int = DEFAULT_MAX_STEPS,
):
    """Run a full simulation for a given algorithm on a fresh clone of `processes` and return summary metrics."""
    sched = CPUScheduler(clone_processes(processes), policy=make_policy(algorithm, quantum), max_steps=max_steps)
    sched.run()

    rows, avg_wt, avg_tat, avg_rt = compute_metrics(sched.processes)

    makespan = sched.time
    throughput = (len(sched.completed) / makespan) if makespan > 0 else 0.0

    return {
        "algorithm": sched.algorithm,
        "avg_wt": float(avg_wt),
        "avg_tat": float(avg_tat),
        "avg_rt": float(avg_rt),
        "cpu_util": float(cpu_utilization(sched.busy_time, makespan)),
        "makespan": int(makespan),
        "throughput": float(throughput),
        "transitions": len(sched.transitions),
        "_rows": rows,
    }


def compare_all_algorithms(processes: List[Process], rr_quantum: int = DEFAULT_QUANTUM):
    """Return a list of result dicts for all supported algorithms."""
    return [run_algorithm_once(processes, algo, quantum=rr_quantum) for algo in SUPPORTED_ALGOS]
