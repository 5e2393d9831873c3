from .clock import next_event_time, running_delta
from .compare import compare_all_algorithms, run_algorithm_once
from .errors import InvalidTransitionError, SchedulerStateError, StalledSimulationError, WorkloadError
from .metrics import compute_metrics, cpu_utilization
from .models import ALLOWED_TRANSITIONS, Process, ProcessState, Transition
from .policies import (
    DEFAULT_QUANTUM,
    SUPPORTED_ALGOS,
    FCFSPolicy,
    PriorityPolicy,
    RoundRobinPolicy,
    SchedulerPolicy,
    make_policy,
    normalize_algorithm,
)
from .scheduler import DEFAULT_MAX_STEPS, CPUScheduler
from .workload import (
    clone_processes,
    load_preset,
    load_processes_json,
    load_workload,
    parse_workload,
    parse_workload_line,
    process_from_dict,
    validate_workload,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "DEFAULT_MAX_STEPS",
    "DEFAULT_QUANTUM",
    "SUPPORTED_ALGOS",
    "CPUScheduler",
    "FCFSPolicy",
    "InvalidTransitionError",
    "PriorityPolicy",
    "Process",
    "ProcessState",
    "RoundRobinPolicy",
    "SchedulerPolicy",
    "SchedulerStateError",
    "StalledSimulationError",
    "Transition",
    "WorkloadError",
    "clone_processes",
    "compare_all_algorithms",
    "compute_metrics",
    "cpu_utilization",
    "load_preset",
    "load_processes_json",
    "load_workload",
    "make_policy",
    "next_event_time",
    "normalize_algorithm",
    "parse_workload",
    "parse_workload_line",
    "process_from_dict",
    "run_algorithm_once",
    "running_delta",
    "validate_workload",
]
