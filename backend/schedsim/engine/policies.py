from abc import ABC, abstractmethod
from typing import List, Optional

from .errors import SchedulerStateError
from .models import Process

DEFAULT_QUANTUM = 100

SUPPORTED_ALGOS = ("FCFS", "PRIORITY", "RR")

_ALIASES = {
    "EP": "PRIORITY",
    "PRIORITY_NP": "PRIORITY",
    "ROUND_ROBIN": "RR",
    "ROUNDROBIN": "RR",
}


class SchedulerPolicy(ABC):
    """Decides who gets the CPU next and whether the running process must yield."""

    name = ""

    @property
    def time_slice(self) -> Optional[int]:
        # None = no time slicing
        return None

    @abstractmethod
    def select_next(self, ready_queue: List[Process]) -> int:
        """Return the index in ``ready_queue`` of the process to dispatch."""

    def should_preempt(self, running: Process, slice_left: int) -> bool:
        return False

    def _check_ready(self, ready_queue: List[Process]) -> None:
        if not ready_queue:
            raise SchedulerStateError(f"{self.name}: dispatch from an empty ready queue")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FCFSPolicy(SchedulerPolicy):
    name = "FCFS"

    def select_next(self, ready_queue: List[Process]) -> int:
        self._check_ready(ready_queue)
        return 0


class PriorityPolicy(SchedulerPolicy):
    """Static priority: the smallest pid wins. Never preempts."""

    name = "PRIORITY"

    def select_next(self, ready_queue: List[Process]) -> int:
        self._check_ready(ready_queue)
        return min(range(len(ready_queue)), key=lambda i: ready_queue[i].pid)


class RoundRobinPolicy(SchedulerPolicy):
    """FIFO dispatch with a fixed quantum, refilled on every dispatch."""

    name = "RR"

    def __init__(self, quantum: int = DEFAULT_QUANTUM):
        if int(quantum) < 1:
            raise ValueError("quantum must be >= 1")
        self.quantum = int(quantum)

    @property
    def time_slice(self) -> Optional[int]:
        return self.quantum

    def select_next(self, ready_queue: List[Process]) -> int:
        self._check_ready(ready_queue)
        return 0

    def should_preempt(self, running: Process, slice_left: int) -> bool:
        return slice_left <= 0

    def __repr__(self) -> str:
        return f"RoundRobinPolicy(quantum={self.quantum})"


def normalize_algorithm(algorithm) -> str:
    algo = str(algorithm or "").strip().upper().replace("-", "_")
    algo = _ALIASES.get(algo, algo)
    if algo not in SUPPORTED_ALGOS:
        raise ValueError(f"unknown algorithm {algorithm!r} (expected one of {', '.join(SUPPORTED_ALGOS)})")
    return algo


def make_policy(algorithm: str, quantum: int = DEFAULT_QUANTUM) -> SchedulerPolicy:
    algo = normalize_algorithm(algorithm)
    if algo == "RR":
        return RoundRobinPolicy(quantum)
    if algo == "PRIORITY":
        return PriorityPolicy()
    return FCFSPolicy()
