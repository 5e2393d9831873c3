from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ProcessState(str, Enum):
    NEW = "NEW"
    READY = "READY"
    RUNNING = "RUNNING"
    WAITING = "WAITING"
    TERMINATED = "TERMINATED"

    def __str__(self) -> str:
        return self.value


# (old, new) pairs the engine is allowed to perform
ALLOWED_TRANSITIONS = frozenset(
    {
        (ProcessState.NEW, ProcessState.READY),
        (ProcessState.READY, ProcessState.RUNNING),
        (ProcessState.RUNNING, ProcessState.READY),
        (ProcessState.RUNNING, ProcessState.WAITING),
        (ProcessState.RUNNING, ProcessState.TERMINATED),
        (ProcessState.WAITING, ProcessState.READY),
    }
)


@dataclass
class Process:
    pid: int
    arrival_time: int

    # Total CPU time the process needs before it can terminate
    burst_time: int

    # CPU time between two I/O requests (0 = request I/O at every event while running)
    io_interval: int = 0
    # Blocking time charged for every I/O request
    io_duration: int = 0

    # Runtime state
    remaining_time: int = field(default=0, compare=False)
    io_countdown: int = field(default=0, compare=False)
    io_time: int = field(default=0, compare=False)

    start_time: Optional[int] = field(default=None, compare=False)
    completion_time: Optional[int] = field(default=None, compare=False)

    state: ProcessState = field(default=ProcessState.NEW, compare=False)

    def __post_init__(self):
        self.reset()

    def reset(self) -> None:
        self.remaining_time = int(self.burst_time)
        self.io_countdown = int(self.io_interval)
        self.io_time = 0
        self.start_time = None
        self.completion_time = None
        self.state = ProcessState.NEW

    @property
    def does_io(self) -> bool:
        return self.io_duration > 0

    @property
    def terminated(self) -> bool:
        return self.state is ProcessState.TERMINATED


@dataclass(frozen=True)
class Transition:
    """One trace record: ``process pid moved from old to new at time``."""

    time: int
    pid: int
    old: ProcessState
    new: ProcessState

    def as_dict(self):
        return {"time": self.time, "pid": self.pid, "from": self.old.value, "to": self.new.value}
