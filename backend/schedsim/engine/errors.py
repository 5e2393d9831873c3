from typing import Iterable, Optional


class WorkloadError(ValueError):
    """Raised for malformed workload input, before any simulation runs."""

    def __init__(self, message: str, pid: Optional[int] = None, lineno: Optional[int] = None):
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)
        self.pid = pid
        self.lineno = lineno


class SchedulerStateError(RuntimeError):
    """The engine broke one of its own invariants. Always a bug, never data."""


class InvalidTransitionError(SchedulerStateError):
    def __init__(self, pid: int, old, new, time: int):
        super().__init__(f"t={time}: illegal transition for pid {pid}: {old} -> {new}")
        self.pid = pid
        self.old = old
        self.new = new
        self.time = time


class StalledSimulationError(RuntimeError):
    """The run stopped before every process terminated."""

    def __init__(self, time: int, pending: Iterable[int], reason: str = "no next event"):
        self.time = time
        self.pending = sorted(pending)
        self.reason = reason
        super().__init__(f"t={time}: {reason}; unterminated pids {self.pending}")
