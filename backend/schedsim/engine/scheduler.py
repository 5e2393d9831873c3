import logging
from collections import deque
from typing import Callable, Dict, List, Optional, Tuple

from .clock import next_event_time
from .errors import InvalidTransitionError, SchedulerStateError, StalledSimulationError
from .models import ALLOWED_TRANSITIONS, Process, ProcessState, Transition
from .policies import RoundRobinPolicy, SchedulerPolicy
from .workload import validate_workload

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 1_000_000

# (pid or None for idle, start, end)
GanttSegment = Tuple[Optional[int], int, int]


class CPUScheduler:
    """
    Event-driven single-CPU simulator.

    Instead of stepping one time unit at a time, every ``tick()`` jumps
    straight to the next instant where something happens (an arrival, an
    I/O completion, or the running process finishing its burst, starting
    I/O or exhausting its quantum) and applies the resulting transitions.

    Within one instant the order is fixed: arrivals, I/O completions,
    dispatch, then the outcome for the running process.
    """

    def __init__(
        self,
        processes: List[Process],
        policy: Optional[SchedulerPolicy] = None,
        max_steps: int = DEFAULT_MAX_STEPS,
        on_transition: Optional[Callable[[Transition], None]] = None,
    ):
        validate_workload(processes)
        self.processes = processes
        self.policy = policy if policy is not None else RoundRobinPolicy()
        self.max_steps = max_steps
        self.on_transition = on_transition
        self.reset()

    @property
    def algorithm(self) -> str:
        return self.policy.name

    @property
    def quantum(self) -> Optional[int]:
        return self.policy.time_slice

    def reset(self):
        self.time = 0
        self.steps = 0

        # Unarrived processes in arrival order (ties keep input order)
        self.pending = deque(sorted(self.processes, key=lambda p: p.arrival_time))
        self.ready_queue: List[Process] = []
        self.waiting: List[Process] = []
        self.io_finish_time: Dict[int, int] = {}
        self.running: Optional[Process] = None
        self.slice_left: int = 0

        self.job_list: List[Process] = []
        self.completed: List[Process] = []
        self.transitions: List[Transition] = []
        self.gantt_chart: List[GanttSegment] = []
        self.busy_time = 0

        # Transition log for state snapshots
        self.event_log: List[str] = []
        self.event_log_limit: int = 120

        for p in self.processes:
            p.reset()

    def done(self) -> bool:
        return len(self.completed) == len(self.processes)

    def unterminated(self) -> List[int]:
        return [p.pid for p in self.processes if not p.terminated]

    def _log_event(self, msg: str):
        self.event_log.append(msg)
        if len(self.event_log) > self.event_log_limit:
            self.event_log = self.event_log[-self.event_log_limit:]

    def _set_state(self, p: Process, new_state: ProcessState):
        old = p.state
        if (old, new_state) not in ALLOWED_TRANSITIONS:
            raise InvalidTransitionError(p.pid, old, new_state, self.time)
        p.state = new_state
        record = Transition(self.time, p.pid, old, new_state)
        self.transitions.append(record)
        self._log_event(f"t={self.time}: {p.pid} {old} -> {new_state}")
        logger.debug("t=%d pid=%d %s -> %s", self.time, p.pid, old, new_state)
        if self.on_transition is not None:
            self.on_transition(record)

    # -------- Per-instant steps --------
    def add_arrived_processes(self):
        while self.pending and self.pending[0].arrival_time == self.time:
            p = self.pending.popleft()
            self._set_state(p, ProcessState.READY)
            self.ready_queue.append(p)
            self.job_list.append(p)

    def complete_io(self):
        still_waiting: List[Process] = []
        for p in self.waiting:
            if self.io_finish_time[p.pid] != self.time:
                still_waiting.append(p)
                continue
            del self.io_finish_time[p.pid]
            self._set_state(p, ProcessState.READY)
            p.io_countdown = p.io_interval
            self.ready_queue.append(p)
        self.waiting = still_waiting

    def schedule(self):
        if self.running is not None or not self.ready_queue:
            return
        idx = self.policy.select_next(self.ready_queue)
        p = self.ready_queue.pop(idx)
        if any(q.state is ProcessState.RUNNING for q in self.job_list):
            raise SchedulerStateError(f"t={self.time}: dispatching pid {p.pid} while another process is running")
        self._set_state(p, ProcessState.RUNNING)
        if p.start_time is None:
            p.start_time = self.time
        self.running = p
        self.slice_left = self.policy.time_slice or 0

    def next_time(self) -> Optional[int]:
        return next_event_time(
            self.time,
            self.running,
            self.io_finish_time.values(),
            next_arrival=self.pending[0].arrival_time if self.pending else None,
            slice_left=self.slice_left if self.policy.time_slice is not None else None,
        )

    def advance(self, next_time: int):
        delta = next_time - self.time
        if delta < 0:
            raise SchedulerStateError(f"time moving backwards: {self.time} -> {next_time}")

        p = self.running
        if p is not None:
            p.remaining_time = max(0, p.remaining_time - delta)
            p.io_countdown = max(0, p.io_countdown - delta)
            if self.policy.time_slice is not None:
                self.slice_left = max(0, self.slice_left - delta)
            self.busy_time += delta

        if delta > 0:
            self._record_gantt(p.pid if p is not None else None, self.time, next_time)
            logger.debug("advance %d -> %d running=%s", self.time, next_time, p.pid if p else "IDLE")
        self.time = next_time

    def _record_gantt(self, pid: Optional[int], start: int, end: int):
        if self.gantt_chart:
            last_pid, last_start, last_end = self.gantt_chart[-1]
            if last_pid == pid and last_end == start:
                self.gantt_chart[-1] = (pid, last_start, end)
                return
        self.gantt_chart.append((pid, start, end))

    def execute(self):
        p = self.running
        if p is None:
            return

        # Burst finished
        if p.remaining_time == 0:
            self._set_state(p, ProcessState.TERMINATED)
            p.completion_time = self.time
            self.completed.append(p)
            self.running = None
            return

        # I/O request
        if p.io_countdown == 0 and p.io_duration > 0:
            self._set_state(p, ProcessState.WAITING)
            self.io_finish_time[p.pid] = self.time + p.io_duration
            p.io_time += p.io_duration
            self.waiting.append(p)
            self.running = None
            return

        # Time slice ended
        if self.policy.should_preempt(p, self.slice_left):
            self._set_state(p, ProcessState.READY)
            self.ready_queue.append(p)
            self.running = None

    def tick(self) -> bool:
        """Process one event instant. Returns False once the run has ended."""
        if self.done():
            return False
        self.steps += 1
        if self.steps > self.max_steps:
            raise StalledSimulationError(self.time, self.unterminated(), reason=f"exceeded {self.max_steps} steps")

        self.add_arrived_processes()
        self.complete_io()
        self.schedule()

        if self.done():
            return False

        next_time = self.next_time()
        if next_time is None:
            raise StalledSimulationError(self.time, self.unterminated())

        self.advance(next_time)
        self.execute()
        return True

    def run(self) -> List[Transition]:
        while self.tick():
            pass
        return self.transitions
