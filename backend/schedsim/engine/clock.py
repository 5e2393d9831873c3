from typing import Iterable, Optional

from .models import Process


def running_delta(process: Process, slice_left: Optional[int] = None) -> int:
    """Time until the running process next changes state on its own.

    That is the earliest of burst completion, the next I/O request and,
    when a time slice is in force, quantum expiry.
    """
    delta = process.remaining_time
    # a zero countdown never stops the clock
    if process.does_io and 0 < process.io_countdown < delta:
        delta = process.io_countdown
    if slice_left is not None and slice_left < delta:
        delta = max(0, slice_left)
    return delta


def next_event_time(
    time: int,
    running: Optional[Process],
    io_finish_times: Iterable[int],
    next_arrival: Optional[int] = None,
    slice_left: Optional[int] = None,
) -> Optional[int]:
    """Return the next instant the system must be re-evaluated, or None."""
    candidates = [t for t in io_finish_times]
    if next_arrival is not None:
        candidates.append(next_arrival)
    if running is not None:
        candidates.append(time + running_delta(running, slice_left))
    if not candidates:
        return None
    return min(candidates)
