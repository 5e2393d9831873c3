from schedsim.engine import (
    CPUScheduler,
    FCFSPolicy,
    PriorityPolicy,
    Process,
    ProcessState,
    RoundRobinPolicy,
)

from tests._support.helpers import as_tuples


def run(processes, policy):
    sched = CPUScheduler(processes, policy=policy)
    return sched, as_tuples(sched.run())


def test_priority_smaller_pid_runs_first_and_is_not_preempted(two_cpu_bound):
    sched, trace = run(two_cpu_bound, PriorityPolicy())
    assert trace == [
        (0, 1, "NEW", "READY"),
        (0, 2, "NEW", "READY"),
        (0, 1, "READY", "RUNNING"),
        (5, 1, "RUNNING", "TERMINATED"),
        (5, 2, "READY", "RUNNING"),
        (8, 2, "RUNNING", "TERMINATED"),
    ]
    assert sched.time == 8
    assert [p.completion_time for p in sched.processes] == [5, 8]


def test_priority_does_not_preempt_on_higher_priority_arrival():
    _, trace = run([Process(2, 0, 10), Process(1, 3, 2)], PriorityPolicy())
    assert trace == [
        (0, 2, "NEW", "READY"),
        (0, 2, "READY", "RUNNING"),
        (3, 1, "NEW", "READY"),
        (10, 2, "RUNNING", "TERMINATED"),
        (10, 1, "READY", "RUNNING"),
        (12, 1, "RUNNING", "TERMINATED"),
    ]


def test_priority_picks_by_pid_not_arrival_order():
    _, trace = run([Process(1, 0, 5), Process(3, 1, 1), Process(2, 2, 1)], PriorityPolicy())
    dispatches = [(t, pid) for t, pid, old, new in trace if new == "RUNNING"]
    assert dispatches == [(0, 1), (5, 2), (6, 3)]


def test_round_robin_quantum_expiry():
    sched, trace = run([Process(1, 0, 250)], RoundRobinPolicy(100))
    assert trace == [
        (0, 1, "NEW", "READY"),
        (0, 1, "READY", "RUNNING"),
        (100, 1, "RUNNING", "READY"),
        (100, 1, "READY", "RUNNING"),
        (200, 1, "RUNNING", "READY"),
        (200, 1, "READY", "RUNNING"),
        (250, 1, "RUNNING", "TERMINATED"),
    ]
    assert sched.processes[0].start_time == 0


def test_round_robin_rotates_ready_queue():
    _, trace = run([Process(1, 0, 150), Process(2, 0, 150)], RoundRobinPolicy(100))
    dispatches = [(t, pid) for t, pid, old, new in trace if new == "RUNNING"]
    assert dispatches == [(0, 1), (100, 2), (200, 1), (250, 2)]
    assert trace[-1] == (300, 2, "RUNNING", "TERMINATED")


def test_io_blocks_and_resets_interval():
    sched, trace = run([Process(1, 0, 6, io_interval=4, io_duration=20)], RoundRobinPolicy(100))
    assert trace == [
        (0, 1, "NEW", "READY"),
        (0, 1, "READY", "RUNNING"),
        (4, 1, "RUNNING", "WAITING"),
        (24, 1, "WAITING", "READY"),
        (24, 1, "READY", "RUNNING"),
        (26, 1, "RUNNING", "TERMINATED"),
    ]
    p = sched.processes[0]
    assert p.io_countdown == 2
    assert p.io_time == 20


def test_io_repeats_every_interval():
    _, trace = run([Process(1, 0, 10, io_interval=4, io_duration=20)], PriorityPolicy())
    assert trace == [
        (0, 1, "NEW", "READY"),
        (0, 1, "READY", "RUNNING"),
        (4, 1, "RUNNING", "WAITING"),
        (24, 1, "WAITING", "READY"),
        (24, 1, "READY", "RUNNING"),
        (28, 1, "RUNNING", "WAITING"),
        (48, 1, "WAITING", "READY"),
        (48, 1, "READY", "RUNNING"),
        (50, 1, "RUNNING", "TERMINATED"),
    ]


def test_burst_completion_wins_over_io_at_same_instant():
    _, trace = run([Process(1, 0, 8, io_interval=4, io_duration=10)], FCFSPolicy())
    assert trace[-3:] == [
        (14, 1, "WAITING", "READY"),
        (14, 1, "READY", "RUNNING"),
        (18, 1, "RUNNING", "TERMINATED"),
    ]


def test_zero_interval_blocks_at_every_event_while_running():
    sched, trace = run([Process(1, 0, 30, io_interval=0, io_duration=5), Process(2, 10, 5)], FCFSPolicy())
    assert trace == [
        (0, 1, "NEW", "READY"),
        (0, 1, "READY", "RUNNING"),
        (10, 1, "RUNNING", "WAITING"),
        (10, 2, "NEW", "READY"),
        (10, 2, "READY", "RUNNING"),
        (15, 2, "RUNNING", "TERMINATED"),
        (15, 1, "WAITING", "READY"),
        (15, 1, "READY", "RUNNING"),
        (35, 1, "RUNNING", "TERMINATED"),
    ]
    assert sched.processes[0].io_time == 5


def test_zero_interval_alone_runs_to_completion():
    _, trace = run([Process(1, 0, 30, io_interval=0, io_duration=5)], FCFSPolicy())
    assert trace[-1] == (30, 1, "RUNNING", "TERMINATED")
    assert all(new != "WAITING" for _, _, _, new in trace)


def test_zero_duration_never_blocks():
    _, trace = run([Process(1, 0, 30, io_interval=5), Process(2, 0, 30, io_interval=5)], FCFSPolicy())
    assert all(new != "WAITING" for _, _, _, new in trace)
    assert trace[-1] == (60, 2, "RUNNING", "TERMINATED")


def test_arrival_and_io_completion_same_instant_both_ready_before_dispatch():
    workload = [Process(1, 0, 5, io_interval=2, io_duration=3), Process(2, 5, 1)]

    _, rr = run(workload, RoundRobinPolicy(100))
    assert [row for row in rr if row[0] == 5] == [
        (5, 2, "NEW", "READY"),
        (5, 1, "WAITING", "READY"),
        (5, 2, "READY", "RUNNING"),
    ]

    _, prio = run(workload, PriorityPolicy())
    assert [row for row in prio if row[0] == 5] == [
        (5, 2, "NEW", "READY"),
        (5, 1, "WAITING", "READY"),
        (5, 1, "READY", "RUNNING"),
    ]
    assert (7, 2, "READY", "RUNNING") in prio
    assert prio[-1] == (11, 1, "RUNNING", "TERMINATED")


def test_cpu_idles_until_next_arrival():
    sched, trace = run([Process(1, 10, 5)], RoundRobinPolicy())
    assert trace[0] == (10, 1, "NEW", "READY")
    assert trace[-1] == (15, 1, "RUNNING", "TERMINATED")
    assert sched.gantt_chart == [(None, 0, 10), (1, 10, 15)]
    assert sched.busy_time == 5


def test_zero_burst_process_terminates_on_dispatch():
    _, trace = run([Process(7, 3, 0, io_interval=5, io_duration=10)], PriorityPolicy())
    assert trace == [
        (3, 7, "NEW", "READY"),
        (3, 7, "READY", "RUNNING"),
        (3, 7, "RUNNING", "TERMINATED"),
    ]


def test_empty_workload_finishes_immediately():
    sched, trace = run([], RoundRobinPolicy())
    assert trace == []
    assert sched.done()
    assert sched.tick() is False


def test_tick_reports_end_of_run():
    sched = CPUScheduler([Process(1, 0, 3)], policy=FCFSPolicy())
    assert sched.tick() is True
    assert sched.processes[0].state is ProcessState.TERMINATED
    assert sched.tick() is False
    assert sched.time == 3


def test_reset_replays_identically():
    sched = CPUScheduler([Process(1, 0, 120, io_interval=50, io_duration=7), Process(2, 4, 90)])
    first = as_tuples(sched.run())
    sched.reset()
    assert sched.time == 0
    assert all(p.state is ProcessState.NEW for p in sched.processes)
    assert as_tuples(sched.run()) == first
