"""
Command-line entry point.

Usage:
python -m schedsim workload.txt [-p priority|rr|fcfs] [-q QUANTUM] [-o execution.txt]

Each workload line is ``id, arrival_time, cpu_burst, io_interval, io_duration``.
The transition table is written to the output file; a one-line summary goes
to stdout.
"""
import argparse
import logging
import sys

from schedsim.engine import (
    DEFAULT_QUANTUM,
    CPUScheduler,
    StalledSimulationError,
    WorkloadError,
    compute_metrics,
    cpu_utilization,
    load_workload,
    make_policy,
)
from schedsim.trace import DEFAULT_OUTPUT, TraceWriter, write_output

logger = logging.getLogger("schedsim")

EXIT_WORKLOAD_ERROR = 1
EXIT_STALLED = 2

_METRIC_COLUMNS = ("PID", "AT", "BT", "IO", "ST", "CT", "TAT", "WT", "RT")


def _print_metrics(processes) -> None:
    rows, avg_wt, avg_tat, avg_rt = compute_metrics(processes)
    print(" ".join(f"{c:>6}" for c in _METRIC_COLUMNS))
    for row in rows:
        print(" ".join(f"{row[c]!s:>6}" for c in _METRIC_COLUMNS))
    print(f"avg waiting {avg_wt:.2f} avg turnaround {avg_tat:.2f} avg response {avg_rt:.2f}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="schedsim", description="Event-driven single-CPU scheduling simulator")
    parser.add_argument("workload", help="Path to the workload file (text or .json)")
    parser.add_argument(
        "-p",
        "--policy",
        default="rr",
        type=str.lower,
        choices=["priority", "ep", "rr", "fcfs"],
        help="Scheduling policy (default: rr)",
    )
    parser.add_argument("-q", "--quantum", type=int, default=DEFAULT_QUANTUM, help="Round-robin time quantum")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="Where to write the transition table")
    parser.add_argument("--metrics", action="store_true", help="Print per-process metrics")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging of engine events")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        processes = load_workload(args.workload)
        policy = make_policy(args.policy, args.quantum)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("cannot read workload: %s", exc)
        return EXIT_WORKLOAD_ERROR
    except WorkloadError as exc:
        logger.error("invalid workload: %s", exc)
        return EXIT_WORKLOAD_ERROR
    except ValueError as exc:
        logger.error("invalid options: %s", exc)
        return EXIT_WORKLOAD_ERROR

    print(f"found {len(processes)} processes")
    print(f"policy is {policy.name}" + (f", time quantum is {policy.time_slice}" if policy.time_slice else ""))

    trace = TraceWriter()
    sched = CPUScheduler(processes, policy=policy, on_transition=trace)
    try:
        sched.run()
    except StalledSimulationError as exc:
        logger.error("simulation stalled: %s", exc)
        return EXIT_STALLED
    finally:
        trace.close()
        write_output(trace.getvalue(), args.output)

    print(f"wrote {len(sched.transitions)} transitions to {args.output}")
    if args.metrics:
        _print_metrics(sched.processes)
    print(f"measurements {sched.time} {int(cpu_utilization(sched.busy_time, sched.time))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
