import random

from schedsim.engine import Process


def as_tuples(transitions):
    return [(t.time, t.pid, t.old.value, t.new.value) for t in transitions]


def random_workload(seed, n=8):
    rng = random.Random(seed)
    return [
        Process(
            pid,
            arrival_time=rng.randint(0, 300),
            burst_time=rng.randint(0, 400),
            io_interval=rng.choice([0, rng.randint(1, 120)]),
            io_duration=rng.randint(0, 60),
        )
        for pid in rng.sample(range(1, 100), n)
    ]
