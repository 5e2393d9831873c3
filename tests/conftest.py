import pytest

from schedsim.engine import Process


@pytest.fixture
def two_cpu_bound():
    return [Process(1, 0, 5), Process(2, 0, 3)]
