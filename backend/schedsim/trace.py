"""Text rendering of a run's transition log.

The table has one row per state change::

    +------------------------------------------------------+
    | Time of Transition |   PID |  Old State |  New State |
    +------------------------------------------------------+
    |                  0 |     1 |        NEW |      READY |
    ...
    +------------------------------------------------------+
"""
from typing import Iterable, List

from schedsim.engine.models import Transition

DEFAULT_OUTPUT = "execution.txt"

_ROW = "| {time:>18} | {pid:>5} | {old:>10} | {new:>10} |"


def _rule() -> str:
    width = len(_ROW.format(time="", pid="", old="", new=""))
    return "+" + "-" * (width - 2) + "+"


def format_header() -> str:
    rule = _rule()
    title = _ROW.format(time="Time of Transition", pid="PID", old="Old State", new="New State")
    return f"{rule}\n{title}\n{rule}\n"


def format_transition(t: Transition) -> str:
    return _ROW.format(time=t.time, pid=t.pid, old=t.old.value, new=t.new.value) + "\n"


def format_footer() -> str:
    return _rule() + "\n"


def render_trace(transitions: Iterable[Transition]) -> str:
    return format_header() + "".join(format_transition(t) for t in transitions) + format_footer()


class TraceWriter:
    """Transition sink for ``CPUScheduler(on_transition=...)``.

    The header goes out before the first row; ``close()`` appends the footer.
    """

    def __init__(self):
        self.parts: List[str] = [format_header()]
        self.closed = False

    def __call__(self, transition: Transition) -> None:
        if self.closed:
            raise RuntimeError("trace already closed")
        self.parts.append(format_transition(transition))

    def close(self) -> None:
        if not self.closed:
            self.parts.append(format_footer())
            self.closed = True

    def getvalue(self) -> str:
        return "".join(self.parts)


def write_output(text: str, path: str = DEFAULT_OUTPUT) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
