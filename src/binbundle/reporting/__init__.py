from .base import (
    Reporter,
    TaskHandle,
    TaskStatus,
    get_reporter,
    set_reporter,
    task,
)
from .base import (
    set_verbosity,
    get_verbosity,
)
from .plain import PlainReporter
from .jsonl import JsonLinesReporter
from .silent import SilentReporter
from .rich_reporter import RichReporter

__all__ = [
    "Reporter",
    "TaskHandle",
    "TaskStatus",
    "get_reporter",
    "set_reporter",
    "task",
    "set_verbosity",
    "get_verbosity",
    "PlainReporter",
    "JsonLinesReporter",
    "SilentReporter",
    "RichReporter",
    "make_reporter",
]


def make_reporter(kind: str, *, isatty: bool = False) -> Reporter:
    """Build the reporter named by ``--reporter``; rich needs a TTY."""
    if kind == "json":
        return JsonLinesReporter()
    if kind == "silent":
        return SilentReporter()
    if kind == "rich" and isatty:
        return RichReporter()
    return PlainReporter()
