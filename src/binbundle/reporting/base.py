"""Reporter protocol, task handles and the process-wide active reporter.

Decoding stages report one task per record kind; the CLI and API report
``<Kind> summary: k=v ...`` status lines that the JSON lines backend turns
into structured ``summary`` events.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, Optional

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "TaskHandle",
    "Reporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
    "format_summary",
    "STAT_KEYS",
    "SUMMARY_KINDS",
]

# Task metadata keys rendered in completion lines, in display order.
STAT_KEYS = ("records", "segments", "bytes", "skipped")

SUMMARY_KINDS = ("bundle", "extract", "validate", "diff")


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()
    SKIPPED = auto()


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    name: str
    total: Optional[int] = None
    completed: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        return (self.end_time - self.start_time) if self.end_time else 0.0

    def stats_text(self) -> str:
        stats = [f"{k}={self.meta[k]}" for k in STAT_KEYS if k in self.meta]
        return f" [{' '.join(stats)}]" if stats else ""


def format_summary(kind: str, fields: Dict[str, Any]) -> str:
    if kind not in SUMMARY_KINDS:
        raise ValueError(f"Unknown summary kind: {kind}")
    pairs = " ".join(f"{k}={v}" for k, v in fields.items())
    return f"{kind.capitalize()} summary: {pairs}"


_VERBOSITY: int = 0  # set by the CLI from repeated -v


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    supports_progress: bool = False

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        raise NotImplementedError

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        raise NotImplementedError

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        raise NotImplementedError

    def status(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def summary(self, kind: str, **fields: Any) -> None:
        """Report the outcome of a bundle operation as one status line."""
        self.status(format_summary(kind, fields))

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        # gated by global verbosity; ignored unless overridden
        pass

    def error(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def section(self, title: str) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter(stream=sys.stderr)
    return _ACTIVE_REPORTER


class TaskHandle:
    """Progress handle yielded by :func:`task`.

    ``stats`` is passed to ``end_task`` when the block completes, so the
    completion line carries the record, segment and byte counts.
    """

    def __init__(self, rep: Reporter, task_id: str) -> None:
        self.rep = rep
        self.task_id = task_id
        self.stats: Dict[str, Any] = {}

    def advance(self, item: str | None = None, step: int = 1) -> None:
        if item is None:
            self.rep.advance(self.task_id, step)
        else:
            self.rep.advance(self.task_id, step, current_item=item)


@contextmanager
def task(
    task_id: str, name: str, total: int | None = None, **meta: Any
) -> Iterator[TaskHandle]:
    """Run a block as a reporter task; marks it FAILED if the block raises."""
    rep = get_reporter()
    rep.start_task(task_id, name, total, **meta)
    handle = TaskHandle(rep, task_id)
    try:
        yield handle
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED)
        raise
    rep.end_task(task_id, TaskStatus.SUCCESS, **handle.stats)
