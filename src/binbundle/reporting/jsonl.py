from __future__ import annotations

import json
import sys
import time
from typing import Any, Dict
from .base import SUMMARY_KINDS, Reporter, TaskStatus, TaskRecord, get_verbosity

# "<Kind> summary: k=v k=v" status lines are also emitted as summary events.
_SUMMARY_TYPES: Dict[str, str] = {f"{kind} summary": kind for kind in SUMMARY_KINDS}


class JsonLinesReporter(Reporter):
    """Machine-readable reporter writing one JSON object per line."""

    supports_progress = False

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self._tasks: Dict[str, TaskRecord] = {}

    def _emit(self, obj: dict) -> None:
        self.stream.write(json.dumps(obj, sort_keys=True) + "\n")

    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> None:
        self._tasks[task_id] = TaskRecord(task_id, name, total, meta=meta)
        self._emit(
            {"event": "task_start", "id": task_id, "name": name, "total": total, **meta}
        )

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if not rec:
            return
        rec.completed += step
        rec.meta.update(meta)
        if get_verbosity() < 1:
            return
        self._emit(
            {
                "event": "task_progress",
                "id": task_id,
                "completed": rec.completed,
                **meta,
            }
        )

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if not rec:
            return
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        rec.meta.pop("current_item", None)
        self._emit(
            {
                "event": "task_end",
                "id": task_id,
                "status": status.name.lower(),
                "completed": rec.completed,
                "total": rec.total,
                "duration_seconds": rec.duration,
                **rec.meta,
            }
        )

    def _maybe_summary(self, message: str, level: str, **fields: Any) -> None:
        head, sep, kv_text = message.partition(":")
        stype = _SUMMARY_TYPES.get(head.strip().lower())
        if stype is None or not sep:
            return
        kv_pairs = dict(
            token.split("=", 1) for token in kv_text.split() if "=" in token
        )
        self._emit(
            {
                "event": "summary",
                "summary_type": stype,
                "level": level,
                "raw": message,
                **kv_pairs,
                **fields,
            }
        )

    def status(self, message: str, **fields: Any) -> None:
        self._maybe_summary(message, "info", **fields)
        self._emit({"event": "status", "message": message, "level": "info", **fields})

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() < level:
            return
        self._emit(
            {
                "event": "status",
                "message": message,
                "level": f"verbose{level}",
                "vlevel": level,
                **fields,
            }
        )

    def error(self, message: str, **fields: Any) -> None:
        self._emit({"event": "status", "message": message, "level": "error", **fields})

    def warning(self, message: str, **fields: Any) -> None:
        self._emit(
            {"event": "status", "message": message, "level": "warning", **fields}
        )

    def section(self, title: str) -> None:
        self._emit({"event": "section", "title": title})
