"""Path utilities (safe resolution)."""

from __future__ import annotations
import re
from pathlib import Path

__all__ = ["safe_file_path", "sanitize_record_name"]

_UNSAFE_CHARS = re.compile(r'[<>:"|?*\x00-\x1f]')


def safe_file_path(base_dir: Path, file_path: str) -> Path:
    base_dir = base_dir.resolve()
    resolved = (base_dir / file_path).resolve()
    resolved.relative_to(base_dir)  # raises ValueError if escapes
    return resolved


def sanitize_record_name(name: str) -> str:
    """Turn a record name into a relative path (no drive, root or ``..``)."""
    parts = [
        _UNSAFE_CHARS.sub("_", p)
        for p in name.replace("\\", "/").split("/")
        if p not in ("", ".", "..")
    ]
    return "/".join(parts) or "_unnamed"
