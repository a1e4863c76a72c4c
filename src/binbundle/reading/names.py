"""Name resolution against the shared string region."""

from __future__ import annotations
from typing import Sequence

from ..models import EbxRecord, ResRecord
from .cursor import ByteCursor

__all__ = ["resolve_names"]


def resolve_names(
    cursor: ByteCursor,
    string_base: int,
    records: Sequence[EbxRecord | ResRecord],
    label: str,
) -> None:
    # name_offset is relative to string_base for every record.
    for i, rec in enumerate(records):
        cursor.seek(string_base + rec.name_offset, f"{label}[{i}].name")
        rec.name = cursor.cstring(f"{label}[{i}].name").decode("latin-1")
