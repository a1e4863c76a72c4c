"""Structural diff between two decoded bundles.

Records are matched by name (EBX/RES) or chunk id (CHUNK). The result is a
JSON-serialisable dict with a stable shape::

    {
      "header": [{"field", "left", "right"}...],
      "ebx"|"res"|"chunk": {"added": [...], "removed": [...],
                            "changed": [{"name", "field", "left", "right"}...]},
      "summary": {"count": N},
    }

Digests are compared rather than payload bytes, so a fast decode is enough.
"""

from __future__ import annotations
from typing import Any, Dict, List, Sequence

from .constants import KIND_CHUNK, KIND_EBX, KIND_RES, RECORD_KINDS
from .models import Bundle, Record

__all__ = ["diff_bundles"]

_HEADER_FIELDS = ("magic", "ebx_count", "res_count", "chunk_count")

_COMPARED_FIELDS: Dict[str, Sequence[str]] = {
    KIND_EBX: ("size", "digest"),
    KIND_RES: ("size", "digest", "res_type", "meta", "res_id"),
    KIND_CHUNK: (
        "range_start",
        "logical_offset",
        "logical_size",
        "digest",
    ),
}


def _jsonable(value: Any) -> Any:
    if isinstance(value, bytes):
        return value.hex()
    return value


def _records_of(bundle: Bundle, kind: str) -> List[Record]:
    return {
        KIND_EBX: bundle.ebx,
        KIND_RES: bundle.res,
        KIND_CHUNK: bundle.chunks,
    }[kind]  # type: ignore[return-value]


def _diff_kind(left: List[Record], right: List[Record], kind: str) -> Dict[str, Any]:
    # Later duplicates win, matching a name-keyed lookup table.
    lmap = {r.label: r for r in left}
    rmap = {r.label: r for r in right}
    changed: List[Dict[str, Any]] = []
    for name in sorted(lmap.keys() & rmap.keys()):
        a, b = lmap[name], rmap[name]
        for field in _COMPARED_FIELDS[kind]:
            av, bv = getattr(a, field), getattr(b, field)
            if av != bv:
                changed.append(
                    {
                        "name": name,
                        "field": field,
                        "left": _jsonable(av),
                        "right": _jsonable(bv),
                    }
                )
    return {
        "added": sorted(rmap.keys() - lmap.keys()),
        "removed": sorted(lmap.keys() - rmap.keys()),
        "changed": changed,
    }


def diff_bundles(left: Bundle, right: Bundle) -> Dict[str, Any]:
    result: Dict[str, Any] = {"header": []}
    for field in _HEADER_FIELDS:
        lv, rv = getattr(left.header, field), getattr(right.header, field)
        if lv != rv:
            result["header"].append({"field": field, "left": lv, "right": rv})
    count = len(result["header"])
    for kind in RECORD_KINDS:
        d = _diff_kind(_records_of(left, kind), _records_of(right, kind), kind)
        result[kind] = d
        count += len(d["added"]) + len(d["removed"]) + len(d["changed"])
    result["summary"] = {"count": count}
    return result
