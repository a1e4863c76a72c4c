"""Manifest (JSON listing) of a decoded bundle.

The manifest is the machine-readable form of ``binbundle list``: header
fields, counts, and one row per record in global storage order. Payload bytes
are never included, so a manifest from a fast decode and one from a full
decode of the same bundle are identical apart from the ``fast`` flag.
"""

from __future__ import annotations

from pathlib import Path
import json
from typing import Any

from .constants import KIND_CHUNK, KIND_RES
from .models import Bundle, Record

__all__ = ["record_row", "bundle_manifest", "write_manifest"]

MANIFEST_VERSION = 1


def record_row(kind: str, rec: Record) -> dict[str, Any]:
    row: dict[str, Any] = {
        "kind": kind,
        "name": rec.label,
        "size": rec.target_size,
        "sha1": rec.digest.hex(),
        "payload_offset": rec.payload_offset,
        "segments": rec.segment_count,
    }
    if kind == KIND_RES:
        row["res_type"] = rec.res_type_hex  # type: ignore[union-attr]
        row["res_meta"] = rec.meta.hex()  # type: ignore[union-attr]
        row["res_id"] = rec.res_id.hex()  # type: ignore[union-attr]
    elif kind == KIND_CHUNK:
        row["range_start"] = rec.range_start  # type: ignore[union-attr]
        row["logical_offset"] = rec.logical_offset  # type: ignore[union-attr]
        row["logical_size"] = rec.logical_size  # type: ignore[union-attr]
        if rec.h32 is not None:  # type: ignore[union-attr]
            row["h32"] = rec.h32  # type: ignore[union-attr]
    return row


def bundle_manifest(bundle: Bundle) -> dict[str, Any]:
    h = bundle.header
    return {
        "version": MANIFEST_VERSION,
        "fast": bundle.fast,
        "header": {
            "magic": f"{h.magic:08x}",
            "header_size": h.header_size,
            "string_offset": h.string_offset,
            "chunk_meta_offset": h.chunk_meta_offset,
            "chunk_meta_size": h.chunk_meta_size,
        },
        "counts": {
            "total": h.total_count,
            "ebx": h.ebx_count,
            "res": h.res_count,
            "chunks": h.chunk_count,
        },
        "has_chunk_meta": bundle.metadata is not None,
        "records": [record_row(kind, rec) for kind, rec in bundle.iter_records()],
    }


def write_manifest(bundle: Bundle, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(bundle_manifest(bundle), f, indent=2, sort_keys=True)
        f.write("\n")
    return output_path
