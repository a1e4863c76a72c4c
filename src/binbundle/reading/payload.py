"""Segmented payload reader.

Each record's payload is a run of segments, each prefixed by an 8-byte
header ``(i32 uncompressed, u16 tag, u16 compressed)``. Segments are consumed
until the accumulated uncompressed size reaches the record's target size.

In fast mode the segment bodies are skipped and only the sizes are tracked,
so records come back with empty payloads but correct structural fields.
"""

from __future__ import annotations
import zlib
from typing import Tuple

from ..constants import SEGMENT_ZLIB, STORED_SEGMENT_TAGS
from ..errors import decompress_error, unknown_segment
from .cursor import ByteCursor

__all__ = ["read_payload", "inflate_segment"]


def inflate_segment(data: bytes, expected_size: int, offset: int = 0) -> bytes:
    try:
        d = zlib.decompressobj()
        out = d.decompress(data, expected_size + 1)
        out += d.flush()
    except zlib.error as e:
        raise decompress_error(
            f"inflate failed: {e}", {"offset": offset}
        ) from e
    if len(out) != expected_size:
        raise decompress_error(
            "inflated size mismatch",
            {"offset": offset, "expected": expected_size, "actual": len(out)},
        )
    if not d.eof:
        raise decompress_error("incomplete zlib stream", {"offset": offset})
    if d.unused_data:
        raise decompress_error(
            "trailing bytes after zlib stream",
            {"offset": offset, "trailing": len(d.unused_data)},
        )
    return out


def read_payload(
    cursor: ByteCursor, target_size: int, fast: bool, label: str
) -> Tuple[bytes, int]:
    """Read one record's segment stream; returns (payload, segment_count)."""
    parts: list[bytes] = []
    produced = 0
    segments = 0
    while produced < target_size:
        seg_offset = cursor.tell()
        seg_label = f"{label}.segment[{segments}]"
        ucsize = cursor.i32(f"{seg_label}.uncompressed")
        tag = cursor.u16(f"{seg_label}.tag")
        csize = cursor.u16(f"{seg_label}.compressed")
        if ucsize <= 0:
            raise decompress_error(
                f"{seg_label}: non-positive segment size {ucsize}",
                {"offset": seg_offset, "produced": produced, "target": target_size},
            )
        if tag == SEGMENT_ZLIB:
            if fast:
                cursor.skip(csize, f"{seg_label}.body")
            else:
                body = cursor.read_exact(csize, f"{seg_label}.body")
                parts.append(inflate_segment(body, ucsize, seg_offset))
        elif tag in STORED_SEGMENT_TAGS:
            if fast:
                cursor.skip(ucsize, f"{seg_label}.body")
            else:
                parts.append(cursor.read_exact(ucsize, f"{seg_label}.body"))
        else:
            raise unknown_segment(seg_label, tag, seg_offset)
        produced += ucsize
        segments += 1
    if produced != target_size and not fast:
        raise decompress_error(
            f"{label}: segments produced {produced} bytes, expected {target_size}",
            {"produced": produced, "target": target_size},
        )
    return b"".join(parts), segments
