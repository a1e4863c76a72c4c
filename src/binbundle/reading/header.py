"""Header and digest table readers."""

from __future__ import annotations
from typing import List

from ..constants import DIGEST_SIZE
from ..errors import corrupt_header
from ..models import BundleHeader
from .cursor import ByteCursor

__all__ = ["read_header", "read_digests"]

_HEADER_FIELDS = (
    "magic",
    "total_count",
    "ebx_count",
    "res_count",
    "chunk_count",
    "string_offset",
    "chunk_meta_offset",
    "chunk_meta_size",
)


def read_header(cursor: ByteCursor) -> BundleHeader:
    """Read the leading size field and the eight fixed header fields.

    The magic is stored as-is; callers decide whether to reject it.
    """
    header_size = cursor.u32("header_size")
    anchor = cursor.tell()
    values = {name: cursor.u32(f"header.{name}") for name in _HEADER_FIELDS}
    header = BundleHeader(header_size=header_size, anchor=anchor, **values)
    if not header.counts_consistent():
        raise corrupt_header(
            "total_count does not match ebx_count + res_count + chunk_count",
            {
                "total_count": header.total_count,
                "ebx_count": header.ebx_count,
                "res_count": header.res_count,
                "chunk_count": header.chunk_count,
            },
        )
    return header


def read_digests(cursor: ByteCursor, count: int) -> List[bytes]:
    return [
        cursor.read_exact(DIGEST_SIZE, f"digest[{i}]") for i in range(count)
    ]
