"""Positional digest binding."""

from __future__ import annotations
from typing import List, Sequence

from ..errors import corrupt_header
from ..models import BundleHeader, ChunkRecord, EbxRecord, ResRecord

__all__ = ["bind_digests"]


def bind_digests(
    header: BundleHeader,
    digests: Sequence[bytes],
    ebx: List[EbxRecord],
    res: List[ResRecord],
    chunks: List[ChunkRecord],
) -> None:
    """Assign digests to records: EBX first, then RES, then CHUNK."""
    if not header.counts_consistent() or len(digests) != header.total_count:
        raise corrupt_header(
            "digest count does not match record counts",
            {
                "digests": len(digests),
                "total_count": header.total_count,
                "ebx_count": header.ebx_count,
                "res_count": header.res_count,
                "chunk_count": header.chunk_count,
            },
        )
    res_start = header.ebx_count
    chunk_start = res_start + header.res_count
    for i, rec in enumerate(ebx):
        rec.digest = digests[i]
    for i, rec in enumerate(res):
        rec.digest = digests[res_start + i]
    for i, rec in enumerate(chunks):
        rec.digest = digests[chunk_start + i]
