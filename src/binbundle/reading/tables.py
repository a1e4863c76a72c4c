"""Record table readers (EBX, RES, CHUNK).

The RES table is stored column-major: every (name_offset, size) pair first,
then every type, then every 16-byte meta blob, then every 8-byte id. Each
column is read to completion into its own list and the columns are joined by
index afterwards.
"""

from __future__ import annotations
from typing import List, Tuple

from ..constants import CHUNK_ID_SIZE, RES_ID_SIZE, RES_META_SIZE
from ..models import BundleHeader, ChunkRecord, EbxRecord, ResRecord
from .cursor import ByteCursor

__all__ = [
    "read_ebx_table",
    "read_res_table",
    "read_chunk_table",
    "read_record_tables",
]


def _read_pairs(cursor: ByteCursor, count: int, label: str) -> List[Tuple[int, int]]:
    return [
        (cursor.i32(f"{label}[{i}].name_offset"), cursor.i32(f"{label}[{i}].size"))
        for i in range(count)
    ]


def read_ebx_table(cursor: ByteCursor, count: int) -> List[EbxRecord]:
    return [EbxRecord(off, size) for off, size in _read_pairs(cursor, count, "ebx")]


def read_res_table(cursor: ByteCursor, count: int) -> List[ResRecord]:
    pairs = _read_pairs(cursor, count, "res")
    types = [cursor.i32(f"res[{i}].type") for i in range(count)]
    metas = [cursor.read_exact(RES_META_SIZE, f"res[{i}].meta") for i in range(count)]
    ids = [cursor.read_exact(RES_ID_SIZE, f"res[{i}].id") for i in range(count)]
    return [
        ResRecord(off, size, res_type=t, meta=m, res_id=rid)
        for (off, size), t, m, rid in zip(pairs, types, metas, ids)
    ]


def read_chunk_table(cursor: ByteCursor, count: int) -> List[ChunkRecord]:
    chunks: List[ChunkRecord] = []
    for i in range(count):
        chunk_id = cursor.read_exact(CHUNK_ID_SIZE, f"chunk[{i}].id")
        range_start = cursor.u16(f"chunk[{i}].range_start")
        logical_size = cursor.u16(f"chunk[{i}].logical_size")
        logical_offset = cursor.i32(f"chunk[{i}].logical_offset")
        chunks.append(
            ChunkRecord(chunk_id, range_start, logical_size, logical_offset)
        )
    return chunks


def read_record_tables(
    cursor: ByteCursor, header: BundleHeader
) -> Tuple[List[EbxRecord], List[ResRecord], List[ChunkRecord]]:
    ebx = read_ebx_table(cursor, header.ebx_count)
    res = read_res_table(cursor, header.res_count)
    chunks = read_chunk_table(cursor, header.chunk_count)
    return ebx, res, chunks
