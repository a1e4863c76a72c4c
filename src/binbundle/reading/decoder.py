"""Bundle decode pipeline.

Stages run strictly in order over one cursor:

1. header (+ anchor)          5. EBX names, then RES names (string region)
2. digest table               6. payloads (EBX, RES, CHUNK) from anchor+header_size
3. EBX / RES / CHUNK tables   7. digest binding by position
4. chunk metadata tree

Every stage starts where the previous one stopped except the three explicit
reseeks in stages 5 and 6, so a misread field anywhere aborts the decode.
"""

from __future__ import annotations
from typing import List, Optional, Sequence

from ..constants import KIND_CHUNK, KIND_EBX, KIND_RES
from ..fieldtree import read_field
from ..logging import get_logger
from ..models import Bundle, Record
from ..reporting import task
from .binder import bind_digests
from .cursor import ByteCursor
from .header import read_digests, read_header
from .metadata import MetadataDecoder, bind_chunk_meta, read_metadata_block
from .names import resolve_names
from .payload import read_payload
from .tables import read_record_tables

__all__ = ["decode", "read_payloads"]


def _read_kind_payloads(
    cursor: ByteCursor, kind: str, records: Sequence[Record], fast: bool
) -> None:
    if not records:
        return
    with task(
        f"payload.{kind}", f"{kind.upper()} payloads", total=len(records)
    ) as t:
        produced = segments = skipped = 0
        for i, rec in enumerate(records):
            rec.payload_offset = cursor.tell()
            rec.payload, rec.segment_count = read_payload(
                cursor, rec.target_size, fast, f"{kind}[{i}]"
            )
            produced += len(rec.payload)
            segments += rec.segment_count
            if fast:
                skipped += rec.target_size
            t.advance(rec.label)
        t.stats.update(records=len(records), segments=segments, bytes=produced)
        if fast:
            t.stats["skipped"] = skipped


def read_payloads(cursor: ByteCursor, bundle: Bundle, fast: bool) -> None:
    """Read every payload from the start of the payload region."""
    if not bundle.record_count:
        return
    cursor.seek(bundle.header.payload_base, "payload region")
    _read_kind_payloads(cursor, KIND_EBX, bundle.ebx, fast)
    _read_kind_payloads(cursor, KIND_RES, bundle.res, fast)
    _read_kind_payloads(cursor, KIND_CHUNK, bundle.chunks, fast)


def decode(
    cursor: ByteCursor,
    fast: bool = False,
    metadata_decoder: Optional[MetadataDecoder] = None,
) -> Bundle:
    logger = get_logger()
    header = read_header(cursor)
    logger.debug(
        "header: magic=%08x total=%d ebx=%d res=%d chunks=%d header_size=%d",
        header.magic,
        header.total_count,
        header.ebx_count,
        header.res_count,
        header.chunk_count,
        header.header_size,
    )
    digests: List[bytes] = read_digests(cursor, header.total_count)
    ebx, res, chunks = read_record_tables(cursor, header)
    metadata = read_metadata_block(cursor, header, metadata_decoder or read_field)
    if metadata is not None:
        bound = bind_chunk_meta(chunks, metadata)
        logger.debug("chunk metadata: %d/%d entries bound", bound, len(chunks))

    resolve_names(cursor, header.string_base, ebx, KIND_EBX)
    resolve_names(cursor, header.string_base, res, KIND_RES)

    bundle = Bundle(
        header=header,
        digests=digests,
        ebx=ebx,
        res=res,
        chunks=chunks,
        metadata=metadata,
        fast=fast,
    )
    read_payloads(cursor, bundle, fast)
    bind_digests(header, digests, ebx, res, chunks)
    logger.debug("decode finished at offset %d (fast=%s)", cursor.tell(), fast)
    return bundle
