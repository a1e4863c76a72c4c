"""Chunk metadata block: delegation to the field-tree decoder."""

from __future__ import annotations
from typing import Any, Callable, List, Optional

from ..errors import MetadataDecodeError, metadata_error
from ..models import BundleHeader, ChunkRecord
from .cursor import ByteCursor

__all__ = ["MetadataDecoder", "read_metadata_block", "bind_chunk_meta"]

MetadataDecoder = Callable[[ByteCursor], Any]


def read_metadata_block(
    cursor: ByteCursor, header: BundleHeader, decoder: MetadataDecoder
) -> Optional[Any]:
    if header.chunk_count == 0:
        return None
    offset = cursor.tell()
    try:
        return decoder(cursor)
    except MetadataDecodeError:
        raise
    except Exception as e:
        raise metadata_error(
            f"metadata decoder failed: {e}", {"offset": offset}
        ) from e


def bind_chunk_meta(chunks: List[ChunkRecord], metadata: Any) -> int:
    """Attach per-chunk ``h32``/``meta`` entries by position.

    Only applies when the tree is a list of objects; returns the number of
    chunks that received an entry.
    """
    entries = getattr(metadata, "value", None)
    if not isinstance(entries, list):
        return 0
    bound = 0
    for chunk, entry in zip(chunks, entries):
        if not hasattr(entry, "child"):
            continue
        h32 = entry.get("h32")
        meta = entry.child("meta")
        chunk.h32 = h32 if isinstance(h32, int) else None
        chunk.chunk_meta = meta.value if meta is not None else None
        bound += 1
    return bound
