"""Fixed sizes and tags of the binary bundle layout."""

from __future__ import annotations

DIGEST_SIZE = 20
RES_META_SIZE = 16
RES_ID_SIZE = 8
CHUNK_ID_SIZE = 16

SEGMENT_ZLIB = 0x0270
SEGMENT_STORED = 0x0071
SEGMENT_STORED_ALT = 0x0070
STORED_SEGMENT_TAGS = frozenset({SEGMENT_STORED, SEGMENT_STORED_ALT})

# Record kinds in global storage order.
KIND_EBX = "ebx"
KIND_RES = "res"
KIND_CHUNK = "chunk"
RECORD_KINDS = (KIND_EBX, KIND_RES, KIND_CHUNK)

__all__ = [
    "DIGEST_SIZE",
    "RES_META_SIZE",
    "RES_ID_SIZE",
    "CHUNK_ID_SIZE",
    "SEGMENT_ZLIB",
    "SEGMENT_STORED",
    "SEGMENT_STORED_ALT",
    "STORED_SEGMENT_TAGS",
    "KIND_EBX",
    "KIND_RES",
    "KIND_CHUNK",
    "RECORD_KINDS",
]
