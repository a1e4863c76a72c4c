"""Dataclass models for decoded binary bundles."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple

from .constants import KIND_CHUNK, KIND_EBX, KIND_RES


@dataclass(slots=True)
class BundleHeader:
    magic: int
    total_count: int
    ebx_count: int
    res_count: int
    chunk_count: int
    string_offset: int
    chunk_meta_offset: int
    chunk_meta_size: int
    # Leading size field and the stream position right after it; every
    # relative offset in the bundle is measured from ``anchor``.
    header_size: int = 0
    anchor: int = 0

    @property
    def string_base(self) -> int:
        return self.anchor + self.string_offset

    @property
    def payload_base(self) -> int:
        return self.anchor + self.header_size

    def counts_consistent(self) -> bool:
        return self.total_count == (
            self.ebx_count + self.res_count + self.chunk_count
        )


@dataclass(slots=True)
class EbxRecord:
    name_offset: int
    size: int
    name: str = ""
    payload: bytes = b""
    digest: bytes = b""
    payload_offset: int = 0
    segment_count: int = 0

    @property
    def target_size(self) -> int:
        return self.size

    @property
    def label(self) -> str:
        return self.name


@dataclass(slots=True)
class ResRecord:
    name_offset: int
    size: int
    res_type: int = 0
    meta: bytes = b""
    res_id: bytes = b""
    name: str = ""
    payload: bytes = b""
    digest: bytes = b""
    payload_offset: int = 0
    segment_count: int = 0

    @property
    def target_size(self) -> int:
        return self.size

    @property
    def label(self) -> str:
        return self.name

    @property
    def res_type_hex(self) -> str:
        return f"{self.res_type & 0xFFFFFFFF:08x}"


@dataclass(slots=True)
class ChunkRecord:
    chunk_id: bytes
    range_start: int
    logical_size: int
    logical_offset: int
    original_size: int = field(init=False)
    payload: bytes = b""
    digest: bytes = b""
    payload_offset: int = 0
    segment_count: int = 0
    h32: Optional[int] = None
    chunk_meta: Any = None

    def __post_init__(self) -> None:
        # The stored payload covers the whole logical asset up to the end of
        # this range, not just logical_size bytes.
        self.original_size = self.logical_offset + self.logical_size

    @property
    def target_size(self) -> int:
        return self.original_size

    @property
    def id_hex(self) -> str:
        return self.chunk_id.hex()

    @property
    def label(self) -> str:
        return self.id_hex


Record = EbxRecord | ResRecord | ChunkRecord


@dataclass(slots=True)
class Bundle:
    header: BundleHeader
    digests: List[bytes] = field(default_factory=list)
    ebx: List[EbxRecord] = field(default_factory=list)
    res: List[ResRecord] = field(default_factory=list)
    chunks: List[ChunkRecord] = field(default_factory=list)
    metadata: Any = None
    fast: bool = False

    @property
    def record_count(self) -> int:
        return len(self.ebx) + len(self.res) + len(self.chunks)

    def iter_records(self) -> Iterator[Tuple[str, Record]]:
        """Yield ``(kind, record)`` in global storage order."""
        for e in self.ebx:
            yield KIND_EBX, e
        for r in self.res:
            yield KIND_RES, r
        for c in self.chunks:
            yield KIND_CHUNK, c

    def find_ebx(self, name: str) -> Optional[EbxRecord]:
        return next((e for e in self.ebx if e.name == name), None)

    def find_res(self, name: str) -> Optional[ResRecord]:
        return next((r for r in self.res if r.name == name), None)

    def find_chunk(self, chunk_id: bytes | str) -> Optional[ChunkRecord]:
        if isinstance(chunk_id, str):
            chunk_id = bytes.fromhex(chunk_id)
        return next((c for c in self.chunks if c.chunk_id == chunk_id), None)


__all__ = [
    "BundleHeader",
    "EbxRecord",
    "ResRecord",
    "ChunkRecord",
    "Record",
    "Bundle",
]
