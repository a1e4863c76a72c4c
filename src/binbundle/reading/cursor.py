"""Position-tracking reader over a seekable byte source.

Every component of the decoder receives the same ``ByteCursor``; all reads go
through ``read_exact`` so a short read is always reported as
``TruncatedInput`` with the absolute offset at which it happened.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

from ..errors import out_of_bounds, truncated

__all__ = ["ByteCursor"]

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")


class ByteCursor:
    """Exclusive reader over ``stream`` bounded to ``[start, end)``.

    ``end`` defaults to the end of the stream. Offsets passed to ``seek`` and
    returned by ``tell`` are absolute stream positions.
    """

    def __init__(
        self, stream: BinaryIO, start: int | None = None, size: int | None = None
    ) -> None:
        self.stream = stream
        self.start = stream.tell() if start is None else start
        stream_end = stream.seek(0, io.SEEK_END)
        self.end = stream_end if size is None else min(stream_end, self.start + size)
        stream.seek(self.start)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteCursor":
        return cls(io.BytesIO(data), start=0)

    def tell(self) -> int:
        return self.stream.tell()

    def seek(self, offset: int, label: str = "seek") -> None:
        if offset < self.start or offset > self.end:
            raise out_of_bounds(label, offset, self.start, self.end)
        self.stream.seek(offset)

    def remaining(self) -> int:
        return max(0, self.end - self.tell())

    def read_exact(self, size: int, label: str) -> bytes:
        pos = self.tell()
        if size < 0:
            raise truncated(label, size, 0, pos)
        data = self.stream.read(min(size, self.remaining()))
        if len(data) != size:
            raise truncated(label, size, len(data), pos)
        return data

    def skip(self, size: int, label: str) -> None:
        pos = self.tell()
        available = self.remaining()
        if size < 0 or size > available:
            raise truncated(label, size, min(max(size, 0), available), pos)
        self.stream.seek(pos + size)

    def u16(self, label: str) -> int:
        return _U16.unpack(self.read_exact(2, label))[0]

    def u32(self, label: str) -> int:
        return _U32.unpack(self.read_exact(4, label))[0]

    def i32(self, label: str) -> int:
        return _I32.unpack(self.read_exact(4, label))[0]

    def u8(self, label: str) -> int:
        return self.read_exact(1, label)[0]

    def cstring(self, label: str) -> bytes:
        """Read bytes up to (and consuming) the next zero byte."""
        start = self.tell()
        out = bytearray()
        while True:
            if self.tell() >= self.end:
                raise truncated(
                    f"{label} (no terminator)", len(out) + 1, len(out), start
                )
            b = self.stream.read(1)
            if b == b"\x00":
                return bytes(out)
            out += b
