"""Default decoder for the tagged binary field tree that follows the chunk
table.

Each field starts with a header byte: the low five bits hold the type, and
bit 7 set means the field is anonymous (list members); otherwise a
null-terminated name follows. Lists and objects carry a LEB128 byte size and
hold child fields until that size is consumed or an end marker (type 0) is
read.
"""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional

from .errors import metadata_error
from .reading.cursor import ByteCursor

__all__ = [
    "Field",
    "read_field",
    "T_END",
    "T_LIST",
    "T_OBJECT",
    "T_BOOL",
    "T_STRING",
    "T_INT32",
    "T_INT64",
    "T_FLOAT32",
    "T_FLOAT64",
    "T_GUID",
    "T_SHA1",
    "T_BLOB",
]

T_END = 0x00
T_LIST = 0x01
T_OBJECT = 0x02
T_BOOL = 0x06
T_STRING = 0x07
T_INT32 = 0x08
T_INT64 = 0x09
T_FLOAT32 = 0x0B
T_FLOAT64 = 0x0C
T_GUID = 0x0F
T_SHA1 = 0x10
T_BLOB = 0x13

_ANONYMOUS = 0x80
_TYPE_MASK = 0x1F

_SCALARS = {
    T_INT32: (struct.Struct("<i"), 4),
    T_INT64: (struct.Struct("<q"), 8),
    T_FLOAT32: (struct.Struct("<f"), 4),
    T_FLOAT64: (struct.Struct("<d"), 8),
}


@dataclass(slots=True)
class Field:
    name: str
    type: int
    value: Any

    def get(self, name: str, default: Any = None) -> Any:
        """Value of the named child of an object field."""
        child = self.child(name)
        return default if child is None else child.value

    def child(self, name: str) -> Optional["Field"]:
        if self.type != T_OBJECT:
            return None
        return next((f for f in self.value if f.name == name), None)

    def to_python(self) -> Any:
        if self.type == T_LIST:
            return [f.to_python() for f in self.value]
        if self.type == T_OBJECT:
            return {f.name: f.to_python() for f in self.value}
        if self.type == T_GUID:
            return str(uuid.UUID(bytes_le=self.value))
        if isinstance(self.value, bytes):
            return self.value.hex()
        return self.value


def _read_varint(cursor: ByteCursor, label: str) -> int:
    result = 0
    shift = 0
    while True:
        b = cursor.u8(label)
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            return result
        shift += 7
        if shift > 63:
            raise metadata_error(f"{label}: varint too long")


def _read_children(cursor: ByteCursor, size: int, label: str) -> List[Field]:
    children: List[Field] = []
    end = cursor.tell() + size
    while cursor.tell() < end:
        child = _read_field_or_end(cursor, f"{label}[{len(children)}]")
        if child is None:
            break
        children.append(child)
    return children


def _read_field_or_end(cursor: ByteCursor, label: str) -> Optional[Field]:
    offset = cursor.tell()
    head = cursor.u8(f"{label}.type")
    ftype = head & _TYPE_MASK
    if ftype == T_END:
        return None
    name = ""
    if not head & _ANONYMOUS:
        name = cursor.cstring(f"{label}.name").decode("utf-8", "replace")
        label = f"{label}({name})"
    if ftype in (T_LIST, T_OBJECT):
        size = _read_varint(cursor, f"{label}.size")
        value: Any = _read_children(cursor, size, label)
    elif ftype == T_BOOL:
        value = cursor.u8(label) != 0
    elif ftype == T_STRING:
        size = _read_varint(cursor, f"{label}.size")
        value = (
            cursor.read_exact(size, label)
            .rstrip(b"\x00")
            .decode("utf-8", "replace")
        )
    elif ftype in _SCALARS:
        codec, width = _SCALARS[ftype]
        value = codec.unpack(cursor.read_exact(width, label))[0]
    elif ftype == T_GUID:
        value = cursor.read_exact(16, label)
    elif ftype == T_SHA1:
        value = cursor.read_exact(20, label)
    elif ftype == T_BLOB:
        size = _read_varint(cursor, f"{label}.size")
        value = cursor.read_exact(size, label)
    else:
        raise metadata_error(
            f"{label}: unknown field type 0x{ftype:02x}",
            {"offset": offset, "type": ftype},
        )
    return Field(name, ftype, value)


def read_field(cursor: ByteCursor) -> Field:
    """Read one field (usually the root list) at the cursor position."""
    field = _read_field_or_end(cursor, "meta")
    if field is None:
        raise metadata_error("metadata tree starts with an end marker")
    return field
