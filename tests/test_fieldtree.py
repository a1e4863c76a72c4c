import struct
import uuid

import pytest

from binbundle import MetadataDecodeError, decode_bundle
from binbundle.fieldtree import T_LIST, T_OBJECT, read_field
from binbundle.reading import ByteCursor
from bundle_helper import (
    Chunk,
    build_bundle,
    chunk_meta_list,
    f_blob,
    f_bool,
    f_guid,
    f_int32,
    f_list,
    f_object,
    f_string,
    stored,
)


def _read(raw: bytes):
    cursor = ByteCursor.from_bytes(raw + b"TAIL")
    field = read_field(cursor)
    return field, cursor


def test_nested_object_and_list():
    guid = uuid.UUID("12345678-1234-5678-9abc-def012345678")
    raw = f_object(
        "root",
        [
            f_int32("count", -7),
            f_bool("enabled", True),
            f_string("label", "hello"),
            f_blob("bytes", b"\x00\x01"),
            f_guid("id", guid.bytes_le),
            f_list("items", [f_int32(None, 1), f_int32(None, 2)]),
        ],
    )
    field, cursor = _read(raw)

    assert field.name == "root"
    assert field.type == T_OBJECT
    assert field.get("count") == -7
    assert field.get("enabled") is True
    assert field.get("label") == "hello"
    assert field.child("items").type == T_LIST
    assert field.get("missing", 5) == 5
    assert field.to_python() == {
        "count": -7,
        "enabled": True,
        "label": "hello",
        "bytes": "0001",
        "id": str(guid),
        "items": [1, 2],
    }
    # The reader stops exactly after the root field.
    assert cursor.read_exact(4, "tail") == b"TAIL"


def test_scalar_widths():
    raw = f_object(
        None,
        [
            b"\x09big\x00" + struct.pack("<q", 1 << 40),
            b"\x0bf32\x00" + struct.pack("<f", 1.5),
            b"\x0cf64\x00" + struct.pack("<d", -2.25),
            b"\x10sha\x00" + b"\xaa" * 20,
        ],
    )
    field, _ = _read(raw)
    assert field.name == ""
    assert field.get("big") == 1 << 40
    assert field.get("f32") == 1.5
    assert field.get("f64") == -2.25
    assert field.get("sha") == b"\xaa" * 20


def test_long_varint_size():
    blob = bytes(range(256)) * 2
    field, _ = _read(f_blob("data", blob))
    assert field.value == blob


def test_end_marker_at_root_is_error():
    with pytest.raises(MetadataDecodeError):
        read_field(ByteCursor.from_bytes(b"\x00"))


def test_chunk_meta_binds_by_position():
    chunks = [
        Chunk(b"\x01" * 16, [stored(b"a")]),
        Chunk(b"\x02" * 16, [stored(b"b")]),
        Chunk(b"\x03" * 16, [stored(b"c")]),
    ]
    meta = chunk_meta_list([(10, b"\x01"), (20, b""), (-30, b"\x02\x03")])
    bundle = decode_bundle(build_bundle(chunks=chunks, metadata=meta))

    assert bundle.metadata.name == "chunkMeta"
    assert [c.h32 for c in bundle.chunks] == [10, 20, -30]
    assert [c.chunk_meta for c in bundle.chunks] == [b"\x01", b"", b"\x02\x03"]
    # Payload reading starts from the payload region, not after the tree.
    assert [c.payload for c in bundle.chunks] == [b"a", b"b", b"c"]


def test_short_chunk_meta_list_leaves_rest_unbound():
    chunks = [Chunk(b"\x01" * 16, [stored(b"a")]), Chunk(b"\x02" * 16, [stored(b"b")])]
    meta = chunk_meta_list([(10, b"")])
    bundle = decode_bundle(build_bundle(chunks=chunks, metadata=meta))
    assert bundle.chunks[0].h32 == 10
    assert bundle.chunks[1].h32 is None


def test_custom_decoder_result_is_kept():
    seen = []

    def decoder(cursor):
        seen.append(cursor.tell())
        return {"opaque": True}

    data = build_bundle(chunks=[Chunk(b"\x01" * 16, [stored(b"a")])], metadata=b"")
    bundle = decode_bundle(data, metadata_decoder=decoder)
    assert bundle.metadata == {"opaque": True}
    assert seen == [4 + 32 + 20 + 24]
    assert bundle.chunks[0].h32 is None
