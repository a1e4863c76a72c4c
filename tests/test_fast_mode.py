import struct

from binbundle import decode_bundle
from binbundle.manifest import bundle_manifest
from bundle_helper import Chunk, Ebx, Res, build_bundle, chunk_meta_list, stored, zlibbed


def _mixed_bundle() -> bytes:
    return build_bundle(
        ebx=[
            Ebx("levels/a", [stored(b"a" * 10), zlibbed(b"b" * 300)]),
            Ebx("levels/b", [zlibbed(b"c" * 64)]),
        ],
        res=[Res("tex/a", [stored(b"hdr" * 5)], res_type=0x5C4954A6)],
        chunks=[
            Chunk(b"\x10" * 16, [zlibbed(b"z" * 100)], logical_offset=40),
            Chunk(b"\x20" * 16, [stored(b"q" * 8)]),
        ],
        metadata=chunk_meta_list([(111, b"\x01"), (222, b"")]),
    )


def test_fast_mode_skips_payload_bytes():
    bundle = decode_bundle(_mixed_bundle(), fast=True)
    assert bundle.fast
    assert all(rec.payload == b"" for _, rec in bundle.iter_records())


def test_fast_and_full_agree_on_structure():
    data = _mixed_bundle()
    fast = decode_bundle(data, fast=True)
    full = decode_bundle(data)

    for (kf, rf), (kk, rk) in zip(fast.iter_records(), full.iter_records()):
        assert kf == kk
        assert rf.label == rk.label
        assert rf.target_size == rk.target_size
        assert rf.digest == rk.digest
        assert rf.payload_offset == rk.payload_offset
        assert rf.segment_count == rk.segment_count
        assert len(rk.payload) == rk.target_size
    assert [r.res_type for r in fast.res] == [r.res_type for r in full.res]
    assert [c.h32 for c in fast.chunks] == [111, 222]

    fast_manifest = bundle_manifest(fast)
    full_manifest = bundle_manifest(full)
    assert fast_manifest.pop("fast") is True
    assert full_manifest.pop("fast") is False
    assert fast_manifest == full_manifest


def test_fast_mode_does_not_inflate_bad_zlib():
    # Garbage zlib body: fast mode only skips it, full mode would fail.
    body = b"\x00" * 6
    seg = struct.pack("<iHH", 10, 0x0270, len(body)) + body
    data = build_bundle(ebx=[Ebx("x", [])])
    # Patch the declared size and append the hand-made segment.
    data = _with_ebx_size(data, 10) + seg
    bundle = decode_bundle(data, fast=True)
    assert bundle.ebx[0].segment_count == 1
    assert bundle.ebx[0].payload == b""


def _with_ebx_size(data: bytes, size: int) -> bytes:
    # header_size(4) + header(32) + one digest(20) + name_offset(4) -> size field
    off = 4 + 32 + 20 + 4
    return data[:off] + struct.pack("<i", size) + data[off + 4 :]
