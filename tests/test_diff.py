from pathlib import Path

from binbundle import decode_bundle, diff_bundle_files
from binbundle.diff import diff_bundles
from bundle_helper import Chunk, Ebx, Res, build_bundle, stored


def test_identical_bundles_have_no_diff():
    data = build_bundle(ebx=[Ebx("a", [stored(b"1")])])
    result = diff_bundles(decode_bundle(data), decode_bundle(data, fast=True))
    assert result["summary"]["count"] == 0


def test_added_removed_and_changed_records():
    left = build_bundle(
        ebx=[Ebx("keep", [stored(b"1")]), Ebx("gone", [stored(b"2")])],
        res=[Res("tex", [stored(b"3")], res_type=1)],
        chunks=[Chunk(b"\x01" * 16, [stored(b"4")])],
    )
    right = build_bundle(
        ebx=[Ebx("keep", [stored(b"11")]), Ebx("new", [stored(b"5")])],
        res=[Res("tex", [stored(b"3")], res_type=2)],
        chunks=[Chunk(b"\x01" * 16, [stored(b"4")])],
    )
    result = diff_bundles(decode_bundle(left), decode_bundle(right))

    assert result["ebx"]["added"] == ["new"]
    assert result["ebx"]["removed"] == ["gone"]
    fields = {(c["name"], c["field"]) for c in result["ebx"]["changed"]}
    assert fields == {("keep", "size"), ("keep", "digest")}
    assert result["res"]["changed"] == [
        {"name": "tex", "field": "res_type", "left": 1, "right": 2}
    ]
    assert result["chunk"] == {"added": [], "removed": [], "changed": []}
    assert result["header"] == []
    assert result["summary"]["count"] == 5


def test_diff_bundle_files(tmp_path: Path):
    a = tmp_path / "a.bundle"
    b = tmp_path / "b.bundle"
    a.write_bytes(build_bundle(ebx=[Ebx("x", [stored(b"1")])], magic=1))
    b.write_bytes(build_bundle(ebx=[Ebx("x", [stored(b"1")])], magic=2))
    result = diff_bundle_files(a, b)
    assert result["header"] == [{"field": "magic", "left": 1, "right": 2}]
    assert result["summary"]["count"] == 1
