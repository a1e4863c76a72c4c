import json
from pathlib import Path

from binbundle.cli import main
from bundle_helper import Chunk, Ebx, Res, build_bundle, raw_segment, stored, zlibbed


def _write(tmp_path: Path, name: str, data: bytes) -> Path:
    p = tmp_path / name
    p.write_bytes(data)
    return p


def _sample() -> bytes:
    return build_bundle(
        ebx=[Ebx("levels/intro", [zlibbed(b"E" * 50)])],
        res=[Res("textures/logo", [stored(b"R" * 12)])],
        chunks=[Chunk(b"\x05" * 16, [stored(b"C" * 9)])],
    )


def test_list_prints_records(tmp_path: Path, capsys):
    path = _write(tmp_path, "s.bundle", _sample())
    assert main(["-r", "silent", "list", str(path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("ebx")
    assert lines[0].endswith("levels/intro")
    assert "05" * 16 in lines[2]


def test_inspect_emits_json(tmp_path: Path, capsys):
    path = _write(tmp_path, "s.bundle", _sample())
    assert main(["-r", "silent", "inspect", "--fast", str(path)]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["counts"]["total"] == 3
    assert info["fast"] is True


def test_inspect_with_offset_and_manifest(tmp_path: Path):
    path = _write(tmp_path, "c.bin", b"\x00" * 32 + _sample())
    manifest = tmp_path / "m.json"
    rc = main(
        ["-r", "silent", "inspect", "--offset", "0x20", "--manifest", str(manifest), str(path)]
    )
    assert rc == 0
    assert json.loads(manifest.read_text())["counts"]["ebx"] == 1


def test_extract(tmp_path: Path):
    path = _write(tmp_path, "s.bundle", _sample())
    out = tmp_path / "out"
    assert main(["-r", "silent", "extract", str(path), str(out)]) == 0
    assert (out / "ebx" / "levels" / "intro.ebx").read_bytes() == b"E" * 50


def test_validate_exit_codes(tmp_path: Path):
    good = _write(tmp_path, "good.bundle", _sample())
    bad = _write(
        tmp_path,
        "bad.bundle",
        build_bundle(ebx=[Ebx("a", [stored(b"1")])], digests=[b"\x00" * 20]),
    )
    assert main(["-r", "silent", "validate", "--verify-digests", str(good)]) == 0
    assert main(["-r", "silent", "validate", "--verify-digests", str(bad)]) == 1


def test_decode_error_exit_code(tmp_path: Path, capsys):
    data = build_bundle(ebx=[Ebx("a", [raw_segment(4, 0x0999, 0)], size=4)])
    path = _write(tmp_path, "broken.bundle", data)
    assert main(["-r", "plain", "extract", str(path), str(tmp_path / "o")]) == 2
    assert "E_UNKNOWN_SEGMENT" in capsys.readouterr().err


def test_missing_file_exit_code(tmp_path: Path):
    assert main(["-r", "silent", "list", str(tmp_path / "none.bundle")]) == 2


def test_diff_exit_codes(tmp_path: Path, capsys):
    a = _write(tmp_path, "a.bundle", _sample())
    b = _write(tmp_path, "b.bundle", build_bundle(ebx=[Ebx("other", [stored(b"x")])]))
    assert main(["-r", "silent", "diff", str(a), str(a)]) == 0
    capsys.readouterr()
    assert main(["-r", "silent", "diff", str(a), str(b)]) == 1
    result = json.loads(capsys.readouterr().out)
    assert result["ebx"]["added"] == ["other"]


def test_config_file_supplies_options(tmp_path: Path, capsys):
    path = _write(tmp_path, "c.bin", b"\xff" * 8 + _sample())
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"offset": 8, "reporter": "json", "fast": True}))
    assert main(["-c", str(cfg), "inspect", str(path)]) == 0
    out = capsys.readouterr().out.splitlines()
    # summary events are single lines, the manifest is pretty-printed
    events = [json.loads(line) for line in out if line.startswith('{"')]
    assert any(e.get("summary_type") == "bundle" for e in events)


def test_diff_embedded_bundles(tmp_path: Path, capsys):
    a = _write(tmp_path, "a.bin", b"\xee" * 16 + _sample())
    b = _write(
        tmp_path,
        "b.bin",
        b"\xee" * 16 + build_bundle(ebx=[Ebx("levels/intro", [stored(b"E")])]),
    )
    assert main(["-r", "silent", "diff", "--offset", "16", str(a), str(b)]) == 1
    result = json.loads(capsys.readouterr().out)
    assert result["ebx"]["changed"][0]["name"] == "levels/intro"
    assert result["res"]["removed"] == ["textures/logo"]


def test_out_of_window_name_exit_code(tmp_path: Path, capsys):
    data = bytearray(build_bundle(ebx=[Ebx("a", [stored(b"0123456789")])]))
    data[56:60] = (-10000).to_bytes(4, "little", signed=True)
    path = _write(tmp_path, "bad.bundle", bytes(data))
    assert main(["-r", "plain", "list", str(path)]) == 2
    assert "E_TRUNCATED" in capsys.readouterr().err
