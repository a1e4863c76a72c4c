"""High-level API for binbundle.

``decode_bundle`` is the core entry point; the remaining functions are thin
conveniences used by the CLI (file loading, listings, validation,
extraction and diffing).
"""

from __future__ import annotations

import hashlib
from collections import Counter
from pathlib import Path
from typing import Any, BinaryIO, List, Optional

from .constants import KIND_CHUNK, KIND_EBX, KIND_RES
from .diff import diff_bundles
from .logging import get_logger
from .manifest import bundle_manifest
from .models import Bundle
from .reading import ByteCursor, decode
from .reading.metadata import MetadataDecoder
from .reporting import get_reporter, task
from .utils.paths import safe_file_path, sanitize_record_name

__all__ = [
    "decode_bundle",
    "load_bundle",
    "inspect_bundle",
    "validate_bundle",
    "extract_bundle",
    "diff_bundle_files",
]

_EXTRACT_DIRS = {KIND_EBX: "ebx", KIND_RES: "res", KIND_CHUNK: "chunks"}


def _summarise(bundle: Bundle, source: str) -> None:
    payload_bytes = sum(len(r.payload) for _, r in bundle.iter_records())
    get_reporter().summary(
        "bundle",
        source=source,
        ebx=len(bundle.ebx),
        res=len(bundle.res),
        chunks=len(bundle.chunks),
        payload_bytes=payload_bytes,
        fast=int(bundle.fast),
    )


def decode_bundle(
    source: bytes | bytearray | BinaryIO,
    fast: bool = False,
    *,
    metadata_decoder: Optional[MetadataDecoder] = None,
) -> Bundle:
    """Decode one bundle starting at the current position of ``source``.

    ``source`` may be raw bytes or a seekable binary stream. With ``fast``
    the payload segments are skipped and every record's payload is empty.
    Raises a :class:`~binbundle.errors.BundleError` subclass on bad input;
    no partial bundle is ever returned.
    """
    if isinstance(source, (bytes, bytearray)):
        cursor = ByteCursor.from_bytes(bytes(source))
    else:
        cursor = ByteCursor(source)
    return decode(cursor, fast=fast, metadata_decoder=metadata_decoder)


def load_bundle(
    path: str | Path,
    offset: int = 0,
    size: int | None = None,
    fast: bool = False,
    *,
    metadata_decoder: Optional[MetadataDecoder] = None,
) -> Bundle:
    """Decode a bundle stored at ``offset`` inside the file at ``path``.

    ``size`` bounds the bytes the decoder may read, for bundles embedded in
    a larger container.
    """
    p = Path(path)
    logger = get_logger()
    logger.debug("loading %s at offset %d (size=%s fast=%s)", p, offset, size, fast)
    with p.open("rb") as f:
        f.seek(offset)
        cursor = ByteCursor(f, start=offset, size=size)
        bundle = decode(cursor, fast=fast, metadata_decoder=metadata_decoder)
    _summarise(bundle, p.name)
    return bundle


def inspect_bundle(
    path: str | Path, offset: int = 0, size: int | None = None
) -> dict[str, Any]:
    """Fast structural listing of a bundle file as a JSON-ready dict."""
    bundle = load_bundle(path, offset, size, fast=True)
    info = bundle_manifest(bundle)
    info["file"] = str(path)
    info["offset"] = offset
    return info


def _duplicates(labels: List[str]) -> List[str]:
    return sorted(name for name, n in Counter(labels).items() if n > 1)


def validate_bundle(
    bundle: Bundle,
    *,
    expected_magic: int | None = None,
    verify_digests: bool = False,
) -> List[str]:
    """Return a list of human-readable issues; empty means no issues."""
    issues: List[str] = []
    h = bundle.header
    if expected_magic is not None and h.magic != expected_magic:
        issues.append(
            f"Header magic mismatch: {h.magic:08x} != {expected_magic:08x}"
        )
    for kind, records in (("ebx", bundle.ebx), ("res", bundle.res)):
        for name in _duplicates([r.name for r in records]):
            issues.append(f"Duplicate {kind} name: {name}")
        for r in records:
            if not r.name:
                issues.append(f"Empty {kind} name at name_offset {r.name_offset}")
    for cid in _duplicates([c.id_hex for c in bundle.chunks]):
        issues.append(f"Duplicate chunk id: {cid}")
    entries = getattr(bundle.metadata, "value", None)
    if isinstance(entries, list) and len(entries) != len(bundle.chunks):
        issues.append(
            f"Chunk meta count mismatch: {len(entries)} entries for "
            f"{len(bundle.chunks)} chunks"
        )
    if bundle.fast:
        if verify_digests:
            issues.append("Digest verification skipped: bundle decoded in fast mode")
        return issues
    for kind, rec in bundle.iter_records():
        if len(rec.payload) != rec.target_size:
            issues.append(
                f"Payload size mismatch for {kind} {rec.label}: "
                f"{len(rec.payload)} != {rec.target_size}"
            )
        elif verify_digests and hashlib.sha1(rec.payload).digest() != rec.digest:
            issues.append(f"SHA1 mismatch for {kind} {rec.label}")
    return issues


def extract_bundle(bundle: Bundle, out_dir: str | Path) -> List[Path]:
    """Write every payload below ``out_dir``; returns the written paths.

    Layout: ``ebx/<name>.ebx``, ``res/<name>.<type>.res`` and
    ``chunks/<id>.chunk``. Names are sanitised and may not escape
    ``out_dir``.
    """
    if bundle.fast:
        raise ValueError("Cannot extract a bundle decoded in fast mode")
    base = Path(out_dir)
    base.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    total_bytes = 0
    with task("extract", "Extract payloads", total=bundle.record_count) as t:
        for kind, rec in bundle.iter_records():
            rel = sanitize_record_name(rec.label)
            if kind == KIND_EBX:
                rel += ".ebx"
            elif kind == KIND_RES:
                rel += f".{rec.res_type_hex}.res"  # type: ignore[union-attr]
            else:
                rel += ".chunk"
            target = safe_file_path(base, f"{_EXTRACT_DIRS[kind]}/{rel}")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(rec.payload)
            written.append(target)
            total_bytes += len(rec.payload)
            t.advance(rec.label)
        t.stats.update(records=len(written), bytes=total_bytes)
    get_reporter().summary(
        "extract", files=len(written), bytes=total_bytes, out=base
    )
    return written


def diff_bundle_files(
    left: str | Path,
    right: str | Path,
    offset: int = 0,
    size: int | None = None,
) -> dict[str, Any]:
    """Diff two bundle files; ``offset``/``size`` select the same window in both."""
    return diff_bundles(
        load_bundle(left, offset, size, fast=True),
        load_bundle(right, offset, size, fast=True),
    )
