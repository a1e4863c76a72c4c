"""Command line interface for binbundle."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import diff_bundle_files, extract_bundle, load_bundle, validate_bundle
from .config import DecodeConfig, load_config
from .errors import BundleError
from .logging import configure_logging, section, step
from .manifest import bundle_manifest, write_manifest
from .reporting import get_reporter, make_reporter, set_reporter, set_verbosity


def _load(args: argparse.Namespace, cfg: DecodeConfig, fast: bool):
    return load_bundle(args.bundle, offset=cfg.offset, size=cfg.size, fast=fast)


def _list_cmd(args: argparse.Namespace, cfg: DecodeConfig) -> int:
    bundle = _load(args, cfg, fast=True)
    for kind, rec in bundle.iter_records():
        print(f"{kind:5} {rec.target_size:>10} {rec.digest.hex()} {rec.label}")
    return 0


def _inspect_cmd(args: argparse.Namespace, cfg: DecodeConfig) -> int:
    bundle = _load(args, cfg, fast=cfg.fast)
    if args.manifest:
        write_manifest(bundle, args.manifest)
        step(f"manifest written to {args.manifest}")
    else:
        print(json.dumps(bundle_manifest(bundle), indent=2, sort_keys=True))
    return 0


def _validate_cmd(args: argparse.Namespace, cfg: DecodeConfig) -> int:
    verify = cfg.verify_digests or args.verify_digests
    bundle = _load(args, cfg, fast=cfg.fast and not verify)
    issues = validate_bundle(
        bundle, expected_magic=cfg.expected_magic, verify_digests=verify
    )
    with section("Validation") as log:
        for issue in issues:
            log.warning(issue)
    get_reporter().summary("validate", issues=len(issues))
    return 1 if issues else 0


def _extract_cmd(args: argparse.Namespace, cfg: DecodeConfig) -> int:
    bundle = _load(args, cfg, fast=False)
    extract_bundle(bundle, args.output)
    return 0


def _diff_cmd(args: argparse.Namespace, cfg: DecodeConfig) -> int:
    step("diffing bundles")
    result = diff_bundle_files(
        args.left, args.right, offset=cfg.offset, size=cfg.size
    )
    diff_count = result["summary"]["count"]
    get_reporter().summary(
        "diff", count=diff_count, left=args.left.name, right=args.right.name
    )
    print(json.dumps(result, indent=2, sort_keys=True))
    return 1 if diff_count else 0


def _add_window_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--offset",
        type=lambda s: int(s, 0),
        help="Byte offset of the bundle inside the file",
    )
    p.add_argument(
        "--size",
        type=lambda s: int(s, 0),
        help="Maximum number of bytes belonging to the bundle",
    )


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("bundle", type=Path)
    _add_window_args(p)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="binbundle", description="Binary bundle decoder"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        help="Reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        help="JSON or YAML file with decoder options",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List records (fast, no payloads)")
    _add_source_args(ls)
    ls.set_defaults(func=_list_cmd)

    i = sub.add_parser("inspect", help="Dump the bundle manifest as JSON")
    _add_source_args(i)
    i.add_argument(
        "--manifest", type=Path, help="Write the manifest to this file instead"
    )
    i.add_argument(
        "--fast", action="store_true", help="Skip payload decompression"
    )
    i.set_defaults(func=_inspect_cmd)

    v = sub.add_parser("validate", help="Decode and check a bundle")
    _add_source_args(v)
    v.add_argument(
        "--verify-digests",
        action="store_true",
        help="Compare SHA1 of each payload against its stored digest",
    )
    v.set_defaults(func=_validate_cmd)

    x = sub.add_parser("extract", help="Write all payloads to a directory")
    _add_source_args(x)
    x.add_argument("output", type=Path)
    x.set_defaults(func=_extract_cmd)

    d = sub.add_parser(
        "diff", help="Diff two bundles (the --offset/--size window applies to both)"
    )
    d.add_argument("left", type=Path)
    d.add_argument("right", type=Path)
    _add_window_args(d)
    d.set_defaults(func=_diff_cmd)

    return p


def _effective_config(args: argparse.Namespace) -> DecodeConfig:
    cfg = load_config(args.config) if args.config else DecodeConfig()
    if args.reporter:
        cfg.reporter = args.reporter
    if getattr(args, "offset", None) is not None:
        cfg.offset = args.offset
    if getattr(args, "size", None) is not None:
        cfg.size = args.size
    if getattr(args, "fast", False):
        cfg.fast = True
    return cfg


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbosity(args.verbose)
    try:
        cfg = _effective_config(args)
    except (BundleError, OSError, ValueError) as e:
        parser.error(str(e))
    set_reporter(make_reporter(cfg.reporter, isatty=sys.stderr.isatty()))
    configure_logging(args.verbose)
    rep = get_reporter()
    try:
        return args.func(args, cfg)
    except BundleError as e:
        rep.error(str(e))
        return 2
    except FileNotFoundError as e:
        rep.error(f"File not found: {e.filename or e}")
        return 2
    finally:
        rep.flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
