"""Error definitions for binbundle."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_TRUNCATED = "E_TRUNCATED"
E_CORRUPT_HEADER = "E_CORRUPT_HEADER"
E_DECOMPRESS = "E_DECOMPRESS"
E_METADATA = "E_METADATA"
E_UNKNOWN_SEGMENT = "E_UNKNOWN_SEGMENT"
E_CONFIG = "E_CONFIG"


@dataclass
class BundleError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class TruncatedInput(BundleError):
    pass


class CorruptHeader(BundleError):
    pass


class PayloadDecompressionError(BundleError):
    pass


class MetadataDecodeError(BundleError):
    pass


class UnknownSegmentFormat(BundleError):
    pass


class ConfigError(BundleError):
    pass


def truncated(
    label: str, wanted: int, got: int, offset: int
) -> TruncatedInput:
    return TruncatedInput(
        code=E_TRUNCATED,
        message=f"Short read for {label}: wanted {wanted} bytes, got {got}",
        context={"offset": offset, "wanted": wanted, "got": got},
    )


def out_of_bounds(label: str, offset: int, start: int, end: int) -> TruncatedInput:
    return TruncatedInput(
        code=E_TRUNCATED,
        message=f"Seek for {label} to {offset} is outside bundle bytes {start}..{end}",
        context={"offset": offset, "start": start, "end": end},
    )


def corrupt_header(
    message: str, context: Optional[Dict[str, Any]] = None
) -> CorruptHeader:
    return CorruptHeader(code=E_CORRUPT_HEADER, message=message, context=context)


def decompress_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> PayloadDecompressionError:
    return PayloadDecompressionError(
        code=E_DECOMPRESS, message=message, context=context
    )


def unknown_segment(
    label: str, tag: int, offset: int
) -> UnknownSegmentFormat:
    return UnknownSegmentFormat(
        code=E_UNKNOWN_SEGMENT,
        message=f"{label}: unknown segment tag 0x{tag:04x}",
        context={"offset": offset, "tag": tag},
    )


def metadata_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> MetadataDecodeError:
    return MetadataDecodeError(code=E_METADATA, message=message, context=context)


__all__ = [
    "BundleError",
    "TruncatedInput",
    "CorruptHeader",
    "PayloadDecompressionError",
    "MetadataDecodeError",
    "UnknownSegmentFormat",
    "ConfigError",
    "truncated",
    "out_of_bounds",
    "corrupt_header",
    "decompress_error",
    "unknown_segment",
    "metadata_error",
    "E_TRUNCATED",
    "E_CORRUPT_HEADER",
    "E_DECOMPRESS",
    "E_METADATA",
    "E_UNKNOWN_SEGMENT",
    "E_CONFIG",
]
