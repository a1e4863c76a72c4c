"""binbundle: decoder for binary asset bundles (EBX, RES and CHUNK records)."""

from .api import (
    decode_bundle,
    diff_bundle_files,
    extract_bundle,
    inspect_bundle,
    load_bundle,
    validate_bundle,
)
from .errors import (
    BundleError,
    CorruptHeader,
    MetadataDecodeError,
    PayloadDecompressionError,
    TruncatedInput,
    UnknownSegmentFormat,
)
from .models import Bundle, BundleHeader, ChunkRecord, EbxRecord, ResRecord

__all__ = [
    "decode_bundle",
    "load_bundle",
    "inspect_bundle",
    "validate_bundle",
    "extract_bundle",
    "diff_bundle_files",
    "Bundle",
    "BundleHeader",
    "EbxRecord",
    "ResRecord",
    "ChunkRecord",
    "BundleError",
    "TruncatedInput",
    "CorruptHeader",
    "PayloadDecompressionError",
    "MetadataDecodeError",
    "UnknownSegmentFormat",
]
