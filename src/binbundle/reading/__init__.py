"""Stage readers for the binary bundle layout."""

from .cursor import ByteCursor
from .decoder import decode, read_payloads

__all__ = ["ByteCursor", "decode", "read_payloads"]
