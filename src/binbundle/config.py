"""Decoder configuration loading (JSON/YAML)."""

from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional
import json

from .errors import E_CONFIG, ConfigError

try:  # Optional YAML support
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None  # type: ignore

__all__ = ["DecodeConfig", "load_config", "parse_config"]

_REPORTERS = ("plain", "rich", "json", "silent")


@dataclass(slots=True)
class DecodeConfig:
    fast: bool = False
    expected_magic: Optional[int] = None
    verify_digests: bool = False
    reporter: str = "plain"
    offset: int = 0
    size: Optional[int] = None


def _config_error(message: str, key: str | None = None) -> ConfigError:
    return ConfigError(
        code=E_CONFIG, message=message, context={"key": key} if key else None
    )


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise _config_error(f"'{key}' must be an integer", key)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value, 0)
        except ValueError:
            pass
    raise _config_error(f"'{key}' must be an integer", key)


def parse_config(data: dict[str, Any]) -> DecodeConfig:
    known = {f.name for f in fields(DecodeConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise _config_error(f"Unknown config keys: {unknown}", unknown[0])
    cfg = DecodeConfig()
    for key in ("fast", "verify_digests"):
        if key in data:
            if not isinstance(data[key], bool):
                raise _config_error(f"'{key}' must be a boolean", key)
            setattr(cfg, key, data[key])
    for key in ("expected_magic", "size"):
        if data.get(key) is not None:
            setattr(cfg, key, _as_int(data[key], key))
    if "offset" in data:
        cfg.offset = _as_int(data["offset"], "offset")
    if "reporter" in data:
        if data["reporter"] not in _REPORTERS:
            raise _config_error(
                f"'reporter' must be one of {list(_REPORTERS)}", "reporter"
            )
        cfg.reporter = data["reporter"]
    if cfg.offset < 0 or (cfg.size is not None and cfg.size < 0):
        raise _config_error("'offset' and 'size' must not be negative")
    return cfg


def load_config(path: str | Path) -> DecodeConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("YAML config provided but PyYAML not installed")
        data: Any = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise _config_error("Root of config must be an object")
    return parse_config(data)
