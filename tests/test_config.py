import json
from pathlib import Path

import pytest

from binbundle.config import DecodeConfig, load_config, parse_config
from binbundle.errors import E_CONFIG, ConfigError


def test_defaults():
    cfg = parse_config({})
    assert cfg == DecodeConfig()


def test_json_config(tmp_path: Path):
    p = tmp_path / "cfg.json"
    p.write_text(
        json.dumps(
            {
                "fast": True,
                "expected_magic": "0x970d1c13",
                "verify_digests": True,
                "reporter": "json",
                "offset": 16,
                "size": "0x200",
            }
        ),
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.fast is True
    assert cfg.expected_magic == 0x970D1C13
    assert cfg.verify_digests is True
    assert cfg.reporter == "json"
    assert cfg.offset == 16
    assert cfg.size == 0x200


def test_yaml_config(tmp_path: Path):
    yaml = pytest.importorskip("yaml")
    p = tmp_path / "cfg.yaml"
    p.write_text(yaml.safe_dump({"expected_magic": 42, "reporter": "silent"}))
    cfg = load_config(p)
    assert cfg.expected_magic == 42
    assert cfg.reporter == "silent"


def test_empty_yaml_is_default(tmp_path: Path):
    pytest.importorskip("yaml")
    p = tmp_path / "cfg.yml"
    p.write_text("")
    assert load_config(p) == DecodeConfig()


@pytest.mark.parametrize(
    "data",
    [
        {"unknown": 1},
        {"fast": "yes"},
        {"offset": "abc"},
        {"offset": True},
        {"reporter": "fancy"},
        {"offset": -1},
    ],
)
def test_invalid_config(data):
    with pytest.raises(ConfigError) as ei:
        parse_config(data)
    assert ei.value.code == E_CONFIG


def test_root_must_be_object(tmp_path: Path):
    p = tmp_path / "cfg.json"
    p.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        load_config(p)


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")
