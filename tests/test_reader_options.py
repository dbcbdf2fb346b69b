from __future__ import annotations

import json
from pathlib import Path

import pytest

from pixeldecode.config import (
    ReaderOptions,
    SessionConfig,
    load_config,
    load_reader_options,
    load_session_config,
)


def test_reader_options_defaults():
    opts = ReaderOptions()
    assert opts.to_dict() == {
        "filter_metadata": True,
        "populate_original_metadata": False,
        "collect_metadata": True,
        "flatten_resolutions": False,
        "output_order": "XYCZT",
    }


def test_reader_options_from_dict_coerces_values():
    opts = ReaderOptions.from_dict(
        {"filter_metadata": 0, "collect_metadata": 1, "output_order": "xyzct"}
    )
    assert opts.filter_metadata is False
    assert opts.collect_metadata is True
    assert opts.output_order == "XYZCT"


@pytest.mark.parametrize(
    "payload",
    [
        {"filter": True},
        {"filter_metadata": "yes"},
        {"output_order": "XYZZT"},
        {"flatten_resolutions": True},
    ],
)
def test_reader_options_from_dict_rejects_bad_payloads(payload):
    with pytest.raises(ValueError):
        ReaderOptions.from_dict(payload)


def test_session_config_from_dict():
    config = SessionConfig.from_dict(
        {"source": {"name": "tiff", "kwargs": {"series": 1}}, "reader": {"filter_metadata": False}}
    )
    assert config.source == "tiff"
    assert config.source_kwargs == {"series": 1}
    assert config.options.filter_metadata is False


def test_session_config_defaults_and_unknown_sections():
    config = SessionConfig.from_dict({})
    assert config.source == "raw"
    assert config.options == ReaderOptions()

    with pytest.raises(ValueError):
        SessionConfig.from_dict({"writer": {}})
    with pytest.raises(ValueError):
        SessionConfig.from_dict({"source": {"kwargs": [1, 2]}})


def test_load_reader_options_json(tmp_path: Path):
    cfg = tmp_path / "options.json"
    cfg.write_text(json.dumps({"reader": {"output_order": "XYTCZ"}}), encoding="utf-8")
    assert load_reader_options(cfg).output_order == "XYTCZ"


def test_load_session_config_yaml(tmp_path: Path):
    pytest.importorskip("yaml")
    cfg = tmp_path / "session.yaml"
    cfg.write_text(
        "reader:\n"
        "  populate_original_metadata: true\n"
        "source:\n"
        "  name: raw\n"
        "  kwargs: {width: 8, height: 4, pixel_type: uint8}\n",
        encoding="utf-8",
    )
    config = load_session_config(cfg)
    assert config.options.populate_original_metadata is True
    assert config.source_kwargs == {"width": 8, "height": 4, "pixel_type": "uint8"}


def test_load_config_empty_json_is_empty_dict(tmp_path: Path):
    cfg = tmp_path / "empty.json"
    cfg.write_text("", encoding="utf-8")
    assert load_config(cfg) == {}


def test_load_config_rejects_unknown_extension(tmp_path: Path):
    cfg = tmp_path / "options.toml"
    cfg.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(cfg)


def test_load_config_rejects_non_mapping(tmp_path: Path):
    cfg = tmp_path / "list.json"
    cfg.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(cfg)
