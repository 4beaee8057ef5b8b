import json

import pytest

from docedit.config import EditorConfig, config_from_dict, load_config
from docedit.model import BlockKind


def test_shipped_config_matches_defaults():
    assert load_config() == EditorConfig()


def test_missing_file_uses_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.json")) == EditorConfig()


def test_partial_config_overrides_only_named_keys(tmp_path):
    path = tmp_path / "editor.json"
    path.write_text(json.dumps({"default_font_size_pt": 12, "heading_sizes_pt": {"1": 30}}), encoding="utf-8")
    config = load_config(str(path))
    assert config.default_font_family == "Calibri"
    assert config.default_font_size_half_points == 24
    assert config.heading_size_half_points(BlockKind.HEADING1) == 60
    assert config.heading_size_half_points(BlockKind.HEADING2) is None
    assert config.heading_size_half_points(BlockKind.PARAGRAPH) is None


def test_style_map_entries_are_parsed():
    config = config_from_dict({"style_map": [{"style": "Title", "kind": "heading1"}]})
    assert config.style_map == [("Title", BlockKind.HEADING1)]


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"default_font_size_pt": 0},
        {"default_font_size_pt": True},
        {"default_font_family": "  "},
        {"heading_sizes_pt": {"one": 24}},
        {"style_map": [{"style": "Title", "kind": "heading3"}]},
        {"style_map": [{"style": "Title"}]},
    ],
)
def test_invalid_config_values(data):
    with pytest.raises(ValueError):
        config_from_dict(data)


def test_invalid_json(tmp_path):
    path = tmp_path / "editor.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))
