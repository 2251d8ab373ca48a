from pathlib import Path

import pytest

from bullet_fitter.config import (
    BulletFitterConfig,
    config_from_dict,
    config_from_yaml,
    load_config,
)
from bullet_fitter.widths import AF1206_LINE_WIDTH_PX
from bullet_fitter.wordlists import DEFAULT_BANNED_WORDS


def test_defaults():
    cfg = load_config()
    assert cfg.target_width_px == AF1206_LINE_WIDTH_PX
    assert cfg.enforcement.target_max == 350
    assert cfg.enforcement.target_min is None
    assert cfg.enforcement.max_retries == 2
    assert cfg.enforcement.banned_words == DEFAULT_BANNED_WORDS
    assert not cfg.openai.enabled
    assert cfg.openai.max_attempts == 1


def test_default_word_lists_are_copied():
    cfg = BulletFitterConfig()
    cfg.enforcement.banned_words["synergy"] = "teamwork"
    assert "synergy" not in DEFAULT_BANNED_WORDS


def test_config_from_dict_nested_sections_and_unknown_keys():
    cfg = config_from_dict(
        {
            "target_width_px": 700,
            "unknown": True,
            "enforcement": {"target_max": 200, "target_min": 180, "bogus": 1},
            "openai": {"enabled": True, "model": "gpt-4o-mini"},
        }
    )
    assert cfg.target_width_px == 700
    assert cfg.enforcement.target_max == 200
    assert cfg.enforcement.target_min == 180
    assert cfg.openai.enabled
    assert cfg.openai.model == "gpt-4o-mini"


def test_config_from_yaml(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "enforcement:\n"
        "  target_max: 250\n"
        "  context: Leadership\n"
        "  banned_words:\n"
        "    utilized: used\n"
        "abbreviations:\n"
        "  and: '&'\n",
        encoding="utf-8",
    )
    cfg = config_from_yaml(path)
    assert cfg.enforcement.target_max == 250
    assert cfg.enforcement.context == "Leadership"
    assert cfg.enforcement.banned_words == {"utilized": "used"}
    assert cfg.abbreviations == {"and": "&"}


def test_empty_yaml_gives_defaults(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert config_from_yaml(path) == BulletFitterConfig()


def test_non_mapping_yaml_is_rejected(tmp_path: Path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        config_from_yaml(path)


def test_to_dict_round_trips():
    cfg = BulletFitterConfig()
    assert config_from_dict(cfg.to_dict()) == cfg
