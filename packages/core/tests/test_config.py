"""Tests for configuration loading."""

import pytest

from lgtm_core.config import DEFAULT_CONFIG, load_config


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["model"] == "anthropic"
    assert config["base_branch"] == "develop"
    assert config["exclude"] == []
    assert config["extensions"] == [".ts", ".tsx", ".js", ".jsx", ".mjs"]
    assert config["aliases"] == {"@/": "src/"}
    assert config["history_window"] == 2
    assert config["failure_delay"] == 2.0


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("model: openai\nbase_branch: main\n")
    config = load_config(config_path=str(cfg))
    assert config["model"] == "openai"
    assert config["base_branch"] == "main"


def test_aliases_loaded(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("aliases:\n  '~/': 'app/'\n")
    config = load_config(config_path=str(cfg))
    assert config["aliases"] == {"~/": "app/"}


def test_exclude_patterns_loaded(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("exclude:\n  - migrations/\n  - '*.min.js'\n")
    config = load_config(config_path=str(cfg))
    assert "migrations/" in config["exclude"]
    assert "*.min.js" in config["exclude"]


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["model"] == "anthropic"


def test_non_mapping_config_file_rejected(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        load_config(config_path=str(cfg))


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("model: openai\n")
    config = load_config(config_path=str(cfg), cli_overrides={"model": "anthropic"})
    assert config["model"] == "anthropic"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".lgtm.yml"
    cfg.write_text("base_branch: main\n")
    config = load_config(config_path=str(cfg), cli_overrides={"base_branch": None})
    assert config["base_branch"] == "main"


def test_mutable_defaults_are_not_shared(tmp_path):
    """Mutating one config's lists or dicts must not leak into the next load."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["exclude"].append("migrations/")
    config_a["extensions"].append(".vue")
    config_a["aliases"]["~/"] = "app/"

    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config_b["exclude"] == []
    assert ".vue" not in config_b["extensions"]
    assert "~/" not in config_b["aliases"]
    assert DEFAULT_CONFIG["exclude"] == []
