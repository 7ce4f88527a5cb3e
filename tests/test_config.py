import json

import pytest

from prompt_ab.config import Config


def test_nothing_configured():
    assert Config.load_plugin_config(inline="", path="") == {"experiments": []}


def test_inline_json():
    raw = Config.load_plugin_config(inline='{"experiments": [{"id": "a"}]}', path="")
    assert raw == {"experiments": [{"id": "a"}]}


def test_file(tmp_path):
    path = tmp_path / "experiments.json"
    path.write_text(json.dumps([{"id": "from-file"}]), encoding="utf-8")
    assert Config.load_plugin_config(inline="", path=str(path)) == [{"id": "from-file"}]


def test_inline_wins_over_file(tmp_path):
    path = tmp_path / "experiments.json"
    path.write_text('{"experiments": []}', encoding="utf-8")
    raw = Config.load_plugin_config(inline='{"experiments": ["inline"]}', path=str(path))
    assert raw == {"experiments": ["inline"]}


def test_invalid_inline_json():
    with pytest.raises(ValueError, match="PROMPT_AB_CONFIG_JSON"):
        Config.load_plugin_config(inline="{not json", path="")


def test_invalid_file_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        Config.load_plugin_config(inline="", path=str(path))


def test_missing_file(tmp_path):
    with pytest.raises(ValueError, match="Cannot read"):
        Config.load_plugin_config(inline="", path=str(tmp_path / "absent.json"))


def test_defaults_come_from_class_attributes(monkeypatch):
    monkeypatch.setattr(Config, "PROMPT_AB_CONFIG_JSON", '{"experiments": ["env"]}')
    monkeypatch.setattr(Config, "PROMPT_AB_CONFIG_PATH", "")
    assert Config.load_plugin_config() == {"experiments": ["env"]}
