import json

import pytest

from jellyrename.config import DEFAULT_CONFIG, ConfigError, load_config


def test_defaults():
    assert load_config(None) is DEFAULT_CONFIG
    assert DEFAULT_CONFIG.is_video("Movie.MKV")
    assert DEFAULT_CONFIG.is_subtitle("Movie.en.srt")
    assert not DEFAULT_CONFIG.is_video("notes.txt")


def test_file_extends_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "video_extensions": ["ts", ".MKV"],
        "filter_words": ["Nanda"],
        "cardinal_words": {"uno": 1},
        "language_codes": ["por"],
    }), encoding="utf-8")

    config = load_config(path)

    assert config.video_extensions == DEFAULT_CONFIG.video_extensions + (".ts",)
    assert config.filter_words[-1] == "nanda"
    assert config.cardinal_words["uno"] == 1
    assert config.cardinal_words["one"] == 1
    assert "por" in config.language_codes
    # The defaults are untouched
    assert ".ts" not in DEFAULT_CONFIG.video_extensions


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text('{"colour": "blue"}', encoding="utf-8")
    assert load_config(path) == DEFAULT_CONFIG
    assert "colour" in caplog.text


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"cardinal_words": {"uno": "x"}}'])
def test_bad_files(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.json")
