import json
from pathlib import Path

import pytest

from urltabs.config import ConfigError, Settings, load_settings


def test_default_settings():
    settings = load_settings(None)
    assert settings.registry().names() == ["tab"]
    assert settings.markup_classes().current == "current-menu-item"


def test_load_settings_from_json(tmp_path: Path):
    path = tmp_path / "urltabs.json"
    path.write_text(
        json.dumps(
            {
                "endpoints": [{"name": "tab"}, {"name": "overview", "mask": "EP_CATEGORIES"}],
                "active_class": "is-current-tab",
            }
        ),
        encoding="utf-8",
    )

    settings = load_settings(path)
    assert settings.registry().names() == ["tab", "overview"]
    assert settings.markup_classes().active == "is-current-tab"


def test_load_settings_errors(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(bad)

    wrong = tmp_path / "wrong.json"
    wrong.write_text("[]", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_settings(wrong)


def test_empty_endpoint_list_falls_back_to_default():
    assert Settings(endpoints=[]).registry().names() == ["tab"]
