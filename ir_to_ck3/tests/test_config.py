import logging

import pytest
from ir_to_ck3.config import ConversionConfig
from ir_to_ck3.game_date import GameDate


def test_default_config():
    config = ConversionConfig.default()
    assert config.conversion_date == GameDate(727, 1, 1)
    assert config.bookmark_date == GameDate(867, 1, 1)
    assert config.gestation_days == 280
    assert config.max_pregnancy_years == 0.25
    assert config.protected_id_prefixes == ("animation_test_",)
    assert config.characters_to_preserve_path is None
    assert not config.caste_system_enabled

def test_from_dict_overrides_defaults():
    config = ConversionConfig.from_dict({"bookmark_date": "1066.9.15", "max_workers": 3})
    assert config.bookmark_date == GameDate(1066, 9, 15)
    assert config.worker_count == 3
    assert config.conversion_date == GameDate(727, 1, 1)

def test_worker_count_defaults_to_at_least_one():
    assert ConversionConfig.default().worker_count >= 1

@pytest.mark.parametrize("override", [{"max_workers": 0}, {"bookmark_date": "not a date"}])
def test_invalid_values(override):
    with pytest.raises(ValueError):
        ConversionConfig.from_dict(override)

def test_unknown_key_warns(caplog):
    with caplog.at_level(logging.WARNING):
        ConversionConfig.from_dict({"legions": True})
    assert "legions" in caplog.text

def test_config_is_read_only():
    config = ConversionConfig.default()
    with pytest.raises(AttributeError):
        config.bookmark_date = GameDate(1)

def test_from_yaml(tmp_path):
    path = tmp_path / "conversion.yaml"
    path.write_text('conversion_date: "450.10.1"\ncharacters_to_preserve_path: "keep.txt"\n', encoding="utf-8")
    config = ConversionConfig.from_yaml(path)
    assert config.conversion_date == GameDate(450, 10, 1)
    assert config.characters_to_preserve_path.name == "keep.txt"

def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConversionConfig.from_yaml(tmp_path / "nope.yaml")

def test_from_yaml_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("conversion_date: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConversionConfig.from_yaml(path)

def test_is_protected_id():
    config = ConversionConfig.default()
    assert config.is_protected_id("animation_test_ruler")
    assert not config.is_protected_id("imperator1")
