import json

import pytest

from core.models import Mode, MinorScaleType
from core.settings import PlaybackSettings, DEFAULT_SETTINGS, validate_setting


def _write(path, data):
    path.write_text(json.dumps(data))


def test_missing_file_is_created_with_defaults(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    settings = PlaybackSettings(path)

    assert path.exists()
    assert json.loads(path.read_text()) == DEFAULT_SETTINGS
    assert settings.bpm == 120
    assert settings.time_signature == 4
    assert settings.metronome_enabled is False
    assert settings.minor_scale_type is MinorScaleType.NATURAL


def test_stored_values_merge_over_defaults(tmp_path):
    path = tmp_path / "settings.json"
    _write(path, {"playback": {"bpm": 96}, "visual": {"hue_rotation_minor": 200}})

    settings = PlaybackSettings(path)
    assert settings.bpm == 96
    assert settings.time_signature == 4
    assert settings.hue_rotation_for(Mode.MINOR) == 200
    assert settings.hue_rotation_for(Mode.MAJOR) == 0
    assert settings.get("audio", "sample_rate") == 44100


def test_invalid_stored_values_fall_back(tmp_path):
    path = tmp_path / "settings.json"
    _write(path, {
        "playback": {"bpm": 500, "time_signature": 9, "unknown": 1},
        "visual": {"minor_scale_type": "dorian", "hue_rotation_major": "red"},
        "audio": "not a dict",
    })

    settings = PlaybackSettings(path)
    assert settings.bpm == 120
    assert settings.time_signature == 4
    assert settings.minor_scale_type is MinorScaleType.NATURAL
    assert settings.hue_rotation_for(Mode.MAJOR) == 0
    assert "unknown" not in settings.settings["playback"]
    assert settings.settings["audio"] == DEFAULT_SETTINGS["audio"]


def test_corrupt_file_uses_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    settings = PlaybackSettings(path)
    assert settings.settings == DEFAULT_SETTINGS


def test_set_and_save_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    settings = PlaybackSettings(path)
    settings.set("playback", "bpm", 180)
    settings.set("visual", "minor_scale_type", "harmonic")
    settings.save()

    reloaded = PlaybackSettings(path)
    assert reloaded.bpm == 180
    assert reloaded.minor_scale_type is MinorScaleType.HARMONIC


def test_set_rejects_invalid_values(tmp_path):
    settings = PlaybackSettings(tmp_path / "settings.json")
    with pytest.raises(ValueError):
        settings.set("playback", "bpm", 39)
    with pytest.raises(ValueError):
        settings.set("playback", "bpm", 120.5)
    with pytest.raises(ValueError):
        settings.set("playback", "time_signature", 1)
    with pytest.raises(ValueError):
        settings.set("visual", "hue_rotation_major", 360)
    with pytest.raises(ValueError):
        settings.set("playback", "swing", 0.5)
    assert settings.bpm == 120


def test_validate_setting_bounds():
    assert validate_setting("playback", "bpm", 40) == 40
    assert validate_setting("playback", "bpm", 240) == 240
    assert validate_setting("playback", "time_signature", 7) == 7
    assert validate_setting("playback", "metronome_enabled", 1) is True
    with pytest.raises(ValueError):
        validate_setting("playback", "bpm", True)


def test_defaults_are_not_shared(tmp_path):
    first = PlaybackSettings(tmp_path / "a.json")
    first.set("playback", "bpm", 60)
    second = PlaybackSettings(tmp_path / "b.json")
    assert second.bpm == 120
    assert DEFAULT_SETTINGS["playback"]["bpm"] == 120


def test_wrong_types_raise_value_error(tmp_path):
    settings = PlaybackSettings(tmp_path / "settings.json")
    with pytest.raises(ValueError):
        settings.set("visual", "hue_rotation_major", "10")
    with pytest.raises(ValueError):
        settings.set("playback", "bpm", None)
    with pytest.raises(ValueError):
        settings.set("playback", "time_signature", [4])
    with pytest.raises(ValueError):
        settings.set("playback", "bpm", float("inf"))
    assert settings.hue_rotation_for(Mode.MAJOR) == 0
    assert settings.bpm == 120


def test_wrong_stored_types_fall_back(tmp_path):
    path = tmp_path / "settings.json"
    _write(path, {"playback": {"bpm": None, "time_signature": "3"}})
    settings = PlaybackSettings(path)
    assert settings.bpm == 120
    assert settings.time_signature == 4
