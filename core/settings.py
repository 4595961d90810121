"""
User settings for Harmonic Colors.

Settings live in ~/.harmonic_colors/settings.json. Stored categories are
merged over the defaults so new settings appear without migrations.
"""
import copy
import json
from pathlib import Path
from typing import Optional, Dict, Any

from core.constants import (
    BPM_MIN,
    BPM_MAX,
    BPM_DEFAULT,
    TIME_SIGNATURE_MIN,
    TIME_SIGNATURE_MAX,
    TIME_SIGNATURE_DEFAULT,
)
from core.models import Mode, MinorScaleType

DEFAULT_SETTINGS = {
    "playback": {
        "bpm": BPM_DEFAULT,
        "time_signature": TIME_SIGNATURE_DEFAULT,
        "metronome_enabled": False,
    },
    "visual": {
        "hue_rotation_major": 0,
        "hue_rotation_minor": 0,
        "minor_scale_type": MinorScaleType.NATURAL.value,
        "visualization_style": "marble",  # Only read by the renderer
    },
    "audio": {
        "sample_rate": 44100,
        "buffer_size": 512,
        "output_device": "Default",
    },
}


def default_settings_path() -> Path:
    return Path.home() / ".harmonic_colors" / "settings.json"


def validate_setting(category: str, key: str, value: Any) -> Any:
    """
    Check a single setting against its allowed range.

    Returns:
        The value, normalized where needed

    Raises:
        ValueError: If the category/key is unknown or the value is invalid
    """
    if category not in DEFAULT_SETTINGS or key not in DEFAULT_SETTINGS[category]:
        raise ValueError(f"Unknown setting: {category}.{key}")

    try:
        return _check_value(key, value)
    except (TypeError, OverflowError) as e:
        raise ValueError(f"Invalid value for {category}.{key}: {value!r}") from e


def _check_value(key: str, value: Any) -> Any:
    if key == "bpm":
        if isinstance(value, bool) or int(value) != value or not BPM_MIN <= value <= BPM_MAX:
            raise ValueError(f"BPM must be an integer {BPM_MIN}-{BPM_MAX}, got {value}")
        return int(value)

    if key == "time_signature":
        if isinstance(value, bool) or int(value) != value or not TIME_SIGNATURE_MIN <= value <= TIME_SIGNATURE_MAX:
            raise ValueError(
                f"Time signature must be {TIME_SIGNATURE_MIN}-{TIME_SIGNATURE_MAX} beats, got {value}"
            )
        return int(value)

    if key in ("hue_rotation_major", "hue_rotation_minor"):
        if not 0 <= value <= 359:
            raise ValueError(f"Hue rotation must be 0-359, got {value}")
        return value

    if key == "minor_scale_type":
        return MinorScaleType(value).value

    if key == "metronome_enabled":
        return bool(value)

    return value


class PlaybackSettings:
    """
    Persistent configuration knobs consumed by the color engine and
    playback scheduler.
    """

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Settings file location (defaults to the user's home)
        """
        self.config_path = Path(config_path) if config_path else default_settings_path()
        self.settings = self._load_settings()

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from config file."""
        defaults = copy.deepcopy(DEFAULT_SETTINGS)

        if not self.config_path.exists():
            # No config file exists, save defaults
            try:
                self.config_path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.config_path, 'w') as f:
                    json.dump(defaults, f, indent=2)
                print("[SETTINGS] Created new settings file with defaults")
            except OSError as e:
                print(f"[SETTINGS] Failed to save default settings: {e}")
            return defaults

        try:
            with open(self.config_path, 'r') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            print(f"[SETTINGS] Failed to load settings: {e}")
            return defaults

        # Merge with defaults (in case new settings added), dropping bad values
        for category, values in defaults.items():
            stored = loaded.get(category)
            if not isinstance(stored, dict):
                continue
            for key, value in stored.items():
                if key not in values:
                    continue
                try:
                    values[key] = validate_setting(category, key, value)
                except ValueError as e:
                    print(f"[SETTINGS] Ignoring {category}.{key}: {e}")

        return defaults

    def save(self):
        """Save settings to config file."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            print(f"[SETTINGS] Failed to save settings: {e}")

    def get(self, category: str, key: str) -> Any:
        return self.settings[category][key]

    def set(self, category: str, key: str, value: Any):
        """Validate and store a setting (not saved until save())."""
        self.settings[category][key] = validate_setting(category, key, value)

    @property
    def bpm(self) -> int:
        return self.settings["playback"]["bpm"]

    @property
    def time_signature(self) -> int:
        return self.settings["playback"]["time_signature"]

    @property
    def metronome_enabled(self) -> bool:
        return self.settings["playback"]["metronome_enabled"]

    @property
    def minor_scale_type(self) -> MinorScaleType:
        return MinorScaleType(self.settings["visual"]["minor_scale_type"])

    def hue_rotation_for(self, mode: Mode) -> float:
        """Hue rotation for a key mode (major and minor are independent)."""
        mode = Mode(mode)
        return self.settings["visual"][f"hue_rotation_{mode.value}"]
