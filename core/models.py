"""
Immutable data models for Harmonic Colors.

All models are immutable dataclasses to support:
- Passing keys and chords by value between UI, color and audio layers
- Safe sharing with the audio callback thread
- Cheap equality checks when deciding whether colors need recomputing
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Tuple, Optional, Dict, Any, FrozenSet, Iterable

from core.constants import NOTE_NAMES, DEFAULT_CHORD_BEATS


class Note(Enum):
    """Chromatic pitch class, spelled with sharps."""
    C = "C"
    C_SHARP = "C#"
    D = "D"
    D_SHARP = "D#"
    E = "E"
    F = "F"
    F_SHARP = "F#"
    G = "G"
    G_SHARP = "G#"
    A = "A"
    A_SHARP = "A#"
    B = "B"

    @property
    def index(self) -> int:
        """Semitones above C (0-11)."""
        return NOTE_NAMES.index(self.value)

    @classmethod
    def from_index(cls, index: int) -> "Note":
        return cls(NOTE_NAMES[index % 12])

    def __lt__(self, other):
        if not isinstance(other, Note):
            return NotImplemented
        return self.index < other.index


class Mode(Enum):
    """Key mode."""
    MAJOR = "major"
    MINOR = "minor"


class MinorScaleType(Enum):
    """Minor scale variant used for diatonic chord generation."""
    NATURAL = "natural"
    HARMONIC = "harmonic"
    MELODIC = "melodic"


class ChordQuality(Enum):
    """Triad quality."""
    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"


class SeventhType(Enum):
    """Seventh chord variants."""
    DOMINANT = "7"
    MAJOR = "maj7"
    MINOR = "m7"
    MINOR_MAJOR = "mMaj7"
    HALF_DIMINISHED = "m7b5"
    DIMINISHED = "dim7"
    AUGMENTED = "aug7"
    AUGMENTED_MAJOR = "augMaj7"


class Tension(Enum):
    """Diatonic color tones above the seventh."""
    NINTH = 9
    ELEVENTH = 11
    THIRTEENTH = 13


class Alteration(Enum):
    """Chromatically altered color tones."""
    FLAT_NINE = "b9"
    SHARP_NINE = "#9"
    SHARP_ELEVEN = "#11"
    FLAT_THIRTEEN = "b13"


class HarmonicFunctionType(Enum):
    """Functional role of a chord within a key."""
    TONIC = "tonic"
    SUBDOMINANT = "subdominant"
    DOMINANT = "dominant"


def _coerce(enum_cls, value):
    """Accept enum members or their raw values."""
    if isinstance(value, enum_cls):
        return value
    return enum_cls(value)


@dataclass(frozen=True)
class Key:
    """
    Musical key.

    Attributes:
        tonic: Tonic pitch class
        mode: MAJOR or MINOR (selects diatonic table and base lightness)
    """
    tonic: Note
    mode: Mode = Mode.MAJOR

    def __post_init__(self):
        """Normalize raw string values to enums."""
        object.__setattr__(self, "tonic", _coerce(Note, self.tonic))
        object.__setattr__(self, "mode", _coerce(Mode, self.mode))

    @property
    def is_major(self) -> bool:
        return self.mode is Mode.MAJOR

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tonic": self.tonic.value,
            "mode": self.mode.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Key":
        """Create Key from dictionary."""
        return cls(
            tonic=Note(data["tonic"]),
            mode=Mode(data.get("mode", "major")),
        )


@dataclass(frozen=True)
class Chord:
    """
    Chord with optional seventh and color tones.

    The seventh type, when present, decides the 3rd/5th/7th intervals used
    for voicing. The triad quality is still kept for color derivation.

    Attributes:
        root: Root pitch class
        quality: Triad quality
        seventh: Optional seventh type
        tensions: Set of tensions (9, 11, 13)
        alterations: Set of alterations (b9, #9, #11, b13)
        duration: Length in beats (must be positive)
    """
    root: Note
    quality: ChordQuality = ChordQuality.MAJOR
    seventh: Optional[SeventhType] = None
    tensions: FrozenSet[Tension] = field(default_factory=frozenset)
    alterations: FrozenSet[Alteration] = field(default_factory=frozenset)
    duration: float = DEFAULT_CHORD_BEATS

    def __post_init__(self):
        """Validate chord and normalize raw values to enums."""
        object.__setattr__(self, "root", _coerce(Note, self.root))
        object.__setattr__(self, "quality", _coerce(ChordQuality, self.quality))
        if self.seventh is not None:
            object.__setattr__(self, "seventh", _coerce(SeventhType, self.seventh))
        object.__setattr__(self, "tensions", _as_set(Tension, self.tensions))
        object.__setattr__(self, "alterations", _as_set(Alteration, self.alterations))

        if self.duration <= 0:
            raise ValueError(f"Duration must be positive, got {self.duration}")

    def with_duration(self, duration: float) -> "Chord":
        """Return a copy with a new duration in beats."""
        return replace(self, duration=duration)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "root": self.root.value,
            "quality": self.quality.value,
            "seventh": self.seventh.value if self.seventh else None,
            "tensions": sorted(t.value for t in self.tensions),
            "alterations": [a.value for a in Alteration if a in self.alterations],
            "duration": self.duration,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chord":
        """Create Chord from dictionary."""
        seventh = data.get("seventh")
        return cls(
            root=Note(data["root"]),
            quality=ChordQuality(data.get("quality", "major")),
            seventh=SeventhType(seventh) if seventh else None,
            tensions=data.get("tensions", ()),
            alterations=data.get("alterations", ()),
            duration=data.get("duration", DEFAULT_CHORD_BEATS),
        )


def _as_set(enum_cls, values: Iterable) -> FrozenSet:
    values = list(values)
    members = [_coerce(enum_cls, v) for v in values]
    if len(members) != len(set(members)):
        raise ValueError(f"Duplicate {enum_cls.__name__.lower()} values: {list(values)}")
    return frozenset(members)


@dataclass(frozen=True)
class HarmonicFunction:
    """
    Result of analysing a chord against a key.

    Attributes:
        roman_numeral: Scale-degree label (root name for non-diatonic roots)
        function: Tonic, subdominant or dominant
        is_diatonic: Whether the chord quality matches the degree's triad
    """
    roman_numeral: str
    function: HarmonicFunctionType
    is_diatonic: bool


@dataclass(frozen=True)
class ColorHSL:
    """
    HSL color.

    Attributes:
        hue: Degrees (0-360, exclusive upper bound)
        saturation: Percent (0-100)
        lightness: Percent (0-100)
    """
    hue: float
    saturation: float
    lightness: float

    def __post_init__(self):
        """Validate color channels."""
        if not 0 <= self.hue < 360:
            raise ValueError(f"Hue must be 0-360, got {self.hue}")
        if not 0 <= self.saturation <= 100:
            raise ValueError(f"Saturation must be 0-100, got {self.saturation}")
        if not 0 <= self.lightness <= 100:
            raise ValueError(f"Lightness must be 0-100, got {self.lightness}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "hue": self.hue,
            "saturation": self.saturation,
            "lightness": self.lightness,
        }


@dataclass(frozen=True)
class ParticleConfig:
    """
    Particle layer descriptor for the renderer.

    Attributes:
        color: CSS color string
        count: Number of particles
        size: Particle size
        type: Discrete tag (e.g. "tension-9", "alteration-#11")
    """
    color: str
    count: int
    size: float
    type: str


@dataclass(frozen=True)
class ChordColor:
    """
    Everything the visual renderer needs for one chord.

    Attributes:
        base_color: Color 1, derived from the key
        chord_color: Color 2, derived from the chord's harmonic role
        marble_ratio: Weight of Color 1 in the blend (0-1)
        particles: Tension/alteration particle layers
    """
    base_color: ColorHSL
    chord_color: ColorHSL
    marble_ratio: float
    particles: Tuple[ParticleConfig, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlaybackEvent:
    """
    One scheduled chord onset.

    Attributes:
        time: Seconds from the start of playback
        chord_index: Position of the chord in the progression
        chord: The chord to sound
    """
    time: float
    chord_index: int
    chord: Chord

    def __post_init__(self):
        """Validate event."""
        if self.time < 0:
            raise ValueError(f"Time must be non-negative, got {self.time}")
