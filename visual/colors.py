"""
Harmonic color derivation.

Maps a key and a chord to two HSL colors (Color 1 from the key, Color 2
from the chord's harmonic role), a marble blend ratio and a list of
particle layers for tensions and alterations.

Every adjustment is additive and looked up from a table keyed by enums;
clamping is applied once, after all adjustments.
"""
import colorsys
from typing import List, Optional, Sequence, Tuple

from core.models import (
    Key,
    Chord,
    Mode,
    Note,
    ChordQuality,
    SeventhType,
    Tension,
    Alteration,
    HarmonicFunctionType,
    MinorScaleType,
    ColorHSL,
    ChordColor,
    ParticleConfig,
)
from core.harmony import get_harmonic_function_type, get_scale_degree

TONIC = HarmonicFunctionType.TONIC
SUBDOMINANT = HarmonicFunctionType.SUBDOMINANT
DOMINANT = HarmonicFunctionType.DOMINANT

# C = 0, C# = 30, D = 60, ...
NOTE_HUE = {note: note.index * 30 for note in Note}

KEY_SATURATION = 75
KEY_LIGHTNESS = {Mode.MAJOR: 62, Mode.MINOR: 42}

CHORD_BASE_SATURATION = 75
LIGHTNESS_MIN = 20
LIGHTNESS_MAX = 80

FUNCTION_HUE_OFFSET = {
    TONIC: 0,
    SUBDOMINANT: 15,
    DOMINANT: 30,
}

# (function, scale degree) -> (hue, saturation, lightness) nudge
SCALE_DEGREE_ADJUSTMENTS = {
    (TONIC, 1): (0, 0, 0),
    (TONIC, 3): (-8, -15, -15),
    (TONIC, 6): (8, 15, 15),
    (SUBDOMINANT, 2): (-5, -12, -12),
    (SUBDOMINANT, 4): (5, 12, 12),
    (DOMINANT, 5): (0, 0, 0),
    (DOMINANT, 7): (-8, -15, -15),
}

# (quality, function) -> lightness delta
QUALITY_LIGHTNESS = {
    (ChordQuality.MAJOR, TONIC): 10,
    (ChordQuality.MAJOR, SUBDOMINANT): 5,
    (ChordQuality.MAJOR, DOMINANT): -5,
    (ChordQuality.MINOR, TONIC): 0,
    (ChordQuality.MINOR, SUBDOMINANT): -5,
    (ChordQuality.MINOR, DOMINANT): -10,
    (ChordQuality.DIMINISHED, TONIC): -15,
    (ChordQuality.DIMINISHED, SUBDOMINANT): -15,
    (ChordQuality.DIMINISHED, DOMINANT): -15,
    (ChordQuality.AUGMENTED, TONIC): -15,
    (ChordQuality.AUGMENTED, SUBDOMINANT): -15,
    (ChordQuality.AUGMENTED, DOMINANT): -15,
}

# seventh -> (lightness, saturation) delta; mMaj7 and augMaj7 add nothing
SEVENTH_ADJUSTMENTS = {
    SeventhType.MAJOR: (5, 10),
    SeventhType.DOMINANT: (-3, 8),
    SeventhType.MINOR: (-6, 5),
    SeventhType.HALF_DIMINISHED: (-8, -10),
    SeventhType.DIMINISHED: (-12, -15),
    SeventhType.AUGMENTED: (-3, 6),
}

MARBLE_RATIOS = {
    TONIC: 0.7,
    SUBDOMINANT: 0.65,
    DOMINANT: 0.5,
}

TENSION_PARTICLE_COUNT = 30
TENSION_PARTICLE_SIZE = 3
ALTERATION_PARTICLE_COUNT = 70
ALTERATION_PARTICLE_SIZE = 6

TENSION_COLORS = {
    Tension.NINTH: "hsl(50, 90%, 75%)",
    Tension.ELEVENTH: "hsl(180, 80%, 75%)",
    Tension.THIRTEENTH: "hsl(280, 80%, 80%)",
}

ALTERATION_COLORS = {
    Alteration.FLAT_NINE: "hsl(0, 95%, 60%)",
    Alteration.SHARP_NINE: "hsl(20, 95%, 55%)",
    Alteration.SHARP_ELEVEN: "hsl(320, 90%, 60%)",
    Alteration.FLAT_THIRTEEN: "hsl(260, 90%, 55%)",
}


def wrap_hue(hue: float) -> float:
    """Reduce a hue to [0, 360)."""
    hue = hue % 360
    # Float modulo of a tiny negative can round up to exactly 360
    return 0.0 if hue >= 360 else hue


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def generate_key_color(key: Key, hue_rotation: float = 0) -> ColorHSL:
    """
    Generate Color 1 from the key's tonic.

    Args:
        key: Key to color
        hue_rotation: User hue rotation in degrees (0-359)

    Returns:
        ColorHSL with tonic hue, fixed saturation and mode lightness
    """
    return ColorHSL(
        hue=wrap_hue(NOTE_HUE[key.tonic] + hue_rotation),
        saturation=KEY_SATURATION,
        lightness=KEY_LIGHTNESS[key.mode],
    )


def generate_chord_color(chord: Chord, key: Key, base_color: ColorHSL) -> ColorHSL:
    """
    Generate Color 2 from the chord's harmonic function, scale degree,
    quality and seventh type, relative to the key color.

    Args:
        chord: Chord to color
        key: Key the chord is heard in
        base_color: Color 1 for the key

    Returns:
        ColorHSL with lightness clamped to 20-80 and saturation to 0-100
    """
    function = get_harmonic_function_type(chord, key)
    degree = get_scale_degree(chord, key)

    micro_hue, micro_sat, micro_light = SCALE_DEGREE_ADJUSTMENTS.get((function, degree), (0, 0, 0))
    seventh_light, seventh_sat = SEVENTH_ADJUSTMENTS.get(chord.seventh, (0, 0))

    hue = base_color.hue + FUNCTION_HUE_OFFSET[function] + micro_hue
    saturation = CHORD_BASE_SATURATION + micro_sat + seventh_sat
    lightness = (base_color.lightness
                 + QUALITY_LIGHTNESS[(chord.quality, function)]
                 + micro_light
                 + seventh_light)

    return ColorHSL(
        hue=wrap_hue(hue),
        saturation=clamp(saturation, 0, 100),
        lightness=clamp(lightness, LIGHTNESS_MIN, LIGHTNESS_MAX),
    )


def get_marble_ratio(chord: Chord, key: Key) -> float:
    """
    Weight of Color 1 in the marble blend. Depends on harmonic function
    only: tonic 0.7, subdominant 0.65, dominant 0.5.
    """
    return MARBLE_RATIOS[get_harmonic_function_type(chord, key)]


def get_particles(chord: Chord) -> List[ParticleConfig]:
    """
    Particle layers for the chord's tensions and alterations.

    Sevenths never produce particles.
    """
    particles = []

    for tension in Tension:
        if tension in chord.tensions:
            particles.append(ParticleConfig(
                color=TENSION_COLORS[tension],
                count=TENSION_PARTICLE_COUNT,
                size=TENSION_PARTICLE_SIZE,
                type=f"tension-{tension.value}",
            ))

    for alteration in Alteration:
        if alteration in chord.alterations:
            particles.append(ParticleConfig(
                color=ALTERATION_COLORS[alteration],
                count=ALTERATION_PARTICLE_COUNT,
                size=ALTERATION_PARTICLE_SIZE,
                type=f"alteration-{alteration.value}",
            ))

    return particles


def generate_chord_colors(chord: Chord, key: Key, hue_rotation: float = 0) -> ChordColor:
    """Build the full renderer bundle for one chord."""
    base_color = generate_key_color(key, hue_rotation)
    return ChordColor(
        base_color=base_color,
        chord_color=generate_chord_color(chord, key, base_color),
        marble_ratio=get_marble_ratio(chord, key),
        particles=tuple(get_particles(chord)),
    )


def hsl_to_css(color: ColorHSL) -> str:
    """Convert HSL color to CSS string."""
    return f"hsl({color.hue:g}, {color.saturation:g}%, {color.lightness:g}%)"


def hsl_to_rgb(color: ColorHSL) -> Tuple[int, int, int]:
    """Convert HSL color to an RGB tuple (0-255 per channel)."""
    r, g, b = colorsys.hls_to_rgb(color.hue / 360.0, color.lightness / 100.0, color.saturation / 100.0)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


class ProgressionColors:
    """
    Colors for a whole progression, recomputed only when the key, the
    chords, the hue rotation for the key's mode or the minor scale type
    change.
    """

    def __init__(self):
        self._signature: Optional[tuple] = None
        self._colors: List[ChordColor] = []

    def get(self, chords: Sequence[Chord], key: Key, hue_rotation: float = 0,
            minor_scale_type: MinorScaleType = MinorScaleType.NATURAL) -> List[ChordColor]:
        """
        Args:
            chords: Progression
            key: Current key
            hue_rotation: Hue rotation for the key's mode
            minor_scale_type: Current minor scale variant

        Returns:
            One ChordColor per chord
        """
        signature = (tuple(chords), key, hue_rotation, MinorScaleType(minor_scale_type))
        if signature != self._signature:
            self._colors = [generate_chord_colors(chord, key, hue_rotation) for chord in chords]
            self._signature = signature
        return list(self._colors)

    def invalidate(self):
        self._signature = None
