"""
Harmonic function analysis.

Classifies a chord's role (tonic, subdominant, dominant) and roman numeral
relative to a key. Non-diatonic roots fall back to a tonic classification
labelled with the root name; secondary dominants and borrowed chords are
not detected.
"""
from typing import Optional

from core.models import (
    Chord,
    Key,
    Mode,
    ChordQuality,
    HarmonicFunction,
    HarmonicFunctionType,
)
from core.theory import interval_from_tonic

TONIC = HarmonicFunctionType.TONIC
SUBDOMINANT = HarmonicFunctionType.SUBDOMINANT
DOMINANT = HarmonicFunctionType.DOMINANT

# (mode, interval) -> (roman numeral, function, quality required to be diatonic)
# Mediants/submediants act as tonic substitutes; minor VI and VII are
# subdominant while major vi is tonic.
FUNCTION_TABLE = {
    (Mode.MAJOR, 0): ("I", TONIC, ChordQuality.MAJOR),
    (Mode.MAJOR, 2): ("ii", SUBDOMINANT, ChordQuality.MINOR),
    (Mode.MAJOR, 4): ("iii", TONIC, ChordQuality.MINOR),
    (Mode.MAJOR, 5): ("IV", SUBDOMINANT, ChordQuality.MAJOR),
    (Mode.MAJOR, 7): ("V", DOMINANT, ChordQuality.MAJOR),
    (Mode.MAJOR, 9): ("vi", TONIC, ChordQuality.MINOR),
    (Mode.MAJOR, 11): ("vii°", DOMINANT, ChordQuality.DIMINISHED),
    (Mode.MINOR, 0): ("i", TONIC, ChordQuality.MINOR),
    (Mode.MINOR, 2): ("ii°", SUBDOMINANT, ChordQuality.DIMINISHED),
    (Mode.MINOR, 3): ("III", TONIC, ChordQuality.MAJOR),
    (Mode.MINOR, 5): ("iv", SUBDOMINANT, ChordQuality.MINOR),
    (Mode.MINOR, 7): ("v", DOMINANT, ChordQuality.MINOR),
    (Mode.MINOR, 8): ("VI", SUBDOMINANT, ChordQuality.MAJOR),
    (Mode.MINOR, 10): ("VII", SUBDOMINANT, ChordQuality.MAJOR),
}

# Semitones above tonic -> scale degree (1-7)
SCALE_DEGREES = {0: 1, 2: 2, 4: 3, 5: 4, 7: 5, 9: 6, 11: 7}


def analyze_harmonic_function(chord: Chord, key: Key) -> HarmonicFunction:
    """
    Analyze the harmonic function of a chord in a key.

    Args:
        chord: Chord to classify (seventh is ignored)
        key: Reference key

    Returns:
        HarmonicFunction with roman numeral, function and diatonic flag

    Example:
        >>> analyze_harmonic_function(Chord(Note.G), Key(Note.C))
        HarmonicFunction(roman_numeral='V', function=<HarmonicFunctionType.DOMINANT: 'dominant'>, is_diatonic=True)
    """
    interval = interval_from_tonic(key.tonic, chord.root)
    entry = FUNCTION_TABLE.get((key.mode, interval))

    if entry is None:
        # Non-diatonic root
        return HarmonicFunction(
            roman_numeral=chord.root.value,
            function=TONIC,
            is_diatonic=False,
        )

    numeral, function, expected_quality = entry

    # Minor-key dominant: a major chord on degree 5 reads as V
    if key.mode is Mode.MINOR and interval == 7 and chord.quality is ChordQuality.MAJOR:
        numeral = "V"

    return HarmonicFunction(
        roman_numeral=numeral,
        function=function,
        is_diatonic=chord.quality is expected_quality,
    )


def get_harmonic_function_type(chord: Chord, key: Key) -> HarmonicFunctionType:
    """Get just the harmonic function type for a chord in a key."""
    return analyze_harmonic_function(chord, key).function


def get_scale_degree(chord: Chord, key: Key) -> Optional[int]:
    """
    Scale degree (1-7) of the chord root measured on the major-scale grid,
    or None when the root falls between degrees.
    """
    return SCALE_DEGREES.get(interval_from_tonic(key.tonic, chord.root))
