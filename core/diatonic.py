"""
Diatonic chord generation.

Produces the seven scale-degree triads of a key. Minor keys use the
selected minor scale variant (natural, harmonic or melodic).
"""
from typing import List, Tuple

from core.constants import (
    MAJOR_INTERVALS,
    MAJOR_QUALITIES,
    MAJOR_NUMERALS,
    MINOR_SCALES,
    DEFAULT_CHORD_BEATS,
)
from core.models import Key, Chord, ChordQuality, MinorScaleType
from core.theory import transpose


def _degree_table(key: Key, minor_scale_type: MinorScaleType) -> Tuple[list, list, list]:
    """Return (intervals, qualities, numerals) for the key's mode/scale."""
    if key.is_major:
        return MAJOR_INTERVALS, MAJOR_QUALITIES, MAJOR_NUMERALS

    scale = MINOR_SCALES[MinorScaleType(minor_scale_type).value]
    return scale["intervals"], scale["qualities"], scale["numerals"]


def get_diatonic_chords(key: Key,
                        minor_scale_type: MinorScaleType = MinorScaleType.NATURAL) -> List[Chord]:
    """
    Generate the diatonic triads for a key.

    Args:
        key: Key to harmonize
        minor_scale_type: Minor scale variant (ignored for major keys)

    Returns:
        Seven chords for scale degrees 1-7, each 4 beats long with no
        tensions or alterations

    Example:
        >>> [c.root.value for c in get_diatonic_chords(Key(Note.C))]
        ['C', 'D', 'E', 'F', 'G', 'A', 'B']
    """
    intervals, qualities, _ = _degree_table(key, minor_scale_type)

    return [
        Chord(
            root=transpose(key.tonic, interval),
            quality=ChordQuality(quality),
            duration=DEFAULT_CHORD_BEATS,
        )
        for interval, quality in zip(intervals, qualities)
    ]


def get_roman_numeral(key: Key, chord_index: int,
                      minor_scale_type: MinorScaleType = MinorScaleType.NATURAL) -> str:
    """
    Roman numeral for a diatonic degree.

    Args:
        key: Key the degree belongs to
        chord_index: Degree index (0-6)
        minor_scale_type: Minor scale variant (ignored for major keys)

    Returns:
        Numeral such as "V" or "ii°", or "" when the index is out of range
    """
    _, _, numerals = _degree_table(key, minor_scale_type)
    if not 0 <= chord_index < len(numerals):
        return ""
    return numerals[chord_index]
