"""
Music theory primitives.

Note/interval arithmetic over the 12-tone chromatic set, chord voicing
and chord naming. All functions are total over their inputs.
"""
from typing import List

from core.constants import (
    NOTE_NAMES,
    DEFAULT_OCTAVE,
    SEVENTH_INTERVALS,
    TRIAD_INTERVALS,
    TENSION_INTERVALS,
    ALTERATION_INTERVALS,
    SEVENTH_SYMBOLS,
    QUALITY_SYMBOLS,
    ALTERATION_SYMBOLS,
)
from core.models import Note, Chord, Tension, Alteration


def note_index(note: Note) -> int:
    """Semitone index of a note from C (0-11)."""
    return note.index


def transpose(note: Note, semitones: int) -> Note:
    """
    Move a note by a number of semitones, wrapping at the octave.

    Example:
        >>> transpose(Note.A, 3)
        <Note.C: 'C'>
        >>> transpose(Note.C, -1)
        <Note.B: 'B'>
    """
    return Note.from_index((note.index + semitones) % 12)


def interval_from_tonic(tonic: Note, root: Note) -> int:
    """Ascending interval in semitones (0-11) from tonic to chord root."""
    return (root.index - tonic.index + 12) % 12


def spell_note(root: Note, semitones: int, octave: int = DEFAULT_OCTAVE) -> str:
    """
    Spell the note `semitones` above `root` in `octave`, carrying into
    higher octaves as needed.

    Example:
        >>> spell_note(Note.A, 4, 4)
        'C#5'
    """
    total = root.index + semitones
    return f"{NOTE_NAMES[total % 12]}{octave + total // 12}"


def chord_intervals(chord: Chord) -> List[int]:
    """
    Semitone offsets above the root for every tone of the chord.

    The seventh type decides the third and fifth when present, the triad
    quality otherwise. Tensions and alterations follow in canonical order.
    """
    if chord.seventh is not None:
        third, fifth, seventh = SEVENTH_INTERVALS[chord.seventh.value]
        intervals = [0, third, fifth, seventh]
    else:
        third, fifth = TRIAD_INTERVALS[chord.quality.value]
        intervals = [0, third, fifth]

    for tension in Tension:
        if tension in chord.tensions:
            intervals.append(TENSION_INTERVALS[tension.value])

    for alteration in Alteration:
        if alteration in chord.alterations:
            intervals.append(ALTERATION_INTERVALS[alteration.value])

    return intervals


def chord_note_names(chord: Chord, octave: int = DEFAULT_OCTAVE) -> List[str]:
    """
    Convert a chord to the spelled notes handed to the audio output.

    Args:
        chord: Chord to voice
        octave: Octave of the root

    Returns:
        Note names with octave, root first (e.g. ["C4", "E4", "G4", "B4"])
    """
    return [spell_note(chord.root, interval, octave) for interval in chord_intervals(chord)]


def chord_display_name(chord: Chord) -> str:
    """
    Human-readable chord symbol.

    Example:
        >>> chord_display_name(Chord(Note.D, ChordQuality.MINOR, SeventhType.MINOR, {Tension.NINTH}))
        'Dm7(9)'
    """
    name = chord.root.value

    # Seventh type takes precedence over the triad quality
    if chord.seventh is not None:
        name += SEVENTH_SYMBOLS[chord.seventh.value]
    else:
        name += QUALITY_SYMBOLS[chord.quality.value]

    tensions = [str(t.value) for t in Tension if t in chord.tensions]
    if tensions:
        name += "(" + ",".join(tensions) + ")"

    alterations = [ALTERATION_SYMBOLS[a.value] for a in Alteration if a in chord.alterations]
    if alterations:
        name += "(" + ",".join(alterations) + ")"

    return name
