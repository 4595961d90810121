"""
Musical constants and utilities.

Note names, diatonic tables, chord interval tables, tempo ranges, etc.
"""
import math

# Chromatic pitch classes (sharps only), index = semitones above C
NOTE_NAMES = [
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"
]

# Diatonic tables: semitone intervals from tonic and triad qualities per degree
MAJOR_INTERVALS = [0, 2, 4, 5, 7, 9, 11]
MAJOR_QUALITIES = ["major", "minor", "minor", "major", "major", "minor", "diminished"]
MAJOR_NUMERALS = ["I", "ii", "iii", "IV", "V", "vi", "vii°"]

MINOR_SCALES = {
    "natural": {
        "intervals": [0, 2, 3, 5, 7, 8, 10],
        "qualities": ["minor", "diminished", "major", "minor", "minor", "major", "major"],
        "numerals": ["i", "ii°", "III", "iv", "v", "VI", "VII"],
    },
    "harmonic": {
        "intervals": [0, 2, 3, 5, 7, 8, 11],
        "qualities": ["minor", "diminished", "augmented", "minor", "major", "major", "diminished"],
        "numerals": ["i", "ii°", "III+", "iv", "V", "VI", "vii°"],
    },
    "melodic": {
        "intervals": [0, 2, 3, 5, 7, 9, 11],
        "qualities": ["minor", "minor", "augmented", "major", "major", "diminished", "diminished"],
        "numerals": ["i", "ii", "III+", "IV", "V", "vi°", "vii°"],
    },
}

# Chord tone intervals (semitones above root)
THIRD_MAJOR = 4
THIRD_MINOR = 3
FIFTH_PERFECT = 7
FIFTH_DIMINISHED = 6
FIFTH_AUGMENTED = 8

# Seventh type -> (third, fifth, seventh)
SEVENTH_INTERVALS = {
    "7": (THIRD_MAJOR, FIFTH_PERFECT, 10),
    "maj7": (THIRD_MAJOR, FIFTH_PERFECT, 11),
    "m7": (THIRD_MINOR, FIFTH_PERFECT, 10),
    "mMaj7": (THIRD_MINOR, FIFTH_PERFECT, 11),
    "m7b5": (THIRD_MINOR, FIFTH_DIMINISHED, 10),
    "dim7": (THIRD_MINOR, FIFTH_DIMINISHED, 9),
    "aug7": (THIRD_MAJOR, FIFTH_AUGMENTED, 10),
    "augMaj7": (THIRD_MAJOR, FIFTH_AUGMENTED, 11),
}

# Triad quality -> (third, fifth)
TRIAD_INTERVALS = {
    "major": (THIRD_MAJOR, FIFTH_PERFECT),
    "minor": (THIRD_MINOR, FIFTH_PERFECT),
    "diminished": (THIRD_MINOR, FIFTH_DIMINISHED),
    "augmented": (THIRD_MAJOR, FIFTH_AUGMENTED),
}

# Compound intervals for color tones
TENSION_INTERVALS = {9: 14, 11: 17, 13: 21}
ALTERATION_INTERVALS = {"b9": 13, "#9": 15, "#11": 18, "b13": 20}

# Display symbols for chord names
SEVENTH_SYMBOLS = {
    "7": "7",
    "maj7": "maj7",
    "m7": "m7",
    "mMaj7": "mMaj7",
    "m7b5": "m7♭5",
    "dim7": "dim7",
    "aug7": "aug7",
    "augMaj7": "augMaj7",
}
QUALITY_SYMBOLS = {"major": "", "minor": "m", "diminished": "dim", "augmented": "aug"}
ALTERATION_SYMBOLS = {"b9": "♭9", "#9": "#9", "#11": "#11", "b13": "♭13"}

# Default octave for chord voicing
DEFAULT_OCTAVE = 4
DEFAULT_CHORD_BEATS = 4

# Tempo and meter ranges accepted by the playback core
BPM_MIN = 40
BPM_MAX = 240
BPM_DEFAULT = 120

TIME_SIGNATURE_MIN = 2
TIME_SIGNATURE_MAX = 7
TIME_SIGNATURE_DEFAULT = 4


def midi_note_to_name(note_number: int) -> str:
    """
    Convert MIDI note number to name with octave.

    Args:
        note_number: MIDI note (0-127)

    Returns:
        Note name (e.g., "C4", "A#3")

    Example:
        >>> midi_note_to_name(60)
        'C4'
        >>> midi_note_to_name(69)
        'A4'
    """
    if not 0 <= note_number <= 127:
        raise ValueError(f"MIDI note must be 0-127, got {note_number}")
    octave = (note_number // 12) - 1
    note_name = NOTE_NAMES[note_number % 12]
    return f"{note_name}{octave}"


def name_to_midi_note(note_name: str) -> int:
    """
    Convert note name to MIDI number.

    Args:
        note_name: Note name (e.g., "C4", "A#3", "C#-1")

    Returns:
        MIDI note number (0-127)

    Raises:
        ValueError: If note name is invalid

    Example:
        >>> name_to_midi_note("C4")
        60
        >>> name_to_midi_note("A4")
        69
    """
    note_name = note_name.strip().upper()

    # Split pitch class from (possibly negative) octave
    split_at = len(note_name)
    while split_at > 0 and (note_name[split_at - 1].isdigit() or note_name[split_at - 1] == "-"):
        split_at -= 1

    note = note_name[:split_at]
    octave_str = note_name[split_at:]
    if not octave_str or octave_str == "-":
        raise ValueError(f"Invalid note name format: {note_name}")

    if note not in NOTE_NAMES:
        raise ValueError(f"Invalid note name: {note}")

    octave = int(octave_str)
    midi_note = (octave + 1) * 12 + NOTE_NAMES.index(note)

    if not 0 <= midi_note <= 127:
        raise ValueError(f"Note {note_name} is out of MIDI range (0-127)")

    return midi_note


def midi_to_frequency(note_number: int) -> float:
    """
    Convert MIDI note number to frequency in Hz.

    Args:
        note_number: MIDI note (0-127)

    Returns:
        Frequency in Hz

    Example:
        >>> midi_to_frequency(69)  # A4
        440.0
    """
    if not 0 <= note_number <= 127:
        raise ValueError(f"MIDI note must be 0-127, got {note_number}")

    # Formula: frequency = 440 * 2^((note - 69) / 12)
    return 440.0 * math.pow(2.0, (note_number - 69) / 12.0)


def note_name_to_frequency(note_name: str) -> float:
    """Convert a spelled note ("E4") to its frequency in Hz."""
    return midi_to_frequency(name_to_midi_note(note_name))
