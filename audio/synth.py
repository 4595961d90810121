"""
Pad synthesizer and metronome click rendering.

Voices are rendered up front into numpy buffers which the output
stream then mixes sample by sample.
"""
from dataclasses import dataclass
from typing import List

import numpy as np
from scipy.signal import butter, lfilter

from core.constants import note_name_to_frequency


@dataclass
class PadParams:
    """
    Pad voice parameters.

    Attributes:
        attack: Attack time (s)
        decay: Decay time to sustain level (s)
        sustain: Sustain level (0-1)
        release: Release time after the note ends (s)
        filter_cutoff: Lowpass cutoff (Hz)
        gain: Output gain per voice (0-1)
    """
    attack: float = 0.1
    decay: float = 0.2
    sustain: float = 0.7
    release: float = 1.0
    filter_cutoff: float = 4000.0
    gain: float = 0.25

    def __post_init__(self):
        """Validate parameters."""
        if min(self.attack, self.decay, self.release) < 0:
            raise ValueError("Envelope times must be non-negative")
        if not 0.0 <= self.sustain <= 1.0:
            raise ValueError(f"Sustain must be 0-1, got {self.sustain}")


def db_to_linear(db: float) -> float:
    """
    Convert decibels to linear gain.

    Example:
        >>> db_to_linear(0.0)
        1.0
    """
    return 10 ** (db / 20)


class PadSynth:
    """
    Sine pad with ADSR envelope and a second-order Butterworth lowpass.
    """

    def __init__(self, sample_rate: int = 44100, params: PadParams = None):
        """
        Args:
            sample_rate: Audio sample rate in Hz
            params: Voice parameters (defaults to a soft pad)
        """
        self.sample_rate = sample_rate
        self.params = params or PadParams()

    def _envelope(self, hold_samples: int, release_samples: int) -> np.ndarray:
        """Build an ADSR envelope: attack/decay/sustain for the held part, then release."""
        p = self.params
        sr = self.sample_rate
        full_attack = int(p.attack * sr)
        full_decay = int(p.decay * sr)

        # Full-length segments, then cut to the held part
        attack = np.arange(full_attack) / max(full_attack, 1)
        decay = 1.0 - (1.0 - p.sustain) * np.arange(full_decay) / max(full_decay, 1)
        sustain = np.full(max(hold_samples - full_attack - full_decay, 0), p.sustain)
        envelope = np.concatenate([attack, decay, sustain])[:hold_samples].astype(np.float32)

        # Release from wherever the envelope ended up
        last_level = envelope[-1] if hold_samples > 0 else 0.0
        release = last_level * np.exp(-6.0 * np.arange(release_samples) / max(release_samples, 1))

        return np.concatenate([envelope, release.astype(np.float32)])

    def render_note(self, frequency: float, duration: float) -> np.ndarray:
        """
        Render one voice.

        Args:
            frequency: Pitch in Hz
            duration: Held time in seconds (release tail is added)

        Returns:
            Mono float32 buffer
        """
        hold_samples = max(int(duration * self.sample_rate), 0)
        release_samples = int(self.params.release * self.sample_rate)
        envelope = self._envelope(hold_samples, release_samples)

        t = np.arange(len(envelope)) / self.sample_rate
        wave = np.sin(2 * np.pi * frequency * t)

        nyquist = 0.5 * self.sample_rate
        normalized_cutoff = np.clip(self.params.filter_cutoff / nyquist, 0.01, 0.99)
        b, a = butter(2, normalized_cutoff, btype='low')
        filtered = lfilter(b, a, wave)

        return (filtered * envelope * self.params.gain).astype(np.float32)

    def render_chord(self, note_names: List[str], duration: float) -> np.ndarray:
        """
        Render and sum several voices.

        Args:
            note_names: Spelled notes (e.g. ["C4", "E4", "G4"])
            duration: Held time in seconds

        Returns:
            Mono float32 buffer (silent if note_names is empty)
        """
        if not note_names:
            return np.zeros(0, dtype=np.float32)

        voices = [self.render_note(note_name_to_frequency(name), duration) for name in note_names]
        mixed = np.sum(voices, axis=0)

        # Keep dense voicings from clipping
        peak = np.max(np.abs(mixed))
        if peak > 0.9:
            mixed = mixed / peak * 0.9

        return mixed.astype(np.float32)


def render_click(frequency: float, volume_db: float, sample_rate: int = 44100,
                 length: float = 0.05) -> np.ndarray:
    """
    Render a short metronome blip.

    Args:
        frequency: Click pitch in Hz
        volume_db: Click level in dB (0 = full scale)
        sample_rate: Audio sample rate
        length: Click length in seconds

    Returns:
        Mono float32 buffer
    """
    num_samples = int(length * sample_rate)
    t = np.arange(num_samples) / sample_rate
    envelope = np.exp(-40.0 * t / max(length, 1e-6) / 8.0)
    click = np.sin(2 * np.pi * frequency * t) * envelope * db_to_linear(volume_db)
    return click.astype(np.float32)
