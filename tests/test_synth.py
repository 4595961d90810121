import numpy as np
import pytest

from audio.synth import PadParams, PadSynth, db_to_linear, render_click

SR = 8000


def test_db_to_linear():
    assert db_to_linear(0.0) == 1.0
    assert db_to_linear(-20.0) == pytest.approx(0.1)


def test_pad_params_validation():
    with pytest.raises(ValueError):
        PadParams(attack=-0.1)
    with pytest.raises(ValueError):
        PadParams(sustain=1.5)


def test_note_length_includes_release():
    synth = PadSynth(SR)
    note = synth.render_note(440.0, 0.5)
    assert note.dtype == np.float32
    assert len(note) == int(0.5 * SR) + int(1.0 * SR)


def test_envelope_shape():
    synth = PadSynth(SR)
    envelope = synth._envelope(SR, SR // 2)
    attack_end = int(0.1 * SR)
    decay_end = attack_end + int(0.2 * SR)

    assert envelope[0] == 0.0
    assert np.max(envelope) <= 1.0
    assert envelope[decay_end:SR] == pytest.approx(np.full(SR - decay_end, 0.7))
    # Release decays from the sustain level
    assert envelope[SR] == pytest.approx(0.7)
    assert envelope[-1] < 0.01


def test_short_note_releases_from_attack_level():
    synth = PadSynth(SR)
    envelope = synth._envelope(int(0.05 * SR), 10)
    assert envelope[int(0.05 * SR)] < 0.6


def test_chord_is_normalized():
    synth = PadSynth(SR, PadParams(gain=1.0))
    chord = synth.render_chord(["C4", "E4", "G4", "B4", "D5"], 0.5)
    assert np.max(np.abs(chord)) <= 0.9 + 1e-6
    assert np.max(np.abs(chord)) > 0.1


def test_empty_chord_is_silent():
    assert len(PadSynth(SR).render_chord([], 1.0)) == 0


def test_click_volume_follows_db():
    loud = render_click(1000.0, -6.0, SR)
    soft = render_click(1000.0, -12.0, SR)
    assert len(loud) == int(0.05 * SR)
    assert np.max(np.abs(loud)) > np.max(np.abs(soft))
    assert np.max(np.abs(loud)) <= db_to_linear(-6.0) + 1e-6
