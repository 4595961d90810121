import pytest

from core.diatonic import get_diatonic_chords
from core.models import (
    Key,
    Mode,
    Note,
    Chord,
    ChordQuality,
    SeventhType,
    Tension,
    Alteration,
    ColorHSL,
    MinorScaleType,
)
from visual.colors import (
    generate_key_color,
    generate_chord_color,
    generate_chord_colors,
    get_marble_ratio,
    get_particles,
    hsl_to_css,
    hsl_to_rgb,
    ProgressionColors,
)

C_MAJOR = Key(Note.C, Mode.MAJOR)


def _chord_color(chord, key=C_MAJOR, rotation=0):
    return generate_chord_color(chord, key, generate_key_color(key, rotation))


def _triple(color):
    return (color.hue, color.saturation, color.lightness)


def test_key_color():
    assert _triple(generate_key_color(C_MAJOR)) == (0, 75, 62)
    assert _triple(generate_key_color(Key(Note.D, Mode.MINOR))) == (60, 75, 42)


def test_key_color_hue_rotation_wraps():
    assert generate_key_color(Key(Note.B), hue_rotation=40).hue == 10


def test_tonic_chord_brightens():
    assert _triple(_chord_color(Chord(Note.C))) == (0, 75, 72)


def test_submediant_is_brighter_and_more_saturated():
    assert _triple(_chord_color(Chord(Note.A, ChordQuality.MINOR))) == (8, 90, 77)


def test_mediant_hue_wraps_below_zero():
    assert _triple(_chord_color(Chord(Note.E, ChordQuality.MINOR))) == (352, 60, 47)


def test_dominant_seventh():
    chord = Chord(Note.G, ChordQuality.MAJOR, SeventhType.DOMINANT)
    assert _triple(_chord_color(chord)) == (30, 83, 54)


def test_subdominant_degrees_differ():
    ii = _chord_color(Chord(Note.D, ChordQuality.MINOR))
    iv = _chord_color(Chord(Note.F))
    assert _triple(ii) == (10, 63, 45)
    assert _triple(iv) == (20, 87, 79)


def test_lightness_clamped_low():
    chord = Chord(Note.G, ChordQuality.DIMINISHED, SeventhType.DIMINISHED)
    color = _chord_color(chord, Key(Note.C, Mode.MINOR))
    assert color.lightness == 20
    assert color.hue == 30


def test_lightness_and_saturation_clamped_high():
    chord = Chord(Note.A, ChordQuality.MAJOR, SeventhType.MAJOR)
    color = _chord_color(chord)
    assert color.lightness == 80
    assert color.saturation == 100


def test_major_sevenths_outside_table_add_nothing():
    plain = _chord_color(Chord(Note.C, ChordQuality.MINOR))
    with_mmaj7 = _chord_color(Chord(Note.C, ChordQuality.MINOR, SeventhType.MINOR_MAJOR))
    assert plain == with_mmaj7


def test_clamps_hold_for_every_key_and_chord():
    sevenths = [None] + list(SeventhType)
    for tonic in Note:
        for mode in Mode:
            key = Key(tonic, mode)
            for rotation in (0, 123, 359):
                for root in Note:
                    for quality in ChordQuality:
                        for seventh in sevenths:
                            color = _chord_color(Chord(root, quality, seventh), key, rotation)
                            assert 0 <= color.hue < 360
                            assert 20 <= color.lightness <= 80
                            assert 0 <= color.saturation <= 100


def test_marble_ratio_depends_on_function_only():
    assert get_marble_ratio(Chord(Note.C), C_MAJOR) == 0.7
    assert get_marble_ratio(Chord(Note.A, ChordQuality.MINOR), C_MAJOR) == 0.7
    assert get_marble_ratio(Chord(Note.F), C_MAJOR) == 0.65
    assert get_marble_ratio(Chord(Note.D, ChordQuality.MINOR, SeventhType.MINOR), C_MAJOR) == 0.65
    assert get_marble_ratio(Chord(Note.G), C_MAJOR) == 0.5
    assert get_marble_ratio(Chord(Note.B, ChordQuality.DIMINISHED), C_MAJOR) == 0.5


def test_particles_for_tensions_and_alterations():
    chord = Chord(
        Note.G,
        seventh=SeventhType.DOMINANT,
        tensions={Tension.NINTH},
        alterations={Alteration.SHARP_ELEVEN},
    )
    particles = {p.type: p for p in get_particles(chord)}
    assert set(particles) == {"tension-9", "alteration-#11"}
    assert (particles["tension-9"].count, particles["tension-9"].size) == (30, 3)
    assert (particles["alteration-#11"].count, particles["alteration-#11"].size) == (70, 6)


def test_sevenths_produce_no_particles():
    assert get_particles(Chord(Note.C, seventh=SeventhType.MAJOR)) == []


def test_chord_colors_bundle():
    chord = Chord(Note.G, tensions={Tension.THIRTEENTH})
    bundle = generate_chord_colors(chord, C_MAJOR, hue_rotation=90)
    assert bundle.base_color.hue == 90
    assert bundle.chord_color.hue == 120
    assert bundle.marble_ratio == 0.5
    assert len(bundle.particles) == 1


def test_progression_colors_recompute_on_change():
    colors = ProgressionColors()
    chords = get_diatonic_chords(C_MAJOR)

    first = colors.get(chords, C_MAJOR)
    assert len(first) == 7
    assert colors.get(chords, C_MAJOR) == first

    rotated = colors.get(chords, C_MAJOR, hue_rotation=180)
    assert rotated[0].base_color.hue == 180

    other_key = colors.get(chords, Key(Note.C, Mode.MINOR), minor_scale_type=MinorScaleType.HARMONIC)
    assert other_key[0].base_color.lightness == 42


def test_css_and_rgb_conversion():
    assert hsl_to_css(ColorHSL(210, 75, 62)) == "hsl(210, 75%, 62%)"
    assert hsl_to_rgb(ColorHSL(0, 100, 50)) == (255, 0, 0)
    assert hsl_to_rgb(ColorHSL(120, 0, 100)) == (255, 255, 255)


def test_color_validation():
    with pytest.raises(ValueError):
        ColorHSL(360, 50, 50)
    with pytest.raises(ValueError):
        ColorHSL(0, 101, 50)


def test_progression_colors_invalidate_forces_recompute():
    colors = ProgressionColors()
    chords = get_diatonic_chords(C_MAJOR)

    first = colors.get(chords, C_MAJOR)
    assert colors.get(chords, C_MAJOR)[0] is first[0]

    colors.invalidate()
    recomputed = colors.get(chords, C_MAJOR)
    assert recomputed[0] is not first[0]
    assert recomputed == first
