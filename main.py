"""
Harmonic Colors - chord progressions as colors and sound
Main entry point (demo progression)
"""
import asyncio

from audio.engine import SoundDeviceOutput
from audio.output import AudioInitializationError
from audio.scheduler import ProgressionPlayer, NO_CHORD
from core.models import Key, Chord, Note, ChordQuality, SeventhType, Tension, Alteration
from core.harmony import analyze_harmonic_function
from core.settings import PlaybackSettings
from core.theory import chord_display_name
from visual.colors import ProgressionColors, hsl_to_css


# Module-level variables (accessed by callbacks)
settings = None
key = Key(Note.C)
progression = [
    Chord(Note.D, ChordQuality.MINOR, SeventhType.MINOR, tensions={Tension.NINTH}),
    Chord(Note.G, ChordQuality.MAJOR, SeventhType.DOMINANT, alterations={Alteration.FLAT_NINE}),
    Chord(Note.C, ChordQuality.MAJOR, SeventhType.MAJOR),
    Chord(Note.A, ChordQuality.MINOR, SeventhType.MINOR, tensions={Tension.ELEVENTH}),
]
colors = []
finished = None


def on_chord_index_change(index: int):
    """Print the chord that just started and its colors."""
    if index == NO_CHORD:
        print("[DEMO] Playback finished")
        if finished is not None:
            finished.set()
        return

    chord = progression[index]
    analysis = analyze_harmonic_function(chord, key)
    chord_color = colors[index]
    print(f"[DEMO] {index + 1}/{len(progression)} {chord_display_name(chord):<12} "
          f"{analysis.roman_numeral:<5} {analysis.function.value:<12} "
          f"color1={hsl_to_css(chord_color.base_color)} "
          f"color2={hsl_to_css(chord_color.chord_color)} "
          f"ratio={chord_color.marble_ratio} particles={len(chord_color.particles)}")


async def run():
    """Play the demo progression once."""
    global colors, finished

    finished = asyncio.Event()
    colors = ProgressionColors().get(
        progression,
        key,
        hue_rotation=settings.hue_rotation_for(key.mode),
        minor_scale_type=settings.minor_scale_type,
    )

    output = SoundDeviceOutput(
        sample_rate=settings.get("audio", "sample_rate"),
        buffer_size=settings.get("audio", "buffer_size"),
        device=settings.get("audio", "output_device"),
    )
    player = ProgressionPlayer.from_settings(
        output,
        settings,
        on_chord_index_change=on_chord_index_change,
    )

    try:
        await player.play(progression)
        await finished.wait()
        # Let the last release tail ring out
        await asyncio.sleep(1.0)
    except AudioInitializationError as e:
        print(f"[ERROR] Could not start audio: {e}")
    finally:
        player.dispose().close()


def main():
    """Launch the demo."""
    global settings

    print("=== Harmonic Colors ===")
    settings = PlaybackSettings()
    asyncio.run(run())


if __name__ == "__main__":
    main()
