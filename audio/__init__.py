"""
Audio playback layer for Harmonic Colors.

Modules:
- output: Audio output capability used by the scheduler
- engine: Sounddevice backend for that capability
- synth: Pad voice and metronome click rendering
- scheduler: Chord progression playback scheduler with metronome
"""
