"""
Core data structures and music theory for Harmonic Colors.

Modules:
- constants: Note names, diatonic and chord interval tables, tempo ranges
- models: Immutable data structures (Key, Chord, ColorHSL, PlaybackEvent, etc.)
- theory: Note/interval arithmetic, chord voicing and naming
- diatonic: Scale-degree chord generation
- harmony: Harmonic function analysis
- settings: User settings (tempo, meter, hue rotation, minor scale type)
"""
