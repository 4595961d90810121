"""
Color derivation layer for Harmonic Colors.

Modules:
- colors: Key/chord colors, marble ratio and particle descriptors
- animations: HSL interpolation, easing and color transitions
"""
