"""
Color interpolation and easing for animated key/chord changes.
"""
import math
from typing import Callable

from core.models import ColorHSL

DEFAULT_TRANSITION_DURATION = 0.3  # seconds


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two numbers."""
    return a + (b - a) * t


def lerp_color(start: ColorHSL, end: ColorHSL, t: float) -> ColorHSL:
    """
    Linear interpolation between two HSL colors.

    Hue takes the shortest way around the color wheel, so 350 -> 10
    passes through 0 rather than 180.

    Args:
        start: Color at t=0
        end: Color at t=1
        t: Progress (0-1)

    Returns:
        Interpolated color
    """
    if t <= 0:
        return start
    if t >= 1:
        return end

    start_hue = start.hue
    end_hue = end.hue

    diff = end_hue - start_hue
    if diff > 180:
        start_hue += 360
    elif diff < -180:
        end_hue += 360

    hue = lerp(start_hue, end_hue, t) % 360
    if hue >= 360:
        hue = 0.0

    return ColorHSL(
        hue=hue,
        saturation=lerp(start.saturation, end.saturation, t),
        lightness=lerp(start.lightness, end.lightness, t),
    )


def ease_out_expo(t: float) -> float:
    """Exponential ease-out: fast start, slow settle."""
    return 1.0 if t >= 1 else 1 - math.pow(2, -10 * t)


def ease_in_out_cubic(t: float) -> float:
    """Smooth acceleration and deceleration."""
    return 4 * t * t * t if t < 0.5 else 1 - math.pow(-2 * t + 2, 3) / 2


def ease_in_out_quad(t: float) -> float:
    """Gentler than cubic."""
    return 2 * t * t if t < 0.5 else 1 - math.pow(-2 * t + 2, 2) / 2


def ease_in_out_expo(t: float) -> float:
    """Smooth start and end with a fast middle."""
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0
    if t < 0.5:
        return math.pow(2, 20 * t - 10) / 2
    return (2 - math.pow(2, -20 * t + 10)) / 2


class ColorTransition:
    """
    Animates the displayed color toward a target color.

    Changing the target restarts the transition from whatever color is
    currently displayed, so rapid chord changes never jump.
    """

    def __init__(self, initial: ColorHSL,
                 duration: float = DEFAULT_TRANSITION_DURATION,
                 easing: Callable[[float], float] = ease_out_expo):
        """
        Args:
            initial: Color shown before any transition
            duration: Transition length in seconds
            easing: Easing curve applied to linear progress
        """
        if duration <= 0:
            raise ValueError(f"Duration must be positive, got {duration}")

        self.duration = duration
        self.easing = easing
        self.start_color = initial
        self.target = initial
        self.start_time = 0.0

    def progress(self, now: float) -> float:
        """Linear progress (0-1) at time `now`."""
        return max(0.0, min(1.0, (now - self.start_time) / self.duration))

    def is_complete(self, now: float) -> bool:
        return self.progress(now) >= 1.0

    def value_at(self, now: float) -> ColorHSL:
        """Displayed color at time `now`."""
        progress = self.progress(now)
        if progress >= 1.0:
            return self.target
        return lerp_color(self.start_color, self.target, self.easing(progress))

    def set_target(self, color: ColorHSL, now: float):
        """Start moving toward `color` from the color displayed at `now`."""
        if color == self.target:
            return
        self.start_color = self.value_at(now)
        self.target = color
        self.start_time = now
