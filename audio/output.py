"""
Audio output capability.

The playback scheduler only talks to an AudioOutput:
- initialize(): async, idempotent, must succeed before the first trigger
- trigger_notes(): sound a set of notes for a duration, optionally at a time
- trigger_click(): sound a metronome click
- release_all(): silence everything currently sounding
"""
from abc import ABC, abstractmethod
from typing import List, Optional


class AudioInitializationError(RuntimeError):
    """Raised when the audio backend cannot be started."""


class AudioOutput(ABC):
    """Base class for audio backends driven by the playback scheduler."""

    @abstractmethod
    async def initialize(self):
        """
        Start the backend. Safe to call repeatedly.

        Raises:
            AudioInitializationError: If the backend is unavailable
        """
        raise NotImplementedError()

    @abstractmethod
    def trigger_notes(self, note_names: List[str], duration: float,
                      at_time: Optional[float] = None):
        """
        Sound notes for `duration` seconds.

        Args:
            note_names: Spelled notes (e.g. ["C4", "E4", "G4"])
            duration: Held time in seconds
            at_time: Output-clock time to start at (None = now)
        """
        raise NotImplementedError()

    @abstractmethod
    def trigger_click(self, note_name: str, volume_db: float,
                      at_time: Optional[float] = None):
        """Sound a metronome click."""
        raise NotImplementedError()

    @abstractmethod
    def release_all(self):
        """Silence every sounding voice."""
        raise NotImplementedError()

    def current_time(self) -> float:
        """Output clock in seconds (used to place triggers)."""
        return 0.0

    def close(self):
        """Release backend resources. Default does nothing."""
        pass
