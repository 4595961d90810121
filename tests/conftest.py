import pytest

from audio.output import AudioOutput, AudioInitializationError
from audio.scheduler import VirtualClock


class RecordingOutput(AudioOutput):
    """AudioOutput that records every call instead of making sound."""

    def __init__(self, fail=False):
        self.fail = fail
        self.initialize_calls = 0
        self.triggers = []   # (note_names, duration, at_time)
        self.clicks = []     # (note_name, volume_db, at_time)
        self.releases = 0

    async def initialize(self):
        self.initialize_calls += 1
        if self.fail:
            raise AudioInitializationError("no audio device")

    def trigger_notes(self, note_names, duration, at_time=None):
        self.triggers.append((list(note_names), duration, at_time))

    def trigger_click(self, note_name, volume_db, at_time=None):
        self.clicks.append((note_name, volume_db, at_time))

    def release_all(self):
        self.releases += 1


@pytest.fixture
def output():
    return RecordingOutput()


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def failing_output():
    return RecordingOutput(fail=True)
