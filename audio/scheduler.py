"""
Chord progression scheduler for real-time playback.

A progression is turned into a timetable of PlaybackEvents (one per chord,
time = cumulative beats * 60 / bpm). A transport tick advances a cursor
through the timetable, firing each due event's audio trigger and index
callback together, and drives a quarter-note metronome sub-clock.

States: IDLE -> SCHEDULED -> RUNNING -> (STOPPED | COMPLETED) -> IDLE.
At most one PlaybackSession is active; a new play() disposes the old one
before scheduling its own.
"""
import asyncio
import math
import time
import traceback
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from audio.output import AudioOutput
from core.constants import (
    BPM_DEFAULT,
    TIME_SIGNATURE_MIN,
    TIME_SIGNATURE_MAX,
    TIME_SIGNATURE_DEFAULT,
)
from core.models import Chord, PlaybackEvent
from core.theory import chord_note_names

NO_CHORD = -1

TICK_INTERVAL = 1 / 120  # seconds between transport ticks

# Metronome voices: downbeat is higher and louder
DOWNBEAT_NOTE = "C6"
DOWNBEAT_VOLUME_DB = -6.0
BEAT_NOTE = "G5"
BEAT_VOLUME_DB = -12.0


class PlaybackState(Enum):
    """Transport states."""
    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"
    STOPPED = "stopped"
    COMPLETED = "completed"


class MonotonicClock:
    """Wall clock for real playback."""

    def now(self) -> float:
        return time.perf_counter()


class VirtualClock:
    """Manually advanced clock for deterministic scheduling."""

    def __init__(self, start: float = 0.0):
        self.time = start

    def now(self) -> float:
        return self.time

    def advance(self, seconds: float):
        self.time += seconds


def beats_to_seconds(beats: float, bpm: float) -> float:
    """Convert beats to seconds at a tempo."""
    return beats * 60.0 / bpm


def build_timetable(chords: Sequence[Chord], bpm: float) -> Tuple[List[PlaybackEvent], float]:
    """
    Convert a progression into timed events.

    Args:
        chords: Chords in playing order
        bpm: Tempo in beats per minute (positive)

    Returns:
        (events, total_seconds) where total_seconds is the completion time

    Example:
        >>> events, total = build_timetable([Chord(Note.C), Chord(Note.G)], 120)
        >>> [e.time for e in events], total
        ([0.0, 2.0], 4.0)
    """
    events = []
    beat_position = 0.0

    for index, chord in enumerate(chords):
        events.append(PlaybackEvent(
            time=beats_to_seconds(beat_position, bpm),
            chord_index=index,
            chord=chord,
        ))
        beat_position += chord.duration

    return events, beats_to_seconds(beat_position, bpm)


class PlaybackSession:
    """
    One playback of one progression.

    Owns the timetable, the cursor into it, the transport origin and the
    metronome beat counter. Once disposed it never yields another event.
    """

    def __init__(self, chords: Sequence[Chord], bpm: float, start_time: float,
                 output_origin: float = 0.0):
        """
        Args:
            chords: Progression to play
            bpm: Tempo for the whole session
            start_time: Clock time of transport zero
            output_origin: Audio output time of transport zero
        """
        self.bpm = bpm
        self.start_time = start_time
        self.output_origin = output_origin
        self.events, self.total_duration = build_timetable(chords, bpm)
        self.cursor = 0
        self.next_beat = 0
        self.completion_pending = True
        self.disposed = False

    @property
    def beat_seconds(self) -> float:
        return 60.0 / self.bpm

    def elapsed(self, now: float) -> float:
        return max(0.0, now - self.start_time)

    def pop_due_events(self, elapsed: float) -> List[PlaybackEvent]:
        """Advance the cursor past every event at or before `elapsed`."""
        due = []
        while not self.disposed and self.cursor < len(self.events) \
                and self.events[self.cursor].time <= elapsed:
            due.append(self.events[self.cursor])
            self.cursor += 1
        return due

    def pop_due_beats(self, elapsed: float) -> List[int]:
        """Metronome beat indices due at `elapsed` (only beats inside the progression)."""
        due = []
        while not self.disposed:
            beat_time = self.next_beat * self.beat_seconds
            if beat_time > elapsed or beat_time >= self.total_duration:
                break
            due.append(self.next_beat)
            self.next_beat += 1
        return due

    def skip_beats_before(self, elapsed: float):
        """Resume the metronome on the first beat at or after `elapsed`."""
        first = math.ceil(elapsed / self.beat_seconds - 1e-9)
        self.next_beat = max(self.next_beat, first)

    def is_finished(self, elapsed: float) -> bool:
        return elapsed >= self.total_duration

    @property
    def pending_count(self) -> int:
        """Scheduled callbacks that have not fired (events + completion)."""
        if self.disposed:
            return 0
        return (len(self.events) - self.cursor) + (1 if self.completion_pending else 0)

    def dispose(self):
        """Cancel everything that has not fired yet."""
        self.disposed = True
        self.cursor = len(self.events)
        self.completion_pending = False


class ProgressionPlayer:
    """
    Plays chord progressions on an AudioOutput and reports progress.

    The caller owns the player and its output; dispose() stops playback
    and hands the output back.

    Callbacks:
        on_chord_index_change(index): chord index when it starts sounding,
            -1 when playback stops or completes
        on_playback_position_change(beats): transport position on every
            tick while running, 0 on stop/completion
    """

    def __init__(self, output: AudioOutput, clock=None,
                 on_chord_index_change: Optional[Callable[[int], None]] = None,
                 on_playback_position_change: Optional[Callable[[float], None]] = None,
                 bpm: int = BPM_DEFAULT,
                 time_signature: int = TIME_SIGNATURE_DEFAULT,
                 metronome_enabled: bool = False,
                 tick_interval: float = TICK_INTERVAL,
                 auto_advance: bool = True):
        """
        Args:
            output: Audio backend (exclusively owned while playing)
            clock: Object with now() in seconds (defaults to MonotonicClock)
            on_chord_index_change: Index callback
            on_playback_position_change: Position callback (beats)
            bpm: Default tempo for play()
            time_signature: Beats per measure for metronome accents (2-7)
            metronome_enabled: Whether clicks sound while running
            tick_interval: Seconds between transport ticks
            auto_advance: Run a transport task on the event loop; when False
                the owner calls tick() itself
        """
        self.output = output
        self.clock = clock or MonotonicClock()
        self.on_chord_index_change = on_chord_index_change
        self.on_playback_position_change = on_playback_position_change
        self.bpm = bpm
        self.time_signature = time_signature
        self._metronome_enabled = bool(metronome_enabled)
        self.tick_interval = tick_interval
        self.auto_advance = auto_advance

        self.session: Optional[PlaybackSession] = None
        self.state = PlaybackState.IDLE
        self.last_outcome: Optional[PlaybackState] = None
        self.current_index = NO_CHORD
        self.position = 0.0  # beats
        self.transport_error: Optional[Exception] = None  # Last error raised while ticking

        self._play_generation = 0
        self._transport_task: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, output: AudioOutput, settings, **kwargs) -> "ProgressionPlayer":
        """Build a player configured from PlaybackSettings."""
        return cls(
            output,
            bpm=settings.bpm,
            time_signature=settings.time_signature,
            metronome_enabled=settings.metronome_enabled,
            **kwargs,
        )

    # --- configuration ---

    @property
    def time_signature(self) -> int:
        return self._time_signature

    @time_signature.setter
    def time_signature(self, value: int):
        if not TIME_SIGNATURE_MIN <= value <= TIME_SIGNATURE_MAX:
            raise ValueError(
                f"Time signature must be {TIME_SIGNATURE_MIN}-{TIME_SIGNATURE_MAX} beats, got {value}"
            )
        self._time_signature = int(value)

    @property
    def metronome_enabled(self) -> bool:
        return self._metronome_enabled

    @metronome_enabled.setter
    def metronome_enabled(self, enabled: bool):
        enabled = bool(enabled)
        if enabled and not self._metronome_enabled and self.session is not None:
            # Pick up on the running session's beat grid
            self.session.skip_beats_before(self.session.elapsed(self.clock.now()))
        self._metronome_enabled = enabled

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.RUNNING

    @property
    def pending_callbacks(self) -> int:
        """Scheduled callbacks still waiting to fire."""
        pending = self.session.pending_count if self.session else 0
        if self._transport_task is not None and not self._transport_task.done():
            pending += 1
        return pending

    # --- transport ---

    async def play(self, chords: Sequence[Chord], bpm: Optional[float] = None):
        """
        Start playing a progression from the beginning.

        An empty progression is ignored. A running session is stopped
        first. If another play() starts while this one waits for the
        output to initialize, the later call wins.

        Args:
            chords: Progression to play
            bpm: Tempo (defaults to self.bpm); callers keep it within 40-240

        Raises:
            AudioInitializationError: If the audio output cannot start
        """
        chords = list(chords)
        if not chords:
            return

        self._play_generation += 1
        generation = self._play_generation

        await self.output.initialize()

        if generation != self._play_generation:
            return  # Superseded while waiting

        self.stop()

        if bpm is not None:
            self.bpm = bpm

        self.transport_error = None
        self.state = PlaybackState.SCHEDULED
        session = PlaybackSession(
            chords,
            self.bpm,
            start_time=self.clock.now(),
            output_origin=self.output.current_time(),
        )
        self.session = session
        self.state = PlaybackState.RUNNING
        print(f"[PLAYBACK] Playing {len(chords)} chords at {self.bpm} BPM "
              f"({session.total_duration:.2f}s)")

        self.tick()

        if self.auto_advance and self.session is session:
            self._transport_task = asyncio.get_running_loop().create_task(
                self._run_transport(session))

    def stop(self):
        """
        Stop playback: cancel pending events and the metronome, release
        sounding notes, report index -1 and reset the position.

        Does nothing while idle, apart from cancelling a play() that is
        still waiting for the output.
        """
        self._play_generation += 1
        if self.session is None:
            return
        self.output.release_all()
        self._finish(PlaybackState.STOPPED)

    def tick(self):
        """
        Advance the transport to the clock's current time: fire due
        events, metronome clicks, completion and the position callback.
        """
        session = self.session
        if session is None or self.state is not PlaybackState.RUNNING:
            return

        elapsed = session.elapsed(self.clock.now())

        for event in session.pop_due_events(elapsed):
            self._fire_event(session, event)
            if self.session is not session:
                return  # Stopped or replaced from a callback

        if self._metronome_enabled:
            for beat in session.pop_due_beats(elapsed):
                self._fire_click(session, beat)

        if session.is_finished(elapsed):
            self._finish(PlaybackState.COMPLETED)
            return

        self.position = elapsed * session.bpm / 60.0
        if self.on_playback_position_change:
            self.on_playback_position_change(self.position)

    def dispose(self) -> AudioOutput:
        """Stop playback and return the audio output to the caller."""
        self.stop()
        return self.output

    async def preview_chord(self, chord: Chord, duration: float = 2.0):
        """
        Sound a single chord now, outside any progression.

        Leaves the active session, the chord index and the position alone.

        Args:
            chord: Chord to audition
            duration: Held time in seconds

        Raises:
            AudioInitializationError: If the audio output cannot start
        """
        await self.output.initialize()
        self.output.trigger_notes(chord_note_names(chord), duration)

    # --- internals ---

    def _fire_event(self, session: PlaybackSession, event: PlaybackEvent):
        """Trigger audio and report the index for one chord onset."""
        duration = beats_to_seconds(event.chord.duration, session.bpm)
        self.output.trigger_notes(
            chord_note_names(event.chord),
            duration,
            session.output_origin + event.time,
        )
        self.current_index = event.chord_index
        if self.on_chord_index_change:
            self.on_chord_index_change(event.chord_index)

    def _fire_click(self, session: PlaybackSession, beat: int):
        if beat % self._time_signature == 0:
            note, volume = DOWNBEAT_NOTE, DOWNBEAT_VOLUME_DB
        else:
            note, volume = BEAT_NOTE, BEAT_VOLUME_DB
        self.output.trigger_click(note, volume, session.output_origin + beat * session.beat_seconds)

    def _finish(self, outcome: PlaybackState):
        """Tear down the active session and report the stop to the UI."""
        session = self.session
        self.session = None
        self.state = outcome
        session.dispose()
        self._cancel_transport()

        self.current_index = NO_CHORD
        self.position = 0.0
        self.last_outcome = outcome
        self.state = PlaybackState.IDLE
        print(f"[PLAYBACK] {outcome.value.capitalize()}")

        if self.on_chord_index_change:
            self.on_chord_index_change(NO_CHORD)
        if self.on_playback_position_change:
            self.on_playback_position_change(0.0)

    async def _run_transport(self, session: PlaybackSession):
        """
        Tick until the session ends. A callback error stops playback and
        is kept in transport_error.
        """
        while self.session is session:
            await asyncio.sleep(self.tick_interval)
            try:
                self.tick()
            except Exception as e:
                print(f"[PLAYBACK ERROR] {e}")
                traceback.print_exc()
                self.transport_error = e
                if self.session is session:
                    self.output.release_all()
                    self._finish(PlaybackState.STOPPED)
                return

    def _cancel_transport(self):
        task = self._transport_task
        self._transport_task = None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
