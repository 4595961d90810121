"""
Sounddevice audio backend.

Triggered voices are pre-rendered by PadSynth and mixed in the audio
callback thread.
"""
import threading
from typing import List, Optional

import numpy as np
import sounddevice as sd

from audio.output import AudioOutput, AudioInitializationError
from audio.synth import PadSynth, render_click
from core.constants import note_name_to_frequency


class SoundDeviceOutput(AudioOutput):
    """
    Audio output through a sounddevice OutputStream.

    Voices are rendered by PadSynth when triggered and then streamed by
    the audio callback. A lock guards the voice list because the callback
    runs on the backend's own thread.
    """

    def __init__(self, sample_rate: int = 44100, buffer_size: int = 512,
                 device: Optional[str] = None, synth: Optional[PadSynth] = None):
        """
        Args:
            sample_rate: Audio sample rate (Hz)
            buffer_size: Audio buffer size (frames)
            device: Output device name (None or "Default" = system default)
            synth: Voice renderer (defaults to a PadSynth at sample_rate)
        """
        self.sample_rate = sample_rate
        self.buffer_size = buffer_size
        self.device = None if device in (None, "Default") else device
        self.synth = synth or PadSynth(sample_rate)

        self.stream: Optional[sd.OutputStream] = None
        self.voices = []  # {'audio': ndarray, 'position': int, 'start': int}
        self.voice_lock = threading.Lock()
        self.frames_played = 0

    @property
    def is_initialized(self) -> bool:
        return self.stream is not None

    async def initialize(self):
        """Open and start the output stream."""
        if self.stream is not None:
            return

        try:
            stream = sd.OutputStream(
                samplerate=self.sample_rate,
                blocksize=self.buffer_size,
                device=self.device,
                channels=2,
                dtype='float32',
                latency='low',
                callback=self._audio_callback,
            )
            stream.start()
        except Exception as e:
            raise AudioInitializationError(f"Failed to open audio output: {e}") from e

        self.stream = stream
        print(f"[AUDIO] Output stream started ({self.sample_rate} Hz, {self.buffer_size} frames)")

    def current_time(self) -> float:
        return self.frames_played / self.sample_rate

    def _start_frame(self, at_time: Optional[float]) -> int:
        if at_time is None:
            return self.frames_played
        return max(self.frames_played, int(at_time * self.sample_rate))

    def _add_voice(self, audio: np.ndarray, at_time: Optional[float]):
        if len(audio) == 0:
            return
        with self.voice_lock:
            self.voices.append({
                'audio': audio,
                'position': 0,
                'start': self._start_frame(at_time),
            })

    def trigger_notes(self, note_names: List[str], duration: float,
                      at_time: Optional[float] = None):
        self._add_voice(self.synth.render_chord(note_names, duration), at_time)

    def trigger_click(self, note_name: str, volume_db: float,
                      at_time: Optional[float] = None):
        frequency = note_name_to_frequency(note_name)
        self._add_voice(render_click(frequency, volume_db, self.sample_rate), at_time)

    def release_all(self):
        """Fade out sounding voices and drop pending ones."""
        fade_samples = int(0.05 * self.sample_rate)
        with self.voice_lock:
            kept = []
            for voice in self.voices:
                if voice['start'] > self.frames_played:
                    continue  # Not started yet
                remaining = voice['audio'][voice['position']:voice['position'] + fade_samples]
                if len(remaining) == 0:
                    continue
                fade = np.linspace(1.0, 0.0, len(remaining), dtype=np.float32)
                kept.append({'audio': remaining * fade, 'position': 0, 'start': voice['start']})
            self.voices = kept

    def _audio_callback(self, outdata, frames, time_info, status):
        """Sounddevice callback: mix active voices into the output buffer."""
        if status:
            print(f"[AUDIO] Stream status: {status}")

        output = np.zeros(frames, dtype=np.float32)
        block_start = self.frames_played

        with self.voice_lock:
            finished = []
            for i, voice in enumerate(self.voices):
                offset = voice['start'] - block_start
                if offset >= frames:
                    continue  # Starts in a later block
                offset = max(offset, 0)

                remaining = len(voice['audio']) - voice['position']
                to_copy = min(remaining, frames - offset)
                if to_copy > 0:
                    output[offset:offset + to_copy] += voice['audio'][voice['position']:voice['position'] + to_copy]
                    voice['position'] += to_copy

                if voice['position'] >= len(voice['audio']):
                    finished.append(i)

            for i in reversed(finished):
                self.voices.pop(i)

        # Normalize to prevent clipping
        peak = np.max(np.abs(output)) if frames else 0.0
        if peak > 0.95:
            output = output / peak * 0.95

        outdata[:, 0] = output
        outdata[:, 1] = output
        self.frames_played += frames

    def close(self):
        """Stop and close the output stream."""
        if self.stream is None:
            return
        with self.voice_lock:
            self.voices = []
        try:
            self.stream.stop()
            self.stream.close()
        except Exception as e:
            print(f"[AUDIO] Error closing stream: {e}")
        self.stream = None
        print("[AUDIO] Output stream closed")
