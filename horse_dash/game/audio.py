# horse_dash/game/audio.py
"""
Background melody sequencer.

Steps through a fixed bass+melody pattern on the simulation's TickScheduler,
so tempo follows game speed without any wall-clock timer. Producing sound is
left to the `play_tone(freq_hz, duration_ms)` sink.
"""
from __future__ import annotations
import logging
import math
from typing import Callable, Optional, Tuple

from .config import FPS
from .events import EventBus, RunStarted, RunEnded
from .scheduler import ScheduledTask, TickScheduler

logger = logging.getLogger(__name__)

C5, D5, E5, F5, G5, A5, B5, C6 = 523.25, 587.33, 659.25, 698.46, 783.99, 880.00, 987.77, 1046.50
C2, D2, E2, G2, A2, C3 = 65.41, 73.42, 82.41, 98.00, 110.00, 130.81

# (bass_hz, melody_hz, base_ms); 0 means rest
MELODY: Tuple[Tuple[float, float, int], ...] = (
    (C2, C5, 90), (0, 0, 60), (G2, G5, 90), (0, 0, 60), (C2, C5, 90), (0, 0, 60), (G2, G5, 90), (0, 0, 60),
    (E2, E5, 90), (0, 0, 60), (A2, A5, 90), (0, 0, 60), (E2, E5, 90), (0, 0, 60), (A2, A5, 90), (0, 0, 60),
    (G2, G5, 90), (0, 0, 60), (C3, C6, 90), (0, 0, 60), (G2, G5, 90), (0, 0, 60), (C3, C6, 90), (0, 0, 60),
    (E2, E5, 90), (0, 0, 60), (G2, G5, 90), (0, 0, 60), (C2, C5, 90), (0, 0, 60), (E2, E5, 90), (0, 0, 60),
)

LOOPS_PER_PITCH_SHIFT = 4
SEMITONE_UP = 2 ** (1 / 12)
SEMITONE_DOWN = 2 ** (-1 / 12)
# normal -> up -> normal -> down
PITCH_CYCLE = (1.0, SEMITONE_UP, 1.0, SEMITONE_DOWN)
MIN_NOTE_MS = 40

ToneSink = Callable[[float, int], None]


def note_duration_ms(base_ms: int, tempo: float) -> int:
    return max(MIN_NOTE_MS, int(round(base_ms / tempo)))


def ms_to_ticks(ms: int, fps: int = FPS) -> int:
    return max(1, int(math.ceil(ms * fps / 1000)))


class MelodyLoop:
    """Plays MELODY while a run is active; tempo is read from `tempo_source()`."""

    def __init__(self, scheduler: TickScheduler, tempo_source: Callable[[], float],
                 play_tone: Optional[ToneSink] = None, muted: bool = False):
        self.scheduler = scheduler
        self.tempo_source = tempo_source
        self.play_tone = play_tone
        self.muted = muted
        self.playing = False
        self.index = 0
        self.loops = 0
        self.pitch_state = 0
        self._task: Optional[ScheduledTask] = None

    @property
    def pitch_multiplier(self) -> float:
        return PITCH_CYCLE[self.pitch_state]

    def attach(self, bus: EventBus):
        """Start on RunStarted, stop on RunEnded."""
        bus.subscribe(RunStarted, lambda _e: self.start())
        bus.subscribe(RunEnded, lambda _e: self.stop())

    def toggle_mute(self) -> bool:
        self.muted = not self.muted
        return self.muted

    def start(self):
        self.stop()
        self.index = 0
        self.loops = 0
        self.pitch_state = 0
        self.playing = True
        self._task = self.scheduler.call_later(0, self._step)

    def stop(self):
        self.playing = False
        TickScheduler.cancel(self._task)
        self._task = None

    def _step(self):
        if not self.playing:
            return
        bass, lead, base_ms = MELODY[self.index]
        dur = note_duration_ms(base_ms, self.tempo_source())
        if not self.muted and self.play_tone is not None:
            mult = self.pitch_multiplier
            if bass:
                self.play_tone(bass * mult, dur)
            if lead:
                self.play_tone(lead * mult, dur)

        self.index = (self.index + 1) % len(MELODY)
        if self.index == 0:
            self.loops += 1
            if self.loops >= LOOPS_PER_PITCH_SHIFT:
                self.loops = 0
                self.pitch_state = (self.pitch_state + 1) % len(PITCH_CYCLE)
                logger.debug("melody pitch state -> %d", self.pitch_state)

        self._task = self.scheduler.call_later(ms_to_ticks(dur), self._step)
