# horse_dash/game/plane.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import (
    WIDTH, PLANE_FIRST_SCORE, PLANE_SCORE_STEP, PLANE_MIN_SPEED,
    PLANE_SPEED_FACTOR, PLANE_ENTRY_FACTOR, SPEECH_SECONDS, FPS,
)
from .scheduler import ScheduledTask, TickScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaneType:
    name: str
    speed: float
    width: int
    height: int
    color: str
    y: float


PLANE_TYPES: Tuple[PlaneType, ...] = (
    PlaneType("prop", 3, 60, 18, "#b22222", 80),
    PlaneType("smalljet", 6, 48, 16, "#1e90ff", 70),
    PlaneType("airliner", 9, 80, 24, "#e0e0e0", 60),
    PlaneType("fighter", 15, 36, 12, "#444444", 50),
)

HELP_PHRASES: Tuple[str, ...] = (
    "Help down here!",
    "I need help!",
    "Zombies ahead!",
    "Hold on!!",
    "Watch out!",
    "Look out!",
    "Help!",
    "Please!",
)


@dataclass
class PlaneEvent:
    """
    Rare cosmetic flyover: idle -> active -> idle.

    Only checked for a trigger while idle, so at most one plane flies at once.
    A help phrase shows for SPEECH_SECONDS after each spawn.
    """
    rng: random.Random
    width: int = WIDTH
    first_score: int = PLANE_FIRST_SCORE
    score_step: int = PLANE_SCORE_STEP
    speech_ticks: int = SPEECH_SECONDS * FPS
    active: bool = False
    type_index: int = 0                 # archetype used by the next spawn
    x: float = 0.0
    y: float = 0.0
    speed: float = 0.0
    next_score: int = PLANE_FIRST_SCORE
    count: int = 0
    plane: Optional[PlaneType] = None
    speech_visible: bool = False
    speech_text: str = ""
    _hide_task: Optional[ScheduledTask] = None

    def reset(self):
        self.active = False
        self.type_index = 0
        self.x = self.y = self.speed = 0.0
        self.next_score = self.first_score
        self.count = 0
        self.plane = None
        self.speech_visible = False
        self.speech_text = ""
        TickScheduler.cancel(self._hide_task)
        self._hide_task = None

    @property
    def exit_x(self) -> float:
        return self.width - self.plane.width * 0.5 if self.plane else float(self.width)

    def update(self, score: int, scheduler: TickScheduler) -> Optional[PlaneType]:
        """Trigger and/or move the plane for one tick. Returns the type if one spawned."""
        spawned = None
        if not self.active and score >= self.next_score:
            spawned = self._spawn(score, scheduler)

        if self.active:
            self.x += self.speed
            if self.x > self.exit_x:
                self.active = False
        return spawned

    def _spawn(self, score: int, scheduler: TickScheduler) -> PlaneType:
        pt = PLANE_TYPES[self.type_index % len(PLANE_TYPES)]
        self.plane = pt
        self.active = True
        self.x = pt.width * PLANE_ENTRY_FACTOR
        self.y = pt.y
        self.speed = max(PLANE_MIN_SPEED, pt.speed * PLANE_SPEED_FACTOR)
        self.type_index += 1
        self.count += 1
        self.next_score += self.score_step
        logger.info("plane spawned: %s at (%.0f, %.0f) score=%d", pt.name, self.x, self.y, score)
        self._say(scheduler)
        return pt

    def _say(self, scheduler: TickScheduler):
        TickScheduler.cancel(self._hide_task)
        self.speech_text = HELP_PHRASES[int(self.rng.random() * len(HELP_PHRASES))]
        self.speech_visible = True
        self._hide_task = scheduler.call_later(self.speech_ticks, self._hide_speech)

    def _hide_speech(self):
        self.speech_visible = False
        self._hide_task = None
