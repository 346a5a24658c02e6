# horse_dash/game/obstacles.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

import pygame

from .config import (
    WIDTH, GROUND_Y, OBSTACLE_W, OBSTACLE_MIN_H, OBSTACLE_H_SPAN,
    SPAWN_PROB_SLOW, SPAWN_PROB_FAST, SPAWN_FAST_SPEED, SPAWN_PROB_PER_SPEED,
)
from .geometry import Box, min_gap

logger = logging.getLogger(__name__)


@dataclass
class Obstacle:
    """A zombie standing on the ground line. (x, y) is the top-left corner."""
    x: float
    y: float
    w: int
    h: int

    @property
    def right(self) -> float:
        return self.x + self.w

    def box(self) -> Box:
        return (self.x, self.y, self.x + self.w, self.y + self.h)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), self.w, self.h)


def spawn_probability(speed: float) -> float:
    base = SPAWN_PROB_SLOW if speed < SPAWN_FAST_SPEED else SPAWN_PROB_FAST
    return base + speed * SPAWN_PROB_PER_SPEED


@dataclass
class ObstacleSpawner:
    """
    Keeps obstacles far enough apart to always be jumpable.

    `gap_counter` accumulates scrolled distance since the last spawn; no roll
    happens until it reaches the current minimum gap.
    """
    rng: random.Random
    width: int = WIDTH
    ground_y: float = GROUND_Y
    gap_counter: float = 0.0
    min_gap: int = 0
    obstacles: List[Obstacle] = field(default_factory=list)

    def reset(self, speed: float, gravity: float, jump_impulse: float):
        self.obstacles = []
        self.min_gap = min_gap(speed, gravity, jump_impulse)
        # start "already clear" so the first obstacle may come early
        self.gap_counter = float(self.min_gap)

    def scroll(self, speed: float):
        """Move every obstacle left and drop those whose right edge passed x=0."""
        for ob in self.obstacles:
            ob.x -= speed
        self.obstacles = [ob for ob in self.obstacles if ob.right >= 0]

    def trailing_gap(self) -> Optional[float]:
        """Distance from the newest obstacle's right edge to the spawn edge."""
        if not self.obstacles:
            return None
        return self.width - self.obstacles[-1].right

    def step(self, speed: float, gravity: float, jump_impulse: float) -> Optional[Obstacle]:
        """Run the spawn policy for one tick. Returns the new obstacle, if any."""
        self.min_gap = min_gap(speed, gravity, jump_impulse)

        if self.gap_counter < self.min_gap:
            self.gap_counter += speed
            return None

        if self.rng.random() >= spawn_probability(speed):
            return None

        trailing = self.trailing_gap()
        if trailing is not None and trailing < self.min_gap:
            return None

        return self._spawn()

    def _spawn(self) -> Obstacle:
        h = OBSTACLE_MIN_H + int(self.rng.random() * OBSTACLE_H_SPAN)
        ob = Obstacle(x=float(self.width), y=self.ground_y - h, w=OBSTACLE_W, h=h)
        self.obstacles.append(ob)
        self.gap_counter = 0.0
        logger.debug("obstacle spawned h=%d min_gap=%d", h, self.min_gap)
        return ob
