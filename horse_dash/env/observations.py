# horse_dash/env/observations.py
from __future__ import annotations
from typing import List, Tuple
import numpy as np

from horse_dash.game.config import (
    WIDTH, PLAYER_H, GROUND_Y, JUMP_IMPULSE, OBSTACLE_MIN_H, OBSTACLE_H_SPAN, OBSTACLE_W,
)
from horse_dash.game.simulation import RunState

OBS_SIZE = 10
LOOKAHEAD_OBSTACLES = 2
MAX_SPEED_NORM = 16.0                       # speeds above this clip to 1
MAX_VY = abs(JUMP_IMPULSE)
MAX_OBSTACLE_H = OBSTACLE_MIN_H + OBSTACLE_H_SPAN
ABSENT: Tuple[float, float, float] = (1.0, 0.0, 0.0)


def _clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return lo if x < lo else (hi if x > hi else x)


def build_observation(state: RunState) -> np.ndarray:
    """
    [top_y_norm, vy_norm, on_ground, speed_norm,
     dx1, h1, w1, dx2, h2, w2]

    dx is the distance from the player's right edge to the obstacle's left
    edge over the screen width; obstacles already passed are skipped and
    missing ones read as (1, 0, 0).
    """
    p = state.player
    top_norm = _clamp(p.top / max(1.0, GROUND_Y - PLAYER_H))
    vy_norm = _clamp(p.vy / MAX_VY, -1.0, 1.0)
    speed_norm = _clamp(state.speed / MAX_SPEED_NORM)

    ahead: List[Tuple[float, float, float]] = []
    player_right = p.x + p.w
    for ob in state.obstacles:
        if ob.right <= p.x:
            continue
        dx = _clamp((ob.x - player_right) / WIDTH)
        ahead.append((dx, _clamp(ob.h / MAX_OBSTACLE_H), _clamp(ob.w / (2 * OBSTACLE_W))))
        if len(ahead) == LOOKAHEAD_OBSTACLES:
            break
    while len(ahead) < LOOKAHEAD_OBSTACLES:
        ahead.append(ABSENT)

    values = [top_norm, vy_norm, 1.0 if p.on_ground else 0.0, speed_norm]
    for item in ahead:
        values.extend(item)
    return np.asarray(values, dtype=np.float32)
