# horse_dash/game/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from typing import Tuple
from .config import PLAYER_X, PLAYER_W, PLAYER_H, GROUND_Y, JUMP_BUFFER_TIME
from .geometry import Box


@dataclass
class Player:
    """
    Runner at a fixed x; the world scrolls left under it.
    - y is the BOTTOM edge (feet), so y == ground level means standing.
    - vy < 0 moves up.
    """
    x: float = float(PLAYER_X)
    y: float = float(GROUND_Y)
    w: int = PLAYER_W
    h: int = PLAYER_H
    vy: float = 0.0
    on_ground: bool = True

    @property
    def top(self) -> float:
        return self.y - self.h

    def box(self) -> Box:
        return (self.x, self.y - self.h, self.x + self.w, self.y)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y - self.h), self.w, self.h)

    def request_jump(self, jump_impulse: float, jump_buffer: int,
                     buffer_time: int = JUMP_BUFFER_TIME) -> int:
        """
        Launch if standing, otherwise (re)arm the jump buffer.
        Returns the new buffer value; a pending buffer is overwritten, never summed.
        """
        if self.on_ground:
            self.vy = jump_impulse
            return jump_buffer
        return buffer_time


def advance(player: Player, gravity: float, jump_impulse: float,
            ground_level: float, jump_buffer: int) -> Tuple[Player, int, bool]:
    """
    One Euler step under gravity, then ground resolution.

    Landing with a buffered jump pending relaunches straight away. Returns
    (player, jump_buffer, landed) where `landed` means the player touched the
    ground this tick coming from the air.
    """
    was_on_ground = player.on_ground
    player.vy += gravity
    player.y += player.vy

    landed = False
    if player.y >= ground_level:
        player.y = ground_level
        player.vy = 0.0
        landed = not was_on_ground
        if not was_on_ground and jump_buffer > 0:
            player.vy = jump_impulse
            jump_buffer = 0
            player.on_ground = False
        else:
            player.on_ground = True
    else:
        player.on_ground = False

    return player, jump_buffer, landed
