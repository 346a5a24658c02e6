# horse_dash/game/config.py
from __future__ import annotations
from dataclasses import dataclass

# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60

# --- World ---
GROUND_H = 24                   # ground strip height; player bottom and obstacle bases sit on it
GROUND_Y = HEIGHT - GROUND_H    # y of the ground line
HORIZON_OFFSET = 180            # horizon line is this far above the bottom of the screen

# --- Player ---
PLAYER_X = 40
PLAYER_W = 24
PLAYER_H = 24

# --- Physics (per tick, not per second) ---
GRAVITY = 1.1                   # px/tick^2
JUMP_IMPULSE = -15.0            # px/tick, negative = up
JUMP_BUFFER_TIME = 6            # ticks (~100 ms at 60 fps)

# --- Speed / score ---
START_SPEED = 4.0
SPEED_STEP = 0.5
SPEED_STEP_EVERY = 150          # score interval between speed steps
MIN_SPEED = 4.0

# --- Obstacles ---
OBSTACLE_W = 20
OBSTACLE_MIN_H = 24
OBSTACLE_H_SPAN = 24            # heights are MIN_H .. MIN_H + SPAN - 1
MIN_GAP_FLOOR = 100
GAP_REACTION_PX = 30
SPAWN_PROB_SLOW = 0.045
SPAWN_PROB_FAST = 0.025
SPAWN_FAST_SPEED = 8.0
SPAWN_PROB_PER_SPEED = 0.002

# --- Background / biomes ---
BIOME_TRANSITION_RATE = 0.0002  # progress per tick per unit of speed
BACKGROUND_STRIDE = 260
BACKGROUND_WRAP_FACTOR = 2.5
BACKGROUND_SCROLL_FACTOR = 0.5  # background scroll per tick = speed * factor
HEIGHT_JITTER = 0.15            # total jitter span (+/- 7.5%)
FADE_IN_STEP = 0.05
LAYER_SPEEDS = {"back": 0.3, "mid": 0.5, "front": 0.7}
LAYER_OPACITY = {"back": 0.6, "mid": 0.7, "front": 0.9}
LAYERS = ("back", "mid", "front")

# --- Plane event ---
PLANE_FIRST_SCORE = 200
PLANE_SCORE_STEP = 400
PLANE_MIN_SPEED = 2.0
PLANE_SPEED_FACTOR = 0.6
PLANE_ENTRY_FACTOR = 1.2        # spawn x = width * factor
SPEECH_SECONDS = 3

# --- Leaderboard ---
LEADERBOARD_SIZE = 5
LEADERBOARD_NAME_PATTERN = r"^[A-Z]{1,5}$"

# --- Colors (RGB) ---
COLOR_FG = (255, 255, 255)
COLOR_HUD = (255, 215, 0)
COLOR_OBSTACLE = (107, 142, 35)
COLOR_PLAYER = (139, 69, 19)
COLOR_DANGER = (255, 86, 110)


@dataclass(frozen=True)
class RunConfig:
    """Per-run tuning. Defaults mirror the module constants."""
    width: int = WIDTH
    ground_y: float = GROUND_Y
    gravity: float = GRAVITY
    jump_impulse: float = JUMP_IMPULSE
    jump_buffer_time: int = JUMP_BUFFER_TIME
    start_speed: float = START_SPEED
    min_speed: float = MIN_SPEED
    speed_step: float = SPEED_STEP
    speed_step_every: int = SPEED_STEP_EVERY
    biome_transition_rate: float = BIOME_TRANSITION_RATE
    plane_first_score: int = PLANE_FIRST_SCORE
    plane_score_step: int = PLANE_SCORE_STEP
    speech_ticks: int = SPEECH_SECONDS * FPS
