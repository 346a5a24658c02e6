# horse_dash/game/simulation.py
from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional

from .config import RunConfig, START_SPEED
from .player import Player, advance
from .obstacles import ObstacleSpawner, Obstacle
from .biomes import BiomeScenery
from .plane import PlaneEvent
from .events import EventBus, RunStarted, RunEnded, PlaneSpawned, ScoreMilestone
from .geometry import boxes_overlap
from .scheduler import TickScheduler

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Everything one run mutates. Owned by a single Simulation."""
    player: Player
    spawner: ObstacleSpawner
    scenery: BiomeScenery
    plane: PlaneEvent
    score: int = 0
    speed: float = START_SPEED
    jump_buffer: int = 0
    music_tempo: float = 1.0
    tick: int = 0
    running: bool = False
    game_over: bool = False
    collided_with: Optional[Obstacle] = field(default=None, repr=False)

    @property
    def obstacles(self):
        return self.spawner.obstacles

    @property
    def min_gap(self) -> int:
        return self.spawner.min_gap


class Simulation:
    """
    Fixed-step game core. One `tick()` per displayed frame, in this order:
    plane event, tempo, player physics, jump buffer, obstacle scroll,
    collision, spawn, score/speed, scenery.
    """

    def __init__(self,
                 config: RunConfig | None = None,
                 rng: random.Random | None = None,
                 seed: int | None = None,
                 bus: EventBus | None = None):
        self.config = config or RunConfig()
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.bus = bus or EventBus()
        self.scheduler = TickScheduler()
        self.state = self._fresh_state()

    # -------------------- Lifecycle --------------------

    def _fresh_state(self) -> RunState:
        cfg = self.config
        player = Player(y=float(cfg.ground_y))
        spawner = ObstacleSpawner(rng=self.rng, width=cfg.width, ground_y=cfg.ground_y)
        spawner.reset(cfg.start_speed, cfg.gravity, cfg.jump_impulse)
        scenery = BiomeScenery(rng=self.rng, width=cfg.width,
                               transition_rate=cfg.biome_transition_rate)
        scenery.reset()
        plane = PlaneEvent(rng=self.rng, width=cfg.width,
                           first_score=cfg.plane_first_score,
                           score_step=cfg.plane_score_step,
                           speech_ticks=cfg.speech_ticks)
        plane.reset()
        return RunState(player=player, spawner=spawner, scenery=scenery, plane=plane,
                        speed=cfg.start_speed)

    def request_start(self) -> bool:
        """Begin a new run unless one is already going. Returns True if started."""
        if self.state.running:
            return False
        self.scheduler.clear()
        self.scheduler.tick = 0
        self.state = self._fresh_state()
        self.state.running = True
        logger.info("run started (seed=%s)", self.seed)
        self.bus.emit(RunStarted())
        return True

    def request_jump(self):
        s = self.state
        if not s.running:
            return
        s.jump_buffer = s.player.request_jump(self.config.jump_impulse, s.jump_buffer,
                                              self.config.jump_buffer_time)

    def _end_run(self, obstacle: Obstacle):
        s = self.state
        s.running = False
        s.game_over = True
        s.collided_with = obstacle
        logger.info("run ended: score=%d speed=%.2f", s.score, s.speed)
        self.bus.emit(RunEnded(score=s.score))

    # -------------------- Frame update --------------------

    def tick(self) -> bool:
        """Advance one frame. Returns False once the run is not (or no longer) running."""
        s = self.state
        cfg = self.config
        if not s.running:
            return False

        s.tick += 1
        self.scheduler.advance(s.tick)

        # 1) plane event
        spawned = s.plane.update(s.score, self.scheduler)
        if spawned is not None:
            self.bus.emit(PlaneSpawned(name=spawned.name, x=s.plane.x, y=s.plane.y, score=s.score))

        # 2) pacing scalar for the audio loop
        s.music_tempo = math.sqrt(s.speed / 4.0)

        # 3) player physics
        _, s.jump_buffer, _ = advance(s.player, cfg.gravity, cfg.jump_impulse,
                                      cfg.ground_y, s.jump_buffer)

        # 4) jump buffer countdown
        if s.jump_buffer > 0:
            s.jump_buffer -= 1

        # 5) scroll obstacles
        s.spawner.scroll(s.speed)

        # 6) collision ends the run
        player_box = s.player.box()
        for ob in s.spawner.obstacles:
            if boxes_overlap(player_box, ob.box()):
                self._end_run(ob)
                return False

        # 7) spawn policy
        s.spawner.step(s.speed, cfg.gravity, cfg.jump_impulse)

        # 8) score and difficulty
        s.score += 1
        if s.score % cfg.speed_step_every == 0:
            s.speed += cfg.speed_step
            logger.debug("speed increased to %.2f at score %d", s.speed, s.score)
            self.bus.emit(ScoreMilestone(score=s.score, speed=s.speed))
        s.speed = max(cfg.min_speed, s.speed)

        # 9) scenery fades, parallax and biome blend
        s.scenery.update(s.speed)
        return True
