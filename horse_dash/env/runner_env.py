# horse_dash/env/runner_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from horse_dash.game.config import WIDTH, HEIGHT, FPS
from horse_dash.game.simulation import Simulation
from horse_dash.game.renderer import draw_frame
from horse_dash.env.observations import build_observation, OBS_SIZE


class HorseDashEnv(gym.Env):
    """
    Horse Dash Gymnasium environment (vector observations).
    - Simulation ticks at 60 Hz (one tick = one frame).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Observation: shape (10,), float32, see build_observation.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = JUMP
        self.action_space = gym.spaces.Discrete(2)

        low = np.array([0.0, -1.0] + [0.0] * (OBS_SIZE - 2), dtype=np.float32)
        high = np.ones(OBS_SIZE, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        self.sim: Optional[Simulation] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # With a seed the run is fully reproducible; otherwise draw one from np_random
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.current_seed = int(seed)
        self.sim = Simulation(seed=self.current_seed)
        self.sim.request_start()
        self.timestep = 0

        obs = build_observation(self.sim.state)
        info = {"seed": self.current_seed, "score": 0}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "call reset() first"

        if action == 1:
            self.sim.request_jump()

        for _ in range(self.frame_skip):
            if not self.sim.tick():
                break

        state = self.sim.state
        reward = 1.0 if state.running else -1.0

        self.timestep += 1
        terminated = state.game_over
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = not terminated

        obs = build_observation(state)
        info = {
            "score": state.score,
            "speed": state.speed,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "on_ground": state.player.on_ground,
            "biome": state.scenery.biome.name,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.sim is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Horse Dash - Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()
            self.font = pygame.font.SysFont("monospace", 16, bold=True)

        if self.render_mode == "human":
            # keep the window responsive
            pygame.event.pump()

        draw_frame(self.screen, self.sim.state, self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata.get("render_fps", FPS))
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
