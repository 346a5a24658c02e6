# horse_dash/tests/test_runner_env.py
import numpy as np
from gymnasium.utils.env_checker import check_env

from horse_dash.env.runner_env import HorseDashEnv


def test_api_check():
    env = HorseDashEnv()
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def test_smoke_rollout():
    env = HorseDashEnv(frame_skip=4)
    try:
        obs, info = env.reset(seed=123)
        assert env.observation_space.contains(obs)
        assert info["seed"] == 123
        for _ in range(300):
            obs, r, term, trunc, info = env.step(env.action_space.sample())
            assert isinstance(r, float)
            assert env.observation_space.contains(obs)
            if term or trunc:
                break
    finally:
        env.close()


def test_noop_agent_eventually_stops():
    env = HorseDashEnv(frame_skip=4, time_limit_seconds=60.0)
    try:
        env.reset(seed=7)
        done = False
        for _ in range(10_000):
            _, r, term, trunc, info = env.step(0)
            if term or trunc:
                done = True
                break
        assert done
        if term:
            assert r == -1.0
    finally:
        env.close()


def test_determinism():
    def rollout(seed, actions):
        env = HorseDashEnv(frame_skip=4)
        traj = []
        try:
            obs, _ = env.reset(seed=seed)
            for a in actions:
                obs, r, term, trunc, info = env.step(int(a))
                traj.append((obs.copy(), r, term, trunc, info["score"]))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    actions = rng.randint(0, 2, size=200)
    t1, t2 = rollout(5, actions), rollout(5, actions)
    assert len(t1) == len(t2)
    for (o1, *rest1), (o2, *rest2) in zip(t1, t2):
        assert np.allclose(o1, o2)
        assert rest1 == rest2


def test_time_limit_truncates():
    env = HorseDashEnv(frame_skip=1, time_limit_seconds=0.05)
    try:
        env.reset(seed=1)
        _, _, term, trunc, _ = env.step(0)
        _, _, term, trunc, _ = env.step(0)
        _, _, term, trunc, _ = env.step(0)
        assert trunc and not term
    finally:
        env.close()


def test_rgb_array_render():
    env = HorseDashEnv(render_mode="rgb_array")
    try:
        env.reset(seed=3)
        env.step(0)
        frame = env.render()
        assert frame.shape == (540, 960, 3)
        assert frame.dtype == np.uint8
    finally:
        env.close()
