# horse_dash/tests/test_obstacles.py
import random

import pytest

from horse_dash.game.config import (
    WIDTH, GROUND_Y, GRAVITY, JUMP_IMPULSE, OBSTACLE_W, OBSTACLE_MIN_H, OBSTACLE_H_SPAN,
)
from horse_dash.game.geometry import min_gap
from horse_dash.game.obstacles import Obstacle, ObstacleSpawner, spawn_probability


def make_spawner(rng, speed=4.0):
    sp = ObstacleSpawner(rng=rng)
    sp.reset(speed, GRAVITY, JUMP_IMPULSE)
    return sp


def test_spawn_probability_by_speed():
    assert spawn_probability(4) == pytest.approx(0.053)
    assert spawn_probability(7.5) == pytest.approx(0.06)
    assert spawn_probability(8) == pytest.approx(0.041)


def test_first_spawn_is_allowed_immediately(always_rng):
    sp = make_spawner(always_rng)
    assert sp.gap_counter == sp.min_gap
    ob = sp.step(4.0, GRAVITY, JUMP_IMPULSE)
    assert ob is not None
    assert sp.gap_counter == 0
    assert sp.obstacles == [ob]


def test_spawned_obstacle_sits_on_ground(always_rng, constant_rng):
    ob = make_spawner(always_rng).step(4.0, GRAVITY, JUMP_IMPULSE)
    assert ob.x == WIDTH
    assert ob.w == OBSTACLE_W
    assert ob.h == OBSTACLE_MIN_H
    assert ob.y + ob.h == GROUND_Y

    # the same stub value serves the spawn roll and the height roll
    ob = make_spawner(constant_rng(0.05)).step(4.0, GRAVITY, JUMP_IMPULSE)
    assert ob.h == OBSTACLE_MIN_H + 1
    assert ob.y + ob.h == GROUND_Y


def test_heights_stay_in_range():
    sp = make_spawner(random.Random(5))
    seen = set()
    for _ in range(500):
        seen.add(sp._spawn().h)
    assert min(seen) >= OBSTACLE_MIN_H
    assert max(seen) <= OBSTACLE_MIN_H + OBSTACLE_H_SPAN - 1


def test_no_roll_below_min_gap(always_rng):
    sp = make_spawner(always_rng)
    sp.step(4.0, GRAVITY, JUMP_IMPULSE)
    counters = []
    for _ in range(10):
        assert sp.step(4.0, GRAVITY, JUMP_IMPULSE) is None
        counters.append(sp.gap_counter)
    assert counters == [4.0 * (i + 1) for i in range(10)]


def test_never_spawns_when_roll_fails(never_rng):
    sp = make_spawner(never_rng)
    for _ in range(2000):
        sp.scroll(4.0)
        assert sp.step(4.0, GRAVITY, JUMP_IMPULSE) is None
    assert sp.obstacles == []


def test_guard_rejects_spawn_too_close_to_last_obstacle(always_rng):
    sp = make_spawner(always_rng)
    sp.obstacles.append(Obstacle(x=WIDTH - 50, y=GROUND_Y - 30, w=OBSTACLE_W, h=30))
    sp.gap_counter = 10_000
    assert sp.step(4.0, GRAVITY, JUMP_IMPULSE) is None
    assert len(sp.obstacles) == 1


def test_scroll_drops_obstacles_past_left_edge():
    sp = ObstacleSpawner(rng=random.Random(0))
    sp.obstacles = [
        Obstacle(x=-19, y=0, w=20, h=30),
        Obstacle(x=-10, y=0, w=20, h=30),
        Obstacle(x=300, y=0, w=20, h=30),
    ]
    sp.scroll(4.0)
    assert [ob.x for ob in sp.obstacles] == [-14, 296]


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_consecutive_obstacles_respect_min_gap(seed):
    rng = random.Random(seed)
    sp = make_spawner(rng)
    speed = 4.0
    spawned = 0
    for t in range(20_000):
        if t % 150 == 0:
            speed = 4.0 + (t // 150 % 20) * 0.5
        sp.scroll(speed)
        before = sp.trailing_gap()
        ob = sp.step(speed, GRAVITY, JUMP_IMPULSE)
        if ob is None:
            continue
        spawned += 1
        assert sp.min_gap == min_gap(speed, GRAVITY, JUMP_IMPULSE)
        if before is not None:
            assert before >= sp.min_gap
    assert spawned > 50
