# horse_dash/tests/test_plane.py
import random

from horse_dash.game.config import WIDTH
from horse_dash.game.plane import PlaneEvent, PLANE_TYPES, HELP_PHRASES
from horse_dash.game.scheduler import TickScheduler


def make_plane(**kw):
    p = PlaneEvent(rng=random.Random(0), **kw)
    p.reset()
    return p


def fly_out(plane, scheduler, score):
    """Tick an active plane until it leaves; checks it never lingers past the exit."""
    ticks = 0
    while plane.active:
        assert plane.x <= plane.exit_x
        assert plane.update(score, scheduler) is None
        ticks += 1
        assert ticks < 10_000
    return ticks


def test_idle_below_threshold():
    plane, sched = make_plane(), TickScheduler()
    assert plane.update(199, sched) is None
    assert not plane.active
    assert plane.count == 0


def test_spawn_at_threshold():
    plane, sched = make_plane(), TickScheduler()
    pt = plane.update(200, sched)
    assert pt is PLANE_TYPES[0]
    assert plane.active
    # prop: max(2, 3 * 0.6) = 2; spawned at width * 1.2 and moved once
    assert plane.speed == 2
    assert plane.x == 60 * 1.2 + 2
    assert plane.y == PLANE_TYPES[0].y
    assert plane.next_score == 600
    assert plane.count == 1
    assert plane.speech_visible
    assert plane.speech_text in HELP_PHRASES


def test_plane_speed_uses_archetype():
    plane, sched = make_plane(), TickScheduler()
    plane.type_index = 3
    plane.update(200, sched)
    assert plane.plane.name == "fighter"
    assert plane.speed == 15 * 0.6


def test_only_one_plane_at_a_time():
    plane, sched = make_plane(), TickScheduler()
    plane.update(200, sched)
    for score in range(10_000, 10_050):
        assert plane.update(score, sched) is None
        assert plane.count == 1


def test_plane_exits_right_then_goes_idle():
    plane, sched = make_plane(), TickScheduler()
    plane.update(200, sched)
    ticks = fly_out(plane, sched, 201)
    assert not plane.active
    assert plane.x > WIDTH - PLANE_TYPES[0].width * 0.5
    # (960 - 30 - 74) / 2 px per tick
    assert ticks == 429


def test_archetypes_cycle():
    plane, sched = make_plane(), TickScheduler()
    names = []
    for _ in range(len(PLANE_TYPES) + 1):
        pt = plane.update(plane.next_score, sched)
        names.append(pt.name)
        fly_out(plane, sched, plane.next_score - 1)
    assert names == ["prop", "smalljet", "airliner", "fighter", "prop"]
    assert plane.count == 5
    assert plane.next_score == 200 + 5 * 400


def test_speech_hides_after_window():
    plane, sched = make_plane(speech_ticks=180), TickScheduler()
    plane.update(200, sched)
    sched.advance(179)
    assert plane.speech_visible
    sched.advance(180)
    assert not plane.speech_visible


def test_new_spawn_restarts_speech_window():
    plane, sched = make_plane(speech_ticks=180, width=200), TickScheduler()
    plane.update(200, sched)
    fly_out(plane, sched, 201)
    sched.advance(100)
    plane.update(plane.next_score, sched)
    sched.advance(180)
    # first window would have ended at 180; the second runs to 280
    assert plane.speech_visible
    sched.advance(280)
    assert not plane.speech_visible


def test_reset_clears_everything():
    plane, sched = make_plane(), TickScheduler()
    plane.update(200, sched)
    plane.reset()
    assert not plane.active
    assert plane.count == 0
    assert plane.next_score == 200
    assert not plane.speech_visible
    sched.advance(1000)
    assert not plane.speech_visible
