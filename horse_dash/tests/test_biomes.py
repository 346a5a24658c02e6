# horse_dash/tests/test_biomes.py
import random

import pytest

from horse_dash.game.config import WIDTH, BACKGROUND_STRIDE, BACKGROUND_WRAP_FACTOR
from horse_dash.game.biomes import (
    BIOMES, Biome, BackgroundElement, BiomeScenery,
    generate_biome_elements, screen_x, draw_positions, wrap_width,
)
from horse_dash.game.geometry import hex_to_rgb

SPAN = WIDTH * BACKGROUND_WRAP_FACTOR
STRIDES = len(range(0, int(SPAN), BACKGROUND_STRIDE))


def test_every_archetype_fires_when_rolls_succeed(always_rng):
    forest = BIOMES[0]
    els = generate_biome_elements(0, 0, always_rng)
    extras = sum(e.count for e in forest.extras)
    assert len(els) == STRIDES * len(forest.elements) + extras
    # height index 0 and maximal negative jitter
    first = els[0]
    assert first.x == 0
    assert first.height == pytest.approx(forest.elements[0].heights[0] * (1 - 0.075))
    assert first.opacity == 0.0 and not first.faded_in


def test_only_extras_when_rolls_fail(never_rng):
    for i, biome in enumerate(BIOMES):
        els = generate_biome_elements(i, WIDTH, never_rng)
        assert len(els) == sum(e.count for e in biome.extras)
        assert {e.type for e in els} == {e.type for e in biome.extras}


def test_biome_specific_extras():
    expected = {"forest": "bird", "mountains": "cloud", "city": "antenna",
                "desert": "rock", "island": "boat"}
    for biome in BIOMES:
        assert expected[biome.name] in {e.type for e in biome.extras}


@pytest.mark.parametrize("index", range(len(BIOMES)))
def test_generated_elements_stay_in_span_and_jitter(index):
    rng = random.Random(100 + index)
    offset = WIDTH
    biome = BIOMES[index]
    extra_types = {e.type for e in biome.extras}
    for el in generate_biome_elements(index, offset, rng):
        assert offset <= el.x < offset + SPAN
        assert el.layer in ("back", "mid", "front")
        arch = [a for a in biome.elements
                if a.type == el.type and a.color == el.color and a.layer == el.layer]
        if arch:
            assert (el.x - offset) % BACKGROUND_STRIDE == 0
            assert any(h * 0.925 <= el.height <= h * 1.075 for h in arch[0].heights)
        else:
            assert el.type in extra_types


def test_empty_biome_generates_nothing(always_rng):
    void = Biome(name="void", ground_color="#000000", sky_color="#000000", elements=())
    assert generate_biome_elements(0, 0, always_rng, biomes=[void]) == []


def test_fade_in_plays_once():
    el = BackgroundElement(x=0, height=100, type="tree", color="#000000", layer="mid")
    for _ in range(10):
        el.fade_in_step()
    assert 0.0 < el.opacity < 1.0
    assert not el.faded_in
    for _ in range(15):
        el.fade_in_step()
    assert el.opacity == 1.0
    assert el.faded_in
    el.fade_in_step()
    assert el.opacity == 1.0


def test_screen_x_uses_layer_parallax_and_wraps():
    back = BackgroundElement(x=100, height=1, type="tree", color="#000000", layer="back")
    front = BackgroundElement(x=100, height=1, type="tree", color="#000000", layer="front")
    assert screen_x(back, -1000) == pytest.approx(SPAN - 200)
    assert screen_x(front, -100) == pytest.approx(30)
    assert 0 <= screen_x(front, -123456.7) < SPAN


def test_draw_positions_duplicate_near_wrap_edges():
    left = BackgroundElement(x=10, height=1, type="mountain", color="#000000", layer="front")
    assert draw_positions(left, 0) == [10, 10 + wrap_width()]

    right = BackgroundElement(x=SPAN - 10, height=1, type="cloud", color="#000000", layer="back")
    xs = draw_positions(right, 0)
    assert xs[0] == pytest.approx(SPAN - 10)
    assert xs[1] == pytest.approx(-10)

    middle = BackgroundElement(x=1000, height=1, type="mountain", color="#000000", layer="mid")
    assert draw_positions(middle, 0) == [1000]


def make_scenery(seed=1, rate=0.0002):
    sc = BiomeScenery(rng=random.Random(seed), transition_rate=rate)
    sc.reset()
    return sc


def test_reset_builds_current_and_offscreen_next():
    sc = make_scenery()
    assert sc.current == 0 and sc.transition == 0.0
    assert all(0 <= e.x < SPAN for e in sc.elements)
    assert all(WIDTH <= e.x < WIDTH + SPAN for e in sc.next_elements)


def test_transition_rate_scales_with_speed():
    sc = make_scenery()
    sc.update(4.0)
    assert sc.transition == pytest.approx(0.0008)
    sc.update(10.0)
    assert sc.transition == pytest.approx(0.0028)


def test_swap_promotes_next_elements():
    sc = make_scenery()
    upcoming = sc.next_elements
    sc.transition = 0.9999
    assert sc.update(4.0)
    assert sc.current == 1
    assert sc.transition == 0.0
    assert sc.elements is upcoming
    assert all(not e.faded_in for e in sc.elements)
    city_types = {a.type for a in BIOMES[2].elements} | {e.type for e in BIOMES[2].extras}
    assert {e.type for e in sc.next_elements} <= city_types


def test_swap_keeps_faded_in_scenery_visible():
    sc = make_scenery()
    for _ in range(40):
        assert not sc.update(4.0)
    upcoming = sc.next_elements
    assert upcoming and all(e.opacity == 1.0 for e in upcoming)

    sc.transition = 0.9999
    _, next_alpha = sc.layer_alphas()
    before = max(e.opacity * next_alpha for e in upcoming)
    assert sc.update(4.0)
    cur_alpha, _ = sc.layer_alphas()
    after = max(e.opacity * cur_alpha for e in sc.elements)
    assert after >= before
    assert all(e.opacity == 1.0 for e in sc.elements)

    sc.update(4.0)
    assert all(e.opacity == 1.0 and e.faded_in for e in sc.elements)


def test_biome_index_wraps_around():
    sc = make_scenery()
    sc.current = len(BIOMES) - 1
    sc.transition = 0.99999
    sc.update(8.0)
    assert sc.current == 0


def test_transition_stays_in_unit_interval_and_advances_by_one():
    sc = make_scenery(rate=0.01)
    swaps = 0
    for _ in range(3000):
        before = sc.current
        swapped = sc.update(8.0)
        assert 0.0 <= sc.transition <= 1.0
        if swapped:
            swaps += 1
            assert sc.current == (before + 1) % len(BIOMES)
            assert sc.transition == 0.0
        else:
            assert sc.current == before
    assert swaps >= 5


def test_colors_blend_between_biomes():
    sc = make_scenery()
    assert sc.sky_color() == hex_to_rgb(BIOMES[0].sky_color)
    assert sc.ground_color() == hex_to_rgb(BIOMES[0].ground_color)
    sc.transition = 0.5
    assert sc.layer_alphas() == (0.5, 0.5)
    r, g, b = sc.sky_color()
    r0, g0, b0 = hex_to_rgb(BIOMES[0].sky_color)
    r1, g1, b1 = hex_to_rgb(BIOMES[1].sky_color)
    assert min(r0, r1) <= r <= max(r0, r1)
    assert min(b0, b1) <= b <= max(b0, b1)


def test_update_scrolls_background_at_half_speed():
    sc = make_scenery()
    sc.update(6.0)
    assert sc.scroll_x == pytest.approx(-3.0)
