# horse_dash/game/biomes.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .config import (
    WIDTH, BACKGROUND_STRIDE, BACKGROUND_WRAP_FACTOR, BACKGROUND_SCROLL_FACTOR,
    BIOME_TRANSITION_RATE, HEIGHT_JITTER, FADE_IN_STEP, LAYER_SPEEDS,
)
from .geometry import RGB, lerp_color, wrap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElementArchetype:
    type: str
    color: str
    heights: Tuple[int, ...]
    frequency: float        # Bernoulli probability per stride
    layer: str              # "back" | "mid" | "front"


@dataclass(frozen=True)
class BiomeExtra:
    """Decoration sprinkled at random x positions, outside the stride walk."""
    type: str
    color: str
    layer: str
    count: int
    min_height: float
    height_span: float = 0.0


@dataclass(frozen=True)
class Biome:
    name: str
    ground_color: str
    sky_color: str
    elements: Tuple[ElementArchetype, ...]
    extras: Tuple[BiomeExtra, ...] = ()


BIOMES: Tuple[Biome, ...] = (
    Biome(
        name="forest", ground_color="#3b2d1d", sky_color="#4a7ab3",
        elements=(
            ElementArchetype("cloud", "#ffffff", (450, 500), 0.1, "back"),
            ElementArchetype("tree", "#0e2a0e", (280, 320, 380), 0.4, "back"),
            ElementArchetype("tree", "#133613", (200, 240, 280), 0.35, "mid"),
            ElementArchetype("tree", "#1a421a", (120, 160, 200), 0.3, "front"),
        ),
        extras=(BiomeExtra("bird", "#222222", "mid", 2, 20),),
    ),
    Biome(
        name="mountains", ground_color="#4d4d4d", sky_color="#6b88a5",
        elements=(
            ElementArchetype("cloud", "#f0f0f0", (500, 550), 0.15, "back"),
            ElementArchetype("mountain", "#333333", (350, 400, 450), 0.25, "back"),
            ElementArchetype("mountain", "#404040", (250, 300, 350), 0.3, "mid"),
            ElementArchetype("mountain", "#4d4d4d", (150, 200, 250), 0.35, "front"),
        ),
        extras=(BiomeExtra("cloud", "#e0e6ed", "back", 3, 40, 30),),
    ),
    Biome(
        name="city", ground_color="#2d2d2d", sky_color="#4d576b",
        elements=(
            ElementArchetype("building", "#1a1a1a", (380, 420, 460, 500), 0.35, "back"),
            ElementArchetype("building", "#262626", (280, 320, 360, 400), 0.4, "mid"),
            ElementArchetype("building", "#333333", (180, 220, 260, 300), 0.45, "front"),
        ),
        extras=(BiomeExtra("antenna", "#888888", "back", 2, 40, 40),),
    ),
    Biome(
        name="desert", ground_color="#b3945f", sky_color="#7ab3d9",
        elements=(
            ElementArchetype("cloud", "#ffffff", (480, 530), 0.05, "back"),
            ElementArchetype("mountain", "#997a47", (300, 350, 400), 0.25, "back"),
            ElementArchetype("dune", "#a38654", (200, 250, 300), 0.35, "mid"),
            ElementArchetype("cactus", "#1a3311", (100, 150, 200), 0.3, "front"),
        ),
        extras=(BiomeExtra("rock", "#8b6f3a", "front", 3, 15, 10),),
    ),
    Biome(
        name="island", ground_color="#e6c366", sky_color="#4da6ff",
        elements=(
            ElementArchetype("cloud", "#ffffff", (450, 520), 0.2, "back"),
            ElementArchetype("mountain", "#404040", (320, 360, 400), 0.25, "back"),
            ElementArchetype("palm", "#0e2a0e", (220, 260, 300), 0.35, "mid"),
            ElementArchetype("rock", "#595959", (120, 160, 200), 0.4, "front"),
        ),
        extras=(BiomeExtra("boat", "#a0522d", "front", 2, 16),),
    ),
)

# Rough on-screen widths, only used to decide when a wrapped copy is needed
ESTIMATED_WIDTHS = {
    "tree": 50, "mountain": 180, "building": 40, "dune": 100,
    "cactus": 30, "palm": 60, "rock": 50, "cloud": 75,
}
DEFAULT_ESTIMATED_WIDTH = 60


@dataclass
class BackgroundElement:
    x: float
    height: float
    type: str
    color: str
    layer: str
    opacity: float = 0.0
    faded_in: bool = False

    def fade_in_step(self, step: float = FADE_IN_STEP):
        """Ramp opacity toward 1 once per lifetime; no-op after it completes."""
        if self.faded_in:
            self.opacity = 1.0
            return
        self.opacity += step
        if self.opacity >= 1.0:
            self.opacity = 1.0
            self.faded_in = True

    @property
    def estimated_width(self) -> int:
        return ESTIMATED_WIDTHS.get(self.type, DEFAULT_ESTIMATED_WIDTH)


def wrap_width(width: int = WIDTH) -> float:
    return width * BACKGROUND_WRAP_FACTOR


def generate_biome_elements(biome_index: int, x_offset: float, rng: random.Random,
                            width: int = WIDTH,
                            biomes: Sequence[Biome] = BIOMES) -> List[BackgroundElement]:
    """
    Scatter scenery for one biome across [x_offset, x_offset + wrap width).

    Every BACKGROUND_STRIDE px each archetype rolls its own frequency; hits
    pick a candidate height with up to +/-7.5% jitter. Biome extras are then
    dropped at random x positions over the same span.
    """
    biome = biomes[biome_index]
    span = wrap_width(width)
    elements: List[BackgroundElement] = []

    x = float(x_offset)
    while x < x_offset + span:
        for arch in biome.elements:
            if not arch.heights:
                continue
            if rng.random() < arch.frequency:
                base_h = arch.heights[int(rng.random() * len(arch.heights))]
                jitter = (rng.random() - 0.5) * base_h * HEIGHT_JITTER
                elements.append(BackgroundElement(
                    x=x, height=base_h + jitter, type=arch.type,
                    color=arch.color, layer=arch.layer,
                ))
        x += BACKGROUND_STRIDE

    for extra in biome.extras:
        for _ in range(extra.count):
            elements.append(BackgroundElement(
                x=x_offset + rng.random() * span,
                height=extra.min_height + rng.random() * extra.height_span,
                type=extra.type, color=extra.color, layer=extra.layer,
            ))
    return elements


def screen_x(element: BackgroundElement, scroll_x: float, width: int = WIDTH) -> float:
    """Parallax-scrolled position of an element, wrapped into [0, wrap width)."""
    layer_speed = LAYER_SPEEDS.get(element.layer, LAYER_SPEEDS["front"])
    return wrap(element.x + scroll_x * layer_speed, wrap_width(width))


def draw_positions(element: BackgroundElement, scroll_x: float, width: int = WIDTH) -> List[float]:
    """Screen x plus a wrapped copy when the element straddles a wrap boundary."""
    span = wrap_width(width)
    x = screen_x(element, scroll_x, width)
    half = element.estimated_width / 2
    if x < half:
        return [x, x + span]
    if x > span - half:
        return [x, x - span]
    return [x]


@dataclass
class BiomeScenery:
    """
    Two live element sets: the current biome and the next one, pre-generated
    one screen to the right. `transition` blends from current to next and the
    sets swap when it reaches 1.
    """
    rng: random.Random
    width: int = WIDTH
    biomes: Sequence[Biome] = BIOMES
    transition_rate: float = BIOME_TRANSITION_RATE
    current: int = 0
    transition: float = 0.0
    scroll_x: float = 0.0
    elements: List[BackgroundElement] = field(default_factory=list)
    next_elements: List[BackgroundElement] = field(default_factory=list)

    @property
    def next_index(self) -> int:
        return (self.current + 1) % len(self.biomes)

    @property
    def biome(self) -> Biome:
        return self.biomes[self.current]

    @property
    def next_biome(self) -> Biome:
        return self.biomes[self.next_index]

    def reset(self):
        self.current = 0
        self.transition = 0.0
        self.scroll_x = 0.0
        self.elements = generate_biome_elements(self.current, 0, self.rng, self.width, self.biomes)
        self.next_elements = generate_biome_elements(self.next_index, self.width, self.rng,
                                                     self.width, self.biomes)

    def update(self, speed: float) -> bool:
        """Advance scroll, fades and blend by one tick. Returns True on a biome swap."""
        self.scroll_x -= speed * BACKGROUND_SCROLL_FACTOR
        for el in self.elements:
            el.fade_in_step()
        for el in self.next_elements:
            el.fade_in_step()

        self.transition += self.transition_rate * speed
        if self.transition < 1.0:
            return False

        self.current = self.next_index
        self.transition = 0.0
        self.elements = self.next_elements
        # re-arm the fade latch only; opacity carries over so the swap is seamless
        for el in self.elements:
            el.faded_in = False
        self.next_elements = generate_biome_elements(self.next_index, self.width, self.rng,
                                                     self.width, self.biomes)
        logger.debug("biome -> %s (next %s)", self.biome.name, self.next_biome.name)
        return True

    def sky_color(self) -> RGB:
        return lerp_color(self.biome.sky_color, self.next_biome.sky_color, self.transition)

    def ground_color(self) -> RGB:
        return lerp_color(self.biome.ground_color, self.next_biome.ground_color, self.transition)

    def layer_alphas(self) -> Tuple[float, float]:
        """(alpha of current elements, alpha of next elements)."""
        return 1.0 - self.transition, self.transition
