# horse_dash/game/renderer.py
from __future__ import annotations
import math
from typing import Tuple

import pygame

from .config import (
    WIDTH, HEIGHT, GROUND_Y, HORIZON_OFFSET, LAYERS, LAYER_OPACITY,
    COLOR_FG, COLOR_HUD, COLOR_OBSTACLE, COLOR_PLAYER, COLOR_DANGER,
)
from .biomes import BackgroundElement, BiomeScenery, draw_positions
from .geometry import RGB, hex_to_rgb, shade_color
from .simulation import RunState

HORIZON_Y = HEIGHT - HORIZON_OFFSET


def _vertical_gradient(surf: pygame.Surface, rect: pygame.Rect, stops):
    """Fill rect with a top-to-bottom gradient through (pos, color) stops."""
    for row in range(rect.height):
        t = row / max(1, rect.height - 1)
        for (p0, c0), (p1, c1) in zip(stops, stops[1:]):
            if p0 <= t <= p1:
                k = (t - p0) / max(1e-6, p1 - p0)
                color = tuple(int(a + (b - a) * k) for a, b in zip(c0, c1))
                pygame.draw.line(surf, color, (rect.left, rect.top + row),
                                 (rect.right, rect.top + row))
                break


def draw_sky_and_ground(surf: pygame.Surface, state: RunState):
    sky = state.scenery.sky_color()
    ground = state.scenery.ground_color()
    _vertical_gradient(surf, pygame.Rect(0, 0, WIDTH, HORIZON_Y),
                       [(0.0, shade_color(sky, 30)), (0.5, sky), (1.0, shade_color(sky, -30))])
    _vertical_gradient(surf, pygame.Rect(0, HORIZON_Y, WIDTH, HEIGHT - HORIZON_Y),
                       [(0.0, shade_color(ground, -40)), (0.3, shade_color(ground, -20)),
                        (1.0, ground)])


def trunk_color(scenery: BiomeScenery) -> RGB:
    """Tree trunks of both element sets use the darkened ground of the current biome."""
    return shade_color(hex_to_rgb(scenery.biome.ground_color), -60)


def _draw_shape(surf: pygame.Surface, el: BackgroundElement, x: float, color, trunk: RGB):
    base_y = HORIZON_Y
    scale = {"back": 1.1, "mid": 1.0}.get(el.layer, 0.9)
    h = el.height * scale
    if el.type == "tree":
        trunk_h = h * 0.2
        pygame.draw.rect(surf, (*trunk, color[3]),
                         (x - 4, base_y - trunk_h, 8, trunk_h))
        pygame.draw.polygon(surf, color, [(x, base_y - h), (x + 25, base_y - trunk_h),
                                          (x - 25, base_y - trunk_h)])
    elif el.type == "mountain":
        pygame.draw.polygon(surf, color, [(x - 90, base_y), (x, base_y - h), (x + 90, base_y)])
    elif el.type == "building":
        pygame.draw.rect(surf, color, (x - 20, base_y - h, 40, h))
    elif el.type == "dune":
        pygame.draw.ellipse(surf, color, (x - 50, base_y - h * 0.6, 100, h * 1.2))
    elif el.type == "cactus":
        pygame.draw.rect(surf, color, (x - 4, base_y - h, 8, h))
        pygame.draw.rect(surf, color, (x - 20, base_y - h * 0.6, 16, 8))
    elif el.type == "palm":
        pygame.draw.rect(surf, (122, 92, 61, color[3]), (x - 3, base_y - h, 6, h))
        for i in range(5):
            a = (math.pi / 5) * i - math.pi / 2.5
            pygame.draw.line(surf, color, (x, base_y - h),
                             (x + math.cos(a) * 30, base_y - h + math.sin(a) * 30), 4)
    elif el.type == "rock":
        pygame.draw.polygon(surf, color, [(x - 20, base_y), (x - 15, base_y - h * 0.6),
                                          (x + 5, base_y - h), (x + 18, base_y - h * 0.5),
                                          (x + 25, base_y)])
    elif el.type == "cloud":
        # clouds use their height as a screen y
        cy = min(el.height, HORIZON_Y - 20)
        pygame.draw.ellipse(surf, color, (x - 37, cy - 20, 75, 40))
        pygame.draw.ellipse(surf, color, (x - 50, cy - 10, 60, 30))
    elif el.type == "bird":
        pygame.draw.lines(surf, color, False, [(x - 6, el.height + 60), (x, el.height + 64),
                                               (x + 6, el.height + 60)], 2)
    elif el.type == "boat":
        pygame.draw.polygon(surf, color, [(x - 14, base_y - h), (x + 14, base_y - h),
                                          (x + 8, base_y), (x - 8, base_y)])
    elif el.type == "antenna":
        pygame.draw.line(surf, color, (x, base_y - 300), (x, base_y - 300 - h), 2)


def draw_background_elements(surf: pygame.Surface, state: RunState):
    scenery = state.scenery
    cur_alpha, next_alpha = scenery.layer_alphas()
    trunk = trunk_color(scenery)
    layer_surf = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
    for layer in LAYERS:
        layer_surf.fill((0, 0, 0, 0))
        for elements, blend in ((scenery.elements, cur_alpha), (scenery.next_elements, next_alpha)):
            if blend <= 0:
                continue
            for el in elements:
                if el.layer != layer:
                    continue
                alpha = el.opacity * LAYER_OPACITY[layer] * blend
                if alpha <= 0:
                    continue
                color = (*hex_to_rgb(el.color), int(255 * alpha))
                for x in draw_positions(el, scenery.scroll_x):
                    half = el.estimated_width / 2
                    if x + half < -half or x - half > WIDTH + half:
                        continue
                    _draw_shape(layer_surf, el, x, color, trunk)
        surf.blit(layer_surf, (0, 0))


def draw_plane(surf: pygame.Surface, state: RunState):
    plane = state.plane
    if not plane.active or plane.plane is None:
        return
    pt = plane.plane
    color = hex_to_rgb(pt.color)
    body = pygame.Rect(0, 0, pt.width, pt.height)
    body.center = (int(plane.x), int(plane.y))
    pygame.draw.ellipse(surf, color, body)
    pygame.draw.polygon(surf, (85, 85, 85), [
        (body.centerx - pt.width * 0.1, body.centery),
        (body.centerx - pt.width * 0.3, body.centery - pt.height * 1.5),
        (body.centerx - pt.width * 0.4, body.centery - pt.height * 1.4),
        (body.centerx - pt.width * 0.15, body.centery),
    ])


def draw_player(surf: pygame.Surface, state: RunState, tick: int):
    p = state.player
    color = COLOR_DANGER if state.game_over else COLOR_PLAYER
    bounce = 0 if not p.on_ground else int(math.sin(tick * 0.2) * 2)
    r = p.rect.move(0, bounce)
    pygame.draw.rect(surf, color, r, border_radius=4)
    pygame.draw.circle(surf, (46, 46, 46), (r.centerx, r.top - 6), 5)


def draw_obstacles(surf: pygame.Surface, state: RunState, tick: int):
    wobble = int(math.sin(tick * 0.1) * 2)
    for ob in state.obstacles:
        r = ob.rect
        pygame.draw.rect(surf, COLOR_OBSTACLE, r)
        pygame.draw.circle(surf, (74, 108, 26), (r.centerx + wobble, r.top - 5), 6)


def draw_speech(surf: pygame.Surface, state: RunState, font: pygame.font.Font):
    if not state.plane.speech_visible:
        return
    p = state.player
    txt = font.render(state.plane.speech_text, True, (0, 0, 0))
    x = int(p.x + p.w * 4)
    y = int(p.y - p.h - 40)
    bubble = pygame.Rect(0, 0, txt.get_width() + 8, txt.get_height() + 8)
    bubble.midbottom = (x, y)
    pygame.draw.rect(surf, (255, 255, 255), bubble)
    pygame.draw.rect(surf, (0, 0, 0), bubble, 2)
    pygame.draw.polygon(surf, (255, 255, 255), [(x - 5, y), (x, y + 8), (x + 5, y)])
    surf.blit(txt, (bubble.left + 4, bubble.top + 4))


def draw_hud(surf: pygame.Surface, state: RunState, font: pygame.font.Font,
             debug: bool = False, fps: float = 0.0):
    surf.blit(font.render(f"Score: {state.score}", True, COLOR_FG), (12, 10))
    if debug:
        lines = [
            f"FPS: {fps:.0f}",
            f"Speed: {state.speed:.2f}",
            f"Music Tempo: {state.music_tempo:.2f}",
            f"Planes: {state.plane.count}",
            f"Biome: {state.scenery.biome.name} -> {state.scenery.next_biome.name} "
            f"({state.scenery.transition:.2f})",
            f"Min gap: {state.min_gap}",
        ]
        for i, msg in enumerate(lines):
            surf.blit(font.render(msg, True, COLOR_HUD), (12, 34 + i * 18))


def draw_frame(surf: pygame.Surface, state: RunState, font: pygame.font.Font,
               debug: bool = False, fps: float = 0.0):
    """Render one frame of the run. Reads state only."""
    draw_sky_and_ground(surf, state)
    draw_background_elements(surf, state)
    pygame.draw.rect(surf, shade_color(state.scenery.ground_color(), -20),
                     (0, GROUND_Y, WIDTH, HEIGHT - GROUND_Y))
    draw_plane(surf, state)
    draw_player(surf, state, state.tick)
    draw_speech(surf, state, font)
    draw_obstacles(surf, state, state.tick)
    draw_hud(surf, state, font, debug=debug, fps=fps)


def overlay_panel(surf: pygame.Surface, lines, font: pygame.font.Font,
                  color: RGB = COLOR_FG) -> Tuple[int, int]:
    """Centered translucent panel with text lines. Returns the panel size."""
    w = max(font.size(l)[0] for l in lines) + 40
    h = 24 * len(lines) + 24
    panel = pygame.Surface((w, h), pygame.SRCALPHA)
    panel.fill((10, 20, 35, 190))
    x, y = (WIDTH - w) // 2, (HEIGHT - h) // 2
    surf.blit(panel, (x, y))
    for i, msg in enumerate(lines):
        t = font.render(msg, True, color)
        surf.blit(t, (x + (w - t.get_width()) // 2, y + 12 + i * 24))
    return w, h
