# horse_dash/game/game.py
import sys, argparse, logging
from pathlib import Path

import pygame
from pygame import K_SPACE, K_UP, K_ESCAPE, K_RETURN, K_d, K_m, K_BACKSPACE

from .config import WIDTH, HEIGHT, FPS, COLOR_HUD
from .audio import MelodyLoop
from .events import RunEnded, PlaneSpawned
from .leaderboard import Leaderboard, is_valid_name
from .renderer import draw_frame, overlay_panel
from .simulation import Simulation

logger = logging.getLogger(__name__)


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Seed for obstacles and scenery. Omit for a random run.")
    p.add_argument("--scores", type=Path, default=Path.home() / ".horse_dash" / "scores.json",
                   help="High score file")
    p.add_argument("--mute", action="store_true", help="Start with music muted")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args()


def run():
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()
    pygame.display.set_caption("Horse Dash")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 16, bold=True)

    sim = Simulation(seed=args.seed)
    board = Leaderboard(args.scores)
    # no synthesizer wired in: notes are only logged
    music = MelodyLoop(sim.scheduler, lambda: sim.state.music_tempo,
                       play_tone=lambda f, d: logger.debug("tone %.1fHz %dms", f, d),
                       muted=args.mute)
    music.attach(sim.bus)
    sim.bus.subscribe(PlaneSpawned, lambda e: logger.debug("plane overhead: %s", e.name))

    debug = False
    entering_name = False
    name_buf = ""
    name_error = ""
    last_score = 0

    def on_end(event: RunEnded):
        nonlocal entering_name, name_buf, name_error, last_score
        last_score = event.score
        entering_name = board.qualifies(event.score)
        name_buf, name_error = "", ""

    sim.bus.subscribe(RunEnded, on_end)

    while True:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if entering_name:
                    if event.key == K_RETURN:
                        try:
                            board.add(name_buf, last_score)
                            entering_name = False
                        except ValueError:
                            logger.warning("rejected leaderboard name %r", name_buf)
                            name_error = "Use 1-5 letters A-Z"
                    elif event.key == K_BACKSPACE:
                        name_buf = name_buf[:-1]
                    elif event.unicode and len(name_buf) < 5:
                        ch = event.unicode.upper()
                        if is_valid_name(ch):
                            name_buf += ch
                    continue
                if event.key in (K_SPACE, K_UP):
                    sim.request_jump()
                if event.key == K_RETURN and not sim.state.running:
                    sim.request_start()
                if event.key == K_d:
                    debug = not debug
                if event.key == K_m:
                    music.toggle_mute()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if sim.state.running:
                    sim.request_jump()
                elif not entering_name:
                    sim.request_start()

        sim.tick()

        draw_frame(screen, sim.state, font, debug=debug, fps=clock.get_fps())

        if not sim.state.running:
            if entering_name:
                lines = [f"Your Score: {last_score}", "New high score! Enter name:",
                         name_buf + "_"]
                if name_error:
                    lines.append(name_error)
            elif sim.state.game_over:
                lines = [f"Your Score: {last_score}", "", "HIGH SCORES"]
                lines += [f"{i}. {e.name:<5} {e.score:>6}" for i, e in enumerate(board.entries, 1)]
                lines += ["", "ENTER / click to restart"]
            else:
                lines = ["HORSE DASH", "Outrun the zombies!", "",
                         "SPACE / click to jump", "ENTER / click to start"]
            overlay_panel(screen, lines, font, COLOR_HUD)

        pygame.display.flip()


if __name__ == "__main__":
    run()
