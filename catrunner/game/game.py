# catrunner/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_UP, K_w, K_RETURN, K_ESCAPE
from .config import WIDTH, HEIGHT, FPS, HIGH_SCORE_FILE, SPRITE_FILE
from .highscore import FileHighScoreStore
from .render import Renderer, Hud, load_sprite
from .session import GameSim

JUMP_KEYS = (K_SPACE, K_UP, K_w)

def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Obstacle seed. Omit for a random run each launch.")
    p.add_argument("--high-score-file", type=str, default=HIGH_SCORE_FILE,
                   help="JSON file holding the best score.")
    p.add_argument("--sprite", type=str, default=SPRITE_FILE,
                   help="Optional cat image; the pixel cat is drawn if it is missing.")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()

def run():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    pygame.init()
    pygame.display.set_caption("Cat Runner")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()

    hud = Hud(pygame.font.SysFont("jetbrainsmono", 18))
    renderer = Renderer(screen, sprite=load_sprite(args.sprite))
    sim = GameSim(seed=args.seed, store=FileHighScoreStore(args.high_score_file), hud=hud)
    print(f"Seed: {sim.level.seed}   Best: {sim.session.high_score}")

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                # pygame only repeats KEYDOWN when key.set_repeat is on, so jumps stay edge-triggered
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key in JUMP_KEYS:
                    sim.jump()
                if event.key == K_RETURN and sim.session.over:
                    sim.restart()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if sim.session.over:
                    sim.restart()
                else:
                    sim.jump()

        snap = sim.tick(pygame.time.get_ticks())

        # --- Render ---
        renderer.draw(snap)
        hud.draw(screen)
        pygame.display.flip()
        clock.tick(FPS)

if __name__ == "__main__":
    run()
