#!/usr/bin/env python3
# Minimal interactive viewer for generated levels.
# - Left click: rotate tile (or overload a forbidden tile when charged)
# - R: reset the current seed
# - N: new practice seed
# - S: toggle single/two-source generation
# - 60 Hz fixed loop

import argparse, logging, time
import pygame

from flowstate.config import DEFAULT_CONFIG, SINGLE_SOURCE_CONFIG
from flowstate.engine.state import GameState
from flowstate.render.tileset import Tileset

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=str, default=time.strftime("%Y-%m-%d"), help="Level seed (defaults to today)")
    ap.add_argument("--tile", type=int, default=64, help="Tile size in pixels")
    ap.add_argument("--single", action="store_true", help="Start in the single-source variant")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s: %(message)s")

    single = args.single
    state = GameState(args.seed, config=SINGLE_SOURCE_CONFIG if single else DEFAULT_CONFIG)

    pygame.init()
    clock = pygame.time.Clock()
    size = state.grid.size * args.tile
    screen = pygame.display.set_mode((size, size))
    tiles = Tileset(args.tile)

    running = True
    while running:
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                running = False
            elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
                c, r = ev.pos[0] // args.tile, ev.pos[1] // args.tile
                if state.grid.in_bounds(r, c):
                    state.rotate(r, c)
            elif ev.type == pygame.KEYDOWN:
                if ev.key == pygame.K_ESCAPE:
                    running = False
                elif ev.key == pygame.K_r:
                    state.reset()
                elif ev.key == pygame.K_n:
                    state = GameState(str(int(time.time() * 1000)), config=state.config)
                elif ev.key == pygame.K_s:
                    single = not single
                    state = GameState(state.seed, config=SINGLE_SOURCE_CONFIG if single else DEFAULT_CONFIG)

        screen.fill((0, 0, 0))
        for r, c in state.grid.positions():
            screen.blit(tiles.surface_for(state.grid.tile(r, c)), (c * args.tile, r * args.tile))

        status = "SOLVED" if state.won else f"moves {state.moves}  charge {state.charges}"
        pygame.display.set_caption(f"Flowstate - {state.seed}  [{status}]")
        pygame.display.flip()
        clock.tick(60)

    pygame.quit()

if __name__ == "__main__":
    main()
