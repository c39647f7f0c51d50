#!/usr/bin/env python3
# Render a generated level to PNG using Pillow.

import argparse, logging, os
from PIL import Image, ImageDraw

from flowstate.config import DEFAULT_CONFIG, SINGLE_SOURCE_CONFIG
from flowstate.engine.flow import COLOR_A, COLOR_B, COLOR_MIXED, propagate_flow
from flowstate.grid import grid_from_text
from flowstate.mapgen.generator import generate_level
from flowstate.tiles import Status, TileKind, has_side

BACKGROUND = (15, 23, 42, 255)
PIPE_IDLE = (71, 85, 105, 255)
FLOW = {COLOR_A: (34, 211, 238, 255), COLOR_B: (232, 121, 249, 255), COLOR_MIXED: (248, 250, 252, 255)}
BADGE = {
    Status.REQUIRED: (250, 204, 21, 255),
    Status.FORBIDDEN: (239, 68, 68, 255),
    Status.LOCKED: (148, 163, 184, 255),
    Status.KEY: (74, 222, 128, 255),
    Status.CAPACITOR: (96, 165, 250, 255),
}

def draw_tile(draw, tile, x0, y0, size):
    draw.rectangle((x0, y0, x0 + size - 1, y0 + size - 1), fill=BACKGROUND, outline=(30, 41, 59, 255))
    if tile.kind is TileKind.BLOCK:
        draw.rectangle((x0 + 2, y0 + 2, x0 + size - 3, y0 + size - 3), fill=(51, 65, 85, 255))
        return
    mid = size // 2
    w = max(2, size // 6)
    col = FLOW.get(tile.flow_color, PIPE_IDLE)
    ends = ((mid, 0), (size - 1, mid), (mid, size - 1), (0, mid))
    for d in range(4):
        if has_side(tile.mask, d):
            ex, ey = ends[d]
            draw.line((x0 + mid, y0 + mid, x0 + ex, y0 + ey), fill=col, width=w)
    if tile.kind in (TileKind.SOURCE, TileKind.SINK):
        r = size // 4
        draw.ellipse((x0 + mid - r, y0 + mid - r, x0 + mid + r, y0 + mid + r), fill=col)
    badge = BADGE.get(tile.status)
    if badge:
        r = max(2, size // 10)
        draw.ellipse((x0 + 2, y0 + 2, x0 + 2 + 2 * r, y0 + 2 + 2 * r), fill=badge)

def render_grid(grid, out_png, tile_size=48, margin=0):
    w = grid.cols * tile_size + 2 * margin
    h = grid.rows * tile_size + 2 * margin
    canvas = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    for r, c in grid.positions():
        draw_tile(draw, grid.tile(r, c), margin + c * tile_size, margin + r * tile_size, tile_size)
    if os.path.dirname(out_png):
        os.makedirs(os.path.dirname(out_png), exist_ok=True)
    canvas.save(out_png)

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=str, help="Generate this seed")
    ap.add_argument("--infile", type=str, help="Or read a grid in text form")
    ap.add_argument("--single", action="store_true", help="Single-source variant")
    ap.add_argument("--out", type=str, default="out/level.png", help="PNG path")
    ap.add_argument("--tile", type=int, default=48, help="Tile size in pixels")
    args = ap.parse_args()
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.infile:
        with open(args.infile, encoding="utf-8") as f:
            try:
                grid = propagate_flow(grid_from_text(f.read()))
            except ValueError as e:
                raise SystemExit(f"{args.infile}: {e}")
    elif args.seed is not None:
        grid = generate_level(args.seed, SINGLE_SOURCE_CONFIG if args.single else DEFAULT_CONFIG)
    else:
        raise SystemExit("need --seed or --infile")
    render_grid(grid, args.out, tile_size=args.tile)
    print(f"Wrote {args.out}")

if __name__ == "__main__":
    main()
