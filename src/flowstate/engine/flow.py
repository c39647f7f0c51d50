# Breadth-first flow propagation with colour mixing.
#
# Every source seeds the queue with its own colour bit (scan order: first
# source = COLOR_A, second = COLOR_B). A neighbour is (re)queued only when the
# incoming bit adds something to its colour mask, so each tile is expanded at
# most once per colour.

from collections import deque
from dataclasses import replace
from typing import Deque, List, Tuple

from ..grid import Grid
from ..tiles import DIRS, DEAD, Tile, TileKind, has_side, opposite

COLOR_NONE = 0
COLOR_A = 1
COLOR_B = 2
COLOR_MIXED = COLOR_A | COLOR_B

FLOW_DELAY_STEP = 75  # ms per hop, presentation only


def source_color(index: int) -> int:
    # Sources past the second share colour B.
    return COLOR_A if index == 0 else COLOR_B


def connected(a: Tile, b: Tile, d: int) -> bool:
    """True iff `a` opens toward `d` and `b` opens back toward `a`."""
    return has_side(a.mask, d) and has_side(b.mask, opposite(d))


def diode_allows(a: Tile, b: Tile, d: int) -> bool:
    """A diode only conducts along its forward direction, which equals its rotation."""
    if a.kind is TileKind.DIODE and a.rotation != d:
        return False
    if b.kind is TileKind.DIODE and b.rotation != d:
        return False
    return True


def conducts(a: Tile, b: Tile, d: int) -> bool:
    return b.kind not in DEAD and connected(a, b, d) and diode_allows(a, b, d)


def propagate_flow(grid: Grid) -> Grid:
    """
    Recompute has_flow / flow_color / flow_delay for every tile.
    Pure: static fields are copied unchanged and the input grid is untouched.
    A grid without sources comes back with no flow at all.
    """
    rows, cols = grid.rows, grid.cols
    color: List[List[int]] = [[COLOR_NONE] * cols for _ in range(rows)]
    delay: List[List[int]] = [[0] * cols for _ in range(rows)]
    queue: Deque[Tuple[int, int, int, int]] = deque()  # (r, c, colour bit, depth)

    for i, (r, c) in enumerate(grid.find(TileKind.SOURCE)):
        bit = source_color(i)
        color[r][c] |= bit
        queue.append((r, c, bit, 0))

    while queue:
        r, c, bit, depth = queue.popleft()
        cur = grid.tiles[r][c]
        for d, (dr, dc) in enumerate(DIRS):
            nr, nc = r + dr, c + dc
            if not (0 <= nr < rows and 0 <= nc < cols):
                continue
            if not conducts(cur, grid.tiles[nr][nc], d):
                continue
            old = color[nr][nc]
            new = old | bit
            if new == old:
                continue
            if old == COLOR_NONE:
                delay[nr][nc] = (depth + 1) * FLOW_DELAY_STEP
            color[nr][nc] = new
            queue.append((nr, nc, bit, depth + 1))

    return Grid(tuple(
        tuple(
            replace(t, has_flow=color[r][c] != COLOR_NONE, flow_color=color[r][c], flow_delay=delay[r][c])
            for c, t in enumerate(row)
        )
        for r, row in enumerate(grid.tiles)
    ))
