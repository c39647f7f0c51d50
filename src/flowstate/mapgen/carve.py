# src/flowstate/mapgen/carve.py
# Greedy randomized walks between fixed cells, and turning a walked path into
# straight / elbow / diode tiles whose openings follow the path.

from typing import List, Optional, Sequence

from ..grid import GridBuilder, Pos
from ..rng import PMRandom
from ..tiles import DIRS, TileKind, make_tile, mask_of, opposite, rotation_for

JITTER = 1.5  # ± added to the Manhattan score; above 1 a farther cell can win


def manhattan(a: Pos, b: Pos) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def direction(a: Pos, b: Pos) -> int:
    """Direction index from `a` to the orthogonally adjacent cell `b`."""
    dr, dc = b[0] - a[0], b[1] - a[1]
    return DIRS.index((dr, dc))


def elbow_rotation(side_a: int, side_b: int) -> int:
    """
    Rotation of the elbow opening on two perpendicular sides.
    The pair sorted low..high is (0,1)->0, (1,2)->1, (2,3)->2, and (0,3)->3.
    """
    lo, hi = sorted((side_a, side_b))
    return 3 if (lo, hi) == (0, 3) else lo


def walk_path(
    b: GridBuilder,
    rng: PMRandom,
    start: Pos,
    end: Pos,
    tries: int = 10,
    max_length: int = 25,
) -> Optional[List[Pos]]:
    """
    Randomized greedy walk from start to end over empty cells (end may be
    occupied). Each step scores the open neighbours by distance to `end`
    plus jitter and takes the lowest. A walk that gets stuck or grows past
    `max_length` is thrown away and restarted; None after `tries` failures.
    """
    for _ in range(tries):
        path = [start]
        visited = {start}
        cur = start
        while cur != end:
            best = None
            best_score = 0.0
            for dr, dc in DIRS:
                n = (cur[0] + dr, cur[1] + dc)
                if not b.in_bounds(*n) or n in visited:
                    continue
                if n != end and not b.is_empty(*n):
                    continue
                score = manhattan(n, end) + (rng.next_float() * 2 - 1) * JITTER
                if best is None or score < best_score:
                    best, best_score = n, score
            if best is None:
                break
            cur = best
            path.append(cur)
            visited.add(cur)
            if len(path) > max_length:
                break
        if cur == end and len(path) <= max_length:
            return path
    return None


def pipe_for(dir_in: int, dir_out: int):
    """(kind, rotation) of the connector entered travelling dir_in and left travelling dir_out."""
    if dir_in == dir_out:
        return TileKind.STRAIGHT, dir_in % 2
    return TileKind.ELBOW, elbow_rotation(opposite(dir_in), dir_out)


def render_path(b: GridBuilder, path: Sequence[Pos], rng: PMRandom, diode_chance: float = 0.0) -> None:
    """
    Write connectors on every interior cell of `path`. Fixed cells are left
    alone. Straight runs may become a diode pointing along the travel direction.
    """
    for i in range(1, len(path) - 1):
        r, c = path[i]
        if b.get(r, c).fixed:
            continue
        dir_in = direction(path[i - 1], path[i])
        dir_out = direction(path[i], path[i + 1])
        kind, rot = pipe_for(dir_in, dir_out)
        if kind is TileKind.STRAIGHT and diode_chance > 0 and rng.chance(diode_chance):
            kind, rot = TileKind.DIODE, dir_in
        b.set(r, c, make_tile(kind, rot))


def orient_endpoint(b: GridBuilder, at: Pos, toward: Pos) -> None:
    """Turn a source or sink so its single opening faces `toward`."""
    t = b.get(*at)
    b.update(at[0], at[1], rotation=rotation_for(t.kind, mask_of(direction(at, toward))))


def fix_junction(b: GridBuilder, merge: Pos, arms: Sequence[Pos]) -> None:
    """
    The merge cell joins two incoming arms and one outgoing arm. Three distinct
    sides give a tee turned to match; anything else degrades to a cross.
    """
    sides = {direction(merge, a) for a in arms}
    if len(sides) == 3:
        b.set(merge[0], merge[1], make_tile(TileKind.TEE, rotation_for(TileKind.TEE, mask_of(*sides))))
    else:
        b.set(merge[0], merge[1], make_tile(TileKind.CROSS))
