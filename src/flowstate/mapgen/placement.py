# src/flowstate/mapgen/placement.py
from typing import List, Optional, Sequence, Set, Tuple

from ..config import GeneratorConfig
from ..grid import GridBuilder, Pos
from ..rng import PMRandom
from ..tiles import DEAD, DIRS, Status, TileKind, make_tile, opposite
from .carve import direction, elbow_rotation, pipe_for

# ---------- step 1: endpoints ----------

def place_endpoints(
    b: GridBuilder,
    rng: PMRandom,
    cfg: GeneratorConfig,
) -> Optional[Tuple[List[Pos], Pos]]:
    """
    Sink on the rightmost column, sources on the leftmost. With two sources the
    first is drawn from the top half and the second from the bottom half.
    With one source its row keeps `min_row_separation` from the sink's row.
    Returns (sources, sink), or None when no legal source row exists.
    """
    n = cfg.grid_size
    sink = (rng.next_int(1, n - 2), n - 1)
    if cfg.sources == 2:
        sources = [(rng.next_int(0, n // 2 - 1), 0), (rng.next_int(n // 2, n - 1), 0)]
    else:
        rows = [r for r in range(n) if abs(r - sink[0]) >= cfg.min_row_separation]
        if not rows:
            return None
        sources = [(rng.choice(rows), 0)]
    b.set(sink[0], sink[1], make_tile(TileKind.SINK))
    for r, c in sources:
        b.set(r, c, make_tile(TileKind.SOURCE))
    return sources, sink


def pick_merge(rng: PMRandom, n: int) -> Pos:
    return (rng.next_int(1, n - 2), rng.next_int(2, n - 2))

# ---------- step 5: decoys ----------

def carve_decoys(b: GridBuilder, rng: PMRandom, path_cells: Sequence[Pos], cfg: GeneratorConfig) -> List[Pos]:
    """
    Short dead ends hanging off real path cells. The branch opens toward its
    root cell but the root never opens back, so in the solved layout no
    current reaches it. Terminal tiles are marked forbidden; returns them.
    """
    terminals: List[Pos] = []
    if not path_cells:
        return terminals
    for _ in range(cfg.decoy_count):
        root = rng.choice(path_cells)
        d = rng.next_int(0, 3)
        first = (root[0] + DIRS[d][0], root[1] + DIRS[d][1])
        if not b.in_bounds(*first) or not b.is_empty(*first):
            continue
        chain = [root, first]
        length = rng.next_int(1, cfg.decoy_max_length)
        while len(chain) - 1 < length:
            tail = chain[-1]
            opts = [
                (tail[0] + dr, tail[1] + dc) for dr, dc in DIRS
                if b.in_bounds(tail[0] + dr, tail[1] + dc)
                and b.is_empty(tail[0] + dr, tail[1] + dc)
                and (tail[0] + dr, tail[1] + dc) not in chain
            ]
            if not opts:
                break
            chain.append(rng.choice(opts))
        for i in range(1, len(chain) - 1):
            kind, rot = pipe_for(direction(chain[i - 1], chain[i]), direction(chain[i], chain[i + 1]))
            b.set(chain[i][0], chain[i][1], make_tile(kind, rot))
        end = chain[-1]
        back = opposite(direction(chain[-2], end))
        turn = back + 1 if rng.chance(0.5) else back + 3
        b.set(end[0], end[1], make_tile(TileKind.ELBOW, elbow_rotation(back, turn % 4), Status.FORBIDDEN))
        terminals.append(end)
    return terminals

# ---------- step 6: constraints ----------

def place_bridges(b: GridBuilder, rng: PMRandom, cfg: GeneratorConfig) -> None:
    n = cfg.grid_size
    for _ in range(cfg.bridge_count):
        r, c = rng.next_int(1, n - 2), rng.next_int(1, n - 2)
        if b.is_empty(r, c):
            b.set(r, c, make_tile(TileKind.BRIDGE))


def _annotatable(b: GridBuilder, p: Pos) -> bool:
    t = b.get(*p)
    return t.status is Status.NORMAL and not t.fixed and t.kind not in (TileKind.EMPTY, TileKind.BRIDGE)


def _offset_cell(path: Sequence[Pos], frac: float) -> Optional[Pos]:
    # interior cells only
    if len(path) < 3:
        return None
    i = min(max(int(len(path) * frac), 1), len(path) - 2)
    return path[i]


def place_key_and_lock(b: GridBuilder, first_path: Sequence[Pos], last_path: Sequence[Pos]) -> bool:
    """
    Key at ~20% along the first source's path, lock at ~80% along the
    sink-bound path, so the key always powers up before the lock matters.
    """
    key = _offset_cell(first_path, 0.2)
    lock = _offset_cell(last_path, 0.8)
    if key is None or lock is None or key == lock:
        return False
    if not (_annotatable(b, key) and _annotatable(b, lock)):
        return False
    b.update(key[0], key[1], status=Status.KEY)
    b.update(lock[0], lock[1], status=Status.LOCKED, fixed=True)
    return True


def mark_required(b: GridBuilder, rng: PMRandom, path_cells: Sequence[Pos], target: int) -> int:
    cands = [p for p in path_cells if _annotatable(b, p)]
    rng.shuffle(cands)
    for r, c in cands[:target]:
        b.update(r, c, status=Status.REQUIRED)
    return min(target, len(cands))


def place_capacitor(b: GridBuilder, rng: PMRandom, path_cells: Sequence[Pos]) -> Optional[Pos]:
    """One bonus tile next to, never on, the solution path."""
    on_path: Set[Pos] = set(path_cells)
    cands = []
    for r, c in b.positions():
        if (r, c) in on_path:
            continue
        if not any((r + dr, c + dc) in on_path for dr, dc in DIRS):
            continue
        t = b.get(r, c)
        if t.kind is TileKind.EMPTY or (t.status is Status.NORMAL and not t.fixed):
            cands.append((r, c))
    if not cands:
        return None
    r, c = rng.choice(cands)
    if b.is_empty(r, c):
        kind = rng.choice((TileKind.STRAIGHT, TileKind.ELBOW, TileKind.TEE))
        b.set(r, c, make_tile(kind, rng.next_int(0, 3), Status.CAPACITOR))
    else:
        b.update(r, c, status=Status.CAPACITOR)
    return (r, c)

# ---------- step 7: fill ----------

def roll_kind(rng: PMRandom, weights: Sequence[Tuple[TileKind, float]]) -> TileKind:
    total = sum(w for _, w in weights)
    x = rng.next_float() * total
    for kind, w in weights:
        if x < w:
            return kind
        x -= w
    return weights[-1][0]


def fill_empty(b: GridBuilder, rng: PMRandom, weights: Sequence[Tuple[TileKind, float]]) -> None:
    for r, c in b.positions():
        if not b.is_empty(r, c):
            continue
        kind = roll_kind(rng, weights)
        if kind is TileKind.BLOCK:
            b.set(r, c, make_tile(TileKind.BLOCK))
        else:
            b.set(r, c, make_tile(kind, rng.next_int(0, 3)))

# ---------- step 9: scramble ----------

def scrambles(kind: TileKind, fixed: bool) -> bool:
    # Fixed tiles (endpoints, walls, locks) keep their solved rotation.
    return not fixed and kind not in DEAD


def scramble(b: GridBuilder, rng: PMRandom) -> None:
    for r, c in b.positions():
        t = b.get(r, c)
        if scrambles(t.kind, t.fixed):
            b.update(r, c, rotation=rng.next_int(0, 3))
