# src/flowstate/mapgen/generator.py
# Daily level generator: candidate -> validate -> scramble, with a bounded
# attempt loop over a single RNG stream and a template fallback.

import logging
from typing import List, Optional

from ..config import DEFAULT_CONFIG, GeneratorConfig
from ..engine.flow import propagate_flow
from ..engine.win import is_won
from ..grid import Grid, GridBuilder, Pos
from ..rng import PMRandom
from ..tiles import Status
from .carve import fix_junction, orient_endpoint, render_path, walk_path
from .placement import (
    carve_decoys,
    fill_empty,
    mark_required,
    pick_merge,
    place_bridges,
    place_capacitor,
    place_endpoints,
    place_key_and_lock,
    scramble,
)
from .templates import embed, templates_for

logger = logging.getLogger(__name__)


def _walk(b: GridBuilder, rng: PMRandom, start: Pos, end: Pos, cfg: GeneratorConfig) -> Optional[List[Pos]]:
    return walk_path(b, rng, start, end, tries=cfg.walk_tries, max_length=cfg.max_walk_length)


def _unique(cells: List[Pos]) -> List[Pos]:
    seen = set()
    out = []
    for p in cells:
        if p not in seen:
            seen.add(p)
            out.append(p)
    return out


def build_candidate(rng: PMRandom, cfg: GeneratorConfig = DEFAULT_CONFIG) -> Optional[Grid]:
    """
    One generation attempt. Returns the solved (unscrambled) grid, or None
    when a walk gets stuck or the carved route is too short.
    """
    b = GridBuilder(cfg.grid_size)
    placed = place_endpoints(b, rng, cfg)
    if placed is None:
        return None
    sources, sink = placed

    # carve and render one segment at a time so later walks route around it
    if cfg.sources == 2:
        merge = pick_merge(rng, cfg.grid_size)
        segments = []
        for start, end in ((sources[0], merge), (sources[1], merge), (merge, sink)):
            path = _walk(b, rng, start, end, cfg)
            if path is None:
                return None
            render_path(b, path, rng, cfg.diode_chance)
            segments.append(path)
        fix_junction(b, merge, (segments[0][-2], segments[1][-2], segments[2][1]))
    else:
        path = _walk(b, rng, sources[0], sink, cfg)
        if path is None:
            return None
        render_path(b, path, rng, cfg.diode_chance)
        segments = [path]

    for seg in segments:
        if b.get(*seg[0]).fixed:
            orient_endpoint(b, seg[0], seg[1])
        if b.get(*seg[-1]).fixed:
            orient_endpoint(b, seg[-1], seg[-2])

    solution = _unique([p for seg in segments for p in seg])
    if len(solution) < cfg.min_path_cells:
        return None
    interior = [p for p in solution if not b.get(*p).fixed]

    carve_decoys(b, rng, interior, cfg)
    place_bridges(b, rng, cfg)
    if rng.chance(cfg.lock_chance):
        place_key_and_lock(b, segments[0], segments[-1])
    mark_required(b, rng, interior, cfg.required_target)
    if rng.chance(cfg.capacitor_chance):
        place_capacitor(b, rng, solution)
    fill_empty(b, rng, cfg.fill_weights)
    return b.build()


def is_valid_solution(solved: Grid, cfg: GeneratorConfig = DEFAULT_CONFIG) -> bool:
    """The solvability proof: the solved layout wins with enough required tiles."""
    if len(solved.with_status(Status.REQUIRED)) < cfg.required_minimum:
        return False
    return is_won(propagate_flow(solved))


def scramble_grid(solved: Grid, rng: PMRandom, cfg: GeneratorConfig = DEFAULT_CONFIG) -> Grid:
    """Randomize rotations; re-roll (bounded) while the result is still won."""
    out = solved
    for _ in range(cfg.scramble_tries):
        b = GridBuilder.from_grid(solved)
        scramble(b, rng)
        out = b.build()
        if not is_won(propagate_flow(out)):
            break
    return out


def fallback_level(rng: PMRandom, cfg: GeneratorConfig = DEFAULT_CONFIG) -> Grid:
    template = rng.choice(templates_for(cfg.sources))
    b = embed(template, cfg.grid_size)
    fill_empty(b, rng, cfg.fill_weights)
    return b.build()


def generate_level(seed: str, cfg: GeneratorConfig = DEFAULT_CONFIG) -> Grid:
    """
    Total: for any seed returns a solvable, scrambled, already-propagated grid.
    Same seed and config always give the same grid.
    """
    rng = PMRandom.from_seed(seed)
    for attempt in range(1, cfg.max_attempts + 1):
        solved = build_candidate(rng, cfg)
        if solved is None:
            logger.debug("seed %r attempt %d: carve failed", seed, attempt)
            continue
        if not is_valid_solution(solved, cfg):
            logger.debug("seed %r attempt %d: validation failed", seed, attempt)
            continue
        logger.debug("seed %r accepted on attempt %d", seed, attempt)
        return propagate_flow(scramble_grid(solved, rng, cfg))

    logger.warning("seed %r: no valid layout in %d attempts, using template", seed, cfg.max_attempts)
    return propagate_flow(scramble_grid(fallback_level(rng, cfg), rng, cfg))
