import logging

import pytest

from flowstate.config import DEFAULT_CONFIG, SINGLE_SOURCE_CONFIG, GeneratorConfig
from flowstate.engine.flow import propagate_flow
from flowstate.engine.win import is_won
from flowstate.grid import grid_to_records, grid_to_text
from flowstate.mapgen.generator import (
    build_candidate, fallback_level, generate_level, is_valid_solution, scramble_grid,
)
from flowstate.mapgen.placement import scrambles
from flowstate.mapgen.templates import templates_for
from flowstate.rng import PMRandom
from flowstate.tiles import Status, TileKind

SEEDS = [f"2025-03-{d:02d}" for d in range(1, 29)]

def solved_for(seed, cfg=DEFAULT_CONFIG):
    """Replay generate_level's attempt loop and return (solved grid, rng after it)."""
    rng = PMRandom.from_seed(seed)
    for _ in range(cfg.max_attempts):
        solved = build_candidate(rng, cfg)
        if solved is not None and is_valid_solution(solved, cfg):
            return solved, rng
    return None, rng

def test_same_seed_same_grid():
    a = generate_level("2024-12-25")
    b = generate_level("2024-12-25")
    assert a == b
    assert grid_to_records(a) == grid_to_records(b)

def test_seeds_give_different_grids():
    assert len({grid_to_text(generate_level(s)) for s in SEEDS[:6]}) > 1

def test_generated_grid_shape():
    for seed in SEEDS:
        g = generate_level(seed)
        assert g.size == DEFAULT_CONFIG.grid_size
        sources = g.find(TileKind.SOURCE)
        sinks = g.find(TileKind.SINK)
        assert len(sources) == 2 and len(sinks) == 1
        assert all(c == 0 for _, c in sources)
        assert sinks[0][1] == g.size - 1
        assert not any(t.kind is TileKind.EMPTY for row in g.tiles for t in row)

def test_generated_grid_is_a_scramble_of_a_winning_grid():
    for seed in SEEDS[:10]:
        solved, rng = solved_for(seed)
        assert solved is not None, seed
        assert is_won(propagate_flow(solved))
        assert len(solved.with_status(Status.REQUIRED)) >= DEFAULT_CONFIG.required_minimum
        g = generate_level(seed)
        assert g == propagate_flow(scramble_grid(solved, rng))
        for (r, c) in g.positions():
            a, b = solved.tile(r, c), g.tile(r, c)
            assert (a.kind, a.status, a.fixed) == (b.kind, b.status, b.fixed)
            if not scrambles(a.kind, a.fixed):
                assert a.rotation == b.rotation

def test_generated_grid_is_not_presented_solved():
    for seed in SEEDS:
        assert not is_won(generate_level(seed)), seed

def test_generated_grid_comes_back_propagated():
    g = generate_level(SEEDS[0])
    assert propagate_flow(g) == g
    assert g.tile(*g.find(TileKind.SOURCE)[0]).has_flow

def test_single_source_variant():
    for seed in SEEDS[:12]:
        g = generate_level(seed, SINGLE_SOURCE_CONFIG)
        sources = g.find(TileKind.SOURCE)
        sinks = g.find(TileKind.SINK)
        assert len(sources) == 1 and len(sinks) == 1
        assert abs(sources[0][0] - sinks[0][0]) >= SINGLE_SOURCE_CONFIG.min_row_separation
        solved, _ = solved_for(seed, SINGLE_SOURCE_CONFIG)
        assert solved is not None and is_won(propagate_flow(solved))

def test_larger_grid():
    cfg = GeneratorConfig(grid_size=8, max_walk_length=40)
    g = generate_level("big", cfg)
    assert g.size == 8
    solved, _ = solved_for("big", cfg)
    assert solved is not None

def test_fallback_when_budget_is_exhausted(caplog):
    cfg = GeneratorConfig(max_attempts=0)
    with caplog.at_level(logging.WARNING, logger="flowstate.mapgen.generator"):
        g = generate_level("anything", cfg)
    assert "using template" in caplog.text
    layouts = [t.find(TileKind.SOURCE) + t.find(TileKind.SINK) for t in templates_for(2)]
    assert g.find(TileKind.SOURCE) + g.find(TileKind.SINK) in layouts
    assert not any(t.kind is TileKind.EMPTY for row in g.tiles for t in row)
    assert generate_level("anything", cfg) == g

@pytest.mark.parametrize("kwargs", [
    {"grid_size": 5},
    {"sources": 3},
    {"required_minimum": 6, "required_target": 5},
    {"fill_weights": ((TileKind.ELBOW, 0.0),)},
    {"walk_tries": 0},
    {"decoy_max_length": 0},
    {"decoy_count": -1},
    {"bridge_count": -1},
    {"required_target": -1, "required_minimum": -1},
    {"max_walk_length": 1},
])
def test_bad_config_rejected(kwargs):
    with pytest.raises(ValueError):
        GeneratorConfig(**kwargs)

def test_locks_keep_their_solved_rotation():
    cfg = GeneratorConfig(lock_chance=1.0)
    locks = 0
    for seed in SEEDS:
        solved, _ = solved_for(seed, cfg)
        g = generate_level(seed, cfg)
        for r, c in solved.with_status(Status.LOCKED):
            locks += 1
            assert g.tile(r, c).rotation == solved.tile(r, c).rotation, (seed, r, c)
    assert locks > 0

def test_smallest_legal_decoration_settings_generate():
    cfg = GeneratorConfig(decoy_count=0, bridge_count=0, decoy_max_length=1)
    for seed in SEEDS[:5]:
        g = generate_level(seed, cfg)
        assert len(g.find(TileKind.SINK)) == 1
        assert not g.with_status(Status.FORBIDDEN)
    cfg = GeneratorConfig(decoy_max_length=1, decoy_count=6)
    for seed in SEEDS[:5]:
        assert generate_level(seed, cfg).size == cfg.grid_size

def test_fallback_on_larger_grid_keeps_sink_on_right_edge():
    cfg = GeneratorConfig(grid_size=8, max_attempts=0)
    g = generate_level("wide", cfg)
    assert g.size == 8
    sink = g.find(TileKind.SINK)[0]
    assert sink[1] == 7
    assert all(c == 0 for _, c in g.find(TileKind.SOURCE))
    solved = fallback_level(PMRandom.from_seed("wide"), cfg)
    assert is_won(propagate_flow(solved))
