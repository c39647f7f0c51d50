from flowstate.engine.flow import propagate_flow
from flowstate.engine.win import is_won
from flowstate.grid import GridBuilder
from flowstate.mapgen.carve import (
    direction, elbow_rotation, fix_junction, manhattan, orient_endpoint, pipe_for,
    render_path, walk_path,
)
from flowstate.rng import PMRandom
from flowstate.tiles import DOWN, LEFT, RIGHT, UP, TileKind, make_tile, mask_of, opposite, rotated_mask

def test_elbow_rotation_table():
    assert elbow_rotation(UP, RIGHT) == 0
    assert elbow_rotation(DOWN, RIGHT) == 1
    assert elbow_rotation(LEFT, DOWN) == 2
    assert elbow_rotation(UP, LEFT) == 3
    for a in range(4):
        b = (a + 1) % 4
        assert rotated_mask(TileKind.ELBOW, elbow_rotation(a, b)) == mask_of(a, b)

def test_pipe_for_opens_entry_and_exit():
    for dir_in in range(4):
        for dir_out in range(4):
            if dir_out == opposite(dir_in):
                continue
            kind, rot = pipe_for(dir_in, dir_out)
            m = rotated_mask(kind, rot)
            assert m == mask_of(opposite(dir_in), dir_out), (dir_in, dir_out)

def test_walk_reaches_target_with_adjacent_steps():
    b = GridBuilder(6)
    path = walk_path(b, PMRandom.from_seed("walk"), (0, 0), (4, 5))
    assert path is not None
    assert path[0] == (0, 0) and path[-1] == (4, 5)
    assert len(set(path)) == len(path)
    assert len(path) <= 25
    for a, c in zip(path, path[1:]):
        assert manhattan(a, c) == 1

def test_walk_is_deterministic():
    a = walk_path(GridBuilder(6), PMRandom.from_seed("same"), (1, 0), (3, 5))
    b = walk_path(GridBuilder(6), PMRandom.from_seed("same"), (1, 0), (3, 5))
    assert a == b

def test_walk_gives_up_when_walled_off():
    b = GridBuilder(6)
    for r in range(6):
        b.set(r, 3, make_tile(TileKind.BLOCK))
    assert walk_path(b, PMRandom.from_seed("stuck"), (0, 0), (0, 5), tries=3) is None

def test_walk_respects_length_cap():
    b = GridBuilder(6)
    assert walk_path(b, PMRandom.from_seed("short"), (0, 0), (5, 5), tries=3, max_length=5) is None

def test_rendered_path_conducts():
    b = GridBuilder(6)
    src, sink = (4, 0), (1, 5)
    b.set(*src, make_tile(TileKind.SOURCE))
    b.set(*sink, make_tile(TileKind.SINK))
    rng = PMRandom.from_seed("render")
    path = walk_path(b, rng, src, sink)
    assert path is not None
    render_path(b, path, rng, diode_chance=0.5)
    orient_endpoint(b, src, path[1])
    orient_endpoint(b, sink, path[-2])
    g = propagate_flow(b.build())
    assert all(g.tile(*p).has_flow for p in path)
    assert is_won(g)

def test_diodes_point_along_travel():
    b = GridBuilder(6)
    path = [(2, c) for c in range(6)]
    render_path(b, path, PMRandom.from_seed("d"), diode_chance=1.0)
    for p in path[1:-1]:
        t = b.get(*p)
        assert t.kind is TileKind.DIODE and t.rotation == RIGHT

def test_junction_tee_and_cross():
    b = GridBuilder(6)
    merge = (2, 2)
    fix_junction(b, merge, [(1, 2), (3, 2), (2, 3)])
    t = b.get(*merge)
    assert t.kind is TileKind.TEE and t.mask == mask_of(UP, DOWN, RIGHT)
    fix_junction(b, merge, [(1, 2), (1, 2), (2, 3)])
    assert b.get(*merge).kind is TileKind.CROSS

def test_direction():
    assert direction((2, 2), (1, 2)) == UP
    assert direction((2, 2), (2, 1)) == LEFT
