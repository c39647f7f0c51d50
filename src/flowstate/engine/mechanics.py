# Side effects the session layer applies after each propagation pass.
# Flow propagation itself never looks at key/lock/capacitor status.

from dataclasses import replace

from ..grid import Grid, GridBuilder
from ..tiles import Status, Tile


def is_charging(tile: Tile) -> bool:
    return tile.status is Status.CAPACITOR and tile.has_flow


def capacitor_powered(grid: Grid) -> bool:
    return any(is_charging(t) for row in grid.tiles for t in row)


def key_powered(grid: Grid) -> bool:
    return any(t.status is Status.KEY and t.has_flow for row in grid.tiles for t in row)


def locked_positions(grid: Grid):
    return grid.with_status(Status.LOCKED)


def unlock(grid: Grid) -> Grid:
    """
    If any key carries flow, every locked tile becomes a normal rotatable tile.
    Returns the same grid object when nothing changes.
    """
    locks = locked_positions(grid)
    if not locks or not key_powered(grid):
        return grid
    b = GridBuilder.from_grid(grid)
    for r, c in locks:
        b.update(r, c, status=Status.NORMAL, fixed=False)
    return b.build()


def overload(grid: Grid, r: int, c: int) -> Grid:
    """Spend a capacitor charge: a forbidden tile turns into a normal one."""
    t = grid.tile(r, c)
    if t.status is not Status.FORBIDDEN:
        raise ValueError(f"tile at {(r, c)} is not forbidden")
    return grid.replace_tile(r, c, replace(t, status=Status.NORMAL, fixed=False))
