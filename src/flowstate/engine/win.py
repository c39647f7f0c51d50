from ..grid import Grid
from ..tiles import Status, TileKind
from .flow import COLOR_NONE, source_color


def target_color(grid: Grid) -> int:
    """Union of every source's colour: what the sink must receive."""
    out = COLOR_NONE
    for i, _ in enumerate(grid.find(TileKind.SOURCE)):
        out |= source_color(i)
    return out


def is_won(grid: Grid) -> bool:
    """
    Expects a grid fresh out of propagate_flow. True iff:
      - every sink carries the full merged colour (and there is a sink),
      - every required tile has flow,
      - no forbidden tile has flow.
    Grids without sources or sinks are simply not won.
    """
    target = target_color(grid)
    if target == COLOR_NONE:
        return False
    sinks = 0
    for row in grid.tiles:
        for t in row:
            if t.kind is TileKind.SINK:
                sinks += 1
                if t.flow_color != target:
                    return False
            if t.status is Status.REQUIRED and not t.has_flow:
                return False
            if t.status is Status.FORBIDDEN and t.has_flow:
                return False
    return sinks > 0
