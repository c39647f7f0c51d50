# src/flowstate/mapgen/templates.py
# Hand-authored 6x6 layouts, already in their solved rotations. Used only when
# the generator exhausts its attempt budget.
#
# Tokens: <kind><rotation>[status], see grid.parse_token.
#   S source  K sink  I straight  L elbow  T tee  . empty ; r = required

from typing import Dict, List, Tuple

from ..grid import Grid, GridBuilder, grid_from_text
from ..tiles import LEFT, TileKind, has_side, make_tile

TEMPLATE_SIZE = 6

TWO_SOURCE: Tuple[str, ...] = (
    # Y-shape: both arms drop into a tee in column 2.
    """
    .  .  .   .  .   .
    S0 I1 L2  .  .   .
    .  .  I0r .  .   .
    .  .  T0  I1 I1r K0
    .  .  I0r .  .   .
    S0 I1 L3  .  .   .
    """,
    # Arms meet on row 2 and run straight into the sink.
    """
    S0 L2  .  .   .   .
    .  I0r .  .   .   .
    .  L0  I1 T1  I1r K0
    .  .   .  I0  .   .
    .  .   .  I0r .   .
    S0 I1  I1 L3  .   .
    """,
)

ONE_SOURCE: Tuple[str, ...] = (
    """
    .  .   .  .   .   .
    S0 I1r I1 L2  .   .
    .  .   .  I0r .   .
    .  .   .  L0  I1r K0
    .  .   .  .   .   .
    .  .   .  .   .   .
    """,
    """
    .  .   .   .  .   .
    .  .   .   .  .   .
    S0 L2r .   .  .   .
    .  L0  I1r L2 .   .
    .  .   .   L0 I1r K0
    .  .   .   .  .   .
    """,
)

_PARSED: Dict[int, List[Grid]] = {}


def templates_for(sources: int) -> List[Grid]:
    if sources not in _PARSED:
        texts = TWO_SOURCE if sources == 2 else ONE_SOURCE
        _PARSED[sources] = [grid_from_text(t) for t in texts]
    return _PARSED[sources]


def embed(template: Grid, size: int) -> GridBuilder:
    """
    Copy a template into an empty size x size builder. The template's last
    column moves to the right edge and pipes entering it are stretched with
    horizontal straights, so the sink stays on the rightmost column.
    """
    if size < TEMPLATE_SIZE:
        raise ValueError(f"templates need a grid of at least {TEMPLATE_SIZE}")
    b = GridBuilder(size)
    last = template.cols - 1
    pad = size - template.cols
    for r, c in template.positions():
        b.set(r, c if c < last else c + pad, template.tile(r, c))
    for r in range(template.rows):
        if has_side(template.tile(r, last).mask, LEFT):
            for c in range(last, last + pad):
                b.set(r, c, make_tile(TileKind.STRAIGHT, 1))
    return b
