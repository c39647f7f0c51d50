from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Sequence, Tuple, Union

from .tiles import Tile, TileKind, Status, make_tile

Pos = Tuple[int, int]  # (row, col)

KIND_CODES = {
    TileKind.EMPTY: ".",
    TileKind.STRAIGHT: "I",
    TileKind.ELBOW: "L",
    TileKind.TEE: "T",
    TileKind.CROSS: "X",
    TileKind.BRIDGE: "B",
    TileKind.DIODE: "D",
    TileKind.SOURCE: "S",
    TileKind.SINK: "K",
    TileKind.BLOCK: "#",
}
STATUS_CODES = {
    Status.NORMAL: "",
    Status.REQUIRED: "r",
    Status.FORBIDDEN: "f",
    Status.LOCKED: "l",
    Status.KEY: "k",
    Status.CAPACITOR: "c",
}
_KIND_BY_CODE = {v: k for k, v in KIND_CODES.items()}
_STATUS_BY_CODE = {v: k for k, v in STATUS_CODES.items() if v}


@dataclass(frozen=True)
class Grid:
    """Row-major, immutable. Generated grids are square; moves produce new grids."""
    tiles: Tuple[Tuple[Tile, ...], ...]

    @property
    def rows(self) -> int:
        return len(self.tiles)

    @property
    def cols(self) -> int:
        return len(self.tiles[0]) if self.tiles else 0

    @property
    def size(self) -> int:
        return self.rows

    def tile(self, r: int, c: int) -> Tile:
        return self.tiles[r][c]

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def positions(self) -> Iterator[Pos]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def find(self, kind: TileKind) -> List[Pos]:
        """Positions of `kind` in scan order (top-to-bottom, left-to-right)."""
        return [(r, c) for r, c in self.positions() if self.tiles[r][c].kind is kind]

    def with_status(self, status: Status) -> List[Pos]:
        return [(r, c) for r, c in self.positions() if self.tiles[r][c].status is status]

    def replace_tile(self, r: int, c: int, tile: Tile) -> "Grid":
        row = self.tiles[r][:c] + (tile,) + self.tiles[r][c + 1:]
        return Grid(self.tiles[:r] + (row,) + self.tiles[r + 1:])

    def rotate(self, r: int, c: int) -> "Grid":
        """
        Apply one player move: turn a single tile 90° clockwise.
        Flow fields are left stale; callers re-run propagate_flow.
        """
        t = self.tiles[r][c]
        if not t.rotatable:
            raise ValueError(f"tile at {(r, c)} ({t.kind.value}) cannot be rotated")
        return self.replace_tile(r, c, replace(t, rotation=(t.rotation + 1) % 4))

    def as_matrix(self) -> List[List[Tile]]:
        return [list(row) for row in self.tiles]


class GridBuilder:
    """Single mutable working grid, owned by the generator until build()."""

    def __init__(self, size: int) -> None:
        self.size = size
        self.cells: List[List[Tile]] = [[Tile() for _ in range(size)] for _ in range(size)]

    @classmethod
    def from_grid(cls, grid: Grid) -> "GridBuilder":
        b = cls(grid.size)
        b.cells = grid.as_matrix()
        return b

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.size and 0 <= c < self.size

    def get(self, r: int, c: int) -> Tile:
        return self.cells[r][c]

    def set(self, r: int, c: int, tile: Tile) -> None:
        self.cells[r][c] = tile

    def update(self, r: int, c: int, **changes) -> None:
        self.cells[r][c] = replace(self.cells[r][c], **changes)

    def is_empty(self, r: int, c: int) -> bool:
        return self.cells[r][c].kind is TileKind.EMPTY

    def positions(self) -> Iterator[Pos]:
        for r in range(self.size):
            for c in range(self.size):
                yield (r, c)

    def build(self) -> Grid:
        return Grid(tuple(tuple(row) for row in self.cells))


# ---------- text codec ----------

def parse_token(token: str) -> Tile:
    """
    '<kind>[<rotation>][<status>]', e.g. 'I1', 'L2r', 'S0', '#', '.'.
    Fixed is derived from kind and status.
    """
    if not token or token[0] not in _KIND_BY_CODE:
        raise ValueError(f"bad tile token {token!r}")
    kind = _KIND_BY_CODE[token[0]]
    rest = token[1:]
    rotation = 0
    if rest[:1].isdigit():
        rotation = int(rest[0])
        rest = rest[1:]
    status = Status.NORMAL
    if rest:
        if rest not in _STATUS_BY_CODE:
            raise ValueError(f"bad status code in tile token {token!r}")
        status = _STATUS_BY_CODE[rest]
    return make_tile(kind, rotation, status)


def format_token(tile: Tile) -> str:
    return f"{KIND_CODES[tile.kind]}{tile.rotation}{STATUS_CODES[tile.status]}"


def grid_from_text(text: Union[str, Sequence[str]]) -> Grid:
    lines = text.splitlines() if isinstance(text, str) else list(text)
    rows = [ln.split() for ln in lines if ln.strip()]
    if not rows or any(len(row) != len(rows[0]) for row in rows):
        raise ValueError(f"expected a rectangular grid, got row lengths {[len(row) for row in rows]}")
    return Grid(tuple(tuple(parse_token(tok) for tok in row) for row in rows))


def grid_to_text(grid: Grid) -> str:
    return "\n".join(" ".join(format_token(t) for t in row) for row in grid.tiles)


# ---------- record codec (persisted form: static fields only) ----------

def grid_to_records(grid: Grid) -> List[List[Dict[str, object]]]:
    return [
        [
            {"kind": t.kind.value, "rotation": t.rotation, "fixed": t.fixed, "status": t.status.value}
            for t in row
        ]
        for row in grid.tiles
    ]


def grid_from_records(records: Sequence[Sequence[Dict[str, object]]]) -> Grid:
    rows = []
    for row in records:
        if len(row) != len(records[0]):
            raise ValueError("records must form a rectangular matrix")
        rows.append(tuple(
            Tile(
                kind=TileKind(rec["kind"]),
                rotation=int(rec["rotation"]),
                fixed=bool(rec["fixed"]),
                status=Status(rec["status"]),
            )
            for rec in row
        ))
    return Grid(tuple(rows))
