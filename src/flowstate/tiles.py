# Tile kinds, statuses and the connectivity model.
# Masks are 4 bits in Up, Right, Down, Left order: bit d is direction d.

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

UP, RIGHT, DOWN, LEFT = 0, 1, 2, 3
DIRS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, 1), (1, 0), (0, -1))  # (dr, dc)


class TileKind(str, Enum):
    EMPTY = "empty"
    STRAIGHT = "straight"
    ELBOW = "elbow"
    TEE = "tee"
    CROSS = "cross"
    BRIDGE = "bridge"
    DIODE = "diode"
    SOURCE = "source"
    SINK = "sink"
    BLOCK = "block"


class Status(str, Enum):
    NORMAL = "normal"
    REQUIRED = "required"
    FORBIDDEN = "forbidden"
    LOCKED = "locked"
    KEY = "key"
    CAPACITOR = "capacitor"


BASE_MASKS = {
    TileKind.EMPTY:    0b0000,
    TileKind.STRAIGHT: 0b0101,  # |
    TileKind.ELBOW:    0b0011,  # └
    TileKind.TEE:      0b0111,  # ├
    TileKind.CROSS:    0b1111,  # +
    TileKind.BRIDGE:   0b1111,  # crossing, mixes like a cross
    TileKind.DIODE:    0b0101,  # straight; direction checked during flow
    TileKind.SOURCE:   0b0010,  # points Right
    TileKind.SINK:     0b1000,  # accepts from Left
    TileKind.BLOCK:    0b0000,
}

# Kinds that are always fixed in place.
ANCHORED = frozenset({TileKind.SOURCE, TileKind.SINK, TileKind.BLOCK})
# Kinds that never conduct.
DEAD = frozenset({TileKind.EMPTY, TileKind.BLOCK})


def opposite(d: int) -> int:
    return (d + 2) % 4


def base_mask(kind: TileKind) -> int:
    return BASE_MASKS[kind]


def rotate_mask(mask: int, rotation: int) -> int:
    """Cyclic bit-rotation: one clockwise turn moves Up->Right->Down->Left."""
    r = rotation % 4
    return ((mask << r) | (mask >> (4 - r))) & 0xF


def rotated_mask(kind: TileKind, rotation: int) -> int:
    return rotate_mask(BASE_MASKS[kind], rotation)


def has_side(mask: int, d: int) -> bool:
    return bool(mask & (1 << d))


def mask_of(*dirs: int) -> int:
    m = 0
    for d in dirs:
        m |= 1 << d
    return m


def rotation_for(kind: TileKind, mask: int) -> int:
    """
    First rotation of `kind` whose mask equals `mask`.
    Raises ValueError when the kind cannot produce that mask.
    """
    for r in range(4):
        if rotated_mask(kind, r) == mask:
            return r
    raise ValueError(f"{kind.value} cannot expose mask {mask:04b}")


@dataclass(frozen=True)
class Tile:
    kind: TileKind = TileKind.EMPTY
    rotation: int = 0
    fixed: bool = False
    status: Status = Status.NORMAL
    # Derived by flow propagation; never persisted.
    has_flow: bool = False
    flow_color: int = 0
    flow_delay: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.rotation <= 3:
            raise ValueError(f"rotation must be 0..3, got {self.rotation}")
        if self.kind in ANCHORED:
            if not self.fixed:
                raise ValueError(f"{self.kind.value} tiles are always fixed")
            if self.status is not Status.NORMAL:
                raise ValueError(f"{self.kind.value} tiles cannot carry status {self.status.value}")
        elif self.kind is TileKind.EMPTY:
            if self.status is not Status.NORMAL or self.fixed:
                raise ValueError("empty tiles carry no status and are not fixed")
        elif self.status is Status.LOCKED:
            if not self.fixed:
                raise ValueError("locked tiles must be fixed")
        elif self.fixed:
            raise ValueError(f"{self.kind.value} tile with status {self.status.value} cannot be fixed")

    @property
    def mask(self) -> int:
        return rotated_mask(self.kind, self.rotation)

    @property
    def rotatable(self) -> bool:
        return not self.fixed and self.kind not in DEAD


def make_tile(kind: TileKind, rotation: int = 0, status: Status = Status.NORMAL) -> Tile:
    """Build a tile with `fixed` derived from its kind and status."""
    fixed = kind in ANCHORED or status is Status.LOCKED
    return Tile(kind=kind, rotation=rotation, fixed=fixed, status=status)
