from dataclasses import dataclass, field
from typing import Tuple

from .tiles import TileKind

MIN_GRID_SIZE = 6  # fallback templates are authored at this size

DEFAULT_FILL_WEIGHTS: Tuple[Tuple[TileKind, float], ...] = (
    (TileKind.STRAIGHT, 0.25),
    (TileKind.ELBOW, 0.30),
    (TileKind.TEE, 0.10),
    (TileKind.CROSS, 0.05),
    (TileKind.DIODE, 0.10),
    (TileKind.BLOCK, 0.20),
)

@dataclass(frozen=True)
class GeneratorConfig:
    grid_size: int = 6
    sources: int = 2                 # 1 = single path, 2 = colour-mixing merge
    max_attempts: int = 200
    # greedy walk
    walk_tries: int = 10
    max_walk_length: int = 25
    min_path_cells: int = 10         # complexity floor over all carved cells
    min_row_separation: int = 2      # single-source only
    diode_chance: float = 0.1
    # decoration
    decoy_count: int = 3
    decoy_max_length: int = 2
    bridge_count: int = 2
    required_target: int = 5
    required_minimum: int = 3
    lock_chance: float = 0.5
    capacitor_chance: float = 0.75
    fill_weights: Tuple[Tuple[TileKind, float], ...] = field(default=DEFAULT_FILL_WEIGHTS)
    scramble_tries: int = 10

    def __post_init__(self) -> None:
        if self.grid_size < MIN_GRID_SIZE:
            raise ValueError(f"grid_size must be >= {MIN_GRID_SIZE}")
        if self.sources not in (1, 2):
            raise ValueError("sources must be 1 or 2")
        if self.max_attempts < 0 or self.walk_tries < 1 or self.scramble_tries < 1:
            raise ValueError("attempt budgets must be positive")
        if self.max_walk_length < 2:
            raise ValueError("max_walk_length must be >= 2")
        if min(self.decoy_count, self.bridge_count, self.required_target) < 0:
            raise ValueError("decoy_count, bridge_count and required_target must be >= 0")
        if self.decoy_max_length < 1:
            raise ValueError("decoy_max_length must be >= 1")
        if self.required_minimum > self.required_target:
            raise ValueError("required_minimum cannot exceed required_target")
        if not 0 <= self.min_row_separation < self.grid_size:
            raise ValueError("min_row_separation out of range")
        if not self.fill_weights or any(w < 0 for _, w in self.fill_weights):
            raise ValueError("fill_weights must be non-empty and non-negative")
        if sum(w for _, w in self.fill_weights) <= 0:
            raise ValueError("fill_weights must not all be zero")

DEFAULT_CONFIG = GeneratorConfig()
SINGLE_SOURCE_CONFIG = GeneratorConfig(sources=1, min_path_cells=8)
