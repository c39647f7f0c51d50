# src/flowstate/engine/state.py
# In-memory move loop: rotate -> propagate -> mechanics hooks -> win check.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CONFIG, GeneratorConfig
from ..grid import Grid
from ..mapgen.generator import generate_level
from ..tiles import Status
from .flow import propagate_flow
from .mechanics import capacitor_powered, overload, unlock
from .win import is_won

logger = logging.getLogger(__name__)

MAX_CHARGES = 1


@dataclass
class MoveOut:
    applied: bool
    won: bool
    unlocked: bool = False
    charged: bool = False
    overloaded: bool = False


class GameState:
    def __init__(
        self,
        seed: str,
        *,
        config: GeneratorConfig = DEFAULT_CONFIG,
        grid: Optional[Grid] = None,
    ) -> None:
        self.seed = seed
        self.config = config
        self.moves = 0
        self.charges = 0
        self.won = False
        # A restored grid is re-flowed; persisted grids carry no flow fields.
        self.grid = propagate_flow(grid) if grid is not None else generate_level(seed, config)
        self._settle()

    # ---- helpers ----
    def _settle(self) -> MoveOut:
        """Apply the post-propagation hooks to self.grid and evaluate the win."""
        out = MoveOut(applied=True, won=False)
        unlocked = unlock(self.grid)
        if unlocked is not self.grid:
            logger.info("key powered: locks released")
            self.grid = unlocked
            out.unlocked = True
        if capacitor_powered(self.grid) and self.charges < MAX_CHARGES:
            self.charges += 1
            logger.info("capacitor charged (%d)", self.charges)
            out.charged = True
        self.won = is_won(self.grid)
        out.won = self.won
        return out

    # ---- commands ----
    def rotate(self, r: int, c: int) -> MoveOut:
        """
        Player click on (r, c). A forbidden tile clicked while holding a charge
        is overloaded instead of rotated. Fixed tiles and moves after a win are
        ignored.
        """
        if self.won:
            return MoveOut(applied=False, won=True)
        t = self.grid.tile(r, c)
        if t.status is Status.FORBIDDEN and self.charges > 0:
            self.charges -= 1
            self.grid = propagate_flow(overload(self.grid, r, c))
            logger.info("overloaded forbidden tile at %s", (r, c))
            out = self._settle()
            out.overloaded = True
            return out
        if not t.rotatable:
            return MoveOut(applied=False, won=self.won)
        self.grid = propagate_flow(self.grid.rotate(r, c))
        self.moves += 1
        out = self._settle()
        if out.won:
            logger.info("seed %r solved in %d moves", self.seed, self.moves)
        return out

    def reset(self) -> None:
        """Regenerate the same seed from scratch."""
        self.grid = generate_level(self.seed, self.config)
        self.moves = 0
        self.charges = 0
        self.won = False
        self._settle()
