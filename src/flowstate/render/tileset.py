# src/flowstate/render/tileset.py
from __future__ import annotations
import pygame
from functools import lru_cache
from typing import Tuple

from ..engine.flow import COLOR_A, COLOR_B, COLOR_MIXED
from ..tiles import Status, Tile, TileKind, has_side

RGBA = Tuple[int, int, int, int]

BACKGROUND: RGBA = (15, 23, 42, 255)
PIPE_IDLE: RGBA = (71, 85, 105, 255)
FLOW_COLORS = {
    COLOR_A: (34, 211, 238, 255),      # cyan
    COLOR_B: (232, 121, 249, 255),     # magenta
    COLOR_MIXED: (248, 250, 252, 255), # white
}
STATUS_COLORS = {
    Status.REQUIRED: (250, 204, 21, 255),
    Status.FORBIDDEN: (239, 68, 68, 255),
    Status.LOCKED: (148, 163, 184, 255),
    Status.KEY: (74, 222, 128, 255),
    Status.CAPACITOR: (96, 165, 250, 255),
}

def pipe_color(flow_color: int) -> RGBA:
    return FLOW_COLORS.get(flow_color, PIPE_IDLE)

class Tileset:
    """
    Procedural tile surfaces, cached per visual state:
      - pipes drawn from the rotated mask, tinted by flow colour
      - status shown as a small corner badge
      - walls as a filled block, endpoints as a disc
    """
    def __init__(self, tile_size: int):
        self.tile_size = tile_size

    def surface_for(self, t: Tile) -> pygame.Surface:
        return self.get(t.kind, t.mask, t.status, t.flow_color, t.rotation if t.kind is TileKind.DIODE else 0)

    @lru_cache(maxsize=1024)
    def get(self, kind: TileKind, mask: int, status: Status, flow_color: int, diode_dir: int) -> pygame.Surface:
        s = self.tile_size
        img = pygame.Surface((s, s), pygame.SRCALPHA)
        img.fill(BACKGROUND)
        pygame.draw.rect(img, (30, 41, 59, 255), img.get_rect(), 1)
        if kind is TileKind.BLOCK:
            pygame.draw.rect(img, (51, 65, 85, 255), img.get_rect().inflate(-4, -4))
            return img
        mid = s // 2
        w = max(2, s // 6)
        col = pipe_color(flow_color)
        ends = ((mid, 0), (s - 1, mid), (mid, s - 1), (0, mid))
        for d in range(4):
            if has_side(mask, d):
                pygame.draw.line(img, col, (mid, mid), ends[d], w)
        if kind in (TileKind.SOURCE, TileKind.SINK):
            pygame.draw.circle(img, col, (mid, mid), s // 4)
        elif kind is TileKind.DIODE:
            tip = ends[diode_dir]
            pygame.draw.line(img, (0, 0, 0, 255), (mid, mid), ((mid + tip[0]) // 2, (mid + tip[1]) // 2), max(1, w // 2))
        elif mask:
            pygame.draw.circle(img, col, (mid, mid), w // 2 + 1)
        badge = STATUS_COLORS.get(status)
        if badge:
            pygame.draw.circle(img, badge, (s // 6 + 1, s // 6 + 1), max(2, s // 10))
        return img
