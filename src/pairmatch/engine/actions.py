from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SelectTileAction:
    tile_id: int


@dataclass(frozen=True)
class ConcealAction:
    """Recorded when the mismatch window closes, so replays see the same timing."""


Action = SelectTileAction | ConcealAction
