from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

Outcome = Literal["in_progress", "won", "lost"]

MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 10
MIN_MOVE_LIMIT = 4
MAX_MOVE_LIMIT = 100

# Paired values start at 1; the odd-grid filler gets a value no pair uses.
FILLER_VALUE = 0


@dataclass(frozen=True)
class Tile:
    id: int
    value: int


@dataclass(frozen=True)
class Deck:
    """Immutable, positionally indexed tile layout: tiles[i].id == i."""

    tiles: tuple[Tile, ...]

    def __len__(self) -> int:
        return len(self.tiles)

    def get(self, tile_id: int) -> Tile:
        return self.tiles[tile_id]

    def contains(self, tile_id: int) -> bool:
        return 0 <= tile_id < len(self.tiles)

    @property
    def grid_size(self) -> int:
        return math.isqrt(len(self.tiles))

    @property
    def filler_id(self) -> int | None:
        for t in self.tiles:
            if t.value == FILLER_VALUE:
                return t.id
        return None

    def matchable_ids(self) -> Sequence[int]:
        return [t.id for t in self.tiles if t.value != FILLER_VALUE]


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class OnePending:
    tile_id: int


@dataclass(frozen=True)
class Resolving:
    """Mismatched pair held face-up; input is locked until it is concealed."""

    first: int
    second: int


TurnState = Idle | OnePending | Resolving
