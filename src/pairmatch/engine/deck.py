from __future__ import annotations

import random
from collections import Counter

from .types import FILLER_VALUE, MAX_GRID_SIZE, MIN_GRID_SIZE, Deck, Tile


def _check_grid_size(grid_size: int) -> None:
    if not MIN_GRID_SIZE <= grid_size <= MAX_GRID_SIZE:
        raise ValueError(f"Grid size must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}, got {grid_size}.")


def generate_deck(grid_size: int, rng: random.Random) -> Deck:
    """Build a shuffled deck of grid_size**2 tiles.

    Values 1..pair_count appear exactly twice each. An odd cell count gets
    one extra FILLER_VALUE tile that can never be matched.
    """
    _check_grid_size(grid_size)
    total = grid_size * grid_size
    pair_count = total // 2

    values = [n + 1 for n in range(pair_count)] * 2
    if total % 2:
        values.append(FILLER_VALUE)

    rng.shuffle(values)
    return Deck(tiles=tuple(Tile(id=i, value=v) for i, v in enumerate(values)))


def validate_deck(deck: Deck) -> None:
    """Raise ValueError unless the deck has the shape generate_deck produces."""
    n = deck.grid_size
    if n * n != len(deck):
        raise ValueError(f"Deck of {len(deck)} tiles is not a square grid.")
    _check_grid_size(n)

    for i, t in enumerate(deck.tiles):
        if t.id != i:
            raise ValueError(f"Tile at position {i} has id {t.id}.")

    counts = Counter(t.value for t in deck.tiles)
    singles = [v for v, c in counts.items() if c == 1]
    if any(c > 2 for c in counts.values()):
        raise ValueError("A value appears more than twice.")
    if len(singles) > 1:
        raise ValueError("More than one unpaired tile.")
    if singles and (len(deck) % 2 == 0 or singles[0] != FILLER_VALUE):
        raise ValueError("Only an odd grid may hold an unpaired filler tile.")
    if counts[FILLER_VALUE] != len(deck) % 2:
        raise ValueError(f"Value {FILLER_VALUE} is reserved for the single filler tile of an odd grid.")
