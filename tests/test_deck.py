from __future__ import annotations

import random
from collections import Counter

import pytest

from pairmatch.engine.deck import generate_deck, validate_deck
from pairmatch.engine.types import FILLER_VALUE, Deck, Tile


@pytest.mark.parametrize("grid_size", range(2, 11))
@pytest.mark.parametrize("seed", [0, 1, 7, 99, 2024])
def test_deck_size_and_pair_multiplicities(grid_size: int, seed: int) -> None:
    deck = generate_deck(grid_size, random.Random(seed))
    total = grid_size * grid_size
    assert len(deck) == total
    assert [t.id for t in deck.tiles] == list(range(total))

    counts = Counter(t.value for t in deck.tiles)
    pair_values = [v for v in counts if v != FILLER_VALUE]
    assert sorted(pair_values) == list(range(1, total // 2 + 1))
    assert all(counts[v] == 2 for v in pair_values)
    if total % 2:
        assert counts[FILLER_VALUE] == 1
    else:
        assert FILLER_VALUE not in counts


def test_odd_grid_has_exactly_one_unpairable_tile() -> None:
    deck = generate_deck(3, random.Random(5))
    assert deck.filler_id is not None
    assert deck.get(deck.filler_id).value == FILLER_VALUE
    assert len(deck.matchable_ids()) == 8
    assert deck.filler_id not in deck.matchable_ids()


def test_same_seed_same_layout() -> None:
    a = generate_deck(6, random.Random(42))
    b = generate_deck(6, random.Random(42))
    assert a == b


def test_shuffle_varies_between_games() -> None:
    rng = random.Random(3)
    layouts = {tuple(t.value for t in generate_deck(4, rng).tiles) for _ in range(10)}
    assert len(layouts) > 1


@pytest.mark.parametrize("grid_size", [0, 1, 11, -3])
def test_out_of_range_grid_size_is_rejected(grid_size: int) -> None:
    with pytest.raises(ValueError):
        generate_deck(grid_size, random.Random(0))


def test_generated_decks_pass_validation() -> None:
    rng = random.Random(11)
    for n in range(2, 11):
        validate_deck(generate_deck(n, rng))


def _deck(values: list[int]) -> Deck:
    return Deck(tiles=tuple(Tile(id=i, value=v) for i, v in enumerate(values)))


@pytest.mark.parametrize(
    "values",
    [
        [1, 1, 2],  # not square
        [1, 1, 1, 1],  # value used four times
        [1, 2, 3, 3],  # two singles
        [1, 1, 2, 0],  # filler in an even grid
        [0, 0, 1, 1],  # filler value used as a pair
        [1],  # too small
    ],
)
def test_malformed_decks_are_rejected(values: list[int]) -> None:
    with pytest.raises(ValueError):
        validate_deck(_deck(values))


def test_non_positional_ids_are_rejected() -> None:
    deck = Deck(tiles=(Tile(0, 1), Tile(2, 1), Tile(1, 2), Tile(3, 2)))
    with pytest.raises(ValueError):
        validate_deck(deck)
