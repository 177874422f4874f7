from __future__ import annotations

import random
from collections import defaultdict

import pytest

from pairmatch.engine.deck import generate_deck
from pairmatch.engine.scheduler import ManualScheduler
from pairmatch.engine.session import GameSession, new_session, select_tile
from pairmatch.engine.types import Deck, Idle, OnePending, Resolving, Tile


def _deck(values: list[int]) -> Deck:
    return Deck(tiles=tuple(Tile(id=i, value=v) for i, v in enumerate(values)))


def _pairs(deck: Deck) -> list[tuple[int, int]]:
    by_value: dict[int, list[int]] = defaultdict(list)
    for t in deck.tiles:
        by_value[t.value].append(t.id)
    return [(ids[0], ids[1]) for ids in by_value.values() if len(ids) == 2]


def _assert_invariants(session: GameSession) -> None:
    assert len(session.revealed) <= 2
    assert not (session.revealed & session.solved)
    assert len(session.solved) % 2 == 0
    assert session.deck.filler_id not in session.solved


def test_matching_pair_is_solved_and_wins_small_grid() -> None:
    session = new_session(_deck([1, 1, 2, 2]), move_limit=6)

    res = select_tile(session, 0)
    assert res.ok
    assert session.turn == OnePending(tile_id=0)
    assert session.move_count == 1

    res = select_tile(session, 1)
    assert res.ok
    assert session.solved == {0, 1}
    assert session.turn == Idle()
    assert session.move_count == 2
    assert session.outcome == "in_progress"
    assert any(e["type"] == "PAIR_MATCHED" for e in res.events)

    select_tile(session, 2)
    res = select_tile(session, 3)
    assert session.solved == {0, 1, 2, 3}
    assert session.move_count == 4
    assert session.outcome == "won"
    assert res.events[-1] == {"type": "GAME_ENDED", "outcome": "won", "moves": 4}


def test_mismatch_locks_then_conceals_after_delay() -> None:
    scheduler = ManualScheduler()
    session = new_session(_deck([1, 2, 1, 2]), move_limit=10, scheduler=scheduler)

    select_tile(session, 0)
    res = select_tile(session, 1)
    assert res.ok
    assert session.turn == Resolving(first=0, second=1)
    assert session.revealed == {0, 1}
    assert session.move_count == 2

    blocked = select_tile(session, 2)
    assert not blocked.ok
    assert session.move_count == 2

    scheduler.advance(0.5)
    assert session.locked

    scheduler.advance(0.5)
    assert session.turn == Idle()
    assert session.revealed == frozenset()
    assert session.solved == set()
    assert session.move_count == 2
    assert not session.is_face_up(0)
    assert not session.is_face_up(1)
    assert session.pending_task is None


def test_move_limit_reached_is_a_loss_and_blocks_input() -> None:
    scheduler = ManualScheduler()
    session = new_session(_deck([1, 2, 1, 2]), move_limit=4, scheduler=scheduler)

    select_tile(session, 0)
    select_tile(session, 1)
    scheduler.advance(1.0)
    select_tile(session, 0)
    select_tile(session, 3)
    assert session.move_count == 4
    assert session.outcome == "lost"

    scheduler.advance(1.0)
    res = select_tile(session, 0)
    assert not res.ok
    assert res.error == "Game already ended."
    assert session.move_count == 4


def test_odd_grid_filler_does_not_block_victory() -> None:
    deck = generate_deck(3, random.Random(8))
    session = new_session(deck, move_limit=20)
    for a, b in _pairs(deck):
        select_tile(session, a)
        select_tile(session, b)
        _assert_invariants(session)

    assert session.outcome == "won"
    assert len(session.solved) == 8
    assert deck.filler_id not in session.solved
    assert session.move_count == 8


def test_filler_tile_can_be_revealed_but_never_solved() -> None:
    scheduler = ManualScheduler()
    deck = generate_deck(3, random.Random(1))
    filler = deck.filler_id
    assert filler is not None
    other = next(t.id for t in deck.tiles if t.id != filler)
    session = new_session(deck, move_limit=20, scheduler=scheduler)

    select_tile(session, filler)
    select_tile(session, other)
    assert session.locked
    scheduler.advance(1.0)
    assert filler not in session.solved


def test_win_takes_priority_over_exhausted_moves() -> None:
    session = new_session(_deck([1, 1, 2, 2]), move_limit=4)
    for tile_id in (0, 1, 2, 3):
        select_tile(session, tile_id)
    assert session.move_count == session.move_limit
    assert session.outcome == "won"


def test_reselecting_pending_tile_cancels_without_charging() -> None:
    session = new_session(_deck([1, 2, 1, 2]), move_limit=10)
    select_tile(session, 0)
    assert session.move_count == 1

    res = select_tile(session, 0)
    assert res.ok
    assert res.events == [{"type": "SELECTION_CANCELLED", "tile_id": 0}]
    assert session.turn == Idle()
    assert session.revealed == frozenset()
    assert session.move_count == 1

    select_tile(session, 0)
    assert session.move_count == 2


@pytest.mark.parametrize("tile_id", [-1, 4, 100])
def test_unknown_tile_is_rejected(tile_id: int) -> None:
    session = new_session(_deck([1, 1, 2, 2]), move_limit=6)
    res = select_tile(session, tile_id)
    assert not res.ok
    assert res.error == "No such tile."
    assert session.move_count == 0


def test_solved_tile_is_rejected() -> None:
    session = new_session(_deck([1, 1, 2, 2]), move_limit=6)
    select_tile(session, 0)
    select_tile(session, 1)
    res = select_tile(session, 0)
    assert not res.ok
    assert res.error == "Tile already solved."
    assert session.move_count == 2
    assert session.turn == Idle()


def test_new_session_rejects_out_of_range_move_limit() -> None:
    deck = _deck([1, 1, 2, 2])
    with pytest.raises(ValueError):
        new_session(deck, move_limit=3)
    with pytest.raises(ValueError):
        new_session(deck, move_limit=101)


@pytest.mark.parametrize("seed", range(12))
def test_invariants_hold_under_random_play(seed: int) -> None:
    rng = random.Random(seed)
    scheduler = ManualScheduler()
    grid_size = rng.randint(2, 6)
    deck = generate_deck(grid_size, rng)
    session = new_session(deck, move_limit=rng.randint(4, 100), scheduler=scheduler)

    last_moves = 0
    last_solved = 0
    for _ in range(300):
        if rng.random() < 0.25:
            scheduler.advance(rng.choice([0.2, 0.5, 1.0]))
        else:
            select_tile(session, rng.randrange(-1, len(deck) + 1))
        _assert_invariants(session)
        assert session.move_count >= last_moves
        assert len(session.solved) >= last_solved
        assert session.move_count <= session.move_limit
        last_moves = session.move_count
        last_solved = len(session.solved)
        if session.outcome != "in_progress":
            break


def test_filler_value_pair_cannot_fake_a_win() -> None:
    with pytest.raises(ValueError):
        new_session(_deck([0, 0, 1, 1]), move_limit=10)


def test_default_scheduler_is_reachable_from_session() -> None:
    session = new_session(_deck([1, 2, 1, 2]), move_limit=10)
    select_tile(session, 0)
    select_tile(session, 1)
    assert session.locked

    assert isinstance(session.scheduler, ManualScheduler)
    session.scheduler.advance(1.0)
    assert session.turn == Idle()
