from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .actions import Action, ConcealAction, SelectTileAction
from .deck import validate_deck
from .scheduler import ManualScheduler, ScheduledTask, Scheduler
from .types import (
    MAX_MOVE_LIMIT,
    MIN_MOVE_LIMIT,
    Deck,
    Idle,
    OnePending,
    Outcome,
    Resolving,
    TurnState,
)

Event = dict[str, object]

MISMATCH_DELAY_SECONDS = 1.0


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None


@dataclass
class GameSession:
    deck: Deck
    move_limit: int
    scheduler: Scheduler
    mismatch_delay: float = MISMATCH_DELAY_SECONDS
    turn: TurnState = field(default_factory=Idle)
    solved: set[int] = field(default_factory=set)
    move_count: int = 0
    outcome: Outcome = "in_progress"
    closed: bool = False
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)
    pending_task: ScheduledTask | None = None

    @property
    def revealed(self) -> frozenset[int]:
        turn = self.turn
        if isinstance(turn, OnePending):
            return frozenset((turn.tile_id,))
        if isinstance(turn, Resolving):
            return frozenset((turn.first, turn.second))
        return frozenset()

    @property
    def locked(self) -> bool:
        return isinstance(self.turn, Resolving)

    @property
    def started(self) -> bool:
        return self.move_count > 0 or not isinstance(self.turn, Idle)

    def is_face_up(self, tile_id: int) -> bool:
        return tile_id in self.solved or tile_id in self.revealed

    def is_matched(self, tile_id: int) -> bool:
        return tile_id in self.solved


def _rejection(session: GameSession, tile_id: int) -> str | None:
    if session.closed:
        return "Session closed."
    if session.outcome != "in_progress":
        return "Game already ended."
    if not session.deck.contains(tile_id):
        return "No such tile."
    if tile_id in session.solved:
        return "Tile already solved."
    if session.locked:
        return "Waiting for mismatched pair to hide."
    if session.move_count >= session.move_limit:
        return "No moves left."
    return None


def _reveal(session: GameSession, tile_id: int) -> None:
    session.move_count += 1
    session.event_log.append(
        {
            "type": "TILE_REVEALED",
            "tile_id": tile_id,
            "value": session.deck.get(tile_id).value,
            "moves": session.move_count,
        }
    )


def _on_mismatch_timeout(session: GameSession) -> None:
    if session.closed or not session.locked:
        return
    conceal_mismatch(session)


def _resolve_pair(session: GameSession, first: int, second: int) -> None:
    a = session.deck.get(first)
    b = session.deck.get(second)
    if a.value == b.value:
        session.solved.update((first, second))
        session.turn = Idle()
        session.event_log.append({"type": "PAIR_MATCHED", "tiles": [first, second], "value": a.value})
        return

    session.turn = Resolving(first=first, second=second)
    session.event_log.append({"type": "PAIR_MISMATCHED", "tiles": [first, second]})
    session.pending_task = session.scheduler.call_later(
        session.mismatch_delay, lambda: _on_mismatch_timeout(session)
    )


def _all_matched(session: GameSession) -> bool:
    return set(session.deck.matchable_ids()) <= session.solved


def _update_outcome(session: GameSession) -> None:
    if session.outcome != "in_progress":
        return
    # Win is checked first: the final match on the final move is a win.
    if _all_matched(session):
        session.outcome = "won"
    elif session.move_count >= session.move_limit:
        session.outcome = "lost"
    else:
        return
    session.event_log.append({"type": "GAME_ENDED", "outcome": session.outcome, "moves": session.move_count})


def select_tile(session: GameSession, tile_id: int) -> StepResult:
    """Reveal a tile, or cancel the pending one if it is selected again.

    Invalid selections are rejected without touching the session; the reason
    is reported in StepResult.error.
    """
    error = _rejection(session, tile_id)
    if error is not None:
        return StepResult(ok=False, events=[], error=error)

    session.action_log.append(SelectTileAction(tile_id=tile_id))
    before = len(session.event_log)

    turn = session.turn
    if isinstance(turn, OnePending):
        if turn.tile_id == tile_id:
            # Cancel: the move charged for the first reveal stands.
            session.turn = Idle()
            session.event_log.append({"type": "SELECTION_CANCELLED", "tile_id": tile_id})
        else:
            _reveal(session, tile_id)
            _resolve_pair(session, turn.tile_id, tile_id)
    else:
        _reveal(session, tile_id)
        session.turn = OnePending(tile_id=tile_id)

    _update_outcome(session)
    return StepResult(ok=True, events=session.event_log[before:])


def conceal_mismatch(session: GameSession) -> StepResult:
    """Hide a mismatched pair and unlock input. Normally fired by the scheduler."""
    if session.closed:
        return StepResult(ok=False, events=[], error="Session closed.")
    turn = session.turn
    if not isinstance(turn, Resolving):
        return StepResult(ok=False, events=[], error="No mismatched pair to hide.")

    if session.pending_task is not None:
        session.pending_task.cancel()
        session.pending_task = None

    session.action_log.append(ConcealAction())
    session.turn = Idle()
    event: Event = {"type": "PAIR_CONCEALED", "tiles": [turn.first, turn.second]}
    session.event_log.append(event)
    return StepResult(ok=True, events=[event])


def close_session(session: GameSession) -> None:
    """Retire a session: cancel its timer so nothing can mutate it afterwards."""
    if session.pending_task is not None:
        session.pending_task.cancel()
        session.pending_task = None
    session.closed = True


def step(session: GameSession, action: Action) -> StepResult:
    if isinstance(action, SelectTileAction):
        return select_tile(session, action.tile_id)
    if isinstance(action, ConcealAction):
        return conceal_mismatch(session)
    return StepResult(ok=False, events=[], error="Unknown action.")


def new_session(
    deck: Deck,
    move_limit: int,
    scheduler: Scheduler | None = None,
    mismatch_delay: float = MISMATCH_DELAY_SECONDS,
) -> GameSession:
    """Start a game on deck.

    Without a scheduler the session gets its own ManualScheduler, reachable as
    session.scheduler; a mismatched pair stays face-up until that scheduler is
    advanced or conceal_mismatch is called.
    """
    validate_deck(deck)
    if not MIN_MOVE_LIMIT <= move_limit <= MAX_MOVE_LIMIT:
        raise ValueError(f"Move limit must be between {MIN_MOVE_LIMIT} and {MAX_MOVE_LIMIT}, got {move_limit}.")
    if mismatch_delay < 0:
        raise ValueError("Mismatch delay cannot be negative.")
    return GameSession(
        deck=deck,
        move_limit=move_limit,
        scheduler=scheduler or ManualScheduler(),
        mismatch_delay=mismatch_delay,
    )


def replay(deck: Deck, move_limit: int, actions: Iterable[Action]) -> GameSession:
    session = new_session(deck, move_limit)
    for a in actions:
        step(session, a)
    return session
