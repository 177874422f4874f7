from __future__ import annotations

from dataclasses import dataclass

from .actions import Action, ConcealAction, SelectTileAction
from .session import GameSession
from .types import Idle, OnePending, Resolving, TurnState


@dataclass(frozen=True)
class TileView:
    id: int
    value: int
    face_up: bool
    matched: bool


def tile_views(session: GameSession) -> list[TileView]:
    """Per-tile render state, in grid order."""
    return [
        TileView(
            id=t.id,
            value=t.value,
            face_up=session.is_face_up(t.id),
            matched=session.is_matched(t.id),
        )
        for t in session.deck.tiles
    ]


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, SelectTileAction):
        return {"type": "select", "tile_id": a.tile_id}
    if isinstance(a, ConcealAction):
        return {"type": "conceal"}
    # should be unreachable
    return {"type": "unknown"}


def _turn_to_dict(turn: TurnState) -> dict[str, object]:
    if isinstance(turn, OnePending):
        return {"state": "one_pending", "tiles": [turn.tile_id]}
    if isinstance(turn, Resolving):
        return {"state": "resolving", "tiles": [turn.first, turn.second]}
    assert isinstance(turn, Idle)
    return {"state": "idle", "tiles": []}


def snapshot(session: GameSession) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current session state."""
    return {
        "grid_size": session.deck.grid_size,
        "tiles": [{"id": t.id, "value": t.value} for t in session.deck.tiles],
        "turn": _turn_to_dict(session.turn),
        "solved": sorted(session.solved),
        "move_count": session.move_count,
        "move_limit": session.move_limit,
        "outcome": session.outcome,
        "action_log": [action_to_dict(a) for a in session.action_log],
    }
