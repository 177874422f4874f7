from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Mapping

from .deck import generate_deck
from .scheduler import ManualScheduler, Scheduler
from .serialize import TileView, snapshot, tile_views
from .session import (
    MISMATCH_DELAY_SECONDS,
    GameSession,
    StepResult,
    close_session,
    new_session,
    select_tile,
)
from .types import MAX_GRID_SIZE, MAX_MOVE_LIMIT, MIN_GRID_SIZE, MIN_MOVE_LIMIT, Deck

EventSink = Callable[[str, Mapping[str, object]], None]


@dataclass(frozen=True)
class GameConfig:
    grid_size: int = 4
    move_limit: int | None = None  # None: derived from the grid size
    mismatch_delay: float = MISMATCH_DELAY_SECONDS


def grid_size_in_range(n: int) -> bool:
    return MIN_GRID_SIZE <= n <= MAX_GRID_SIZE


def move_limit_in_range(m: int) -> bool:
    return MIN_MOVE_LIMIT <= m <= MAX_MOVE_LIMIT


def default_move_limit(grid_size: int) -> int:
    """One reveal per tile plus two spare, kept inside the allowed range."""
    return max(MIN_MOVE_LIMIT, min(MAX_MOVE_LIMIT, grid_size * grid_size + 2))


class GameController:
    """Configuration boundary in front of the current GameSession.

    Out-of-range configuration is rejected here (the call returns False and
    nothing changes); the engine below assumes valid input. Sessions are never
    reused: a new game closes the old session and builds a fresh one.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        on_event: EventSink | None = None,
    ) -> None:
        cfg = config or GameConfig()
        if not grid_size_in_range(cfg.grid_size):
            raise ValueError(f"Invalid grid size: {cfg.grid_size}")
        if cfg.move_limit is not None and not move_limit_in_range(cfg.move_limit):
            raise ValueError(f"Invalid move limit: {cfg.move_limit}")

        self.rng = rng or random.Random()
        self.scheduler: Scheduler = scheduler or ManualScheduler()
        self._grid_size = cfg.grid_size
        self._explicit_move_limit = cfg.move_limit
        self._mismatch_delay = cfg.mismatch_delay
        self._on_event = on_event
        self._session = self._start_game(generate_deck(self._grid_size, self.rng))

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def move_limit(self) -> int:
        return self._session.move_limit

    def _emit(self, event_type: str, payload: Mapping[str, object]) -> None:
        if self._on_event is not None:
            self._on_event(event_type, payload)

    def _resolve_move_limit(self) -> int:
        if self._explicit_move_limit is not None:
            return self._explicit_move_limit
        return default_move_limit(self._grid_size)

    def _start_game(self, deck: Deck) -> GameSession:
        session = new_session(
            deck,
            move_limit=self._resolve_move_limit(),
            scheduler=self.scheduler,
            mismatch_delay=self._mismatch_delay,
        )
        self._emit("game_started", {"grid_size": self._grid_size, "move_limit": session.move_limit})
        return session

    def _replace_session(self, deck: Deck) -> None:
        close_session(self._session)
        self._session = self._start_game(deck)

    def reset(self) -> None:
        self._replace_session(generate_deck(self._grid_size, self.rng))

    def configure_grid_size(self, n: int) -> bool:
        if not grid_size_in_range(n):
            self._emit("config_rejected", {"setting": "grid_size", "value": n})
            return False
        self._grid_size = n
        self.reset()
        return True

    def configure_move_limit(self, m: int) -> bool:
        """Set the move budget. Only allowed before the first reveal of a game."""
        if not move_limit_in_range(m) or self._session.started:
            self._emit("config_rejected", {"setting": "move_limit", "value": m})
            return False
        self._explicit_move_limit = m
        # Untouched game: keep the layout, swap in a session with the new budget.
        self._replace_session(self._session.deck)
        return True

    def select_tile(self, tile_id: int) -> StepResult:
        session = self._session
        res = select_tile(session, tile_id)
        if not res.ok:
            return res
        self._emit("tile_selected", {"tile_id": tile_id, "moves": session.move_count})
        if session.outcome != "in_progress":
            self._emit("game_ended", {"outcome": session.outcome, "moves": session.move_count})
        return res

    def tiles(self) -> list[TileView]:
        return tile_views(self._session)

    def snapshot(self) -> dict[str, object]:
        return snapshot(self._session)
