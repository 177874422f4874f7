"""Deterministic, headless game engine for PairMatch.

IMPORTANT: This package must never import pygame.
"""

from .actions import ConcealAction, SelectTileAction
from .controller import GameConfig, GameController
from .deck import generate_deck
from .scheduler import ManualScheduler
from .session import GameSession, StepResult, new_session, select_tile, step
from .types import Deck, Outcome, Tile

__all__ = [
    "ConcealAction",
    "Deck",
    "GameConfig",
    "GameController",
    "GameSession",
    "ManualScheduler",
    "Outcome",
    "SelectTileAction",
    "StepResult",
    "Tile",
    "generate_deck",
    "new_session",
    "select_tile",
    "step",
]
