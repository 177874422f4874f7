from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import pygame  # type: ignore[import-not-found]

if TYPE_CHECKING:
    from .app import GameContext


@dataclass
class SceneTransition:
    next_scene: "Scene"


class Scene(Protocol):
    """A screen of the game; every scene shares the app's GameContext."""

    ctx: "GameContext"

    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...
