from __future__ import annotations

import dataclasses
import random
import traceback

import pygame  # type: ignore[import-not-found]

from pairmatch.engine.controller import GameController, grid_size_in_range, move_limit_in_range

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import Button, draw_text
from .board import BoardScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def _apply_cli_overrides(self) -> None:
        assert self.ctx.settings is not None
        overrides = self.ctx.cli_overrides or {}
        grid_size = overrides.get("grid_size")
        if grid_size is not None and not grid_size_in_range(grid_size):
            raise ValueError(f"--grid-size must be between 2 and 10, got {grid_size}")
        move_limit = overrides.get("move_limit")
        if move_limit is not None and not move_limit_in_range(move_limit):
            raise ValueError(f"--move-limit must be between 4 and 100, got {move_limit}")
        self.ctx.settings = dataclasses.replace(self.ctx.settings, **overrides)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            self.ctx.settings_service.validate_all()
            self.ctx.settings = self.ctx.settings_service.load(self.ctx.settings_override)
            self._apply_cli_overrides()

            settings = self.ctx.settings
            self.ctx.controller = GameController(
                config=settings.to_game_config(),
                rng=random.Random(settings.seed),
                scheduler=self.ctx.scheduler,
                on_event=self.ctx.telemetry.log,
            )

            self.ctx.telemetry.log("boot", {"ok": True, "seed": settings.seed})
            return SceneTransition(BoardScene(self.ctx))
        except Exception as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            # Offer quit button
            self._quit_button = Button(
                rect=pygame.Rect(20, 700, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((243, 244, 246))
        draw_text(screen, self.ctx.assets.fonts.big, "Memory Game", (20, 20))

        font2 = self.ctx.assets.fonts.ui
        if self._error is None:
            draw_text(screen, font2, "Loading settings...", (20, 80))
        else:
            draw_text(screen, font2, "BOOT ERROR", (20, 80), color=(220, 38, 38))
            y = 120
            for line in self._error.splitlines()[:22]:
                draw_text(screen, self.ctx.assets.fonts.small, line[:120], (20, y))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, font2)
