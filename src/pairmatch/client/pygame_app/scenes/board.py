from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from pairmatch.engine.controller import GameController
from pairmatch.engine.serialize import TileView
from pairmatch.engine.types import FILLER_VALUE

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import Button, Stepper, draw_text, draw_text_centered

BG = (243, 244, 246)
TILE_HIDDEN = (209, 213, 219)
TILE_REVEALED = (59, 130, 246)
TILE_MATCHED = (34, 197, 94)

GRID_TOP = 170
TILE_GAP = 8
MAX_TILE = 80


class BoardScene:
    def __init__(self, ctx: GameContext) -> None:
        assert ctx.controller is not None
        self.ctx = ctx
        self.controller: GameController = ctx.controller

        self.grid_stepper = Stepper(
            rect=pygame.Rect(40, 70, 260, 32),
            label="Grid Size: (max 10)",
            value=self.controller.grid_size,
            on_change=self.controller.configure_grid_size,
        )
        self.moves_stepper = Stepper(
            rect=pygame.Rect(340, 70, 360, 32),
            label="Maximum Moves Allowed:",
            value=self.controller.move_limit,
            on_change=self.controller.configure_move_limit,
        )
        self.btn_reset = Button(rect=pygame.Rect(0, 0, 140, 40), text="Reset", on_click=self.controller.reset)

    def _tile_size(self) -> int:
        n = self.controller.grid_size
        w, _ = self.ctx.screen.get_size()
        avail = min(w - 80, self.ctx.screen.get_height() - GRID_TOP - 140)
        return max(20, min(MAX_TILE, (avail - TILE_GAP * (n - 1)) // n))

    def _tile_rect(self, tile_id: int) -> pygame.Rect:
        n = self.controller.grid_size
        size = self._tile_size()
        grid_w = n * size + (n - 1) * TILE_GAP
        x0 = (self.ctx.screen.get_width() - grid_w) // 2
        row, col = divmod(tile_id, n)
        return pygame.Rect(x0 + col * (size + TILE_GAP), GRID_TOP + row * (size + TILE_GAP), size, size)

    def _grid_bottom(self) -> int:
        n = self.controller.grid_size
        return GRID_TOP + n * self._tile_size() + (n - 1) * TILE_GAP

    def _hit_test_tile(self, pos: tuple[int, int]) -> int | None:
        for view in self.controller.tiles():
            if self._tile_rect(view.id).collidepoint(pos):
                return view.id
        return None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.grid_stepper.handle_event(event):
            return
        if self.moves_stepper.handle_event(event):
            return
        if self.btn_reset.handle_event(event):
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            tile_id = self._hit_test_tile(event.pos)
            if tile_id is not None:
                # Rejected selections are no-ops; nothing to show.
                self.controller.select_tile(tile_id)

    def update(self, dt: float) -> SceneTransition | None:
        # Steppers mirror the controller (a grid change re-derives the move limit)
        self.grid_stepper.value = self.controller.grid_size
        self.moves_stepper.value = self.controller.move_limit
        return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill(BG)
        fonts = self.ctx.assets.fonts
        session = self.controller.session
        cx = screen.get_width() // 2

        draw_text_centered(screen, fonts.big, "Memory Game", (cx, 36))
        self.grid_stepper.draw(screen, fonts.ui)
        self.moves_stepper.draw(screen, fonts.ui)
        draw_text_centered(screen, fonts.ui, f"Moves: {session.move_count} / {session.move_limit}", (cx, 135))

        for view in self.controller.tiles():
            self._draw_tile(screen, view)

        y = self._grid_bottom() + 36
        if session.outcome == "won":
            draw_text_centered(screen, fonts.big, "You Won!", (cx, y), color=(22, 163, 74))
        elif session.outcome == "lost":
            draw_text_centered(screen, fonts.big, "Game Over! Maximum moves reached.", (cx, y), color=(220, 38, 38))

        self.btn_reset.text = "Reset" if session.outcome == "in_progress" else "Play Again"
        self.btn_reset.rect.center = (cx, y + 50)
        self.btn_reset.draw(screen, fonts.ui)

    def _draw_tile(self, screen: pygame.Surface, view: TileView) -> None:
        rect = self._tile_rect(view.id)
        if view.matched:
            bg, label, fg = TILE_MATCHED, str(view.value), (255, 255, 255)
        elif view.face_up:
            label = "x" if view.value == FILLER_VALUE else str(view.value)
            bg, fg = TILE_REVEALED, (255, 255, 255)
        else:
            bg, label, fg = TILE_HIDDEN, "?", (156, 163, 175)
        pygame.draw.rect(screen, bg, rect, border_radius=8)
        img = self.ctx.assets.tile_label(label, fg)
        screen.blit(img, img.get_rect(center=rect.center).topleft)
