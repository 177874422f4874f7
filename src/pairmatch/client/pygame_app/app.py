from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pygame  # type: ignore[import-not-found]

from pairmatch.engine.controller import GameController
from pairmatch.engine.scheduler import ManualScheduler
from pairmatch.paths import Paths
from pairmatch.services.settings import GameSettings, SettingsService
from pairmatch.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .scene_base import Scene


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    settings_service: SettingsService
    telemetry: TelemetryService
    scheduler: ManualScheduler

    # Command line overrides, applied at boot
    settings_override: Optional[Path] = None
    cli_overrides: Optional[dict[str, int]] = None

    # Loaded at boot
    settings: Optional[GameSettings] = None
    controller: Optional[GameController] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        while self.running:
            dt = self.ctx.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            # Engine timers run on frame time
            self.ctx.scheduler.advance(dt)

            tr = self.scene.update(dt)
            if tr is not None:
                self.scene = tr.next_scene

            self.scene.render(self.ctx.screen)
            pygame.display.flip()

        return 0
