from __future__ import annotations

from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

Color = tuple[int, int, int]


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font
    tile: pygame.font.Font


class AssetManager:
    """Fonts plus a cache of rendered tile labels (no image assets)."""

    def __init__(self) -> None:
        self._labels: dict[tuple[str, Color], pygame.Surface] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 24),
            small=pygame.font.SysFont(None, 18),
            big=pygame.font.SysFont(None, 40),
            tile=pygame.font.SysFont(None, 30),
        )

    def tile_label(self, text: str, color: Color) -> pygame.Surface:
        key = (text, color)
        if key not in self._labels:
            self._labels[key] = self.fonts.tile.render(text, True, color)
        return self._labels[key]
