from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (40, 40, 40),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


def draw_text_centered(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    center: tuple[int, int],
    color: Color = (40, 40, 40),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, img.get_rect(center=center).topleft)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        bg = (34, 197, 94) if self.enabled else (160, 160, 160)
        pygame.draw.rect(screen, bg, self.rect, border_radius=6)
        img = font.render(self.text, True, (255, 255, 255))
        r = img.get_rect(center=self.rect.center)
        screen.blit(img, r.topleft)


@dataclass
class Stepper:
    """Integer input with -/+ buttons.

    on_change receives the proposed value and returns whether it was accepted;
    range checks belong to the receiver, the widget only displays the result.
    """

    rect: pygame.Rect
    label: str
    value: int
    on_change: Callable[[int], bool]

    def _minus_rect(self) -> pygame.Rect:
        return pygame.Rect(self.rect.right - 96, self.rect.y, 32, self.rect.height)

    def _plus_rect(self) -> pygame.Rect:
        return pygame.Rect(self.rect.right - 32, self.rect.y, 32, self.rect.height)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type != pygame.MOUSEBUTTONDOWN or event.button != 1:
            return False
        delta = 0
        if self._minus_rect().collidepoint(event.pos):
            delta = -1
        elif self._plus_rect().collidepoint(event.pos):
            delta = 1
        if delta == 0:
            return False
        proposed = self.value + delta
        if self.on_change(proposed):
            self.value = proposed
        return True

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        draw_text(screen, font, self.label, (self.rect.x, self.rect.y + 6))
        for r, sign in ((self._minus_rect(), "-"), (self._plus_rect(), "+")):
            pygame.draw.rect(screen, (209, 213, 219), r, border_radius=4)
            draw_text_centered(screen, font, sign, r.center)
        value_rect = pygame.Rect(self.rect.right - 64, self.rect.y, 32, self.rect.height)
        pygame.draw.rect(screen, (255, 255, 255), value_rect)
        pygame.draw.rect(screen, (209, 213, 219), value_rect, width=2)
        draw_text_centered(screen, font, str(self.value), value_rect.center)
