"""Card face rendering for the combotable client."""

from __future__ import annotations

from typing import ClassVar, Tuple

import pygame

from .layout import CARD_SIZE
from .models import Card

Color = Tuple[int, int, int]

CARD_PADDING = 6


class CardSprite:
    """Pre-rendered face-up image of a single card."""

    CARD_SIZE: ClassVar[tuple[int, int]] = CARD_SIZE
    RENDER_SCALE = 4

    SUIT_SYMBOLS = {
        "spades": "♠",
        "clubs": "♣",
        "hearts": "♥",
        "diamonds": "♦",
    }
    SUIT_COLORS: ClassVar[dict[str, Color]] = {
        "spades": (20, 20, 20),
        "clubs": (20, 20, 20),
        "hearts": (200, 16, 46),
        "diamonds": (200, 16, 46),
    }

    def __init__(self, card: Card) -> None:
        self.card = card
        self.hi_res_image = self._create_card_surface(card, scale=self.RENDER_SCALE)
        self.image = pygame.transform.smoothscale(self.hi_res_image, self.CARD_SIZE)

    def draw(self, surface: pygame.Surface, rect: pygame.Rect) -> None:
        if rect.size == self.image.get_size():
            surface.blit(self.image, rect)
            return
        scaled = pygame.transform.smoothscale(self.hi_res_image, rect.size)
        surface.blit(scaled, rect)

    @staticmethod
    def _create_card_surface(card: Card, scale: int = 1) -> pygame.Surface:
        width = CardSprite.CARD_SIZE[0] * scale
        height = CardSprite.CARD_SIZE[1] * scale
        surface = pygame.Surface((width, height), pygame.SRCALPHA)
        surface.fill((0, 0, 0, 0))

        border_radius = 12 * scale
        card_rect = surface.get_rect().inflate(-2 * CARD_PADDING * scale, -2 * CARD_PADDING * scale)
        face_color = (246, 246, 246)
        outline_color = (24, 24, 24)
        pygame.draw.rect(surface, face_color, card_rect, border_radius=border_radius)
        pygame.draw.rect(surface, outline_color, card_rect, width=2, border_radius=border_radius)

        suit_color = CardSprite.SUIT_COLORS.get(card.suit, outline_color)
        symbol = CardSprite.SUIT_SYMBOLS.get(card.suit, card.suit[:1].upper())

        value_font = CardSprite._load_font(48 * scale, bold=True)
        suit_font = CardSprite._load_font(40 * scale)
        value_surface = value_font.render(card.rank, True, suit_color)
        suit_surface = suit_font.render(symbol, True, suit_color)

        padding = 6 * scale
        surface.blit(value_surface, (card_rect.left + padding, card_rect.top + padding))

        suit_rect = suit_surface.get_rect()
        suit_rect.bottomright = (
            card_rect.right - padding,
            card_rect.bottom - padding,
        )
        surface.blit(suit_surface, suit_rect)
        return surface

    @staticmethod
    def _load_font(size: int, bold: bool = False) -> pygame.font.Font:
        """Load a font that supports suit glyphs with sensible fallbacks."""

        preferred_fonts = [
            "dejavusans",
            "arialunicode",
            "arial",
            "liberationsans",
        ]
        for name in preferred_fonts:
            path = pygame.font.match_font(name, bold=bold)
            if path:
                return pygame.font.Font(path, size)
        return pygame.font.Font(None, size)


class SpriteCache:
    """Render each distinct card face once."""

    def __init__(self) -> None:
        self._sprites: dict[Card, CardSprite] = {}

    def get(self, card: Card) -> CardSprite:
        sprite = self._sprites.get(card)
        if sprite is None:
            sprite = CardSprite(card)
            self._sprites[card] = sprite
        return sprite
