from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import COLORS, GameSession, Piece


BACKGROUND = (10, 10, 14)
EMPTY_CELL = (20, 20, 26)
TEXT = (235, 235, 240)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    hex_color = COLORS.get(abs(v))
    if hex_color is None:
        return EMPTY_CELL
    c = pygame.Color(hex_color)
    return c.r, c.g, c.b


class Renderer:
    """Draws a session: board with falling piece, next preview, score."""

    def __init__(self, cell_size: int = 30, margin: int = 20, font: Optional[pygame.font.Font] = None) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.font = font

    def window_size(self, session: GameSession) -> Tuple[int, int]:
        cfg = session.config
        width = self.margin * 3 + cfg.width * self.cell_size + 6 * self.cell_size
        height = self.margin * 2 + cfg.height * self.cell_size
        return width, height

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), rect)
        return surf

    def _preview_surface(self, piece: Piece) -> pygame.Surface:
        size = 4 * self.cell_size
        surf = pygame.Surface((size, size))
        surf.fill(EMPTY_CELL)
        color = _color_for_value(piece.color)
        ox = (size - piece.width * self.cell_size) // 2
        oy = (size - piece.height * self.cell_size) // 2
        for dy, dx in piece.offsets():
            rect = pygame.Rect(ox + dx * self.cell_size, oy + dy * self.cell_size, self.cell_size - 1, self.cell_size - 1)
            pygame.draw.rect(surf, color, rect)
        return surf

    def _text(self, screen: pygame.Surface, text: str, pos: Tuple[int, int]) -> None:
        if self.font is None:
            return
        screen.blit(self.font.render(text, True, TEXT), pos)

    def draw(self, screen: pygame.Surface, session: GameSession) -> None:
        screen.fill(BACKGROUND)
        screen.blit(self._grid_surface(session.get_state()), (self.margin, self.margin))

        panel_x = self.margin * 2 + session.config.width * self.cell_size
        self._text(screen, "Next", (panel_x, self.margin))
        screen.blit(self._preview_surface(session.next_piece), (panel_x, self.margin + 30))
        self._text(screen, f"Score: {session.score}", (panel_x, self.margin + 50 + 4 * self.cell_size))
        self._text(screen, f"Lines: {session.lines_cleared_total}", (panel_x, self.margin + 80 + 4 * self.cell_size))
        self._text(screen, f"Level: {session.difficulty}", (panel_x, self.margin + 110 + 4 * self.cell_size))
        if session.game_over:
            self._text(screen, session.final_report(), (self.margin, self.margin // 4))
            self._text(screen, "R to restart, ESC to quit", (panel_x, self.margin + 150 + 4 * self.cell_size))
        pygame.display.flip()
