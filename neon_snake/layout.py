import pygame

from .config import (
    BUTTON_BAR_HEIGHT,
    COLS,
    HEADER_HEIGHT,
    MARGIN,
    MAX_CELL,
    MIN_CELL,
    ROWS,
)


def cell_size(window_w, window_h, cols=COLS, rows=ROWS):
    avail_w = window_w - MARGIN * 2
    avail_h = window_h - HEADER_HEIGHT - BUTTON_BAR_HEIGHT - MARGIN * 2
    return max(MIN_CELL, min(avail_w // cols, avail_h // rows, MAX_CELL))


class Layout:
    """Pixel geometry of the window: header, board and button bar."""

    def __init__(self, window_w, window_h, cols=COLS, rows=ROWS):
        self.window = pygame.Rect(0, 0, window_w, window_h)
        self.cols = cols
        self.rows = rows
        self.cell = cell_size(window_w, window_h, cols, rows)

        board_w = cols * self.cell
        board_h = rows * self.cell
        self.board = pygame.Rect((window_w - board_w) // 2, MARGIN + HEADER_HEIGHT, board_w, board_h)
        self.header = pygame.Rect(self.board.left, MARGIN, board_w, HEADER_HEIGHT)
        self.button_bar = pygame.Rect(self.board.left, self.board.bottom + 8, board_w, BUTTON_BAR_HEIGHT - 8)

    def place_pad(self, pad):
        bar = self.button_bar
        size = max(20, min(bar.height // 2 - 2, 40))
        cx = bar.left + size * 2
        top = bar.top

        pad["up"].rect = pygame.Rect(cx - size // 2, top, size, size)
        pad["down"].rect = pygame.Rect(cx - size // 2, top + size + 2, size, size)
        pad["left"].rect = pygame.Rect(cx - size // 2 - size - 4, top + size // 2, size, size)
        pad["right"].rect = pygame.Rect(cx + size // 2 + 4, top + size // 2, size, size)
        pad["pause"].rect = pygame.Rect(bar.right - size * 2, top + size // 2, size, size)

    def place_overlay_buttons(self, pad, screen=None):
        w = max(90, self.board.width // 3)
        h = max(28, self.cell + 10)
        centre = self.board.centerx
        base = self.board.centery + self.cell * 2

        pad["start"].rect = pygame.Rect(centre - w // 2, base, w, h)
        pad["resume"].rect = pygame.Rect(centre - w - 6, base, w, h)
        pad["restart"].rect = pygame.Rect(centre + 6, base, w, h)
        if screen == "gameover":
            # Restart stands alone on the game-over screen
            pad["restart"].rect.x = centre - w // 2
