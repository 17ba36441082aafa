import math

import pygame

from .config import (
    BG,
    DARK,
    GREEN,
    GREEN_DIM,
    GRID_LINE,
    HEAD_BORDER,
    PINK,
    SPECIAL_URGENT_TICKS,
    WHITE,
    YELLOW,
)
from .engine import Direction

SCREEN_START = "start"
SCREEN_PAUSED = "paused"
SCREEN_GAMEOVER = "gameover"


def fmt(n):
    return str(int(math.floor(n))).zfill(6)


def fmt_level(level):
    return str(level).zfill(2)


def lerp(a, b, t):
    return a + (b - a) * t


def draw_glow(surface, color, rect, blur, circle=False):
    """Fake a canvas shadow blur with nested translucent shapes."""
    blur = int(blur)
    if blur <= 0:
        return
    glow = pygame.Surface((rect.width + blur * 2, rect.height + blur * 2), pygame.SRCALPHA)
    centre = glow.get_rect().center
    steps = max(2, blur // 3)
    for i in range(steps, 0, -1):
        spread = blur * i / steps
        alpha = int(110 * (1 - i / (steps + 1)))
        shape = pygame.Rect(0, 0, int(rect.width + spread * 2), int(rect.height + spread * 2))
        shape.center = centre
        if circle:
            pygame.draw.ellipse(glow, (*color[:3], alpha), shape)
        else:
            pygame.draw.rect(glow, (*color[:3], alpha), shape, border_radius=int(spread))
    surface.blit(glow, (rect.left - blur, rect.top - blur))


def draw_wash(surface, color, alpha):
    if alpha <= 0:
        return
    wash = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    wash.fill((*color[:3], int(255 * min(alpha, 1.0))))
    surface.blit(wash, (0, 0))


class Renderer:
    def __init__(self):
        self.food_pulse = 0.0
        self.special_pulse = 0.0
        self._fonts = {}
        self._grid = None

    def font(self, size):
        size = max(8, int(size))
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def text(self, surface, label, size, color, **anchor):
        rendered = self.font(size).render(label, True, color)
        rect = rendered.get_rect(**anchor)
        surface.blit(rendered, rect)
        return rect

    # --- Board -------------------------------------------------------------

    def draw_grid(self, board, cell):
        key = (board.get_size(), cell)
        if self._grid is None or self._grid[0] != key:
            width, height = board.get_size()
            grid = pygame.Surface((width, height), pygame.SRCALPHA)
            for x in range(0, width + 1, cell):
                pygame.draw.line(grid, GRID_LINE, (x, 0), (x, height))
            for y in range(0, height + 1, cell):
                pygame.draw.line(grid, GRID_LINE, (0, y), (width, y))
            self._grid = (key, grid)
        board.blit(self._grid[1], (0, 0))

    def draw_food(self, board, cell, food):
        self.food_pulse += 0.07
        pulse = 0.72 + math.sin(self.food_pulse) * 0.28
        r = max(1.0, (cell / 2 - 2) * pulse)
        cx = food[0] * cell + cell / 2
        cy = food[1] * cell + cell / 2
        body = pygame.Rect(0, 0, int(r * 2), int(r * 2))
        body.center = (int(cx), int(cy))

        draw_glow(board, PINK, body, 18 * pulse * cell / 24, circle=True)

        # Outer ring
        ring_r = int(r + 2)
        ring = pygame.Surface((ring_r * 2 + 2, ring_r * 2 + 2), pygame.SRCALPHA)
        pygame.draw.circle(ring, (*PINK, int(255 * 0.25 * pulse)), (ring_r + 1, ring_r + 1), ring_r, 1)
        board.blit(ring, (int(cx) - ring_r - 1, int(cy) - ring_r - 1))

        pygame.draw.circle(board, PINK, (int(cx), int(cy)), int(r))

        # Specular dot
        dot = max(1, int(r * 0.28))
        spec = pygame.Surface((dot * 2, dot * 2), pygame.SRCALPHA)
        pygame.draw.circle(spec, (255, 255, 255, 89), (dot, dot), dot)
        board.blit(spec, (int(cx - r * 0.3) - dot, int(cy - r * 0.3) - dot))

    def draw_special(self, board, cell, special, ticks, now_ms):
        self.special_pulse += 0.1
        pulse = 0.78 + math.sin(self.special_pulse) * 0.22
        urgency = 1.0
        if ticks < SPECIAL_URGENT_TICKS:
            urgency = math.sin(now_ms / 80) * 0.5 + 0.5
        size = max(2, int((cell - 4) * pulse))
        blur = int(22 * pulse * cell / 24)

        sprite = pygame.Surface((size + blur * 2, size + blur * 2), pygame.SRCALPHA)
        square = pygame.Rect(blur, blur, size, size)
        draw_glow(sprite, YELLOW, square, blur)
        pygame.draw.rect(sprite, YELLOW, square)
        inner = pygame.Rect(0, 0, max(1, int(size * 0.3)), max(1, int(size * 0.3)))
        inner.center = square.center
        shine = pygame.Surface(inner.size, pygame.SRCALPHA)
        shine.fill((255, 255, 255, 64))
        sprite.blit(shine, inner)

        sprite = pygame.transform.rotate(sprite, -math.degrees(self.special_pulse * 0.6))
        sprite.set_alpha(int(255 * urgency))
        cx = special[0] * cell + cell // 2
        cy = special[1] * cell + cell // 2
        board.blit(sprite, sprite.get_rect(center=(cx, cy)))

    def draw_snake(self, board, cell, snake, direction):
        length = len(snake)
        # Tail first so the head sits on top
        for i in range(length - 1, -1, -1):
            px, py = snake[i][0] * cell, snake[i][1] * cell
            if i == 0:
                head = pygame.Rect(px + 1, py + 1, cell - 2, cell - 2)
                draw_glow(board, GREEN, head, 18 * cell / 24)
                pygame.draw.rect(board, GREEN, head)
                border = pygame.Surface(head.size, pygame.SRCALPHA)
                pygame.draw.rect(border, HEAD_BORDER, border.get_rect(), 1)
                board.blit(border, head)
                self.draw_eyes(board, cell, px, py, direction)
                continue

            t = i / length
            alpha = 1 - t * 0.55
            g = int(lerp(200, 80, t))
            b = int(lerp(120, 40, t))
            seg = pygame.Rect(px + 2, py + 2, cell - 4, cell - 4)
            draw_glow(board, GREEN, seg, lerp(10, 2, t) * cell / 24)
            body = pygame.Surface(seg.size, pygame.SRCALPHA)
            body.fill((0, g, b, int(255 * alpha)))
            board.blit(body, seg)

    def draw_eyes(self, board, cell, px, py, direction):
        s = max(2, cell // 7)
        m = cell // 4
        if direction == Direction.RIGHT:
            eyes = [(px + cell - m, py + m), (px + cell - m, py + cell - m - s)]
        elif direction == Direction.LEFT:
            eyes = [(px + m - s, py + m), (px + m - s, py + cell - m - s)]
        elif direction == Direction.UP:
            eyes = [(px + m, py + m - s), (px + cell - m - s, py + m - s)]
        else:
            eyes = [(px + m, py + cell - m), (px + cell - m - s, py + cell - m)]
        for ex, ey in eyes:
            pygame.draw.rect(board, DARK, (ex, ey, s, s))

    def draw_particles(self, board, particles):
        for particle in particles:
            size = max(1, int(particle['size']))
            alpha = int(255 * max(0.0, particle['life']) ** 2)
            rect = pygame.Rect(0, 0, size, size)
            rect.center = (int(particle['pos'][0]), int(particle['pos'][1]))
            surf = pygame.Surface((size + 10, size + 10), pygame.SRCALPHA)
            draw_glow(surf, particle['color'], pygame.Rect(5, 5, size, size), 5)
            pygame.draw.rect(surf, particle['color'], (5, 5, size, size))
            surf.set_alpha(alpha)
            board.blit(surf, (rect.left - 5, rect.top - 5))

    def draw_board(self, board, cell, game, particles, flash, death, now_ms):
        board.fill(BG)
        self.draw_grid(board, cell)

        if game.food is not None:
            self.draw_food(board, cell, game.food)
        if game.special is not None:
            self.draw_special(board, cell, game.special, game.special_ticks, now_ms)
        if len(game.snake) > 0:
            self.draw_snake(board, cell, game.snake.positions, game.direction)

        self.draw_particles(board, particles.particles)
        draw_wash(board, GREEN, flash.step())
        if death.active:
            draw_wash(board, PINK, death.step())

    # --- Chrome ------------------------------------------------------------

    def draw_hud(self, surface, layout, game):
        header = layout.header
        size = max(16, header.height // 2)
        y = header.centery
        self.text(surface, "SCORE", size * 0.6, GREEN_DIM, midleft=(header.left, y - size // 2))
        self.text(surface, fmt(game.score), size, GREEN, midleft=(header.left, y + size // 4))
        self.text(surface, "LEVEL", size * 0.6, GREEN_DIM, center=(header.centerx, y - size // 2))
        self.text(surface, fmt_level(game.level), size, YELLOW, center=(header.centerx, y + size // 4))
        self.text(surface, "BEST", size * 0.6, GREEN_DIM, midright=(header.right, y - size // 2))
        self.text(surface, fmt(game.best), size, PINK, midright=(header.right, y + size // 4))

    def draw_button(self, surface, button, size):
        fill = (*GREEN_DIM, 140) if button.pressed else (*GREEN, 24)
        panel = pygame.Surface(button.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(panel, fill, panel.get_rect(), border_radius=6)
        pygame.draw.rect(panel, (*GREEN, 180), panel.get_rect(), 1, border_radius=6)
        surface.blit(panel, button.rect)

        rect = button.rect
        inset = rect.width // 4
        arrows = {
            "up": [(rect.centerx, rect.top + inset), (rect.right - inset, rect.bottom - inset),
                   (rect.left + inset, rect.bottom - inset)],
            "down": [(rect.centerx, rect.bottom - inset), (rect.right - inset, rect.top + inset),
                     (rect.left + inset, rect.top + inset)],
            "left": [(rect.left + inset, rect.centery), (rect.right - inset, rect.top + inset),
                     (rect.right - inset, rect.bottom - inset)],
            "right": [(rect.right - inset, rect.centery), (rect.left + inset, rect.top + inset),
                      (rect.left + inset, rect.bottom - inset)],
        }
        if button.name in arrows:
            pygame.draw.polygon(surface, GREEN, arrows[button.name])
        else:
            self.text(surface, button.label, size, GREEN, center=rect.center)

    def draw_pad(self, surface, pad):
        for button in pad:
            self.draw_button(surface, button, button.rect.height * 0.6)

    def draw_screen(self, surface, layout, name, game, buttons):
        board = layout.board
        veil = pygame.Surface(board.size, pygame.SRCALPHA)
        veil.fill((*DARK, 190))
        surface.blit(veil, board)

        big = max(24, layout.cell * 2)
        small = max(14, int(layout.cell * 0.9))
        top = board.centery - big

        if name == SCREEN_START:
            self.text(surface, "NEON SNAKE", big, GREEN, center=(board.centerx, top))
            self.text(surface, "ARROWS / WASD  -  SWIPE  -  P TO PAUSE", small, GREEN_DIM,
                      center=(board.centerx, top + big))
            visible = ["start"]
        elif name == SCREEN_PAUSED:
            self.text(surface, "PAUSED", big, YELLOW, center=(board.centerx, top))
            visible = ["resume", "restart"]
        else:
            self.text(surface, "GAME OVER", big, PINK, center=(board.centerx, top))
            self.text(surface, fmt(game.score), big * 0.8, WHITE, center=(board.centerx, top + big))
            if game.new_best_on_death:
                self.text(surface, "NEW BEST!", small, YELLOW, center=(board.centerx, top + int(big * 1.6)))
            visible = ["restart"]

        for button_name in visible:
            button = buttons[button_name]
            self.draw_button(surface, button, button.rect.height * 0.6)
        return visible

    def draw(self, surface, layout, game, particles, flash, death, screen, pad, buttons, now_ms):
        surface.fill(BG)
        board = pygame.Surface(layout.board.size)
        self.draw_board(board, layout.cell, game, particles, flash, death, now_ms)
        surface.blit(board, layout.board)
        pygame.draw.rect(surface, GREEN_DIM, layout.board.inflate(2, 2), 1)

        self.draw_hud(surface, layout, game)
        self.draw_pad(surface, pad)
        if screen is not None:
            self.draw_screen(surface, layout, screen, game, buttons)
