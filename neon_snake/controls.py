import pygame

from .config import SWIPE_THRESHOLD
from .engine import Direction

KEY_MAP = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}

START_KEYS = (pygame.K_SPACE, pygame.K_RETURN, pygame.K_KP_ENTER)
PAUSE_KEY = pygame.K_p
RESTART_KEY = pygame.K_ESCAPE


def key_direction(key):
    # pygame reports the same key code regardless of shift
    return KEY_MAP.get(key)


def swipe_direction(dx, dy, threshold=SWIPE_THRESHOLD):
    """Resolve a drag by its dominant axis, None if it was too short."""
    if max(abs(dx), abs(dy)) < threshold:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP


class Button:
    def __init__(self, name, label, rect=None):
        self.name = name
        self.label = label
        self.rect = pygame.Rect(rect or (0, 0, 0, 0))
        self.pressed = False

    def contains(self, pos):
        return self.rect.collidepoint(pos)


class ButtonPad:
    """On-screen buttons with a pressed look until release or pointer leave."""

    def __init__(self, buttons):
        self.buttons = {button.name: button for button in buttons}
        self.active = None

    def __getitem__(self, name):
        return self.buttons[name]

    def __iter__(self):
        return iter(self.buttons.values())

    def hit(self, pos, names=None):
        for button in self.buttons.values():
            if names is not None and button.name not in names:
                continue
            if button.contains(pos):
                return button
        return None

    def press(self, pos, names=None):
        button = self.hit(pos, names)
        if button is None:
            return None
        button.pressed = True
        self.active = button
        return button.name

    def release(self):
        if self.active is not None:
            self.active.pressed = False
            self.active = None

    def motion(self, pos):
        # Dragging off a held button counts as leaving it
        if self.active is not None and not self.active.contains(pos):
            self.release()


def direction_pad():
    return ButtonPad([
        Button("up", "UP"),
        Button("left", "LEFT"),
        Button("down", "DOWN"),
        Button("right", "RIGHT"),
        Button("pause", "II"),
    ])


def overlay_buttons():
    return ButtonPad([
        Button("start", "START"),
        Button("resume", "RESUME"),
        Button("restart", "RESTART"),
    ])


PAD_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}
