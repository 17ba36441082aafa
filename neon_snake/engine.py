"""
Tick engine: the game state and everything that happens on one tick.

Nothing in here touches pygame. The application layer owns the timers and
turns the events returned by :func:`tick` into sounds and particles.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from .config import (
    BASE_TICK_MS,
    COLS,
    FOOD_POINTS,
    LEVEL_THRESHOLDS,
    MIN_TICK_MS,
    ROWS,
    SPECIAL_CHANCE,
    SPECIAL_EXTRA_TICKS,
    SPECIAL_MIN_TICKS,
    SPECIAL_POINTS,
    STATE_DEAD,
    STATE_IDLE,
    STATE_PAUSED,
    STATE_RUNNING,
    TICK_STEP_MS,
)

logger = logging.getLogger(__name__)

EVENT_EAT = "eat"
EVENT_SPECIAL = "special"
EVENT_LEVEL_UP = "level_up"
EVENT_DIE = "die"


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self):
        return self.value[0]

    @property
    def dy(self):
        return self.value[1]

    @property
    def opposite(self):
        return Direction((-self.dx, -self.dy))


class Snake:
    def __init__(self, positions=None):
        self.positions = list(positions or [])

    def reset(self, cols=COLS, rows=ROWS):
        mx, my = cols // 2, rows // 2
        self.positions = [(mx, my), (mx - 1, my), (mx - 2, my)]

    @property
    def head(self):
        return self.positions[0]

    @property
    def neck(self):
        if len(self.positions) < 2:
            return None
        return self.positions[1]

    def __len__(self):
        return len(self.positions)

    def __contains__(self, cell):
        return cell in self.positions

    def next_head(self, direction, cols=COLS, rows=ROWS):
        x, y = self.head
        return ((x + direction.dx) % cols, (y + direction.dy) % rows)

    def hits_itself(self, cell):
        # The tail tip moves away on this tick
        return cell in self.positions[:-1]

    def push_head(self, cell):
        self.positions.insert(0, cell)

    def drop_tail(self):
        return self.positions.pop()


@dataclass
class TickResult:
    events: list = field(default_factory=list)
    new_best: bool = False
    head: tuple = None


class GameState:
    """Everything the tick engine and the renderer share."""

    def __init__(self, best=0, rng=None, cols=COLS, rows=ROWS):
        if cols < 3 or rows < 1:
            raise ValueError(f"grid {cols}x{rows} is too small for a snake")
        self.cols = cols
        self.rows = rows
        self.rng = rng or random.Random()
        self.best = best
        self.state = STATE_IDLE
        self.snake = Snake()
        self.direction = Direction.RIGHT
        self.pending = Direction.RIGHT
        self.food = None
        self.special = None
        self.special_ticks = 0
        self.score = 0
        self.level = 1
        self.food_eaten = 0
        self.tick_ms = BASE_TICK_MS
        self.new_best_on_death = False

    @property
    def running(self):
        return self.state == STATE_RUNNING


def new_game(best=0, rng=None):
    return GameState(best=best, rng=rng)


def random_cell(exclude, rng, cols=COLS, rows=ROWS):
    """Pick a uniformly random free cell, or None when the board is full."""
    blocked = set(exclude)
    free = [(x, y) for y in range(rows) for x in range(cols) if (x, y) not in blocked]
    if not free:
        return None
    return rng.choice(free)


def tick_interval(level):
    return max(MIN_TICK_MS, BASE_TICK_MS - (level - 1) * TICK_STEP_MS)


def level_for(food_eaten):
    for index, threshold in enumerate(LEVEL_THRESHOLDS):
        if food_eaten < threshold:
            return index + 1
    return len(LEVEL_THRESHOLDS) + 1


def place_food(game):
    exclude = list(game.snake.positions)
    if game.special is not None:
        exclude.append(game.special)
    game.food = random_cell(exclude, game.rng, game.cols, game.rows)


def try_spawn_special(game):
    if game.special is not None or game.rng.random() >= SPECIAL_CHANCE:
        return False
    exclude = list(game.snake.positions)
    if game.food is not None:
        exclude.append(game.food)
    cell = random_cell(exclude, game.rng, game.cols, game.rows)
    if cell is None:
        return False
    game.special = cell
    game.special_ticks = SPECIAL_MIN_TICKS + game.rng.randrange(SPECIAL_EXTRA_TICKS)
    return True


def check_level(game):
    new_level = level_for(game.food_eaten)
    if new_level <= game.level:
        return False
    game.level = new_level
    game.tick_ms = tick_interval(new_level)
    logger.debug("level %d, tick %d ms", game.level, game.tick_ms)
    return True


def start_game(game):
    game.score = 0
    game.level = 1
    game.food_eaten = 0
    game.tick_ms = BASE_TICK_MS
    game.special = None
    game.special_ticks = 0
    game.new_best_on_death = False

    game.snake.reset(game.cols, game.rows)
    game.direction = Direction.RIGHT
    game.pending = Direction.RIGHT
    place_food(game)

    game.state = STATE_RUNNING
    logger.info("game started (best %d)", game.best)


def request_direction(game, direction):
    """Queue a turn for the next tick. Returns True if it was accepted."""
    if game.state != STATE_RUNNING:
        return False
    if direction in (game.pending, game.pending.opposite):
        return False
    game.pending = direction
    return True


def _resolve_direction(game):
    candidate = game.pending
    # Two quick turns can queue a reversal into the neck; keep going instead
    if game.snake.neck is not None and game.snake.next_head(candidate, game.cols, game.rows) == game.snake.neck:
        game.pending = game.direction
        return game.direction
    game.direction = candidate
    return candidate


def die(game):
    game.state = STATE_DEAD
    game.new_best_on_death = game.score > 0 and game.score >= game.best
    logger.info("game over: score %d, level %d, length %d", game.score, game.level, len(game.snake))


def tick(game):
    result = TickResult()
    if game.state != STATE_RUNNING:
        return result

    direction = _resolve_direction(game)
    head = game.snake.next_head(direction, game.cols, game.rows)
    result.head = head

    if game.snake.hits_itself(head):
        die(game)
        result.events.append(EVENT_DIE)
        return result

    game.snake.push_head(head)
    grew = False

    if head == game.food:
        grew = True
        game.score += game.level * FOOD_POINTS
        game.food_eaten += 1
        result.events.append(EVENT_EAT)
        place_food(game)
        try_spawn_special(game)
        if check_level(game):
            result.events.append(EVENT_LEVEL_UP)

    if game.special is not None and head == game.special:
        grew = True
        game.score += game.level * SPECIAL_POINTS
        game.food_eaten += 1
        result.events.append(EVENT_SPECIAL)
        game.special = None
        game.special_ticks = 0
        if check_level(game):
            result.events.append(EVENT_LEVEL_UP)

    if not grew:
        game.snake.drop_tail()

    if game.special is not None:
        game.special_ticks -= 1
        if game.special_ticks <= 0:
            game.special = None
            game.special_ticks = 0

    if game.score > game.best:
        game.best = game.score
        result.new_best = True

    return result


def toggle_pause(game):
    if game.state == STATE_RUNNING:
        game.state = STATE_PAUSED
        return True
    if game.state == STATE_PAUSED:
        return resume(game)
    return False


def resume(game):
    if game.state != STATE_PAUSED:
        return False
    game.state = STATE_RUNNING
    return True


def abandon(game):
    """Drop a running or paused game back to idle."""
    if game.state in (STATE_RUNNING, STATE_PAUSED):
        game.state = STATE_IDLE
        return True
    return False
