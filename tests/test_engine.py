import random

import pytest

from neon_snake.config import COLS, ROWS
from neon_snake.engine import (
    EVENT_DIE,
    EVENT_EAT,
    EVENT_LEVEL_UP,
    EVENT_SPECIAL,
    STATE_DEAD,
    STATE_IDLE,
    STATE_PAUSED,
    STATE_RUNNING,
    Direction,
    GameState,
    Snake,
    abandon,
    check_level,
    level_for,
    new_game,
    random_cell,
    request_direction,
    resume,
    start_game,
    tick,
    tick_interval,
    toggle_pause,
)


def running_game(snake, direction=Direction.RIGHT, food=(0, 0), rng=None, cols=COLS, rows=ROWS):
    game = GameState(rng=rng or random.Random(7), cols=cols, rows=rows)
    start_game(game)
    game.snake = Snake(snake)
    game.direction = direction
    game.pending = direction
    game.food = food
    return game


def test_new_game_is_idle():
    game = new_game(best=42)
    assert game.state == STATE_IDLE
    assert game.best == 42
    assert len(game.snake) == 0


def test_grid_too_small_is_rejected():
    with pytest.raises(ValueError):
        GameState(cols=2, rows=5)


def test_start_game_resets_everything(rng):
    game = GameState(rng=rng)
    game.score = 990
    game.level = 7
    game.food_eaten = 44
    game.tick_ms = 50
    game.special = (3, 3)

    start_game(game)

    assert game.state == STATE_RUNNING
    assert game.snake.positions == [(12, 12), (11, 12), (10, 12)]
    assert game.direction == Direction.RIGHT
    assert game.pending == Direction.RIGHT
    assert game.score == 0
    assert game.level == 1
    assert game.food_eaten == 0
    assert game.tick_ms == 120
    assert game.special is None
    assert game.food is not None
    assert game.food not in game.snake


def test_tick_moves_one_cell_without_growing():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    result = tick(game)
    assert result.events == []
    assert game.snake.positions == [(13, 12), (12, 12), (11, 12)]


def test_head_wraps_around_every_edge():
    game = running_game([(24, 5), (23, 5), (22, 5)])
    tick(game)
    assert game.snake.head == (0, 5)

    game = running_game([(5, 0), (5, 1), (5, 2)], direction=Direction.UP)
    tick(game)
    assert game.snake.head == (5, 24)

    game = running_game([(0, 5), (1, 5), (2, 5)], direction=Direction.LEFT)
    tick(game)
    assert game.snake.head == (24, 5)

    game = running_game([(5, 24), (5, 23), (5, 22)], direction=Direction.DOWN, food=(9, 9))
    tick(game)
    assert game.snake.head == (5, 0)


def test_eating_food_grows_scores_and_replaces_food(never_special):
    game = running_game([(12, 12), (11, 12), (10, 12)], food=(13, 12), rng=never_special)
    result = tick(game)

    assert result.events == [EVENT_EAT]
    assert result.head == (13, 12)
    assert game.score == 10
    assert game.food_eaten == 1
    assert game.snake.positions == [(13, 12), (12, 12), (11, 12), (10, 12)]
    assert game.food is not None
    assert game.food not in game.snake
    assert game.special is None


def test_food_score_scales_with_level(never_special):
    game = running_game([(12, 12), (11, 12), (10, 12)], food=(13, 12), rng=never_special)
    game.level = 3
    tick(game)
    assert game.score == 30


def test_eating_food_can_spawn_special(always_special):
    game = running_game([(12, 12), (11, 12), (10, 12)], food=(13, 12), rng=always_special)
    tick(game)

    assert game.special is not None
    assert game.special not in game.snake
    assert game.special != game.food
    # Spawned with 60..109 ticks and already counted down once
    assert 59 <= game.special_ticks <= 108


def test_special_does_not_respawn_while_present(always_special):
    game = running_game([(12, 12), (11, 12), (10, 12)], food=(13, 12), rng=always_special)
    game.special = (0, 20)
    game.special_ticks = 30
    tick(game)
    assert game.special == (0, 20)
    assert game.special_ticks == 29


def test_eating_special(never_special):
    game = running_game([(12, 12), (11, 12), (10, 12)], food=(0, 0), rng=never_special)
    game.special = (13, 12)
    game.special_ticks = 40

    result = tick(game)

    assert result.events == [EVENT_SPECIAL]
    assert game.score == 50
    assert game.food_eaten == 1
    assert game.special is None
    assert game.special_ticks == 0
    assert len(game.snake) == 4


def test_special_expires():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    game.special = (0, 20)
    game.special_ticks = 2

    tick(game)
    assert game.special == (0, 20)
    assert game.special_ticks == 1

    tick(game)
    assert game.special is None


def test_self_collision_kills():
    # Head at (5,5) turning right into its own body at (6,5)
    game = running_game([(5, 5), (5, 6), (6, 6), (6, 5), (6, 4)])
    result = tick(game)

    assert result.events == [EVENT_DIE]
    assert game.state == STATE_DEAD
    assert len(game.snake) == 5


def test_moving_into_vacating_tail_is_safe():
    game = running_game([(5, 5), (5, 6), (6, 6), (6, 5)])
    result = tick(game)

    assert result.events == []
    assert game.state == STATE_RUNNING
    assert game.snake.positions == [(6, 5), (5, 5), (5, 6), (6, 6)]


def test_full_board_leaves_no_food_and_keeps_running(never_special):
    game = running_game([(2, 0), (1, 0), (0, 0)], food=(3, 0), rng=never_special, cols=4, rows=1)
    result = tick(game)
    assert result.events == [EVENT_EAT]
    assert game.food is None
    assert len(game.snake) == 4

    result = tick(game)
    assert result.events == []
    assert game.state == STATE_RUNNING
    assert game.food is None
    assert game.snake.positions == [(0, 0), (3, 0), (2, 0), (1, 0)]


def test_level_table():
    assert level_for(0) == 1
    assert level_for(4) == 1
    assert level_for(5) == 2
    assert level_for(9) == 2
    assert level_for(10) == 3
    assert level_for(99) == 11
    assert level_for(100) == 12
    assert level_for(1000) == 12


def test_tick_interval_floor():
    assert tick_interval(1) == 120
    assert tick_interval(2) == 113
    assert tick_interval(11) == 50
    assert tick_interval(12) == 48


def test_level_up_on_threshold(never_special):
    game = running_game([(12, 12), (11, 12), (10, 12)], food=(13, 12), rng=never_special)
    game.food_eaten = 4

    result = tick(game)

    assert result.events == [EVENT_EAT, EVENT_LEVEL_UP]
    assert game.level == 2
    assert game.tick_ms == 113


def test_level_never_goes_down():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    game.level = 5
    game.food_eaten = 0
    assert check_level(game) is False
    assert game.level == 5


def test_request_direction_rejects_same_and_reverse():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    assert request_direction(game, Direction.RIGHT) is False
    assert request_direction(game, Direction.LEFT) is False
    assert game.pending == Direction.RIGHT

    assert request_direction(game, Direction.UP) is True
    assert game.pending == Direction.UP
    assert request_direction(game, Direction.UP) is False
    assert request_direction(game, Direction.DOWN) is False


def test_queued_turn_applies_on_next_tick():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    request_direction(game, Direction.UP)
    assert game.direction == Direction.RIGHT

    tick(game)

    assert game.direction == Direction.UP
    assert game.snake.head == (12, 11)


def test_latest_turn_overwrites_pending():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    request_direction(game, Direction.UP)
    assert request_direction(game, Direction.LEFT) is True
    assert game.pending == Direction.LEFT


def test_quick_double_turn_cannot_reverse_into_neck():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    request_direction(game, Direction.UP)
    request_direction(game, Direction.LEFT)

    tick(game)

    assert game.state == STATE_RUNNING
    assert game.direction == Direction.RIGHT
    assert game.snake.head == (13, 12)


def test_request_direction_ignored_unless_running():
    game = new_game()
    assert request_direction(game, Direction.UP) is False

    game = running_game([(12, 12), (11, 12), (10, 12)])
    toggle_pause(game)
    assert request_direction(game, Direction.UP) is False


def test_best_score_follows_score(never_special):
    game = running_game([(12, 12), (11, 12), (10, 12)], food=(13, 12), rng=never_special)
    game.best = 5

    result = tick(game)

    assert result.new_best is True
    assert game.best == 10

    game.food = (0, 0)
    result = tick(game)
    assert result.new_best is False
    assert game.best == 10


def test_death_records_new_best():
    game = running_game([(5, 5), (5, 6), (6, 6), (6, 5), (6, 4)])
    game.score = 80
    game.best = 80
    tick(game)
    assert game.new_best_on_death is True

    game = running_game([(5, 5), (5, 6), (6, 6), (6, 5), (6, 4)])
    game.score = 20
    game.best = 80
    tick(game)
    assert game.new_best_on_death is False

    game = running_game([(5, 5), (5, 6), (6, 6), (6, 5), (6, 4)])
    tick(game)
    assert game.new_best_on_death is False


def test_pause_resume_cycle():
    game = running_game([(12, 12), (11, 12), (10, 12)])

    assert toggle_pause(game) is True
    assert game.state == STATE_PAUSED
    before = list(game.snake.positions)
    assert tick(game).events == []
    assert game.snake.positions == before

    assert resume(game) is True
    assert game.state == STATE_RUNNING
    assert resume(game) is False

    toggle_pause(game)
    toggle_pause(game)
    assert game.state == STATE_RUNNING


def test_pause_does_nothing_when_idle_or_dead():
    game = new_game()
    assert toggle_pause(game) is False
    assert game.state == STATE_IDLE

    game.state = STATE_DEAD
    assert toggle_pause(game) is False
    assert game.state == STATE_DEAD


def test_abandon_only_from_active_game():
    game = running_game([(12, 12), (11, 12), (10, 12)])
    assert abandon(game) is True
    assert game.state == STATE_IDLE
    assert abandon(game) is False


def test_random_cell_avoids_excluded(rng):
    exclude = [(x, y) for x in range(3) for y in range(3) if (x, y) != (1, 2)]
    for _ in range(20):
        assert random_cell(exclude, rng, cols=3, rows=3) == (1, 2)


def test_random_cell_on_full_board(rng):
    everything = [(x, y) for x in range(3) for y in range(3)]
    assert random_cell(everything, rng, cols=3, rows=3) is None


def test_long_random_game_keeps_invariants():
    rng = random.Random(99)
    game = GameState(rng=random.Random(5))
    start_game(game)

    for _ in range(2000):
        if game.state != STATE_RUNNING:
            break
        request_direction(game, rng.choice(list(Direction)))
        length = len(game.snake)
        score = game.score
        best = game.best

        result = tick(game)
        if EVENT_DIE in result.events:
            break

        x, y = game.snake.head
        assert 0 <= x < COLS and 0 <= y < ROWS
        grew = EVENT_EAT in result.events or EVENT_SPECIAL in result.events
        assert len(game.snake) == length + (1 if grew else 0)
        assert game.score >= score
        assert game.best >= best
        assert len(set(game.snake.positions)) == len(game.snake)
        assert game.food not in game.snake
        if game.special is not None:
            assert game.special not in game.snake
            assert game.special != game.food
