import os
from pathlib import Path

# Grid
COLS = 25
ROWS = 25
MIN_CELL = 10
MAX_CELL = 24
DEFAULT_CELL = 20
FPS = 60

# Layout (pixels)
MARGIN = 16
HEADER_HEIGHT = 48
BUTTON_BAR_HEIGHT = 72
WINDOW_WIDTH = COLS * DEFAULT_CELL + MARGIN * 2
WINDOW_HEIGHT = ROWS * DEFAULT_CELL + HEADER_HEIGHT + BUTTON_BAR_HEIGHT + MARGIN * 2
RESIZE_DEBOUNCE_MS = 80

# Colors - neon palette
BG = (6, 13, 20)
DARK = (2, 4, 8)
GREEN = (0, 255, 159)
GREEN_DIM = (0, 204, 122)
PINK = (255, 45, 120)
YELLOW = (255, 228, 77)
WHITE = (255, 255, 255)
GRID_LINE = (0, 255, 159, 9)
HEAD_BORDER = (0, 30, 20, 153)

# Game states
STATE_IDLE = "idle"
STATE_RUNNING = "running"
STATE_PAUSED = "paused"
STATE_DEAD = "dead"

# Timing
BASE_TICK_MS = 120
MIN_TICK_MS = 48
TICK_STEP_MS = 7
LEVEL_THRESHOLDS = [5, 10, 16, 23, 31, 40, 50, 61, 73, 86, 100]
DEATH_SCREEN_DELAY_MS = 900
DEATH_STAGGER_MS = 15

# Scoring
FOOD_POINTS = 10
SPECIAL_POINTS = 50
SPECIAL_CHANCE = 0.18
SPECIAL_MIN_TICKS = 60
SPECIAL_EXTRA_TICKS = 50
SPECIAL_URGENT_TICKS = 20

# Effects
FLASH_SPECIAL = 0.25
FLASH_LEVEL_UP = 0.18
FLASH_DECAY = 0.025
DEATH_ALPHA_STEP = 0.04
DEATH_ALPHA_MAX = 0.55
SWIPE_THRESHOLD = 10

# Audio
SAMPLE_RATE = 22050
MAX_TONE_VOLUME = 0.3
SILENCE = 0.0001

# Persistence
BEST_SCORE_KEY = "neon-snake-best"
DATA_DIR = Path(os.environ.get("NEON_SNAKE_HOME", Path.home() / ".neon-snake"))
