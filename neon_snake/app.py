import logging

import pygame

from . import engine
from .audio import AudioEngine
from .config import (
    DATA_DIR,
    DEATH_SCREEN_DELAY_MS,
    FLASH_LEVEL_UP,
    FLASH_SPECIAL,
    FPS,
    GREEN,
    PINK,
    RESIZE_DEBOUNCE_MS,
    STATE_DEAD,
    STATE_IDLE,
    STATE_PAUSED,
    STATE_RUNNING,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    YELLOW,
)
from .controls import (
    PAD_DIRECTIONS,
    PAUSE_KEY,
    RESTART_KEY,
    START_KEYS,
    direction_pad,
    key_direction,
    overlay_buttons,
    swipe_direction,
)
from .effects import DeathEffect, ParticleSystem, ScreenFlash
from .layout import Layout
from .render import SCREEN_GAMEOVER, SCREEN_PAUSED, SCREEN_START, Renderer
from .storage import BestScoreStore

logger = logging.getLogger(__name__)

TICK_EVENT = pygame.USEREVENT + 1
DEATH_SCREEN_EVENT = pygame.USEREVENT + 2
RESIZE_EVENT = pygame.USEREVENT + 3

OVERLAY_BUTTONS = {
    SCREEN_START: ("start",),
    SCREEN_PAUSED: ("resume", "restart"),
    SCREEN_GAMEOVER: ("restart",),
}


class Game:
    def __init__(self, fps=FPS, muted=False, data_dir=DATA_DIR, rng=None):
        pygame.init()
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.RESIZABLE)
        pygame.display.set_caption("NEON SNAKE")
        self.clock = pygame.time.Clock()
        self.fps = fps

        self.store = BestScoreStore(data_dir)
        self.game = engine.GameState(best=self.store.load(), rng=rng)
        self.audio = AudioEngine(enabled=not muted)
        self.renderer = Renderer()
        self.particles = ParticleSystem(rng=rng)
        self.flash = ScreenFlash()
        self.death = DeathEffect()

        self.pad = direction_pad()
        self.buttons = overlay_buttons()
        self.overlay = SCREEN_START
        self.swipe_start = None
        self._tick_armed = 0
        self.relayout()

    # --- Layout and timers -------------------------------------------------

    def relayout(self):
        self.screen = pygame.display.get_surface()
        width, height = self.screen.get_size()
        self.layout = Layout(width, height, self.game.cols, self.game.rows)
        self.layout.place_pad(self.pad)
        self.layout.place_overlay_buttons(self.buttons, self.overlay)
        logger.debug("layout %dx%d, cell %d px", width, height, self.layout.cell)

    def show(self, overlay):
        self.overlay = overlay
        self.buttons.release()
        self.layout.place_overlay_buttons(self.buttons, overlay)

    def sync_timer(self):
        """Keep the tick timer armed at the current interval only while running."""
        wanted = self.game.tick_ms if self.game.running else 0
        if wanted != self._tick_armed:
            pygame.time.set_timer(TICK_EVENT, wanted)
            self._tick_armed = wanted

    # --- State transitions -------------------------------------------------

    def start_game(self):
        pygame.time.set_timer(DEATH_SCREEN_EVENT, 0)
        engine.start_game(self.game)
        self.particles.clear()
        self.flash.reset()
        self.death.reset()
        self.show(None)
        self.sync_timer()

    def restart(self):
        if engine.abandon(self.game):
            self.sync_timer()
        self.start_game()

    def toggle_pause(self):
        engine.toggle_pause(self.game)
        self.after_pause_change()

    def resume(self):
        engine.resume(self.game)
        self.after_pause_change()

    def after_pause_change(self):
        if self.game.state == STATE_PAUSED:
            self.show(SCREEN_PAUSED)
        elif self.game.state == STATE_RUNNING:
            self.show(None)
        self.sync_timer()

    def change_direction(self, direction):
        if engine.request_direction(self.game, direction):
            self.audio.turn()

    def handle_tick(self):
        result = engine.tick(self.game)
        cell = self.layout.cell
        for event in result.events:
            if event == engine.EVENT_EAT:
                self.particles.spawn_at_cell(result.head, cell, PINK, 12)
                self.audio.eat()
            elif event == engine.EVENT_SPECIAL:
                self.particles.spawn_at_cell(result.head, cell, YELLOW, 20)
                self.audio.special()
                self.flash.trigger(FLASH_SPECIAL)
            elif event == engine.EVENT_LEVEL_UP:
                self.audio.level_up()
                self.flash.trigger(FLASH_LEVEL_UP)
            elif event == engine.EVENT_DIE:
                self.on_death()
        if result.new_best:
            self.store.save(self.game.best)
        self.sync_timer()
        return result

    def on_death(self):
        self.audio.die()
        self.death.start(list(self.game.snake.positions), pygame.time.get_ticks())
        pygame.time.set_timer(DEATH_SCREEN_EVENT, DEATH_SCREEN_DELAY_MS, 1)

    def on_death_screen(self):
        if self.game.state != STATE_DEAD:
            return
        self.death.finish()
        self.show(SCREEN_GAMEOVER)

    # --- Input -------------------------------------------------------------

    def handle_key(self, key):
        direction = key_direction(key)
        if direction is not None:
            if self.game.state == STATE_RUNNING:
                self.change_direction(direction)
            elif self.game.state == STATE_IDLE:
                self.start_game()
            return

        if key == PAUSE_KEY:
            self.toggle_pause()
        elif key == RESTART_KEY:
            if self.game.state in (STATE_RUNNING, STATE_PAUSED):
                self.restart()
        elif key in START_KEYS:
            if self.game.state == STATE_IDLE:
                self.start_game()
            elif self.overlay == SCREEN_GAMEOVER:
                self.start_game()

    def press_pad(self, name):
        if name == "pause":
            self.toggle_pause()
        elif self.game.state == STATE_RUNNING:
            self.change_direction(PAD_DIRECTIONS[name])

    def click_overlay(self, name):
        if name == "resume":
            self.resume()
        else:
            self.start_game()

    def handle_pointer_down(self, pos):
        self.swipe_start = None
        if self.overlay is not None and self.buttons.press(pos, OVERLAY_BUTTONS[self.overlay]):
            return
        name = self.pad.press(pos)
        if name is not None:
            self.press_pad(name)
        elif self.layout.board.collidepoint(pos):
            self.swipe_start = pos

    def handle_pointer_up(self, pos):
        held = self.buttons.active
        self.buttons.release()
        self.pad.release()
        if held is not None and held.contains(pos):
            self.click_overlay(held.name)
            return

        if self.swipe_start is None:
            return
        dx = pos[0] - self.swipe_start[0]
        dy = pos[1] - self.swipe_start[1]
        self.swipe_start = None
        direction = swipe_direction(dx, dy)
        if direction is None:
            return
        self.change_direction(direction)

    def handle_event(self, event):
        if event.type == pygame.QUIT:
            return False
        if event.type == TICK_EVENT:
            self.handle_tick()
        elif event.type == DEATH_SCREEN_EVENT:
            self.on_death_screen()
        elif event.type == pygame.KEYDOWN:
            self.handle_key(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.handle_pointer_down(event.pos)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.handle_pointer_up(event.pos)
        elif event.type == pygame.MOUSEMOTION:
            self.pad.motion(event.pos)
            self.buttons.motion(event.pos)
        elif event.type == pygame.VIDEORESIZE:
            # Re-arming replaces the pending timer, so only the last resize lands
            pygame.time.set_timer(RESIZE_EVENT, RESIZE_DEBOUNCE_MS, 1)
        elif event.type == RESIZE_EVENT:
            self.relayout()
        return True

    # --- Frame -------------------------------------------------------------

    def update(self, now_ms):
        for segment in self.death.due_segments(now_ms):
            self.particles.spawn_at_cell(segment, self.layout.cell, GREEN, 5)

    def draw(self, now_ms):
        self.renderer.draw(
            self.screen,
            self.layout,
            self.game,
            self.particles,
            self.flash,
            self.death,
            self.overlay,
            self.pad,
            self.buttons,
            now_ms,
        )
        self.particles.update()

    def run(self, max_frames=None):
        running = True
        frames = 0
        logger.info("best score so far: %d", self.game.best)

        while running:
            for event in pygame.event.get():
                if not self.handle_event(event):
                    running = False
                    break

            now_ms = pygame.time.get_ticks()
            self.update(now_ms)
            self.draw(now_ms)
            pygame.display.flip()
            self.clock.tick(self.fps)

            frames += 1
            if max_frames is not None and frames >= max_frames:
                running = False

        pygame.time.set_timer(TICK_EVENT, 0)
        pygame.quit()
