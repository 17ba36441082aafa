import math
import random

from .config import (
    DEATH_ALPHA_MAX,
    DEATH_ALPHA_STEP,
    DEATH_STAGGER_MS,
    FLASH_DECAY,
)

GRAVITY = 0.07
DRAG = 0.98


class ParticleSystem:
    def __init__(self, rng=None):
        self.rng = rng or random.Random()
        self.particles = []

    def __len__(self):
        return len(self.particles)

    def clear(self):
        self.particles = []

    def spawn(self, cx, cy, color, count):
        for i in range(count):
            # Evenly spread burst with a little jitter
            angle = (math.pi * 2 * i / count) + self.rng.random() * 0.6
            speed = 1.2 + self.rng.random() * 2.8
            self.particles.append({
                'pos': [cx, cy],
                'vel': [math.cos(angle) * speed, math.sin(angle) * speed],
                'life': 1.0,
                'decay': 0.035 + self.rng.random() * 0.04,
                'size': 1.5 + self.rng.random() * 2.5,
                'color': color,
            })

    def spawn_at_cell(self, cell, cell_size, color, count):
        gx, gy = cell
        self.spawn(gx * cell_size + cell_size / 2, gy * cell_size + cell_size / 2, color, count)

    def update(self):
        for particle in self.particles[:]:
            particle['pos'][0] += particle['vel'][0]
            particle['pos'][1] += particle['vel'][1]
            particle['vel'][1] += GRAVITY
            particle['vel'][0] *= DRAG
            particle['life'] -= particle['decay']
            if particle['life'] <= 0:
                self.particles.remove(particle)


class ScreenFlash:
    def __init__(self):
        self.alpha = 0.0

    def trigger(self, alpha):
        self.alpha = alpha

    def reset(self):
        self.alpha = 0.0

    @property
    def active(self):
        return self.alpha > 0

    def step(self):
        """Return the alpha to draw this frame, then fade."""
        alpha = self.alpha
        self.alpha = max(0.0, self.alpha - FLASH_DECAY)
        return alpha


class DeathEffect:
    """Red wash over the board plus a staggered burst along the dead snake."""

    def __init__(self):
        self.active = False
        self.alpha = 0.0
        self.pending = []

    def reset(self):
        self.active = False
        self.alpha = 0.0
        self.pending = []

    def start(self, segments, now_ms):
        self.active = True
        self.alpha = 0.0
        self.pending = [(now_ms + i * DEATH_STAGGER_MS, seg) for i, seg in enumerate(segments)]

    def finish(self):
        self.active = False

    def due_segments(self, now_ms):
        """Pop the segments whose burst time has come."""
        due = [seg for at, seg in self.pending if at <= now_ms]
        self.pending = [(at, seg) for at, seg in self.pending if at > now_ms]
        return due

    def step(self):
        if not self.active:
            return 0.0
        self.alpha = min(self.alpha + DEATH_ALPHA_STEP, DEATH_ALPHA_MAX)
        return self.alpha
