import logging

import numpy as np
import pygame

from .config import MAX_TONE_VOLUME, SAMPLE_RATE, SILENCE

logger = logging.getLogger(__name__)

# Tail after the envelope has faded so the stop never clicks
STOP_PAD = 0.02

# (frequency, waveform, duration, volume, offset)
VOICES = {
    "eat": [
        (440, "square", 0.06, 0.14, 0.0),
        (660, "square", 0.06, 0.10, 0.05),
    ],
    "special": [
        (523, "sawtooth", 0.07, 0.12, 0.0),
        (659, "sawtooth", 0.07, 0.11, 0.06),
        (880, "sawtooth", 0.1, 0.13, 0.13),
    ],
    "die": [
        (220, "sawtooth", 0.12, 0.18, 0.0),
        (170, "sawtooth", 0.15, 0.14, 0.1),
        (120, "sawtooth", 0.2, 0.12, 0.22),
    ],
    "turn": [
        (280, "square", 0.02, 0.03, 0.0),
    ],
    "level_up": [
        (freq, "square", 0.09, 0.14, i * 0.09) for i, freq in enumerate([392, 523, 659, 784])
    ],
}

# (duration, volume)
NOISE = {
    "die": (0.35, 0.07),
}


def oscillator(kind, frequency, t):
    phase = frequency * t
    if kind == "square":
        return np.where(np.sin(2 * np.pi * phase) >= 0, 1.0, -1.0)
    if kind == "sawtooth":
        return 2.0 * (phase - np.floor(phase + 0.5))
    raise ValueError(f"unknown waveform: {kind!r}")


def envelope(duration, volume, sample_rate=SAMPLE_RATE):
    """Exponential fade from the start volume down to silence over duration."""
    samples = max(1, int(sample_rate * (duration + STOP_PAD)))
    t = np.arange(samples) / sample_rate
    start = min(volume, MAX_TONE_VOLUME)
    if start <= SILENCE:
        return np.full(samples, start)
    progress = np.clip(t / duration, 0.0, 1.0)
    return start * (SILENCE / start) ** progress


def render_tone(frequency, kind, duration, volume, sample_rate=SAMPLE_RATE):
    gain = envelope(duration, volume, sample_rate)
    t = np.arange(len(gain)) / sample_rate
    return oscillator(kind, frequency, t) * gain


def render_noise(duration, volume, rng=None, sample_rate=SAMPLE_RATE):
    rng = rng or np.random.default_rng()
    samples = max(1, int(sample_rate * (duration + STOP_PAD)))
    t = np.arange(samples) / sample_rate
    progress = np.clip(t / duration, 0.0, 1.0)
    gain = volume * (SILENCE / volume) ** progress
    return rng.uniform(-1.0, 1.0, samples) * gain


def render_event(name, sample_rate=SAMPLE_RATE, rng=None):
    """Mix every voice of an event into one float buffer in [-1, 1]."""
    layers = []
    for frequency, kind, duration, volume, offset in VOICES.get(name, []):
        start = int(sample_rate * offset)
        layers.append((start, render_tone(frequency, kind, duration, volume, sample_rate)))
    if name in NOISE:
        duration, volume = NOISE[name]
        layers.append((0, render_noise(duration, volume, rng, sample_rate)))
    if not layers:
        raise KeyError(name)

    total = max(start + len(wave) for start, wave in layers)
    mix = np.zeros(total)
    for start, wave in layers:
        mix[start:start + len(wave)] += wave
    return np.clip(mix, -1.0, 1.0)


def to_pcm(buffer, channels=2):
    pcm = (buffer * 32767).astype(np.int16)
    if channels == 1:
        return pcm
    return np.ascontiguousarray(np.repeat(pcm[:, None], channels, axis=1))


class AudioEngine:
    """Plays synthesized event sounds; silently does nothing without a mixer."""

    def __init__(self, enabled=True):
        self.enabled = enabled
        self._ready = None
        self._sounds = {}

    def _mixer(self):
        if self._ready is None:
            try:
                if pygame.mixer.get_init() is None:
                    pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
                self._ready = True
            except pygame.error as exc:
                logger.debug("audio unavailable: %s", exc)
                self._ready = False
        return self._ready

    def _sound(self, name):
        if name not in self._sounds:
            frequency, _size, channels = pygame.mixer.get_init()
            pcm = to_pcm(render_event(name, sample_rate=frequency), channels)
            self._sounds[name] = pygame.sndarray.make_sound(pcm)
        return self._sounds[name]

    def play(self, name):
        if not self.enabled or not self._mixer():
            return
        try:
            self._sound(name).play()
        except (pygame.error, ValueError) as exc:
            logger.debug("could not play %s: %s", name, exc)

    def eat(self):
        self.play("eat")

    def special(self):
        self.play("special")

    def die(self):
        self.play("die")

    def turn(self):
        self.play("turn")

    def level_up(self):
        self.play("level_up")
