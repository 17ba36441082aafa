"""Neon Snake: a pygame Snake with glow, particles and synthesized sound."""

__version__ = "1.0.0"
