"""Headless 2D game simulation: geometry, platformer physics, particle emitters and small game rules."""

__version__ = "0.1.0"

__all__ = [
    "angles",
    "asteroids",
    "emitter",
    "geometry",
    "life",
    "particle_config",
    "platformer",
    "snake",
]