"""Angle helpers for smoothly rotating cameras, in degrees."""

from __future__ import annotations

import math

_FULL_TURN = 360.0


def short_angle_dist(a0: float, a1: float) -> float:
    """Signed distance from ``a0`` to ``a1`` the short way round the circle."""
    da = math.fmod(a1 - a0, _FULL_TURN)
    return math.fmod(2.0 * da, _FULL_TURN) - da


def angle_lerp(a0: float, a1: float, t: float) -> float:
    """Interpolate from ``a0`` towards ``a1`` by ``t``, taking the short way."""
    return a0 + short_angle_dist(a0, a1) * t


def wrap_rotation(angle: float) -> float:
    """Bring an angle that went at most one turn out of range back into 0..360."""
    if angle >= _FULL_TURN:
        return angle - _FULL_TURN
    if angle < 0.0:
        return angle + _FULL_TURN
    return angle