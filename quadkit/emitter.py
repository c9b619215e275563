"""Particle emitters: spawning, ageing and animating particles on the CPU."""

from __future__ import annotations

import dataclasses
import math
import random
from dataclasses import dataclass, field

from quadkit.geometry import Vec2
from quadkit.particle_config import BatchedCurve, BlendMode, Color, EmitterConfig

_U16_MAX = 2**16 - 1


def _life_ratio(lived: float, lifetime: float) -> float:
    """``lived / lifetime`` with the IEEE results for a zero lifetime."""
    if lifetime != 0.0:
        return lived / lifetime
    if lived == 0.0:
        return math.nan
    return math.copysign(math.inf, lived)


def _to_u16(value: float) -> int:
    if math.isnan(value) or value <= 0.0:
        return 0
    if value >= _U16_MAX:
        return _U16_MAX
    return int(value)


def _spawn_count(value: float) -> int:
    if math.isnan(value) or value <= 0.0:
        return 0
    if math.isinf(value):
        return 2**63
    return int(value)


def _mix(a: Color, b: Color, t: float) -> tuple[float, float, float, float]:
    return tuple(x * (1.0 - t) + y * t for x, y in zip(a.to_tuple(), b.to_tuple()))


def _rotated(vec: Vec2, angle: float) -> Vec2:
    cos, sin = math.cos(angle), math.sin(angle)
    return Vec2(vec.x * cos - vec.y * sin, vec.x * sin + vec.y * cos)


@dataclass
class Particle:
    """One live particle: its drawable state and its motion."""

    position: Vec2
    rotation: float
    size: float
    initial_size: float
    velocity: Vec2
    angular_velocity: float
    lifetime: float
    color: tuple[float, float, float, float]
    spawn_index: float
    lived: float = 0.0
    life_fraction: float = 0.0
    frame: int = 0
    uv: tuple[float, float, float, float] = (1.0, 1.0, 0.0, 0.0)


class Emitter:
    """Spawns particles according to an EmitterConfig and moves them over time."""

    def __init__(self, config: EmitterConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.particles: list[Particle] = []
        self.position = Vec2(0.0, 0.0)
        self.blend_mode: BlendMode = config.blend_mode
        self.mesh: tuple[list[float], list[int]] = config.shape.mesh()
        self._batched_size_curve: BatchedCurve | None = None
        self._mesh_dirty = False
        self._last_emit_time = 0.0
        self._time_passed = 0.0
        self._particles_current_cycle = 0
        self._particles_spawned = 0
        self.rebuild_size_curve()

    @property
    def particles_spawned(self) -> int:
        return self._particles_spawned

    @property
    def time_passed(self) -> float:
        return self._time_passed

    @property
    def particles_current_cycle(self) -> int:
        return self._particles_current_cycle

    @property
    def batched_size_curve(self) -> BatchedCurve | None:
        return self._batched_size_curve

    def reset(self) -> None:
        """Drop every particle and restart the emission cycle."""
        self.particles.clear()
        self._last_emit_time = 0.0
        self._time_passed = 0.0
        self._particles_spawned = 0
        self._particles_current_cycle = 0

    def rebuild_size_curve(self) -> None:
        """Resample the size curve after the config's curve has changed."""
        curve = self.config.size_curve
        self._batched_size_curve = None if curve is None else curve.batch()

    def update_particle_mesh(self) -> None:
        """Rebuild the particle mesh from the config's shape on the next update."""
        self._mesh_dirty = True

    def _emit_particle(self, offset: Vec2) -> None:
        config = self.config
        rng = self.rng
        offset = offset + config.emission_shape.random_point(rng)

        size = config.size - config.size * rng.uniform(0.0, config.size_randomness)
        rotation = config.initial_rotation - config.initial_rotation * rng.uniform(
            0.0, config.initial_rotation_randomness
        )
        position = offset if config.local_coords else self.position + offset

        speed = config.initial_velocity - config.initial_velocity * rng.uniform(
            0.0, config.initial_velocity_randomness
        )
        spread = config.initial_direction_spread
        angle = rng.uniform(-spread / 2.0, spread / 2.0)
        velocity = _rotated(config.initial_direction, angle) * speed

        angular_velocity = config.initial_angular_velocity - (
            config.initial_angular_velocity
            * rng.uniform(0.0, config.initial_angular_velocity_randomness)
        )
        lifetime = config.lifetime - config.lifetime * rng.uniform(
            0.0, config.lifetime_randomness
        )

        self.particles.append(
            Particle(
                position=position,
                rotation=rotation,
                size=size,
                initial_size=size,
                velocity=velocity,
                angular_velocity=angular_velocity,
                lifetime=lifetime,
                color=config.colors_curve.start.to_tuple(),
                spawn_index=float(self._particles_spawned),
            )
        )
        self._particles_spawned += 1
        self._particles_current_cycle += 1

    def emit(self, pos: Vec2, n: int) -> None:
        """Immediately emit ``n`` particles, ignoring ``emitting`` and ``amount``."""
        for _ in range(n):
            self._emit_particle(pos)
            self._particles_spawned += 1

    def _spawn(self, dt: float) -> None:
        config = self.config
        self._time_passed += dt

        if config.amount == 0:
            return
        gap = (config.lifetime / config.amount) * (1.0 - config.explosiveness)
        if gap < 0.001:
            spawn_amount = config.amount
        else:
            spawn_amount = _spawn_count((self._time_passed - self._last_emit_time) / gap)

        for _ in range(spawn_amount):
            self._last_emit_time = self._time_passed
            if self._particles_spawned < config.amount:
                self._emit_particle(Vec2(0.0, 0.0))
            if len(self.particles) >= config.amount:
                break
            if self._particles_spawned >= config.amount:
                # Nothing more can change in the remaining iterations.
                break

    def _age(self, particle: Particle, dt: float) -> None:
        config = self.config
        particle.velocity = particle.velocity + particle.velocity * (config.linear_accel * dt)
        particle.angular_velocity += particle.angular_velocity * config.angular_accel * dt
        particle.angular_velocity *= 1.0 - config.angular_damping

        ratio = _life_ratio(particle.lived, particle.lifetime)
        colors = config.colors_curve
        if ratio < 0.5:
            particle.color = _mix(colors.start, colors.mid, ratio * 2.0)
        else:
            particle.color = _mix(colors.mid, colors.end, (ratio - 0.5) * 2.0)

        particle.position = particle.position + particle.velocity * dt
        particle.rotation += particle.angular_velocity * dt

        curve = self._batched_size_curve
        particle.size = particle.initial_size * (1.0 if curve is None else curve.get(ratio))

        if particle.lifetime != 0.0:
            particle.life_fraction = particle.lived / particle.lifetime

        particle.lived += dt
        particle.velocity = particle.velocity + config.gravity * dt

        atlas = config.atlas
        if atlas is None:
            particle.uv = (0.0, 0.0, 1.0, 1.0)
            return
        if particle.lifetime != 0.0:
            span = atlas.end_index - atlas.start_index
            if span < 0:
                raise ValueError("atlas end_index is before start_index")
            particle.frame = (
                _to_u16(particle.lived / particle.lifetime * span) + atlas.start_index
            )
        x = particle.frame % atlas.n
        y = particle.frame // atlas.n
        particle.uv = (x / atlas.n, y / atlas.m, 1.0 / atlas.n, 1.0 / atlas.m)

    def update(self, dt: float) -> None:
        """Advance the emitter by ``dt`` seconds: spawn, age and retire particles."""
        if self._mesh_dirty:
            self.mesh = self.config.shape.mesh()
            self._mesh_dirty = False

        if self.config.emitting:
            self._spawn(dt)

        if self.config.one_shot and self._particles_current_cycle >= self.config.amount:
            self._time_passed = 0.0
            self._last_emit_time = 0.0
            self._particles_current_cycle = 0
            self.config.emitting = False

        for particle in self.particles:
            self._age(particle, dt)

        survivors: list[Particle] = []
        for particle in self.particles:
            # The second clause covers a lifetime shortened after spawning.
            if particle.lived >= particle.lifetime or particle.lived > self.config.lifetime:
                if particle.lived != particle.lifetime:
                    self._particles_spawned -= 1
            else:
                survivors.append(particle)
        self.particles = survivors

    def advance(self, pos: Vec2, dt: float) -> None:
        """Place the emitter at ``pos`` and update it by ``dt`` seconds."""
        self.position = pos
        self.update(dt)
        self.blend_mode = self.config.blend_mode


@dataclass
class _ActiveEmitter:
    emitter: Emitter
    position: Vec2


class EmittersCache:
    """Many short-lived emitters sharing one config, recycled when they finish."""

    CACHE_DEFAULT_SIZE = 10

    def __init__(self, config: EmitterConfig, rng: random.Random | None = None) -> None:
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.cache: list[Emitter] = [
            Emitter(dataclasses.replace(config, emitting=False), self.rng)
            for _ in range(self.CACHE_DEFAULT_SIZE)
        ]
        self._active: list[_ActiveEmitter] = field(default_factory=list) and []

    @property
    def active(self) -> list[tuple[Emitter, Vec2]]:
        """Emitters currently running, with their positions."""
        return [(entry.emitter, entry.position) for entry in self._active]

    def spawn(self, pos: Vec2) -> None:
        """Start an emitter at ``pos``, reusing a cached one when available."""
        if self.cache:
            emitter = self.cache.pop()
        else:
            emitter = Emitter(dataclasses.replace(self.config), self.rng)
        emitter.update_particle_mesh()
        emitter.config.emitting = True
        emitter.reset()
        self._active.append(_ActiveEmitter(emitter, pos))

    def update(self, dt: float) -> None:
        """Update every active emitter; finished ones go back to the cache."""
        still_active: list[_ActiveEmitter] = []
        for entry in self._active:
            entry.emitter.advance(entry.position, dt)
            if entry.emitter.config.emitting:
                still_active.append(entry)
            else:
                self.cache.append(entry.emitter)
        self._active = still_active