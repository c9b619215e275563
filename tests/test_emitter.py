import random

import pytest

from quadkit.emitter import Emitter, EmittersCache, Particle
from quadkit.geometry import Vec2
from quadkit.particle_config import (
    AtlasConfig,
    CircleShape,
    Color,
    ColorCurve,
    Curve,
    EmitterConfig,
    EmitRect,
)


def make_emitter(**kwargs):
    return Emitter(EmitterConfig(**kwargs), random.Random(1234))


def test_particle_defaults():
    p = Particle(
        position=Vec2(1.0, 2.0),
        rotation=0.0,
        size=3.0,
        initial_size=3.0,
        velocity=Vec2(0.0, 0.0),
        angular_velocity=0.0,
        lifetime=1.0,
        color=(1.0, 1.0, 1.0, 1.0),
        spawn_index=0.0,
    )
    assert p.lived == 0.0
    assert p.uv == (1.0, 1.0, 0.0, 0.0)


def test_explosive_emitter_spawns_whole_amount_at_once():
    emitter = make_emitter(explosiveness=1.0, amount=12)
    emitter.update(0.01)
    assert len(emitter.particles) == 12
    assert emitter.particles_spawned == 12


def test_particle_count_never_exceeds_amount():
    emitter = make_emitter(amount=5, lifetime=2.0)
    for _ in range(100):
        emitter.update(0.05)
        assert len(emitter.particles) <= 5


def test_zero_amount_spawns_nothing():
    emitter = make_emitter(amount=0)
    emitter.update(1.0)
    assert emitter.particles == []


def test_one_shot_stops_emitting_after_cycle():
    emitter = make_emitter(explosiveness=1.0, one_shot=True, amount=4)
    emitter.update(0.01)
    assert emitter.config.emitting is False
    assert emitter.particles_current_cycle == 0
    assert emitter.time_passed == 0.0


def test_particles_die_after_lifetime():
    emitter = make_emitter(explosiveness=1.0, one_shot=True, amount=6, lifetime=1.0)
    emitter.update(0.01)
    assert len(emitter.particles) == 6
    emitter.update(2.0)
    emitter.update(0.01)
    assert emitter.particles == []


def test_initial_velocity_follows_direction_without_spread():
    emitter = make_emitter(explosiveness=1.0, amount=1, initial_velocity=50.0)
    emitter.update(0.0)
    (particle,) = emitter.particles
    assert particle.velocity.x == pytest.approx(0.0)
    assert particle.velocity.y == pytest.approx(-50.0)


def test_position_moves_with_velocity():
    emitter = make_emitter(explosiveness=1.0, amount=1, initial_velocity=50.0)
    emitter.update(0.0)
    start = emitter.particles[0].position
    emitter.update(0.1)
    moved = emitter.particles[0].position
    assert moved.x == pytest.approx(start.x)
    assert moved.y - start.y == pytest.approx(-50.0 * 0.1)


def test_gravity_changes_velocity():
    emitter = make_emitter(
        explosiveness=1.0, amount=1, initial_velocity=0.0, gravity=Vec2(0.0, 10.0)
    )
    emitter.update(0.0)
    emitter.update(0.5)
    assert emitter.particles[0].velocity.y == pytest.approx(10.0 * 0.5)


def test_world_coords_use_emitter_position():
    emitter = make_emitter(explosiveness=1.0, amount=1)
    emitter.advance(Vec2(30.0, 40.0), 0.0)
    assert emitter.particles[0].position == Vec2(30.0, 40.0)


def test_local_coords_ignore_emitter_position():
    emitter = make_emitter(explosiveness=1.0, amount=1, local_coords=True)
    emitter.advance(Vec2(30.0, 40.0), 0.0)
    assert emitter.particles[0].position == Vec2(0.0, 0.0)


def test_emit_counts_each_particle_twice():
    emitter = make_emitter(emitting=False)
    emitter.position = Vec2(1.0, 2.0)
    emitter.emit(Vec2(3.0, 4.0), 3)
    assert len(emitter.particles) == 3
    assert emitter.particles_spawned == 6
    assert all(p.position == Vec2(4.0, 6.0) for p in emitter.particles)


def test_emission_rect_keeps_particles_inside():
    emitter = make_emitter(emitting=False, emission_shape=EmitRect(4.0, 2.0))
    emitter.emit(Vec2(0.0, 0.0), 50)
    for p in emitter.particles:
        assert -2.0 <= p.position.x <= 2.0
        assert -1.0 <= p.position.y <= 1.0


def test_spawn_color_is_curve_start():
    start = Color(1.0, 0.0, 0.0, 1.0)
    emitter = make_emitter(
        emitting=False, colors_curve=ColorCurve(start=start, mid=start, end=start)
    )
    emitter.emit(Vec2(0.0, 0.0), 1)
    assert emitter.particles[0].color == start.to_tuple()


def test_color_stays_constant_for_uniform_curve():
    blue = Color(0.0, 0.0, 1.0, 1.0)
    emitter = make_emitter(
        explosiveness=1.0, amount=1, colors_curve=ColorCurve(blue, blue, blue)
    )
    emitter.update(0.0)
    emitter.update(0.3)
    emitter.update(0.3)
    assert emitter.particles[0].color == pytest.approx(blue.to_tuple())


def test_size_curve_scales_size():
    curve = Curve(points=[(0.0, 0.5), (0.5, 1.0), (1.0, 0.0)])
    emitter = make_emitter(explosiveness=1.0, amount=1, size=2.0, size_curve=curve)
    emitter.update(0.0)
    particle = emitter.particles[0]
    assert particle.size == pytest.approx(2.0 * curve.batch().get(0.0))


def test_rebuild_size_curve_follows_config():
    emitter = make_emitter()
    assert emitter.batched_size_curve is None
    emitter.config.size_curve = Curve(points=[(0.0, 1.0), (1.0, 1.0)])
    emitter.rebuild_size_curve()
    assert emitter.batched_size_curve == emitter.config.size_curve.batch()


def test_uv_without_atlas_covers_whole_texture():
    emitter = make_emitter(explosiveness=1.0, amount=1)
    emitter.update(0.0)
    assert emitter.particles[0].uv == (0.0, 0.0, 1.0, 1.0)


def test_uv_with_atlas_uses_cell_size():
    atlas = AtlasConfig.from_range(4, 4, 8, None)
    emitter = make_emitter(explosiveness=1.0, amount=1, atlas=atlas)
    emitter.update(0.0)
    particle = emitter.particles[0]
    assert particle.frame == atlas.start_index
    assert particle.uv[2] == pytest.approx(1.0 / atlas.n)
    assert particle.uv[3] == pytest.approx(1.0 / atlas.m)


def test_frames_stay_within_atlas_range():
    atlas = AtlasConfig.from_range(4, 4, 0, 8)
    emitter = make_emitter(explosiveness=1.0, amount=3, atlas=atlas)
    for _ in range(20):
        emitter.update(0.04)
        for p in emitter.particles:
            assert atlas.start_index <= p.frame < atlas.end_index


def test_update_particle_mesh_rebuilds_from_shape():
    emitter = make_emitter()
    emitter.config.shape = CircleShape(6)
    emitter.update_particle_mesh()
    emitter.update(0.0)
    assert emitter.mesh == CircleShape(6).mesh()


def test_reset_clears_state():
    emitter = make_emitter(explosiveness=1.0)
    emitter.update(0.2)
    emitter.reset()
    assert emitter.particles == []
    assert emitter.particles_spawned == 0
    assert emitter.time_passed == 0.0


def test_same_seed_same_particles():
    config = dict(explosiveness=1.0, amount=5, initial_direction_spread=1.0, size_randomness=0.5)
    a = Emitter(EmitterConfig(**config), random.Random(7))
    b = Emitter(EmitterConfig(**config), random.Random(7))
    a.update(0.1)
    b.update(0.1)
    assert a.particles == b.particles


def test_cache_recycles_finished_emitters():
    config = EmitterConfig(explosiveness=1.0, one_shot=True, amount=3)
    cache = EmittersCache(config, random.Random(3))
    cache.spawn(Vec2(5.0, 5.0))
    assert len(cache.active) == 1
    assert len(cache.cache) == EmittersCache.CACHE_DEFAULT_SIZE - 1
    cache.update(0.01)
    assert cache.active == []
    assert len(cache.cache) == EmittersCache.CACHE_DEFAULT_SIZE


def test_cache_creates_new_emitter_when_empty():
    config = EmitterConfig(lifetime=10.0)
    cache = EmittersCache(config, random.Random(3))
    for _ in range(EmittersCache.CACHE_DEFAULT_SIZE + 2):
        cache.spawn(Vec2(0.0, 0.0))
    assert len(cache.active) == EmittersCache.CACHE_DEFAULT_SIZE + 2
    assert cache.cache == []
    assert all(emitter.config.emitting for emitter, _ in cache.active)