import json
import math
import random

import pytest

from quadkit.geometry import Vec2
from quadkit.particle_config import (
    AtlasConfig,
    BatchedCurve,
    BlendMode,
    CircleShape,
    Color,
    ColorCurve,
    Curve,
    CustomMeshShape,
    EmitPoint,
    EmitRect,
    EmitSphere,
    EmitterConfig,
    Interpolation,
    ParticleMaterial,
    PostProcessing,
    RectangleShape,
)


def test_linear_curve_batch_samples_evenly():
    batched = Curve(points=[(0.0, 0.0), (1.0, 1.0)], resolution=4).batch()
    assert batched.points == [0.0, 0.25, 0.5, 0.75, 1.0]


def test_batched_curve_hits_samples_at_their_positions():
    batched = Curve(points=[(0.0, 0.5), (0.5, 1.0), (1.0, 0.0)]).batch()
    count = len(batched.points)
    for i, value in enumerate(batched.points):
        assert batched.get(i / count) == pytest.approx(value)


def test_batched_curve_clamps_past_the_end():
    batched = BatchedCurve([0.0, 2.0, 3.0])
    assert batched.get(1.0) == pytest.approx(3.0)
    assert batched.get(5.0) == pytest.approx(3.0)


def test_batched_curve_values_stay_within_key_range():
    batched = Curve(points=[(0.0, 0.5), (0.5, 1.0), (1.0, 0.0)]).batch()
    for step in range(100):
        value = batched.get(step / 100)
        assert -1e-9 <= value <= 1.0 + 1e-9


def test_bezier_curve_is_rejected():
    with pytest.raises(ValueError):
        Curve(points=[(0.0, 0.0), (1.0, 1.0)], interpolation=Interpolation.BEZIER).batch()


def test_empty_batched_curve_cannot_be_sampled():
    with pytest.raises(ValueError):
        Curve().batch().get(0.5)


def test_color_to_tuple():
    assert Color(0.1, 0.2, 0.3, 0.4).to_tuple() == (0.1, 0.2, 0.3, 0.4)


def test_color_curve_defaults_to_white():
    curve = ColorCurve()
    assert curve.start.to_tuple() == (1.0, 1.0, 1.0, 1.0)
    assert curve.mid == curve.start == curve.end


def test_emit_point_is_origin():
    assert EmitPoint().random_point(random.Random(1)) == Vec2(0.0, 0.0)


def test_emit_rect_stays_inside_rect():
    rng = random.Random(7)
    shape = EmitRect(width=4.0, height=2.0)
    for _ in range(200):
        p = shape.random_point(rng)
        assert -2.0 <= p.x <= 2.0
        assert -1.0 <= p.y <= 1.0


def test_emit_sphere_stays_inside_disc():
    rng = random.Random(3)
    shape = EmitSphere(radius=5.0)
    for _ in range(200):
        assert shape.random_point(rng).length() <= 5.0 + 1e-9


def test_emission_is_reproducible_with_same_seed():
    shape = EmitSphere(radius=2.0)
    first = [shape.random_point(random.Random(42)) for _ in range(3)]
    second = [shape.random_point(random.Random(42)) for _ in range(3)]
    assert first == second


def test_rectangle_mesh_layout():
    vertices, indices = RectangleShape(aspect_ratio=2.0).mesh()
    assert indices == [0, 1, 2, 0, 2, 3]
    assert len(vertices) == 4 * 9
    assert vertices[0] == -2.0
    assert vertices[9] == 2.0


def test_circle_mesh_layout():
    subdivisions = 6
    vertices, indices = CircleShape(subdivisions).mesh()
    assert len(vertices) == 9 * (subdivisions + 2)
    assert len(indices) == 3 * subdivisions
    assert all(0 <= i < subdivisions + 2 for i in indices)
    for start in range(9, len(vertices), 9):
        assert math.hypot(vertices[start], vertices[start + 1]) == pytest.approx(1.0)


def test_circle_needs_subdivisions():
    with pytest.raises(ValueError):
        CircleShape(0).mesh()


def test_custom_mesh_returns_its_data():
    shape = CustomMeshShape((0.0, 1.0, 2.0), (0, 1, 2))
    assert shape.mesh() == ([0.0, 1.0, 2.0], [0, 1, 2])


def test_atlas_from_open_ranges():
    assert AtlasConfig.from_range(4, 4, 8, None) == AtlasConfig(4, 4, 8, 16)
    assert AtlasConfig.from_range(4, 4, None, 8) == AtlasConfig(4, 4, 0, 8)


def test_emitter_config_defaults():
    config = EmitterConfig()
    assert config.amount == 8
    assert config.lifetime == 1.0
    assert config.initial_velocity == 50.0
    assert config.size == 10.0
    assert config.initial_direction == Vec2(0.0, -1.0)
    assert config.blend_mode is BlendMode.ALPHA
    assert config.emitting is True
    assert config.shape == RectangleShape(1.0)


def _rich_config():
    return EmitterConfig(
        local_coords=True,
        emission_shape=EmitRect(3.0, 4.0),
        one_shot=True,
        lifetime=0.3,
        lifetime_randomness=0.7,
        explosiveness=0.95,
        amount=30,
        shape=CustomMeshShape((1.0, 2.0), (0, 1)),
        initial_direction_spread=2.0 * math.pi,
        initial_velocity=200.0,
        initial_rotation=0.5,
        size=30.0,
        size_curve=Curve(points=[(0.0, 0.5), (0.5, 1.0), (1.0, 0.0)]),
        blend_mode=BlendMode.ADDITIVE,
        colors_curve=ColorCurve(Color(1, 0, 0, 1), Color(0, 1, 0, 1), Color(0, 0, 1, 0)),
        gravity=Vec2(0.0, -1000.0),
        atlas=AtlasConfig.from_range(4, 4, 8),
        material=ParticleMaterial("vertex src", "fragment src"),
        post_processing=PostProcessing(),
    )


def test_config_dict_round_trip():
    config = _rich_config()
    assert EmitterConfig.from_dict(config.to_dict()) == config


def test_config_survives_json():
    config = _rich_config()
    restored = EmitterConfig.from_dict(json.loads(json.dumps(config.to_dict())))
    assert restored == config


def test_texture_is_not_serialized():
    config = EmitterConfig(texture=object())
    data = config.to_dict()
    assert "texture" not in data
    assert EmitterConfig.from_dict(data).texture is None


def test_rotation_fields_default_when_missing():
    data = EmitterConfig(initial_rotation=1.5).to_dict()
    del data["initial_rotation"]
    assert EmitterConfig.from_dict(data).initial_rotation == 0.0


def test_missing_required_field_raises():
    data = EmitterConfig().to_dict()
    del data["lifetime"]
    with pytest.raises(ValueError):
        EmitterConfig.from_dict(data)


def test_unknown_shape_kind_raises():
    data = EmitterConfig().to_dict()
    data["shape"] = {"kind": "hexagon"}
    with pytest.raises(ValueError):
        EmitterConfig.from_dict(data)