"""Configuration of particle emitters: curves, shapes, colours and settings."""

from __future__ import annotations

import enum
import math
import random
from dataclasses import dataclass, field
from typing import Any, Union

from quadkit.geometry import Vec2, polar_to_cartesian


class Interpolation(enum.Enum):
    """How intermediate values of a curve are computed."""

    LINEAR = "linear"
    BEZIER = "bezier"


def _saturating_index(value: float) -> int:
    """Convert to a non-negative index the way an unsigned cast does."""
    if math.isnan(value) or value <= 0.0:
        return 0
    if math.isinf(value):
        return 2**63
    return int(value)


@dataclass
class BatchedCurve:
    """A curve sampled at even steps, ready for fast lookups."""

    points: list[float] = field(default_factory=list)

    def get(self, t: float) -> float:
        """Value of the curve at ``t`` in 0..1, interpolating between samples."""
        if not self.points:
            raise ValueError("cannot sample an empty curve")
        last = len(self.points) - 1
        t_scaled = t * len(self.points)
        previous_ix = min(_saturating_index(t_scaled), last)
        next_ix = min(previous_ix + 1, last)
        previous = self.points[previous_ix]
        following = self.points[next_ix]
        return previous + (following - previous) * (t_scaled - previous_ix)


@dataclass
class Curve:
    """Key points of a curve over 0..1 and how to sample them."""

    points: list[tuple[float, float]] = field(default_factory=list)
    interpolation: Interpolation = Interpolation.LINEAR
    resolution: int = 20

    def batch(self) -> BatchedCurve:
        """Sample the curve linearly at steps of 1 / resolution."""
        if self.interpolation is Interpolation.BEZIER:
            raise ValueError("bezier interpolation is not supported")
        if self.resolution <= 0:
            raise ValueError("resolution must be positive")

        step = 1.0 / self.resolution
        x = 0.0
        samples: list[float] = []
        for (start_x, start_y), (end_x, end_y) in zip(self.points, self.points[1:]):
            while x <= end_x:
                if end_x == start_x:
                    samples.append(end_y)
                else:
                    t = (x - start_x) / (end_x - start_x)
                    samples.append(start_y + (end_y - start_y) * t)
                x += step
        return BatchedCurve(samples)


@dataclass(frozen=True)
class Color:
    """An RGBA colour with components in 0..1."""

    r: float
    g: float
    b: float
    a: float = 1.0

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)


WHITE = Color(1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class ColorCurve:
    """Colours at the start, middle and end of a particle's life."""

    start: Color = WHITE
    mid: Color = WHITE
    end: Color = WHITE


@dataclass(frozen=True)
class EmitPoint:
    """Emit every particle from the emitter's position."""

    def random_point(self, rng: random.Random) -> Vec2:
        return Vec2(0.0, 0.0)


@dataclass(frozen=True)
class EmitRect:
    """Emit from a random point of a rectangle centred on the emitter."""

    width: float
    height: float

    def random_point(self, rng: random.Random) -> Vec2:
        return Vec2(
            rng.uniform(-self.width / 2.0, self.width / 2.0),
            rng.uniform(-self.height / 2.0, self.height / 2.0),
        )


@dataclass(frozen=True)
class EmitSphere:
    """Emit from a uniformly random point of a disc centred on the emitter."""

    radius: float

    def random_point(self, rng: random.Random) -> Vec2:
        rho = math.sqrt(rng.uniform(0.0, self.radius * self.radius))
        phi = rng.uniform(0.0, math.pi * 2.0)
        return polar_to_cartesian(rho, phi)


EmissionShape = Union[EmitPoint, EmitRect, EmitSphere]

_WHITE_VERTEX = (1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class RectangleShape:
    """A quad particle, stretched horizontally by ``aspect_ratio``."""

    aspect_ratio: float = 1.0

    def mesh(self) -> tuple[list[float], list[int]]:
        """Vertices (position xyz, uv, rgba) and triangle indices."""
        a = self.aspect_ratio
        corners = [
            (-a, -1.0, 0.0, 0.0),
            (a, -1.0, 1.0, 0.0),
            (a, 1.0, 1.0, 1.0),
            (-a, 1.0, 0.0, 1.0),
        ]
        vertices: list[float] = []
        for x, y, u, v in corners:
            vertices.extend((x, y, 0.0, u, v, *_WHITE_VERTEX))
        return vertices, [0, 1, 2, 0, 2, 3]


@dataclass(frozen=True)
class CircleShape:
    """A disc particle approximated by a fan of triangles."""

    subdivisions: int

    def mesh(self) -> tuple[list[float], list[int]]:
        """Vertices (position xyz, uv, rgba) and triangle indices."""
        if self.subdivisions <= 0:
            raise ValueError("a circle needs at least one subdivision")
        vertices: list[float] = [0.0, 0.0, 0.0, 0.0, 0.0, *_WHITE_VERTEX]
        indices: list[int] = []
        for i in range(self.subdivisions + 1):
            angle = i / self.subdivisions * math.pi * 2.0
            rx, ry = math.cos(angle), math.sin(angle)
            vertices.extend((rx, ry, 0.0, rx, ry, *_WHITE_VERTEX))
            if i != self.subdivisions:
                indices.extend((0, i + 1, i + 2))
        return vertices, indices


@dataclass(frozen=True)
class CustomMeshShape:
    """A particle mesh given directly as vertex data and indices."""

    vertices: tuple[float, ...]
    indices: tuple[int, ...]

    def mesh(self) -> tuple[list[float], list[int]]:
        return list(self.vertices), list(self.indices)


ParticleShape = Union[RectangleShape, CircleShape, CustomMeshShape]


class BlendMode(enum.Enum):
    """How overlapping particles are combined."""

    ALPHA = "alpha"
    ADDITIVE = "additive"


@dataclass(frozen=True)
class AtlasConfig:
    """Layout of an ``n`` by ``m`` sprite sheet and the frames to animate."""

    n: int
    m: int
    start_index: int
    end_index: int

    @classmethod
    def from_range(cls, n: int, m: int, start: int | None = None, end: int | None = None) -> AtlasConfig:
        """Frames ``start`` (inclusive) to ``end`` (exclusive); open ends span the sheet."""
        return cls(
            n=n,
            m=m,
            start_index=0 if start is None else start,
            end_index=n * m if end is None else end,
        )


@dataclass(frozen=True)
class ParticleMaterial:
    """Custom vertex and fragment shader sources for particles."""

    vertex: str
    fragment: str


@dataclass(frozen=True)
class PostProcessing:
    """Marker: render particles to an offscreen target before the screen."""


_DEFAULTED_FIELDS = {
    "initial_rotation": 0.0,
    "initial_rotation_randomness": 0.0,
    "initial_angular_velocity": 0.0,
    "initial_angular_velocity_randomness": 0.0,
    "angular_accel": 0.0,
    "angular_damping": 0.0,
}

_FLOAT_FIELDS = (
    "lifetime",
    "lifetime_randomness",
    "explosiveness",
    "initial_direction_spread",
    "initial_velocity",
    "initial_velocity_randomness",
    "linear_accel",
    "size",
    "size_randomness",
)


def _require(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"missing field {key!r}") from None


def _vec_to_dict(vec: Vec2) -> dict[str, float]:
    return {"x": vec.x, "y": vec.y}


def _vec_from_dict(data: dict[str, Any]) -> Vec2:
    return Vec2(float(_require(data, "x")), float(_require(data, "y")))


def _color_to_dict(color: Color) -> dict[str, float]:
    return {"r": color.r, "g": color.g, "b": color.b, "a": color.a}


def _color_from_dict(data: dict[str, Any]) -> Color:
    return Color(*(float(_require(data, key)) for key in "rgba"))


def _emission_to_dict(shape: EmissionShape) -> dict[str, Any]:
    if isinstance(shape, EmitRect):
        return {"kind": "rect", "width": shape.width, "height": shape.height}
    if isinstance(shape, EmitSphere):
        return {"kind": "sphere", "radius": shape.radius}
    return {"kind": "point"}


def _emission_from_dict(data: dict[str, Any]) -> EmissionShape:
    kind = _require(data, "kind")
    if kind == "point":
        return EmitPoint()
    if kind == "rect":
        return EmitRect(float(_require(data, "width")), float(_require(data, "height")))
    if kind == "sphere":
        return EmitSphere(float(_require(data, "radius")))
    raise ValueError(f"unknown emission shape {kind!r}")


def _shape_to_dict(shape: ParticleShape) -> dict[str, Any]:
    if isinstance(shape, CircleShape):
        return {"kind": "circle", "subdivisions": shape.subdivisions}
    if isinstance(shape, CustomMeshShape):
        return {
            "kind": "custom_mesh",
            "vertices": list(shape.vertices),
            "indices": list(shape.indices),
        }
    return {"kind": "rectangle", "aspect_ratio": shape.aspect_ratio}


def _shape_from_dict(data: dict[str, Any]) -> ParticleShape:
    kind = _require(data, "kind")
    if kind == "rectangle":
        return RectangleShape(float(_require(data, "aspect_ratio")))
    if kind == "circle":
        return CircleShape(int(_require(data, "subdivisions")))
    if kind == "custom_mesh":
        return CustomMeshShape(
            tuple(float(v) for v in _require(data, "vertices")),
            tuple(int(i) for i in _require(data, "indices")),
        )
    raise ValueError(f"unknown particle shape {kind!r}")


def _curve_to_dict(curve: Curve) -> dict[str, Any]:
    return {
        "points": [[x, y] for x, y in curve.points],
        "interpolation": curve.interpolation.value,
        "resolution": curve.resolution,
    }


def _curve_from_dict(data: dict[str, Any]) -> Curve:
    return Curve(
        points=[(float(x), float(y)) for x, y in _require(data, "points")],
        interpolation=Interpolation(_require(data, "interpolation")),
        resolution=int(_require(data, "resolution")),
    )


@dataclass
class EmitterConfig:
    """All settings of a particle emitter."""

    local_coords: bool = False
    emission_shape: EmissionShape = EmitPoint()
    one_shot: bool = False
    lifetime: float = 1.0
    lifetime_randomness: float = 0.0
    explosiveness: float = 0.0
    amount: int = 8
    shape: ParticleShape = RectangleShape(1.0)
    emitting: bool = True
    initial_direction: Vec2 = Vec2(0.0, -1.0)
    initial_direction_spread: float = 0.0
    initial_velocity: float = 50.0
    initial_velocity_randomness: float = 0.0
    linear_accel: float = 0.0
    initial_rotation: float = 0.0
    initial_rotation_randomness: float = 0.0
    initial_angular_velocity: float = 0.0
    initial_angular_velocity_randomness: float = 0.0
    angular_accel: float = 0.0
    angular_damping: float = 0.0
    size: float = 10.0
    size_randomness: float = 0.0
    size_curve: Curve | None = None
    blend_mode: BlendMode = BlendMode.ALPHA
    colors_curve: ColorCurve = ColorCurve()
    gravity: Vec2 = Vec2(0.0, 0.0)
    texture: Any = None
    atlas: AtlasConfig | None = None
    material: ParticleMaterial | None = None
    post_processing: PostProcessing | None = None

    def to_dict(self) -> dict[str, Any]:
        """A JSON-friendly dictionary of the settings; the texture is left out."""
        data: dict[str, Any] = {
            "local_coords": self.local_coords,
            "emission_shape": _emission_to_dict(self.emission_shape),
            "one_shot": self.one_shot,
            "amount": self.amount,
            "shape": _shape_to_dict(self.shape),
            "emitting": self.emitting,
            "initial_direction": _vec_to_dict(self.initial_direction),
            "size_curve": None if self.size_curve is None else _curve_to_dict(self.size_curve),
            "blend_mode": self.blend_mode.value,
            "colors_curve": {
                "start": _color_to_dict(self.colors_curve.start),
                "mid": _color_to_dict(self.colors_curve.mid),
                "end": _color_to_dict(self.colors_curve.end),
            },
            "gravity": _vec_to_dict(self.gravity),
            "atlas": None
            if self.atlas is None
            else {
                "n": self.atlas.n,
                "m": self.atlas.m,
                "start_index": self.atlas.start_index,
                "end_index": self.atlas.end_index,
            },
            "material": None
            if self.material is None
            else {"vertex": self.material.vertex, "fragment": self.material.fragment},
            "post_processing": None if self.post_processing is None else {},
        }
        for name in (*_FLOAT_FIELDS, *_DEFAULTED_FIELDS):
            data[name] = getattr(self, name)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EmitterConfig:
        """Build a config from ``to_dict`` output; raises ValueError on missing fields."""
        floats = {name: float(_require(data, name)) for name in _FLOAT_FIELDS}
        floats.update(
            {name: float(data.get(name, default)) for name, default in _DEFAULTED_FIELDS.items()}
        )

        colors = _require(data, "colors_curve")
        size_curve = data.get("size_curve")
        atlas = data.get("atlas")
        material = data.get("material")

        return cls(
            local_coords=bool(_require(data, "local_coords")),
            emission_shape=_emission_from_dict(_require(data, "emission_shape")),
            one_shot=bool(_require(data, "one_shot")),
            amount=int(_require(data, "amount")),
            shape=_shape_from_dict(_require(data, "shape")),
            emitting=bool(_require(data, "emitting")),
            initial_direction=_vec_from_dict(_require(data, "initial_direction")),
            size_curve=None if size_curve is None else _curve_from_dict(size_curve),
            blend_mode=BlendMode(_require(data, "blend_mode")),
            colors_curve=ColorCurve(
                start=_color_from_dict(_require(colors, "start")),
                mid=_color_from_dict(_require(colors, "mid")),
                end=_color_from_dict(_require(colors, "end")),
            ),
            gravity=_vec_from_dict(_require(data, "gravity")),
            atlas=None
            if atlas is None
            else AtlasConfig(
                n=int(_require(atlas, "n")),
                m=int(_require(atlas, "m")),
                start_index=int(_require(atlas, "start_index")),
                end_index=int(_require(atlas, "end_index")),
            ),
            material=None
            if material is None
            else ParticleMaterial(
                str(_require(material, "vertex")), str(_require(material, "fragment"))
            ),
            post_processing=None if data.get("post_processing") is None else PostProcessing(),
            **floats,
        )