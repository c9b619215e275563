# quadkit

Simulation cores for small 2D games. They have no rendering and no window.
You drive them from your own game loop, from a test or from a headless server.
Everything is plain Python with no third-party dependencies.

## Modules

- `quadkit.geometry`: the immutable `Vec2`, which has arithmetic, `length()` and
  `normalize()`. `normalize()` raises `ValueError` for a zero-length vector. The
  module also has `Rect` with `overlaps()` and `contains()`, plus
  `polar_to_cartesian(rho, theta)` and `round_half_away(value)`.
- `quadkit.platformer`: a pixel-exact platformer `World` with these parts:
  - static tile layers, added with `add_static_tiled_layer(tiles, tile_width, tile_height, width, tag)`;
  - actors, added with `add_actor`;
  - moving solids, added with `add_solid`.

  Actors move with `move_h` / `move_v`, which step one pixel at a time and
  return `False` when blocked. `Tile.JUMP_THROUGH` tiles are one-way platforms,
  and `descent()` lets an actor drop through them. `solid_move` carries the
  actors that ride a solid and pushes the ones in its way. A pushed actor that
  cannot move is reported by `squished()`. For queries there are
  `collide_check`, `collide_solids`, `collide_tag`, `solid_at`, `tag_at`,
  `actor_pos` and `solid_pos`.
- `quadkit.particle_config`: the settings of a particle emitter.
  - `EmitterConfig` holds them all.
  - Emission shapes: `EmitPoint`, `EmitRect` and `EmitSphere`.
  - Particle meshes: `RectangleShape`, `CircleShape` and `CustomMeshShape`. Each
    gives its vertices and indices through `mesh()`.
  - `Curve` batches into a `BatchedCurve`. Only linear interpolation is
    supported; Bezier raises `ValueError`.
  - The other settings types are `Color`, `ColorCurve`, `AtlasConfig` (which has
    `AtlasConfig.from_range`), `BlendMode`, `ParticleMaterial` and
    `PostProcessing`.

  A config round-trips through plain dictionaries with
  `EmitterConfig.to_dict()` and `EmitterConfig.from_dict()`. The `texture` field
  is not serialised.
- `quadkit.emitter`: the simulation side of a particle system.
  - `Emitter` spawns, ages and retires `Particle`s. The methods are `update(dt)`,
    `advance(pos, dt)`, `emit(pos, n)`, `reset()`, `rebuild_size_curve()` and
    `update_particle_mesh()`.
  - `EmittersCache` keeps a pool of emitters for one-shot effects that repeat.
    Use `spawn(pos)` and `update(dt)`.
- `quadkit.life`: Conway's Game of Life on a bounded grid (`LifeGrid`,
  `CellState`). It has `LifeGrid.random`, `neighbours` and `step`.
- `quadkit.snake`: the rules of Snake on a square board, 16×16 by default
  (`SnakeGame`, `Direction`). It has `steer`, `tick` and `reset`.
- `quadkit.asteroids`: a ship, its bullets and asteroids that split when shot.
  The classes are `AsteroidsGame`, `Ship`, `Bullet`, `Asteroid` and `Controls`.
  `wrap_around` is a helper function. `AsteroidsGame.update(controls, now)`
  advances one frame.
- `quadkit.angles`: `short_angle_dist`, `angle_lerp` and `wrap_rotation`, all in
  degrees, for smooth camera rotation.

The randomised parts accept a `random.Random`, so a seeded one gives repeatable
runs. These are the emitters, `LifeGrid.random`, `SnakeGame` and
`AsteroidsGame`.

## Installation

```
pip install .
```

## Platformer example

```python
from quadkit.geometry import Vec2
from quadkit.platformer import Tile, World

world = World()
# A layer 4 tiles wide and 3 rows high. The bottom row is solid.
tiles = [Tile.EMPTY] * 4 + [Tile.EMPTY] * 4 + [Tile.SOLID] * 4
world.add_static_tiled_layer(tiles, 8.0, 8.0, 4, 1)

player = world.add_actor(Vec2(4.0, 0.0), 8, 8)
world.move_v(player, 20.0)   # stops on top of the solid row and returns False
print(world.actor_pos(player))                                              # Vec2(x=4.0, y=8.0)
print(world.collide_check(player, world.actor_pos(player) + Vec2(0.0, 1.0)))  # True
```

## Particle example

```python
import random

from quadkit.emitter import Emitter
from quadkit.geometry import Vec2
from quadkit.particle_config import EmitterConfig

emitter = Emitter(EmitterConfig(amount=20, lifetime=0.8), rng=random.Random(1))
for _ in range(60):
    emitter.advance(Vec2(100.0, 100.0), 1 / 60)
for particle in emitter.particles[:3]:
    print(particle.position, particle.size, particle.color)
```

## What it does not do

quadkit has no drawing, windowing, input, audio or asset loading. It provides
no command-line program. The games and emitters expose their state through
attributes, for example `Emitter.particles`, `Emitter.mesh`, `SnakeGame.body`
and `AsteroidsGame.asteroids`. Input comes in as method arguments, for example
`Controls` or `SnakeGame.steer`. Drawing that state is up to the caller.

## Running the tests

```
pip install .[test]
pytest
```