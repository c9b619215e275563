"""The asteroids game: a ship, its bullets and asteroids that split when shot."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

from quadkit.geometry import Vec2

SHIP_HEIGHT = 25.0
SHIP_BASE = 22.0
ASTEROID_COUNT = 10
SHOT_COOLDOWN = 0.5
BULLET_LIFETIME = 1.5
BULLET_SPEED = 7.0
MAX_SHIP_SPEED = 5.0
TURN_STEP = 5.0


@dataclass
class Ship:
    pos: Vec2
    rot: float = 0.0
    vel: Vec2 = Vec2(0.0, 0.0)


@dataclass
class Bullet:
    pos: Vec2
    vel: Vec2
    shot_at: float
    collided: bool = False


@dataclass
class Asteroid:
    pos: Vec2
    vel: Vec2
    rot: float
    rot_speed: float
    size: float
    sides: int
    collided: bool = False


@dataclass(frozen=True)
class Controls:
    """Which inputs are held during a frame."""

    up: bool = False
    left: bool = False
    right: bool = False
    shoot: bool = False
    enter: bool = False


def wrap_around(pos: Vec2, width: float, height: float) -> Vec2:
    """Move a point that left the screen to the opposite edge."""
    x, y = pos.x, pos.y
    if x > width:
        x = 0.0
    if x < 0.0:
        x = width
    if y > height:
        y = 0.0
    if y < 0.0:
        y = height
    return Vec2(x, y)


def _heading(rotation: float) -> Vec2:
    return Vec2(math.sin(rotation), -math.cos(rotation))


class AsteroidsGame:
    """Game state on a ``width`` by ``height`` screen; call ``update`` each frame."""

    def __init__(
        self,
        width: float,
        height: float,
        rng: random.Random | None = None,
        now: float = 0.0,
    ) -> None:
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()
        self.last_shot = now
        self.ship = Ship(self._center)
        self.bullets: list[Bullet] = []
        self.asteroids: list[Asteroid] = []
        self.gameover = False
        self.reset()

    @property
    def _center(self) -> Vec2:
        return Vec2(self.width / 2.0, self.height / 2.0)

    @property
    def won(self) -> bool:
        """True when the game is over because every asteroid was destroyed."""
        return self.gameover and not self.asteroids

    def _random_direction(self) -> Vec2:
        while True:
            vec = Vec2(self.rng.uniform(-1.0, 1.0), self.rng.uniform(-1.0, 1.0))
            if vec.length() > 0.0:
                return vec.normalize()

    def reset(self) -> None:
        """Start a new round with a centred ship and a ring of asteroids."""
        self.ship = Ship(self._center)
        self.bullets = []
        self.gameover = False
        short_side = min(self.width, self.height)
        self.asteroids = [
            Asteroid(
                pos=self._center + self._random_direction() * short_side / 2.0,
                vel=Vec2(self.rng.uniform(-1.0, 1.0), self.rng.uniform(-1.0, 1.0)),
                rot=0.0,
                rot_speed=self.rng.uniform(-2.0, 2.0),
                size=short_side / 10.0,
                sides=self.rng.randrange(3, 8),
            )
            for _ in range(ASTEROID_COUNT)
        ]

    def _fragment(self, parent: Asteroid, direction: Vec2) -> Asteroid:
        return Asteroid(
            pos=parent.pos,
            vel=direction.normalize() * self.rng.uniform(1.0, 3.0),
            rot=self.rng.uniform(0.0, 360.0),
            rot_speed=self.rng.uniform(-2.0, 2.0),
            size=parent.size * 0.8,
            sides=parent.sides - 1,
        )

    def update(self, controls: Controls, now: float) -> None:
        """Advance one frame at time ``now`` (seconds) with the given inputs."""
        if self.gameover:
            if controls.enter:
                self.reset()
            return

        ship = self.ship
        rotation = math.radians(ship.rot)

        acc = -ship.vel / 100.0
        if controls.up:
            acc = _heading(rotation) / 3.0

        if controls.shoot and now - self.last_shot > SHOT_COOLDOWN:
            heading = _heading(rotation)
            self.bullets.append(
                Bullet(
                    pos=ship.pos + heading * SHIP_HEIGHT / 2.0,
                    vel=heading * BULLET_SPEED,
                    shot_at=now,
                )
            )
            self.last_shot = now

        if controls.right:
            ship.rot += TURN_STEP
        elif controls.left:
            ship.rot -= TURN_STEP

        ship.vel = ship.vel + acc
        if ship.vel.length() > MAX_SHIP_SPEED:
            ship.vel = ship.vel.normalize() * MAX_SHIP_SPEED
        ship.pos = wrap_around(ship.pos + ship.vel, self.width, self.height)

        for bullet in self.bullets:
            bullet.pos = bullet.pos + bullet.vel
        for asteroid in self.asteroids:
            asteroid.pos = wrap_around(asteroid.pos + asteroid.vel, self.width, self.height)
            asteroid.rot += asteroid.rot_speed

        self.bullets = [b for b in self.bullets if b.shot_at + BULLET_LIFETIME > now]

        fragments: list[Asteroid] = []
        for asteroid in self.asteroids:
            if (asteroid.pos - ship.pos).length() < asteroid.size + SHIP_HEIGHT / 3.0:
                self.gameover = True
                break
            for bullet in self.bullets:
                if (asteroid.pos - bullet.pos).length() < asteroid.size:
                    asteroid.collided = True
                    bullet.collided = True
                    if asteroid.sides > 3:
                        fragments.append(
                            self._fragment(asteroid, Vec2(bullet.vel.y, -bullet.vel.x))
                        )
                        fragments.append(
                            self._fragment(asteroid, Vec2(-bullet.vel.y, bullet.vel.x))
                        )
                    break

        self.bullets = [
            b for b in self.bullets if b.shot_at + BULLET_LIFETIME > now and not b.collided
        ]
        self.asteroids = [a for a in self.asteroids if not a.collided]
        self.asteroids.extend(fragments)

        if not self.asteroids:
            self.gameover = True