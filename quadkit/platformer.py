"""Pixel-precise platformer physics: actors, moving solids and tile layers."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from functools import reduce

from quadkit.geometry import Rect, Vec2, round_half_away

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _to_i32(value: float) -> int:
    """Truncate toward zero, saturating at the 32-bit range."""
    if math.isnan(value):
        return 0
    if value >= _I32_MAX:
        return _I32_MAX
    if value <= _I32_MIN:
        return _I32_MIN
    return int(value)


def _round_i32(value: float) -> int:
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return _I32_MAX if value > 0 else _I32_MIN
    return max(_I32_MIN, min(_I32_MAX, round_half_away(value)))


class Tile(enum.Enum):
    """What occupies a cell of a static layer."""

    EMPTY = "empty"
    SOLID = "solid"
    JUMP_THROUGH = "jump_through"
    COLLIDER = "collider"

    def combine(self, other: Tile) -> Tile:
        """Merge two tile hits: empties and jump-throughs merge, anything else is solid."""
        if self is Tile.EMPTY and other is Tile.EMPTY:
            return Tile.EMPTY
        if {self, other} <= {Tile.EMPTY, Tile.JUMP_THROUGH}:
            return Tile.JUMP_THROUGH
        return Tile.SOLID


@dataclass(frozen=True)
class Actor:
    """Handle of an actor added to a World."""

    index: int


@dataclass(frozen=True)
class Solid:
    """Handle of a moving solid added to a World."""

    index: int


@dataclass
class StaticTiledLayer:
    """A grid of tiles stored row by row."""

    static_colliders: list[Tile]
    tile_width: float
    tile_height: float
    width: int
    tag: int


@dataclass
class _Collider:
    pos: Vec2
    width: int
    height: int
    collidable: bool = True
    squished: bool = False
    x_remainder: float = 0.0
    y_remainder: float = 0.0
    squishers: set[Solid] = field(default_factory=set)
    descent: bool = False
    seen_wood: bool = False

    def rect(self) -> Rect:
        return Rect(self.pos.x, self.pos.y, float(self.width), float(self.height))


class World:
    """Holds tile layers, actors and solids and moves them against each other."""

    def __init__(self) -> None:
        self._layers: list[StaticTiledLayer] = []
        self._solids: list[_Collider] = []
        self._actors: list[_Collider] = []

    def add_static_tiled_layer(
        self,
        static_colliders,
        tile_width: float,
        tile_height: float,
        width: int,
        tag: int,
    ) -> None:
        """Add a layer of tiles laid out in rows of ``width`` cells."""
        self._layers.append(
            StaticTiledLayer(list(static_colliders), tile_width, tile_height, width, tag)
        )

    def add_actor(self, pos: Vec2, width: int, height: int) -> Actor:
        """Add an actor; one spawned inside a jump-through tile starts descending."""
        actor = Actor(len(self._actors))
        inside_wood = self.collide_solids(pos, width, height) is Tile.JUMP_THROUGH
        self._actors.append(
            _Collider(
                pos=pos,
                width=width,
                height=height,
                descent=inside_wood,
                seen_wood=inside_wood,
            )
        )
        return actor

    def add_solid(self, pos: Vec2, width: int, height: int) -> Solid:
        """Add a moving solid."""
        solid = Solid(len(self._solids))
        self._solids.append(_Collider(pos=pos, width=width, height=height))
        return solid

    def set_actor_position(self, actor: Actor, pos: Vec2) -> None:
        """Teleport an actor, dropping any accumulated sub-pixel movement."""
        collider = self._actors[actor.index]
        collider.x_remainder = 0.0
        collider.y_remainder = 0.0
        collider.pos = pos

    def descent(self, actor: Actor) -> None:
        """Let the actor drop through jump-through tiles."""
        self._actors[actor.index].descent = True

    def move_v(self, actor: Actor, dy: float) -> bool:
        """Move an actor vertically pixel by pixel; False if it was stopped."""
        collider = self._actors[actor.index]
        collider.y_remainder += dy

        step = _round_i32(collider.y_remainder)
        if step != 0:
            collider.y_remainder -= step
            sign = 1 if step > 0 else -1

            while step != 0:
                tile = self.collide_solids(
                    collider.pos + Vec2(0.0, float(sign)),
                    collider.width,
                    collider.height,
                )
                if tile is Tile.JUMP_THROUGH and collider.descent:
                    collider.seen_wood = True
                if tile is Tile.JUMP_THROUGH and sign < 0:
                    collider.seen_wood = True
                    collider.descent = True
                if tile is Tile.EMPTY or (tile is Tile.JUMP_THROUGH and collider.descent):
                    collider.pos = Vec2(collider.pos.x, collider.pos.y + sign)
                    step -= sign
                else:
                    return False

        tile = self.collide_solids(collider.pos, collider.width, collider.height)
        if tile is not Tile.JUMP_THROUGH:
            collider.seen_wood = False
            collider.descent = False
        return True

    def move_h(self, actor: Actor, dx: float) -> bool:
        """Move an actor horizontally pixel by pixel; False if it was stopped."""
        collider = self._actors[actor.index]
        collider.x_remainder += dx

        step = _round_i32(collider.x_remainder)
        if step != 0:
            collider.x_remainder -= step
            sign = 1 if step > 0 else -1

            while step != 0:
                tile = self.collide_solids(
                    collider.pos + Vec2(float(sign), 0.0),
                    collider.width,
                    collider.height,
                )
                if tile is Tile.JUMP_THROUGH:
                    collider.descent = True
                    collider.seen_wood = True
                if tile in (Tile.EMPTY, Tile.JUMP_THROUGH):
                    collider.pos = Vec2(collider.pos.x + sign, collider.pos.y)
                    step -= sign
                else:
                    return False
        return True

    def solid_move(self, solid: Solid, dx: float, dy: float) -> None:
        """Move a solid, carrying riders and pushing (possibly squishing) actors."""
        collider = self._solids[solid.index]
        collider.x_remainder += dx
        collider.y_remainder += dy
        move_x = _round_i32(collider.x_remainder)
        move_y = _round_i32(collider.y_remainder)

        riding_rect = Rect(collider.pos.x, collider.pos.y - 1.0, float(collider.width), 1.0)
        pushing_rect = Rect(
            collider.pos.x + move_x,
            collider.pos.y,
            float(collider.width),
            float(collider.height),
        )

        riding: list[Actor] = []
        pushing: list[Actor] = []
        for index, actor_collider in enumerate(self._actors):
            rider_rect = Rect(
                actor_collider.pos.x,
                actor_collider.pos.y + actor_collider.height - 1.0,
                float(actor_collider.width),
                1.0,
            )
            pushed = pushing_rect.overlaps(actor_collider.rect())

            if riding_rect.overlaps(rider_rect):
                riding.append(Actor(index))
            elif pushed and not actor_collider.squished:
                pushing.append(Actor(index))

            if not pushed:
                actor_collider.squishers.discard(solid)
                if not actor_collider.squishers:
                    actor_collider.squished = False

        collider.collidable = False
        for actor in riding:
            self.move_h(actor, float(move_x))
        for actor in pushing:
            if not self.move_h(actor, float(move_x)):
                pushed_collider = self._actors[actor.index]
                pushed_collider.squished = True
                pushed_collider.squishers.add(solid)
        collider.collidable = True

        if move_x != 0:
            collider.x_remainder -= move_x
            collider.pos = Vec2(collider.pos.x + move_x, collider.pos.y)
        if move_y != 0:
            collider.y_remainder -= move_y
            collider.pos = Vec2(collider.pos.x, collider.pos.y + move_y)

    def solid_at(self, pos: Vec2) -> bool:
        """True if the point is inside a tag-1 tile or a collidable solid."""
        return self.tag_at(pos, 1)

    def tag_at(self, pos: Vec2, tag: int) -> bool:
        """Check the point against layers (first occupied cell decides) and solids."""
        for layer in self._layers:
            y = _to_i32(pos.y / layer.tile_width)
            x = _to_i32(pos.x / layer.tile_height)
            ix = y * layer.width + x
            if (
                0 <= ix < len(layer.static_colliders)
                and layer.static_colliders[ix] is not Tile.EMPTY
            ):
                return layer.tag == tag

        return any(s.collidable and s.rect().contains(pos) for s in self._solids)

    def collide_solids(self, pos: Vec2, width: int, height: int) -> Tile:
        """What a box at ``pos`` hits: a tag-1 tile, a solid (COLLIDER) or nothing."""
        tile = self.collide_tag(1, pos, width, height)
        if tile is not Tile.EMPTY:
            return tile

        box = Rect(pos.x, pos.y, float(width), float(height))
        if any(s.collidable and s.rect().overlaps(box) for s in self._solids):
            return Tile.COLLIDER
        return Tile.EMPTY

    def collide_tag(self, tag: int, pos: Vec2, width: int, height: int) -> Tile:
        """Sample a box against layers carrying ``tag``."""
        for layer in self._layers:
            tiles = layer.static_colliders
            layer_width = layer.width
            layer_height = len(tiles) // layer_width + 1

            def check(point: Vec2) -> Tile:
                y = _to_i32(point.y / layer.tile_width)
                x = _to_i32(point.x / layer.tile_height)
                ix = y * layer_width + x
                if (
                    0 <= y < layer_height
                    and 0 <= x < layer_width
                    and 0 <= ix < len(tiles)
                    and layer.tag == tag
                    and tiles[ix] is not Tile.EMPTY
                ):
                    return tiles[ix]
                return Tile.EMPTY

            right = width - 1.0
            bottom = height - 1.0
            corners = (
                pos,
                pos + Vec2(right, 0.0),
                pos + Vec2(right, bottom),
                pos + Vec2(0.0, bottom),
            )
            tile = reduce(Tile.combine, (check(p) for p in corners))
            if tile is not Tile.EMPTY:
                return tile

            if width > _to_i32(layer.tile_width):
                x = pos.x
                while True:
                    x += layer.tile_width
                    if not x < pos.x + width - 1.0:
                        break
                    tile = check(Vec2(x, pos.y)).combine(check(Vec2(x, pos.y + bottom)))
                    if tile is not Tile.EMPTY:
                        return tile

            if height > _to_i32(layer.tile_height):
                y = pos.y
                while True:
                    y += layer.tile_height
                    if not y < pos.y + height - 1.0:
                        break
                    tile = check(Vec2(pos.x, y)).combine(check(Vec2(pos.x + right, y)))
                    if tile is not Tile.EMPTY:
                        return tile

        return Tile.EMPTY

    def squished(self, actor: Actor) -> bool:
        """True if a solid pushed the actor into something it could not pass."""
        return self._actors[actor.index].squished

    def actor_pos(self, actor: Actor) -> Vec2:
        return self._actors[actor.index].pos

    def solid_pos(self, solid: Solid) -> Vec2:
        return self._solids[solid.index].pos

    def collide_check(self, actor: Actor, pos: Vec2) -> bool:
        """Would the actor collide at ``pos``? Jump-throughs are ignored while descending."""
        collider = self._actors[actor.index]
        tile = self.collide_solids(pos, collider.width, collider.height)
        if collider.descent:
            return tile in (Tile.SOLID, Tile.COLLIDER)
        return tile in (Tile.SOLID, Tile.COLLIDER, Tile.JUMP_THROUGH)