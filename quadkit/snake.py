"""The snake game on a square board, driven one movement tick at a time."""

from __future__ import annotations

import enum
import random
from collections import deque

Point = tuple[int, int]

SQUARES = 16
START_SPEED = 0.3
FRUIT_SCORE = 100


class Direction(enum.Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    RIGHT = (1, 0)
    LEFT = (-1, 0)

    @property
    def opposite(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))


class SnakeGame:
    """Game state; call ``tick`` every ``speed`` seconds and ``steer`` on input."""

    def __init__(self, squares: int = SQUARES, rng: random.Random | None = None) -> None:
        if squares <= 0:
            raise ValueError("board needs at least one square")
        self.squares = squares
        self.rng = rng if rng is not None else random.Random()
        self.reset()

    def _random_point(self) -> Point:
        return (self.rng.randrange(0, self.squares), self.rng.randrange(0, self.squares))

    def reset(self) -> None:
        """Start a new game at the top-left corner heading right."""
        self.head: Point = (0, 0)
        self.body: deque[Point] = deque()
        self.direction = Direction.RIGHT
        self.fruit: Point = self._random_point()
        self.score = 0
        self.speed = START_SPEED
        self.navigation_lock = False
        self.game_over = False

    def steer(self, direction: Direction) -> bool:
        """Turn the snake; ignored when reversing or already turned this tick."""
        if self.game_over or self.navigation_lock:
            return False
        if self.direction is direction.opposite:
            return False
        self.direction = direction
        self.navigation_lock = True
        return True

    def tick(self) -> None:
        """Move the snake one square, eating fruit and checking for collisions."""
        if self.game_over:
            return
        self.body.appendleft(self.head)
        dx, dy = self.direction.value
        self.head = (self.head[0] + dx, self.head[1] + dy)
        if self.head == self.fruit:
            self.fruit = self._random_point()
            self.score += FRUIT_SCORE
            self.speed *= 0.9
        else:
            self.body.pop()

        x, y = self.head
        if not (0 <= x < self.squares and 0 <= y < self.squares):
            self.game_over = True
        if self.head in self.body:
            self.game_over = True
        self.navigation_lock = False