"""Conway's Game of Life on a bounded grid."""

from __future__ import annotations

import enum
import random as _random
from dataclasses import dataclass


class CellState(enum.Enum):
    ALIVE = "alive"
    DEAD = "dead"


def _next_state(current: CellState, neighbours: int) -> CellState:
    if current is CellState.ALIVE:
        if neighbours < 2 or neighbours > 3:
            return CellState.DEAD
        return CellState.ALIVE
    if neighbours == 3:
        return CellState.ALIVE
    return current


@dataclass
class LifeGrid:
    """A ``width`` by ``height`` grid of cells stored row by row; edges are walls."""

    width: int
    height: int
    cells: list[CellState]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("grid dimensions must not be negative")
        if len(self.cells) != self.width * self.height:
            raise ValueError(
                f"expected {self.width * self.height} cells, got {len(self.cells)}"
            )

    @classmethod
    def random(
        cls, width: int, height: int, rng: _random.Random | None = None
    ) -> LifeGrid:
        """A grid where each cell is alive with probability one in five."""
        rng = rng if rng is not None else _random.Random()
        cells = [
            CellState.ALIVE if rng.randrange(0, 5) == 0 else CellState.DEAD
            for _ in range(width * height)
        ]
        return cls(width, height, cells)

    def _at(self, x: int, y: int) -> CellState:
        return self.cells[y * self.width + x]

    def neighbours(self, x: int, y: int) -> int:
        """Number of live cells around ``(x, y)``; cells off the grid do not count."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) is outside the grid")
        return sum(
            1
            for j in (-1, 0, 1)
            for i in (-1, 0, 1)
            if (i, j) != (0, 0)
            and 0 <= x + i < self.width
            and 0 <= y + j < self.height
            and self._at(x + i, y + j) is CellState.ALIVE
        )

    def step(self) -> None:
        """Advance the whole grid by one generation."""
        self.cells = [
            _next_state(self._at(x, y), self.neighbours(x, y))
            for y in range(self.height)
            for x in range(self.width)
        ]