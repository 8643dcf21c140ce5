from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Tuple

import numpy as np

Cell = Tuple[int, int]


class Direction(str, Enum):
    """Movement direction; the value doubles as the wire name."""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> Cell:
        return DELTAS[self]

    @property
    def opposite(self) -> Direction:
        return OPPOSITES[self]


DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Status(str, Enum):
    """Game status. INFO is an overlay and never reached by the simulation."""

    START = "START"
    PLAYING = "PLAYING"
    EXPLODING_10 = "EXPLODING_10"
    EXPLODING_20 = "EXPLODING_20"
    GAME_OVER = "GAME_OVER"
    INFO = "INFO"

    @property
    def is_exploding(self) -> bool:
        return self in (Status.EXPLODING_10, Status.EXPLODING_20)


# Grid codes used by GameState.to_grid()
EMPTY = 0
BODY = 1
HEAD = 2
FOOD = 3


@dataclass
class GameState:
    """Represents the current state of a Snake Ultra game."""

    snake: List[Cell]  # List of (x, y) tuples, head first
    food: Cell  # (x, y) position of food
    direction: Direction = Direction.UP  # Committed direction, used by the reversal guard
    pending_direction: Direction = Direction.UP  # Applied on the next tick
    score: int = 0
    status: Status = Status.START
    colors: List[str] = field(default_factory=list)  # One CSS colour per segment, head first
    pucci_active: bool = False  # Inverted controls
    grid_size: int = 20

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.grid_size and 0 <= y < self.grid_size

    def to_dict(self) -> dict[str, Any]:
        """Convert GameState to a dictionary for JSON serialization."""
        return {
            "snake": [{"x": x, "y": y} for x, y in self.snake],
            "food": {"x": self.food[0], "y": self.food[1]},
            "direction": self.direction.value,
            "score": self.score,
            "status": self.status.value,
            "colors": list(self.colors),
            "pucci_active": self.pucci_active,
            "grid_size": self.grid_size,
        }

    def to_grid(self) -> np.ndarray:
        """Return a (grid_size, grid_size) occupancy grid indexed [y, x].

        Food is drawn first so a body segment spawned over it stays visible.
        """
        grid = np.full((self.grid_size, self.grid_size), EMPTY, dtype=np.int8)

        if self.in_bounds(self.food):
            fx, fy = self.food
            grid[fy, fx] = FOOD

        for x, y in self.snake[1:]:
            if self.in_bounds((x, y)):
                grid[y, x] = BODY

        if self.snake and self.in_bounds(self.head):
            hx, hy = self.head
            grid[hy, hx] = HEAD

        return grid
