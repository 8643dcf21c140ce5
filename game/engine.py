import logging
from dataclasses import replace
from typing import Optional, Union

import numpy as np

from .colors import INITIAL_COLOR, color_for_score, monochrome_trail
from .config import GameConfig
from .controls import parse_direction, resolve_direction
from .state import Cell, Direction, GameState, Status

logger = logging.getLogger(__name__)

# Score that triggers each milestone, and the status it enters
MILESTONES = {
    10: Status.EXPLODING_10,
    20: Status.EXPLODING_20,
}

INITIAL_LENGTH = 3


def spawn_food(
    grid_size: int,
    rng: np.random.Generator,
    snake: Optional[list[Cell]] = None,
) -> Cell:
    """Pick a food cell.

    Without ``snake`` the cell is uniform over the whole grid and may land on
    the body. With ``snake`` only free cells are considered; a full board
    falls back to the uniform draw.
    """
    if snake is not None:
        occupied = set(snake)
        empty_cells = [
            (x, y)
            for x in range(grid_size)
            for y in range(grid_size)
            if (x, y) not in occupied
        ]
        if empty_cells:
            return empty_cells[int(rng.integers(len(empty_cells)))]

    x, y = rng.integers(0, grid_size, size=2)
    return (int(x), int(y))


def initial_state(
    grid_size: int,
    rng: np.random.Generator,
    status: Status = Status.START,
) -> GameState:
    """Canonical starting position: a vertical snake in the centre column, heading up."""
    center = grid_size // 2
    snake = [(center, center + i) for i in range(INITIAL_LENGTH)]
    return GameState(
        snake=snake,
        food=spawn_food(grid_size, rng),
        direction=Direction.UP,
        pending_direction=Direction.UP,
        score=0,
        status=status,
        colors=[INITIAL_COLOR] * INITIAL_LENGTH,
        pucci_active=False,
        grid_size=grid_size,
    )


def tick(
    state: GameState,
    rng: np.random.Generator,
    food_avoids_snake: bool = False,
) -> GameState:
    """Advance the game by one cell.

    Pure with respect to ``state``: a new GameState is returned and the
    argument is never modified. Outside PLAYING the same state is returned.

    Args:
        state: Current state; ``pending_direction`` is the move to apply
        rng: Random source for food placement and segment colours
        food_avoids_snake: Restrict food respawn to cells off the snake

    Returns:
        The next GameState
    """
    if state.status != Status.PLAYING:
        return state

    dx, dy = state.pending_direction.delta
    head_x, head_y = state.head
    new_head = (head_x + dx, head_y + dy)

    # Wall or body collision freezes everything but the status
    if not state.in_bounds(new_head) or new_head in state.snake:
        return replace(state, status=Status.GAME_OVER)

    snake = [new_head] + state.snake
    colors = list(state.colors)
    score = state.score
    food = state.food
    status = Status.PLAYING

    if new_head == state.food:
        score += 1
        food = spawn_food(state.grid_size, rng, snake if food_avoids_snake else None)
        colors.insert(0, color_for_score(score, rng))
        status = MILESTONES.get(score, Status.PLAYING)
    else:
        snake.pop()

    return replace(
        state,
        snake=snake,
        food=food,
        score=score,
        direction=state.pending_direction,
        status=status,
        colors=colors,
    )


def tick_interval_ms(score: int, config: GameConfig) -> int:
    """Milliseconds between ticks; shrinks linearly with the score down to a floor."""
    return config.base_interval_ms - min(score * config.speed_decay_ms, config.speed_cap_ms)


class SnakeGame:
    """Snake Ultra engine: owns the state and applies every transition to it."""

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """Initialize the game.

        Args:
            config: Game constants (defaults to GameConfig())
            seed: Optional random seed for reproducibility
        """
        self.config = config or GameConfig()
        self.rng = np.random.default_rng(seed)
        self.state = initial_state(self.config.grid_size, self.rng)

    @property
    def status(self) -> Status:
        return self.state.status

    @property
    def game_over(self) -> bool:
        return self.state.status == Status.GAME_OVER

    @property
    def interval_ms(self) -> int:
        return tick_interval_ms(self.state.score, self.config)

    def reset(self) -> GameState:
        """Start a new run: fresh canonical state, already PLAYING.

        Returns:
            The new GameState
        """
        self.state = initial_state(self.config.grid_size, self.rng, status=Status.PLAYING)
        logger.debug("Game reset on %dx%d grid", self.config.grid_size, self.config.grid_size)
        return self.get_state()

    def submit_direction(self, requested: Union[Direction, str]) -> bool:
        """Queue a direction for the next tick (last write wins).

        Args:
            requested: Direction or raw key name ("up", "ArrowLeft", "d", ...)

        Returns:
            True if the pending direction was overwritten
        """
        direction = parse_direction(requested)
        if direction is None:
            logger.debug("Ignoring unrecognized direction %r", requested)
            return False

        final = resolve_direction(self.state, direction)
        if final is None:
            return False

        self.state.pending_direction = final
        return True

    def step(self) -> GameState:
        """Process one tick and return the resulting state."""
        previous = self.state.status
        self.state = tick(self.state, self.rng, self.config.food_avoids_snake)

        if self.state.status != previous:
            logger.info("Status %s -> %s at score %d", previous.value, self.state.status.value, self.state.score)

        return self.get_state()

    def finish_explosion(self, status: Status) -> bool:
        """Leave a milestone pause and apply its mode change.

        EXPLODING_10 repaints the whole trail in grayscale and clears PUCCI
        mode; EXPLODING_20 turns PUCCI mode on for the rest of the run.

        Args:
            status: The exploding status the caller scheduled the resume for

        Returns:
            False (and nothing changes) if the game is no longer in ``status``
        """
        if not status.is_exploding or self.state.status != status:
            return False

        if status == Status.EXPLODING_10:
            self.state = replace(
                self.state,
                status=Status.PLAYING,
                pucci_active=False,
                colors=monochrome_trail(len(self.state.snake)),
            )
        else:
            self.state = replace(self.state, status=Status.PLAYING, pucci_active=True)

        logger.info("Milestone %s finished, pucci_active=%s", status.value, self.state.pucci_active)
        return True

    def toggle_info(self) -> GameState:
        """Open or close the info overlay; only reachable from START."""
        if self.state.status == Status.INFO:
            self.state = replace(self.state, status=Status.START)
        elif self.state.status == Status.START:
            self.state = replace(self.state, status=Status.INFO)
        return self.get_state()

    def get_state(self) -> GameState:
        """Get a snapshot of the current game state.

        Returns:
            Copy of the current GameState, safe to hand to renderers
        """
        return replace(self.state, snake=list(self.state.snake), colors=list(self.state.colors))
