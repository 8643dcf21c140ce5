"""Direction input handling: raw key parsing, inversion and the reversal guard."""

from __future__ import annotations

from typing import Any, Optional

from .state import Direction, GameState, Status

# Raw inputs accepted from the browser (lower-cased before lookup)
KEY_MAP = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
    "arrowup": Direction.UP,
    "arrowdown": Direction.DOWN,
    "arrowleft": Direction.LEFT,
    "arrowright": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}

# PUCCI mode swaps every direction with its opposite
INVERTED_CONTROLS = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


def parse_direction(raw: Any) -> Optional[Direction]:
    """Map a raw input value to a Direction, or None if it is not one."""
    if isinstance(raw, Direction):
        return raw
    if not isinstance(raw, str):
        return None
    return KEY_MAP.get(raw.strip().lower())


def resolve_direction(state: GameState, requested: Direction) -> Optional[Direction]:
    """Return the direction to store in the pending slot, or None to drop the request.

    Args:
        state: Current game state (only status, pucci flag and committed direction are read)
        requested: Direction asked for by the player

    Returns:
        The (possibly inverted) direction, or None when the game is not running
        or the move would reverse the snake onto itself
    """
    if state.status != Status.PLAYING:
        return None

    final = INVERTED_CONTROLS[requested] if state.pucci_active else requested

    # Prevent reversing direction (can't go back on yourself)
    if final == state.direction.opposite:
        return None

    return final
