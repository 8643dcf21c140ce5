from __future__ import annotations

from typing import Any

from game.state import Direction, GameState, Status


def make_state(**overrides: Any) -> GameState:
    """A PLAYING state with the canonical snake and food out of the way."""
    values: dict[str, Any] = {
        "snake": [(10, 10), (10, 11), (10, 12)],
        "food": (0, 0),
        "direction": Direction.UP,
        "pending_direction": Direction.UP,
        "score": 0,
        "status": Status.PLAYING,
        "pucci_active": False,
        "grid_size": 20,
    }
    values.update(overrides)
    values.setdefault("colors", ["#fff"] * len(values["snake"]))
    return GameState(**values)
