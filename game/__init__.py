"""Snake Ultra game package."""

from game.config import GameConfig, load_config
from game.engine import SnakeGame, tick, tick_interval_ms
from game.loop import PlayLoop
from game.state import Direction, GameState, Status

__all__ = [
    "Direction",
    "GameConfig",
    "GameState",
    "PlayLoop",
    "SnakeGame",
    "Status",
    "load_config",
    "tick",
    "tick_interval_ms",
]
