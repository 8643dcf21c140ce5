"""Game configuration loaded from YAML with environment overrides."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "configs" / "default.yaml"


class ConfigError(ValueError):
    """Raised when the configuration file or an override is invalid."""


@dataclass(frozen=True)
class GameConfig:
    """Tunable game constants.

    The tick interval is ``base_interval_ms - min(score * speed_decay_ms, speed_cap_ms)``.
    """

    grid_size: int = 20
    base_interval_ms: int = 150
    speed_decay_ms: int = 3
    speed_cap_ms: int = 100
    explosion_duration_ms: int = 3000
    frame_interval_ms: int = 16
    food_avoids_snake: bool = False
    milestone_model: str = "gpt-4o-mini"

    def __post_init__(self) -> None:
        if self.grid_size < 5:
            # The starting snake runs from the centre down to grid_size // 2 + 2
            raise ConfigError(f"grid_size must be at least 5, got {self.grid_size}")
        if self.base_interval_ms <= 0:
            raise ConfigError("base_interval_ms must be positive")
        if self.speed_decay_ms < 0 or self.speed_cap_ms < 0:
            raise ConfigError("speed_decay_ms and speed_cap_ms must not be negative")
        if self.speed_cap_ms >= self.base_interval_ms:
            raise ConfigError(
                f"speed_cap_ms ({self.speed_cap_ms}) must be below base_interval_ms ({self.base_interval_ms})"
            )
        if self.explosion_duration_ms < 0:
            raise ConfigError("explosion_duration_ms must not be negative")
        if self.frame_interval_ms <= 0:
            raise ConfigError("frame_interval_ms must be positive")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameConfig:
        """Build a config from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")
        try:
            return cls(**data)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _coerce(raw: str, target: type) -> Any:
    if target is bool:
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ConfigError(f"Not a boolean: {raw!r}")
    if target is int:
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigError(f"Not an integer: {raw!r}") from e
    return raw


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect ``SNAKE_<FIELD>`` overrides from the environment."""
    environ = dict(os.environ) if environ is None else environ
    overrides: dict[str, Any] = {}
    for f in fields(GameConfig):
        key = f"SNAKE_{f.name.upper()}"
        if key in environ:
            target = type(getattr(GameConfig, f.name))
            overrides[f.name] = _coerce(environ[key], target)
    return overrides


def load_config(
    config_path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> GameConfig:
    """Load configuration from YAML file, then apply environment overrides.

    Args:
        config_path: YAML file; defaults to ``$SNAKE_CONFIG`` or configs/default.yaml
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        The validated GameConfig
    """
    env = dict(os.environ) if environ is None else environ
    path = Path(config_path or env.get("SNAKE_CONFIG") or DEFAULT_CONFIG_PATH)

    data: dict[str, Any] = {}
    if path.exists():
        with open(path) as f:
            loaded = yaml.safe_load(f)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path} must contain a mapping, got {type(loaded).__name__}")
        data.update(loaded)
    elif config_path is not None:
        raise ConfigError(f"Config file not found: {path}")

    data.update(env_overrides(env))
    return GameConfig.from_dict(data)
