from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "GLOOMDELVE_"


@dataclass
class DungeonSettings:
    width: int = 80
    height: int = 50
    max_rooms: int = 12
    room_min_size: int = 6
    room_max_size: int = 12


@dataclass
class StatBlock:
    max_hp: int = 10
    attack: int = 3
    defense: int = 1


@dataclass
class MonsterKind:
    name: str = "Goblin"
    glyph: str = "g"
    max_hp: int = 10
    attack: int = 3
    defense: int = 1


@dataclass
class ActorSettings:
    player_vision_range: int = 8
    monster_vision_range: int = 8
    player_stats: StatBlock = field(default_factory=lambda: StatBlock(max_hp=30, attack=5, defense=2))
    monster_kinds: List[MonsterKind] = field(default_factory=lambda: [MonsterKind()])


@dataclass
class AiSettings:
    melee_range: float = 1.5


def _as_int(value: Any, key: str) -> int:
    # YAML booleans pass isinstance(int).
    if isinstance(value, bool):
        raise ConfigError(f"Setting '{key}' must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigError(f"Setting '{key}' must be an integer, got {value!r}")


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"Setting '{key}' must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Setting '{key}' must be a number, got {value!r}") from exc


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"Setting '{key}' must be a string, got {value!r}")
    return value


# Field annotations are strings under postponed evaluation.
_COERCE = {"int": _as_int, "float": _as_float, "str": _as_str}


def _section(data: Any, section: str) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings section '{section}' must be a mapping, got {type(data).__name__}")
    return dict(data)


def _build(cls, data: Any, section: str):
    """Instantiate a settings dataclass from a mapping.

    Unknown keys are logged and ignored; scalar fields are coerced to their
    declared type, anything that cannot be coerced raises ConfigError.
    """
    data = _section(data, section)
    fields = {f.name: f for f in dataclasses.fields(cls)}
    for key in sorted(set(data) - set(fields)):
        logger.warning("Ignoring unknown setting '%s.%s'", section, key)
        data.pop(key)
    for key, value in data.items():
        coerce = _COERCE.get(str(fields[key].type))
        if coerce is not None:
            data[key] = coerce(value, f"{section}.{key}")
    try:
        return cls(**data)
    except TypeError as exc:
        raise ConfigError(f"Invalid '{section}' settings: {exc}") from exc


@dataclass
class Settings:
    dungeon: DungeonSettings = field(default_factory=DungeonSettings)
    actors: ActorSettings = field(default_factory=ActorSettings)
    ai: AiSettings = field(default_factory=AiSettings)
    seed: Optional[int] = None

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse settings file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping at the top level")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        for key in sorted(set(data) - {"dungeon", "actors", "ai", "seed"}):
            logger.warning("Ignoring unknown settings section '%s'", key)
        actors_raw = _section(data.get("actors"), "actors")
        player_stats = _build(StatBlock, actors_raw.pop("player_stats", None), "actors.player_stats")
        kinds_raw = actors_raw.pop("monster_kinds", None)
        actors = _build(ActorSettings, actors_raw, "actors")
        actors.player_stats = player_stats
        if kinds_raw is not None:
            if not isinstance(kinds_raw, list):
                raise ConfigError("actors.monster_kinds must be a list")
            actors.monster_kinds = [_build(MonsterKind, k, "actors.monster_kinds") for k in kinds_raw]
        seed = data.get("seed")
        settings = cls(
            dungeon=_build(DungeonSettings, data.get("dungeon"), "dungeon"),
            actors=actors,
            ai=_build(AiSettings, data.get("ai"), "ai"),
            seed=None if seed is None else _as_int(seed, "seed"),
        )
        settings.validate()
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "dungeon": dataclasses.asdict(self.dungeon),
            "actors": dataclasses.asdict(self.actors),
            "ai": dataclasses.asdict(self.ai),
        }

    def validate(self) -> None:
        d = self.dungeon
        if d.width < 3 or d.height < 3:
            raise ConfigError(f"Dungeon must be at least 3x3, got {d.width}x{d.height}")
        if d.max_rooms < 0:
            raise ConfigError("dungeon.max_rooms must be >= 0")
        if d.room_min_size <= 0 or d.room_min_size > d.room_max_size:
            raise ConfigError(
                f"Invalid room size bounds: min={d.room_min_size} max={d.room_max_size}"
            )
        if self.actors.player_vision_range < 0 or self.actors.monster_vision_range < 0:
            raise ConfigError("Vision ranges must be >= 0")
        if not self.actors.monster_kinds:
            raise ConfigError("actors.monster_kinds must list at least one kind")
        for kind in self.actors.monster_kinds:
            if len(kind.glyph) != 1:
                raise ConfigError(f"Monster glyph for {kind.name!r} must be a single character")
        if self.ai.melee_range <= 0:
            raise ConfigError("ai.melee_range must be positive")

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """Override selected values from GLOOMDELVE_* environment variables."""
        env = os.environ if environ is None else environ
        overrides = {
            "SEED": ("seed", None),
            "WIDTH": ("width", self.dungeon),
            "HEIGHT": ("height", self.dungeon),
            "MAX_ROOMS": ("max_rooms", self.dungeon),
        }
        for suffix, (attr, target) in overrides.items():
            raw = env.get(ENV_PREFIX + suffix)
            if raw is None or raw == "":
                continue
            try:
                value = int(raw)
            except ValueError as exc:
                raise ConfigError(f"{ENV_PREFIX}{suffix} must be an integer, got {raw!r}") from exc
            setattr(target if target is not None else self, attr, value)
            logger.debug("Env override %s%s=%d", ENV_PREFIX, suffix, value)
        self.validate()
        return self

    @classmethod
    def load(cls, user_path: Optional[Path] = None, use_env: bool = True) -> "Settings":
        """Load settings from built-in defaults and optional user override file.

        If user_path is provided and exists, overlay values onto defaults.
        Environment overrides are applied last unless ``use_env`` is False.
        """
        try:
            with resources.files("gloomdelve.data").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = Settings().to_dict()

        user_data: dict = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        settings = cls.from_dict(cls._deep_merge(default_data, user_data))
        if use_env:
            settings.apply_env()
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved settings to %s", path)
