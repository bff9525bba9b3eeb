"""Entropy: reproducible per-battle randomization of walls and spawn cells.

Two independent features:

- **Random walls** are dropped onto the freshly cloned terrain at reset,
  before any actor is added.
- **Spawn jitter** shifts each team's formation by one shared offset once the
  roster is in place, optionally followed by a small per-unit shuffle.

Configuration is accepted in shorthand (``True``, a number, a mapping with
snake_case or camelCase keys) and normalized once into frozen dataclasses.
Anything non-positive or unparseable disables the feature instead of failing.
All draws go through a single injected ``RandomSource``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from squadsim.core.enums import Team
from squadsim.core.models import Vector2
from squadsim.systems.rng import random_int

if TYPE_CHECKING:
    from squadsim.core.models import Actor
    from squadsim.core.terrain import Terrain
    from squadsim.systems.rng import RandomSource

logger = logging.getLogger(__name__)

Offset = tuple[int, int]

# Single-axis fallbacks, nearest first
_UNIT_OFFSETS: tuple[Offset, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


# ---------------------------------------------------------------------------
# Configuration records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SpawnJitterConfig:
    """Team-wide spawn offset, plus optional per-unit shuffle."""

    radius: int = 3
    attempts: int = 18
    per_unit_radius: int = 1
    per_unit_attempts: int = 4
    allow_zero_offset: bool = True
    preserve_formation: bool = True


@dataclass(frozen=True, slots=True)
class RandomWallsConfig:
    """Scattered single-cell walls placed away from the map edge."""

    count: int = 8
    margin: int = 12
    min_distance: int = 4
    attempts: int = 40


@dataclass(frozen=True, slots=True)
class EntropyConfig:
    """Canonical entropy settings; ``None`` means the feature is off."""

    spawn_jitter: SpawnJitterConfig | None = None
    random_walls: RandomWallsConfig | None = None

    @property
    def enabled(self) -> bool:
        return self.spawn_jitter is not None or self.random_walls is not None

    @classmethod
    def disabled(cls) -> EntropyConfig:
        return cls()

    @classmethod
    def defaults(cls) -> EntropyConfig:
        return cls(spawn_jitter=SpawnJitterConfig(), random_walls=RandomWallsConfig())


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

_CAMEL_ALIASES: dict[str, str] = {
    "perUnitRadius": "per_unit_radius",
    "perUnitAttempts": "per_unit_attempts",
    "allowZeroOffset": "allow_zero_offset",
    "preserveFormation": "preserve_formation",
    "minDistance": "min_distance",
    "spawnJitter": "spawn_jitter",
    "randomWalls": "random_walls",
}

_BOOL_FIELDS = frozenset({"allow_zero_offset", "preserve_formation"})
_FEATURE_KEYS = frozenset({"spawn_jitter", "random_walls"})


def _canonical_key(key: str) -> str:
    return _CAMEL_ALIASES.get(key, key)


def _merge_mapping(base: Any, overrides: Mapping[str, Any]) -> Any | None:
    """Apply *overrides* onto the dataclass *base*; None if a value is unusable."""
    known = {f.name for f in fields(base)}
    changes: dict[str, Any] = {}
    for raw_key, value in overrides.items():
        key = _canonical_key(str(raw_key))
        if key not in known:
            logger.warning("Ignoring unknown entropy option %r", raw_key)
            continue
        if key in _BOOL_FIELDS:
            changes[key] = bool(value)
            continue
        try:
            changes[key] = int(value)
        except (TypeError, ValueError):
            logger.warning("Entropy option %s=%r is not a number — feature disabled", key, value)
            return None
    return replace(base, **changes)


def _normalize_feature(value: Any, default: Any, primary: str) -> Any | None:
    """Resolve one feature's shorthand to a record of *default*'s type or None.

    A bare number sets the feature's primary field (radius / count).
    """
    if value is None or value is False:
        return None
    if value is True:
        return default
    if isinstance(value, type(default)):
        resolved = value
    elif isinstance(value, (int, float)):
        resolved = replace(default, **{primary: int(value)})
    elif isinstance(value, Mapping):
        resolved = _merge_mapping(default, value)
    else:
        logger.warning("Unrecognized entropy value %r — feature disabled", value)
        return None
    return resolved


def normalize_spawn_jitter(value: Any) -> SpawnJitterConfig | None:
    cfg = _normalize_feature(value, SpawnJitterConfig(), "radius")
    if cfg is None or cfg.radius <= 0 or cfg.attempts <= 0:
        return None
    if cfg.per_unit_radius <= 0 or cfg.per_unit_attempts <= 0:
        cfg = replace(cfg, per_unit_radius=0, per_unit_attempts=0)
    return cfg


def normalize_random_walls(value: Any) -> RandomWallsConfig | None:
    cfg = _normalize_feature(value, RandomWallsConfig(), "count")
    if cfg is None or cfg.count <= 0 or cfg.attempts <= 0:
        return None
    return replace(cfg, margin=max(0, cfg.margin), min_distance=max(0, cfg.min_distance))


def normalize_entropy(value: Any) -> EntropyConfig:
    """Resolve any accepted entropy shorthand into an ``EntropyConfig``.

    - ``None`` / ``False`` / number <= 0: everything off
    - ``True`` / positive number: both features with default presets
    - mapping: per-feature values; a feature the mapping omits keeps its
      default preset, an explicit ``False`` turns it off
    """
    if isinstance(value, EntropyConfig):
        return EntropyConfig(
            spawn_jitter=normalize_spawn_jitter(value.spawn_jitter),
            random_walls=normalize_random_walls(value.random_walls),
        )
    if value is None or value is False:
        return EntropyConfig.disabled()
    if value is True:
        return EntropyConfig.defaults()
    if isinstance(value, (int, float)):
        return EntropyConfig.defaults() if value > 0 else EntropyConfig.disabled()
    if isinstance(value, Mapping):
        options = {_canonical_key(str(k)): v for k, v in value.items()}
        for key in sorted(options.keys() - _FEATURE_KEYS):
            logger.warning("Ignoring unknown entropy feature %r", key)
        return EntropyConfig(
            spawn_jitter=normalize_spawn_jitter(options.get("spawn_jitter", True)),
            random_walls=normalize_random_walls(options.get("random_walls", True)),
        )
    logger.warning("Unrecognized entropy configuration %r — entropy disabled", value)
    return EntropyConfig.disabled()


# ---------------------------------------------------------------------------
# Random walls
# ---------------------------------------------------------------------------

def place_random_walls(terrain: Terrain, cfg: RandomWallsConfig, rng: RandomSource) -> list[Offset]:
    """Drop up to ``cfg.count`` walls on *terrain*; return the placed cells.

    Each wall gets ``cfg.attempts`` draws.  When one wall cannot be placed,
    placement stops; a partial set is a valid outcome.
    """
    margin_x = min(cfg.margin, (terrain.width - 1) // 2)
    margin_y = min(cfg.margin, (terrain.height - 1) // 2)
    lo_x, hi_x = margin_x, terrain.width - 1 - margin_x
    lo_y, hi_y = margin_y, terrain.height - 1 - margin_y

    placed: list[Offset] = []
    for wall_idx in range(cfg.count):
        for _ in range(cfg.attempts):
            x = random_int(rng, lo_x, hi_x)
            y = random_int(rng, lo_y, hi_y)
            if not terrain.is_walkable(x, y):
                continue
            if any(abs(x - wx) + abs(y - wy) <= cfg.min_distance for wx, wy in placed):
                continue
            terrain.set_terrain(x, y, "wall")
            placed.append((x, y))
            break
        else:
            logger.debug("Wall %d/%d found no free cell — stopping placement", wall_idx + 1, cfg.count)
            break
    return placed


# ---------------------------------------------------------------------------
# Spawn jitter
# ---------------------------------------------------------------------------

def _offset_fits(
    members: list[Actor],
    offset: Offset,
    terrain: Terrain,
    blocked: set[Offset],
) -> bool:
    dx, dy = offset
    for actor in members:
        x, y = actor.pos.x + dx, actor.pos.y + dy
        if not terrain.is_walkable(x, y) or (x, y) in blocked:
            return False
    return True


def _pick_offset(
    members: list[Actor],
    terrain: Terrain,
    blocked: set[Offset],
    rng: RandomSource,
    radius: int,
    attempts: int,
    allow_zero: bool,
    preferred: Offset | None = None,
) -> Offset:
    """Walk the fallback ladder: preferred, random draws, unit step, zero."""
    if preferred is not None:
        preferred = (int(preferred[0]), int(preferred[1]))
        if (allow_zero or preferred != (0, 0)) and _offset_fits(members, preferred, terrain, blocked):
            return preferred

    for _ in range(attempts):
        offset = (random_int(rng, -radius, radius), random_int(rng, -radius, radius))
        if offset == (0, 0) and not allow_zero:
            continue
        if _offset_fits(members, offset, terrain, blocked):
            return offset

    if not allow_zero:
        for offset in _UNIT_OFFSETS:
            if _offset_fits(members, offset, terrain, blocked):
                return offset
    return (0, 0)


def _shift(actor: Actor, offset: Offset) -> None:
    if offset != (0, 0):
        actor.pos = actor.pos + Vector2(*offset)


def apply_spawn_jitter(
    actors: Iterable[Actor],
    terrain: Terrain,
    cfg: SpawnJitterConfig,
    rng: RandomSource,
    preferred_offsets: Mapping[Team | str, Offset] | None = None,
) -> dict[Team, Offset]:
    """Shift each team's formation; return the offset applied per team.

    Teams are processed friendly first, each validated against the other
    team's *current* cells.  Per-unit jitter runs only when
    ``preserve_formation`` is False.
    """
    roster = [a for a in actors if a.alive]
    preferred = {Team(k): v for k, v in (preferred_offsets or {}).items()}
    applied: dict[Team, Offset] = {}

    for team in (Team.FRIENDLY, Team.ENEMY):
        members = [a for a in roster if a.team is team]
        if not members:
            continue
        blocked = {(a.pos.x, a.pos.y) for a in roster if a.team is not team}
        offset = _pick_offset(
            members, terrain, blocked, rng,
            cfg.radius, cfg.attempts, cfg.allow_zero_offset,
            preferred.get(team),
        )
        for actor in members:
            _shift(actor, offset)
        applied[team] = offset
        logger.debug("Spawn jitter: %s squad shifted by %s", team.value, offset)

    if not cfg.preserve_formation and cfg.per_unit_radius > 0:
        _jitter_units(roster, terrain, cfg, rng)

    return applied


def _jitter_units(roster: list[Actor], terrain: Terrain, cfg: SpawnJitterConfig, rng: RandomSource) -> None:
    for actor in roster:
        blocked = {(a.pos.x, a.pos.y) for a in roster if a is not actor}
        offset = _pick_offset(
            [actor], terrain, blocked, rng,
            cfg.per_unit_radius, cfg.per_unit_attempts, cfg.allow_zero_offset,
        )
        _shift(actor, offset)
