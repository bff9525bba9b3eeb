"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PolicyConfig:
    """Tuning knobs of the squad AI.

    These are game-balance values, not structural rules; the defaults keep
    win rates comparable with earlier runs.
    """

    focus_fire_range: int = 5              # weakest enemy beyond this -> fall back to nearest
    kite_range: int = 2                    # ranged units react at or inside this range
    kite_self_hp_threshold: float = 0.5    # only kite while own hp fraction is above this
    kite_target_hp_threshold: float = 0.3  # flee healthy targets, press weaker ones
    healer_approach_range: int = 2         # healers step closer beyond this range


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for an engine and the runs built on it."""

    # World
    seed: int = 42
    grid_width: int = 100
    grid_height: int = 100
    default_terrain: str = "swamp"

    # Battle
    max_ticks: int = 1000
    record_battle: bool = False

    # Entropy: True / False, a number, a mapping, or an EntropyConfig
    entropy: Any = True

    # Squad placement (anchor cell of each formation)
    friendly_spawn: tuple[int, int] = (10, 45)
    enemy_spawn: tuple[int, int] = (90, 54)

    # Batches
    num_workers: int = 1

    # AI
    policy: PolicyConfig = field(default_factory=PolicyConfig)

    # Logging
    log_level: str = "INFO"
    progress_log_interval: int = 10      # ticks between DEBUG progress lines
    replay_file: str = "battle-recording.json"
