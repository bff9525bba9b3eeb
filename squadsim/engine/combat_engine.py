"""CombatEngine — the authoritative tick state machine for one battle.

State cycle:  IDLE --(first execute_tick)--> RUNNING --(end condition)--> ENDED

Per tick:
  1. Fatigue recovery for every living actor
  2. Occupancy rebuild
  3. Each living actor, in roster order, runs the squad AI; the occupancy
     index is rebuilt after every single actor
  4. Optional frame recording
  5. End check: both sides alive and tick < max_ticks, or stop
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping

from squadsim.ai.brain import SquadBrain
from squadsim.config import SimulationConfig
from squadsim.core.enums import BattleOutcome, EngineState, Team
from squadsim.core.terrain import Terrain
from squadsim.engine.results import BattleResult, SideSummary, decide_winner
from squadsim.systems.entropy import EntropyConfig, apply_spawn_jitter, normalize_entropy, place_random_walls
from squadsim.systems.occupancy import OccupancyIndex
from squadsim.systems.rng import DeterministicRNG
from squadsim.utils.replay import BattleRecorder

if TYPE_CHECKING:
    from squadsim.actions.base import ActionRecord
    from squadsim.core.models import Actor
    from squadsim.engine.results import BatchResult
    from squadsim.systems.rng import RandomSource

logger = logging.getLogger(__name__)

Offset = tuple[int, int]


@dataclass(slots=True)
class BattleContext:
    """Per-battle information handed to ``reset`` and the setup callback.

    ``preferred_spawn_offsets`` maps a team to the offset spawn jitter should
    try first; feeding back a recording's ``spawnOffsets`` replays a battle.
    """

    index: int = 0
    label: str = ""
    preferred_spawn_offsets: dict[Team, Offset] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_recording(cls, recording: Mapping[str, Any], index: int = 0) -> BattleContext:
        """Context that reproduces the spawn offsets stored in *recording*."""
        raw = recording.get("metadata", {}).get("spawnOffsets", {})
        offsets = {Team(team): (int(o["x"]), int(o["y"])) for team, o in raw.items()}
        return cls(index=index, label="replay", preferred_spawn_offsets=offsets)


SetupFn = Callable[["CombatEngine", BattleContext], None]


class CombatEngine:
    """Runs a single battle at a time; reusable across battles via ``reset``."""

    __slots__ = (
        "_config",
        "_base_terrain",
        "_terrain",
        "_rng",
        "_brain",
        "_entropy",
        "_actors",
        "_occupancy",
        "_recorder",
        "_tick",
        "_state",
        "_context",
        "_placed_walls",
        "_spawn_offsets",
        "_last_actions",
    )

    def __init__(
        self,
        config: SimulationConfig | None = None,
        terrain: Terrain | None = None,
        random_source: RandomSource | None = None,
        brain: SquadBrain | None = None,
    ) -> None:
        self._config = config or SimulationConfig()
        cfg = self._config
        self._base_terrain = terrain or Terrain(cfg.grid_width, cfg.grid_height, cfg.default_terrain)
        self._rng: RandomSource = random_source or DeterministicRNG(cfg.seed)
        self._brain = brain or SquadBrain(cfg.policy)
        self._entropy: EntropyConfig = normalize_entropy(cfg.entropy)
        self._occupancy = OccupancyIndex()
        self._recorder = BattleRecorder()

        # A fresh engine is ready for its first battle
        self.reset()

    # -- read-only views --

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def terrain(self) -> Terrain:
        """The live terrain of the current battle (walls included)."""
        return self._terrain

    @property
    def base_terrain(self) -> Terrain:
        return self._base_terrain

    @property
    def actors(self) -> list[Actor]:
        return self._actors

    @property
    def occupancy(self) -> OccupancyIndex:
        return self._occupancy

    @property
    def entropy(self) -> EntropyConfig:
        return self._entropy

    @property
    def placed_walls(self) -> list[Offset]:
        return list(self._placed_walls)

    @property
    def spawn_offsets(self) -> dict[Team, Offset]:
        return dict(self._spawn_offsets)

    @property
    def context(self) -> BattleContext:
        return self._context

    @property
    def last_actions(self) -> list[ActionRecord]:
        """Actions that landed during the most recent tick."""
        return self._last_actions

    # -- lifecycle --

    def reset(self, context: BattleContext | None = None) -> None:
        """Start a fresh battle: new terrain clone, random walls, empty roster."""
        self._context = context or BattleContext()
        self._terrain = self._base_terrain.clone()
        self._actors: list[Actor] = []
        self._occupancy.clear()
        self._recorder.clear()
        self._tick = 0
        self._state = EngineState.IDLE
        self._spawn_offsets: dict[Team, Offset] = {}
        self._last_actions: list[ActionRecord] = []

        self._placed_walls: list[Offset] = []
        if self._entropy.random_walls is not None:
            self._placed_walls = place_random_walls(self._terrain, self._entropy.random_walls, self._rng)
            logger.debug("Battle %d: placed %d random walls", self._context.index, len(self._placed_walls))

    def add_creep(self, actor: Actor) -> Actor:
        """Append *actor* to the roster; roster order is turn order."""
        self._actors.append(actor)
        return actor

    def alive_actors(self, team: Team | None = None) -> list[Actor]:
        return [a for a in self._actors if a.alive and (team is None or a.team is team)]

    def _begin(self) -> None:
        """IDLE -> RUNNING: spawn jitter, terrain snapshot, start log."""
        jitter = self._entropy.spawn_jitter
        if jitter is not None:
            self._spawn_offsets = apply_spawn_jitter(
                self._actors, self._terrain, jitter, self._rng,
                self._context.preferred_spawn_offsets,
            )
        if self._config.record_battle:
            self._recorder.set_terrain(self._terrain.to_grid())
        self._state = EngineState.RUNNING
        logger.info(
            "Battle %d started: %d friendlies vs %d enemies (%d walls)",
            self._context.index,
            len(self.alive_actors(Team.FRIENDLY)),
            len(self.alive_actors(Team.ENEMY)),
            len(self._placed_walls),
        )

    def _end(self) -> None:
        self._state = EngineState.ENDED
        logger.info(
            "Battle %d ended at tick %d: %s (friendlies %d, enemies %d)",
            self._context.index,
            self._tick,
            self._winner().value,
            len(self.alive_actors(Team.FRIENDLY)),
            len(self.alive_actors(Team.ENEMY)),
        )

    def _both_sides_alive(self) -> bool:
        return bool(self.alive_actors(Team.FRIENDLY)) and bool(self.alive_actors(Team.ENEMY))

    # -- tick --

    def _refresh_occupancy(self) -> None:
        """Rebuild the occupancy index from the living roster."""
        self._occupancy.rebuild(self._actors)

    def execute_tick(self) -> bool:
        """Run one tick.  Returns False once the battle is over."""
        if self._state is EngineState.ENDED:
            return False
        if self._state is EngineState.IDLE:
            self._begin()

        if not self._both_sides_alive() or self._tick >= self._config.max_ticks:
            self._end()
            return False

        self._tick += 1
        self._last_actions = []

        # --- Phase 1: fatigue ---
        for actor in self._actors:
            if actor.alive:
                actor.reduce_fatigue()

        # --- Phase 2: occupancy ---
        self._refresh_occupancy()

        # --- Phase 3: actors, in roster order ---
        for actor in self._actors:
            # Killed earlier this tick
            if not actor.alive:
                continue
            self._last_actions.extend(self._brain.decide(actor, self._actors, self._terrain, self._occupancy))
            self._refresh_occupancy()

        # --- Phase 4: recording ---
        if self._config.record_battle:
            self._recorder.record_frame(self._tick, self._actors, self._last_actions)

        interval = self._config.progress_log_interval
        if interval > 0 and self._tick % interval == 0:
            logger.debug(
                "Tick %d: friendlies %d, enemies %d",
                self._tick,
                len(self.alive_actors(Team.FRIENDLY)),
                len(self.alive_actors(Team.ENEMY)),
            )

        # --- Phase 5: end check ---
        if self._both_sides_alive() and self._tick < self._config.max_ticks:
            return True
        self._end()
        return False

    def run_battle(self) -> BattleResult:
        """Tick until the battle ends and return its result."""
        while self.execute_tick():
            pass
        return self.battle_result()

    # -- results --

    def _winner(self) -> BattleOutcome:
        return decide_winner(
            len(self.alive_actors(Team.FRIENDLY)),
            len(self.alive_actors(Team.ENEMY)),
        )

    def battle_result(self) -> BattleResult:
        friendly = [a for a in self._actors if a.team is Team.FRIENDLY]
        enemy = [a for a in self._actors if a.team is Team.ENEMY]
        return BattleResult(
            winner=self._winner(),
            ticks=self._tick,
            friendly=SideSummary.from_actors(friendly),
            enemy=SideSummary.from_actors(enemy),
        )

    def export_recording(self) -> dict[str, Any] | None:
        """Frames of the current battle, or None when recording is off."""
        if not self._config.record_battle:
            return None
        metadata = {
            "maxTicks": self._config.max_ticks,
            "gridSize": self._terrain.width,
            "gridHeight": self._terrain.height,
            "walls": [{"x": x, "y": y} for x, y in self._placed_walls],
            "spawnOffsets": {team.value: {"x": dx, "y": dy} for team, (dx, dy) in self._spawn_offsets.items()},
        }
        if self._context.label:
            metadata["label"] = self._context.label
        metadata.update(self._context.metadata)
        return self._recorder.export(self._tick, metadata)

    # -- batches --

    def run_multiple_battles(
        self,
        n: int,
        setup_fn: SetupFn,
        keep_recordings: bool = False,
    ) -> BatchResult:
        """Run *n* battles back to back on this engine.

        ``setup_fn(engine, context)`` populates the roster after each reset.
        All battles draw from this engine's single random source.
        """
        from squadsim.engine.batch import run_battles

        return run_battles(self, n, setup_fn, keep_recordings=keep_recordings)
