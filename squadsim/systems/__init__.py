"""Engine systems: RNG, occupancy indexing, entropy, squad catalog."""

from squadsim.systems.rng import DeterministicRNG
from squadsim.systems.occupancy import OccupancyIndex
from squadsim.systems.entropy import EntropyConfig, normalize_entropy

__all__ = ["DeterministicRNG", "EntropyConfig", "OccupancyIndex", "normalize_entropy"]
