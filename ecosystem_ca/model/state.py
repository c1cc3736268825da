"""State snapshot dataclasses for the ecosystem simulation."""

from dataclasses import dataclass
from typing import List, Dict
import numpy as np


@dataclass(frozen=True)
class CreatureSnapshot:
    """Immutable snapshot of one creature at a given tick."""
    creature_id: int
    species: str
    row: int
    col: int
    age: int
    food_level: int


@dataclass
class SimulationState:
    """Complete snapshot of the simulation at a given tick."""
    step: int
    populations: Dict[str, int]  # every configured species, zero included
    creatures: List[CreatureSnapshot]
    species_grid: np.ndarray     # species codes, see Field.species_grid
    metrics: Dict[str, float]    # occupancy, births, deaths, etc.

    def to_csv_rows(self) -> List[Dict]:
        """One row per species: the population log format."""
        return [
            {
                "step": self.step,
                "species": species,
                "count": count
            }
            for species, count in self.populations.items()
        ]

    @property
    def total_population(self) -> int:
        return sum(self.populations.values())
