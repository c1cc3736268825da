from dataclasses import replace

import pytest

from ecosystem_ca.config import SimulationConfig, GridConfig
from ecosystem_ca.model.agent import Creature
from ecosystem_ca.model.grid import Field
from ecosystem_ca.model.location import Location
from ecosystem_ca.model.randomizer import Randomizer
from ecosystem_ca.model.species import DEFAULT_SPECIES, GRASS


class ScriptedRandomizer(Randomizer):
    """Randomizer whose uniform draws always return one fixed value."""

    def __init__(self, value: float, seed: int = 0):
        super().__init__(seed)
        self.value = value
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return self.value


# Breeding age no creature in a test ever reaches
NEVER = 10 ** 6


def no_breeding(profile):
    return replace(profile, breeding_age=NEVER)


def put(profile, field, row, col, rng):
    return Creature(profile, field, Location(row, col), rng)


def make_config(depth=10, width=10, seed=0, species=None, **overrides):
    """SimulationConfig with selected species profiles swapped in."""
    merged = dict(DEFAULT_SPECIES)
    merged.update(species or {})
    return SimulationConfig(grid=GridConfig(depth, width), species=merged,
                            seed=seed, **overrides)


@pytest.fixture
def rng():
    return Randomizer(1234)


@pytest.fixture
def field3(rng):
    return Field(3, 3, rng)


@pytest.fixture
def prolific_grass():
    return replace(GRASS, breeding_probability=1.0, max_litter_size=1)
