"""Per-species behaviour descriptors and the built-in species set."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class Behavior(Enum):
    """The two behaviour variants a creature can follow each tick."""
    PRODUCER = "producer"  # grows and spreads; dies only of overcrowding
    CONSUMER = "consumer"  # ages, hungers, hunts prey


@dataclass(frozen=True)
class SpeciesProfile:
    """
    Constants shared by every creature of one species.

    kill_probabilities maps a prey species name to the chance a single
    predation attempt on it succeeds. Only species listed there are
    eligible prey.
    """
    name: str
    behavior: Behavior
    breeding_age: int
    breeding_probability: float
    max_litter_size: int
    creation_probability: float
    max_age: Optional[int] = None
    food_value: int = 0
    kill_probabilities: Dict[str, float] = field(default_factory=dict)
    founder_age_limit: int = 0
    color: str = '#95A5A6'

    @property
    def is_consumer(self) -> bool:
        return self.behavior is Behavior.CONSUMER

    def preys_on(self, species_name: str) -> bool:
        return species_name in self.kill_probabilities


GRASS = SpeciesProfile(
    name='grass',
    behavior=Behavior.PRODUCER,
    breeding_age=0,
    breeding_probability=0.50,
    max_litter_size=10,
    creation_probability=0.5,
    founder_age_limit=10,
    color='#27AE60',
)

TREE = SpeciesProfile(
    name='tree',
    behavior=Behavior.PRODUCER,
    breeding_age=0,
    breeding_probability=0.20,
    max_litter_size=4,
    creation_probability=0.25,
    founder_age_limit=50,
    color='#2E86C1',
)

# Food value is the number of ticks a consumer survives between meals.
FIRE = SpeciesProfile(
    name='fire',
    behavior=Behavior.CONSUMER,
    breeding_age=0,
    breeding_probability=0.08,
    max_litter_size=2,
    creation_probability=0.5,
    max_age=150,
    food_value=8,
    kill_probabilities={'grass': 0.75, 'tree': 0.60},
    founder_age_limit=150,
    color='#E74C3C',
)

DEER = SpeciesProfile(
    name='deer',
    behavior=Behavior.CONSUMER,
    breeding_age=2,
    breeding_probability=0.12,
    max_litter_size=2,
    creation_probability=0.5,
    max_age=40,
    food_value=9,
    kill_probabilities={'grass': 0.80},
    founder_age_limit=40,
    color='#F39C12',
)

DEFAULT_SPECIES: Dict[str, SpeciesProfile] = {
    p.name: p for p in (GRASS, TREE, FIRE, DEER)
}

# Species passes run in this order every tick.
DEFAULT_ACT_ORDER = ('grass', 'tree', 'fire', 'deer')
# Bootstrap tries species in this order for each empty cell.
DEFAULT_POPULATE_ORDER = ('tree', 'grass', 'deer', 'fire')
