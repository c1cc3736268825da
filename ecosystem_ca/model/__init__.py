"""Model package for the ecosystem simulation."""

from .location import Location
from .randomizer import Randomizer
from .species import Behavior, SpeciesProfile, DEFAULT_SPECIES
from .grid import Field
from .agent import Creature, DeathCause, DeadCreatureError
from .viability import PopulationViability
from .state import CreatureSnapshot, SimulationState
from .engine import SimulationEngine

__all__ = [
    'Location',
    'Randomizer',
    'Behavior',
    'SpeciesProfile',
    'DEFAULT_SPECIES',
    'Field',
    'Creature',
    'DeathCause',
    'DeadCreatureError',
    'PopulationViability',
    'CreatureSnapshot',
    'SimulationState',
    'SimulationEngine',
]
