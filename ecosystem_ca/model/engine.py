"""Simulation engine for the ecosystem field."""

import logging
from collections import Counter
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from .agent import Creature
from .grid import Field
from .location import Location
from .randomizer import Randomizer
from .state import CreatureSnapshot, SimulationState
from .viability import PopulationViability

if TYPE_CHECKING:
    from ..config import SimulationConfig

logger = logging.getLogger(__name__)

DEFAULT_DEPTH = 12
DEFAULT_WIDTH = 12
LONG_RUN_STEPS = 4000

StepObserver = Callable[[int, Field], None]


class SimulationEngine:
    """
    Orchestrates the discrete-time simulation loop.

    Each tick runs one full pass per species in act order:
    1. Every creature of the species acts, collecting newborns
    2. Creatures that died are dropped (survivors form a new list)
    3. Newborns join the species, so they first act next tick

    A species pass finishes before the next one starts. Prey eaten by a
    later pass stay in their list, already off the field, until their own
    species' next pass drops them.
    """

    def __init__(self, config: "SimulationConfig",
                 rng: Optional[Randomizer] = None,
                 viability: Optional[Callable[[Field], bool]] = None):
        self.config = config
        self.current_step = 0
        self.rng = rng if rng is not None else Randomizer(config.seed)

        depth, width = config.grid.depth, config.grid.width
        if depth <= 0 or width <= 0:
            logger.warning(
                "Field dimensions must be greater than zero (got %dx%d); "
                "using defaults %dx%d", depth, width, DEFAULT_DEPTH, DEFAULT_WIDTH
            )
            depth, width = DEFAULT_DEPTH, DEFAULT_WIDTH
        self.field = Field(depth, width, self.rng)

        if viability is None:
            viability = PopulationViability(config.viability.min_species,
                                            config.viability.min_count)
        self.viability = viability

        # Species that only appear in populate_order still get a list
        self.species_names: List[str] = list(config.act_order)
        for name in config.populate_order:
            if name not in self.species_names:
                self.species_names.append(name)
        self.populations: Dict[str, List[Creature]] = {
            name: [] for name in self.species_names
        }

        self.births: Counter = Counter()
        self.deaths: Counter = Counter()  # (species, DeathCause) -> count
        self._observers: List[StepObserver] = []

        self.reset()

    def add_observer(self, observer: StepObserver) -> None:
        """Register a callback invoked with (step, field) after every reset and tick."""
        self._observers.append(observer)

    def _notify(self) -> None:
        for observer in self._observers:
            observer(self.current_step, self.field)

    def reset(self) -> SimulationState:
        """Clear everything and repopulate the field from scratch."""
        self.current_step = 0
        for population in self.populations.values():
            population.clear()
        self.births.clear()
        self.deaths.clear()
        self._populate()

        logger.info("Field %dx%d populated: %s", self.field.depth,
                    self.field.width, self.field.species_counts())
        self._notify()
        return self._create_state_snapshot()

    def _populate(self) -> None:
        """
        Visit every cell and try each species in populate order.

        Every species tried draws its own sample, so later species only see
        the cells earlier ones left and their effective density is lower
        than their creation probability.
        """
        self.field.clear_all()
        profiles = [self.config.species[name] for name in self.config.populate_order]
        for row in range(self.field.depth):
            for col in range(self.field.width):
                for profile in profiles:
                    if self.rng.random() <= profile.creation_probability:
                        creature = Creature(profile, self.field,
                                            Location(row, col), self.rng,
                                            founder=True)
                        self.populations[profile.name].append(creature)
                        break

    def step(self) -> SimulationState:
        """Execute one tick and return the resulting snapshot."""
        self.current_step += 1
        for name in self.config.act_order:
            self._run_species_pass(name)
        self._notify()
        return self._create_state_snapshot()

    def _run_species_pass(self, name: str) -> None:
        population = self.populations[name]
        newborns: List[Creature] = []
        survivors: List[Creature] = []

        for creature in population:
            creature.act(newborns, self.rng)
            if creature.alive:
                survivors.append(creature)
            else:
                self.deaths[(name, creature.cause_of_death)] += 1

        self.births[name] += len(newborns)
        survivors.extend(newborns)
        if population and not survivors:
            logger.debug("Step %d: %s went extinct", self.current_step, name)
        self.populations[name] = survivors

    def run(self, num_steps: int) -> int:
        """
        Run up to num_steps ticks, stopping early once the field is no
        longer viable. Viability is checked before each tick.

        Returns the number of ticks actually run.
        """
        completed = 0
        for _ in range(num_steps):
            if not self.is_viable():
                break
            self.step()
            completed += 1
        return completed

    def run_long_simulation(self) -> int:
        """Run for a reasonably long period."""
        return self.run(LONG_RUN_STEPS)

    def is_viable(self) -> bool:
        return self.viability(self.field)

    def is_finished(self) -> bool:
        """Check if simulation should terminate."""
        return (self.current_step >= self.config.max_steps or
                not self.is_viable())

    def population_counts(self) -> Dict[str, int]:
        """Live members of every species, read from the field."""
        counts = self.field.species_counts()
        return {name: counts.get(name, 0) for name in self.species_names}

    def snapshot(self) -> SimulationState:
        """Snapshot of the current tick without advancing."""
        return self._create_state_snapshot()

    def _create_state_snapshot(self) -> SimulationState:
        """Create immutable snapshot of current simulation state."""
        creatures = [
            CreatureSnapshot(
                creature_id=c.id,
                species=c.species,
                row=c.location.row,
                col=c.location.col,
                age=c.age,
                food_level=c.food_level
            )
            for c in self.field.occupants()
        ]

        populations = self.population_counts()
        total = sum(populations.values())
        total_cells = self.field.depth * self.field.width

        metrics = {
            'occupancy': total / total_cells if total_cells > 0 else 0,
            'total_population': total,
            'species_alive': sum(1 for n in populations.values() if n > 0),
            'births': sum(self.births.values()),
            'deaths': sum(self.deaths.values()),
        }

        return SimulationState(
            step=self.current_step,
            populations=populations,
            creatures=creatures,
            species_grid=self.field.species_grid(self.species_names),
            metrics=metrics
        )

    def deaths_by_cause(self) -> Dict[str, Dict[str, int]]:
        """Deaths so far, grouped as {species: {cause: count}}."""
        grouped: Dict[str, Dict[str, int]] = {name: {} for name in self.species_names}
        for (species, cause), count in self.deaths.items():
            grouped.setdefault(species, {})[cause.value] = count
        return grouped

    def get_summary(self) -> Dict:
        """Get summary statistics for the simulation."""
        return {
            'total_steps': self.current_step,
            'populations': self.population_counts(),
            'births': {name: self.births[name] for name in self.species_names},
            'deaths': self.deaths_by_cause(),
            'viable': self.is_viable(),
        }
