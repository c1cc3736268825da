"""Creature implementation: the per-tick life cycle of every species."""

from enum import Enum
from typing import List, Optional

from .grid import Field
from .location import Location
from .randomizer import Randomizer
from .species import Behavior, SpeciesProfile


class DeathCause(Enum):
    """Why a creature left the field."""
    OLD_AGE = "old_age"
    STARVATION = "starvation"
    OVERCROWDING = "overcrowding"
    EATEN = "eaten"


class DeadCreatureError(RuntimeError):
    """Raised when a dead creature is asked where it is."""


class Creature:
    """
    A single grass, tree, fire or deer.

    Species differences live entirely in the SpeciesProfile; the profile's
    behavior picks one of two life cycles:

    Producer (grass, tree):
        age, breed, move to a free neighbour or die of overcrowding.

    Consumer (fire, deer):
        age (old-age death), hunger (starvation), breed, then move onto
        the first prey killed or else to a free neighbour, or die of
        overcrowding.

    While alive, the creature and the field point at each other: the
    creature keeps its location and the field's cell holds its id. Only
    move_to and set_dead change either side.
    """

    def __init__(self, profile: SpeciesProfile,
                 field: Field,
                 location: Location,
                 rng: Randomizer,
                 founder: bool = False):
        self.profile = profile
        self.id = field.new_creature_id()
        self.age = 0
        self.alive = True
        self.food_level = 0
        self.cause_of_death: Optional[DeathCause] = None
        self._field: Optional[Field] = field
        self._location: Optional[Location] = None
        self.move_to(location)

        if founder and profile.founder_age_limit > 0:
            self.age = rng.integers(profile.founder_age_limit)
        if profile.is_consumer and profile.food_value > 0:
            self.food_level = rng.integers(profile.food_value)

    @property
    def species(self) -> str:
        return self.profile.name

    @property
    def location(self) -> Location:
        """Current cell. Dead creatures have none."""
        if self._location is None:
            raise DeadCreatureError(f"{self!r} has no location")
        return self._location

    @property
    def field(self) -> Optional[Field]:
        return self._field

    @property
    def is_placed(self) -> bool:
        return self._location is not None

    def move_to(self, new_location: Location) -> None:
        """Vacate the current cell and occupy new_location."""
        if self._location is not None:
            self._field.clear(self._location)
        self._location = new_location
        self._field.place(self, new_location)

    def set_dead(self, cause: DeathCause) -> None:
        """
        Remove the creature from the field for good.

        Repeated calls are no-ops; the first cause is kept.
        """
        if not self.alive:
            return
        self.alive = False
        self.cause_of_death = cause
        if self._location is not None:
            self._field.clear(self._location)
            self._location = None
            self._field = None

    def act(self, newborns: List["Creature"], rng: Randomizer) -> None:
        """Run one tick. Offspring are appended to newborns, not placed in a population."""
        if self.profile.behavior is Behavior.CONSUMER:
            self._hunt(newborns, rng)
        else:
            self._grow(newborns, rng)

    def _grow(self, newborns: List["Creature"], rng: Randomizer) -> None:
        self.age += 1
        if not self.alive:
            return
        self._give_birth(newborns, rng)
        new_location = self._field.free_adjacent_location(self._location)
        if new_location is not None:
            self.move_to(new_location)
        else:
            self.set_dead(DeathCause.OVERCROWDING)

    def _hunt(self, newborns: List["Creature"], rng: Randomizer) -> None:
        self._increment_age()
        self._increment_hunger()
        if not self.alive:
            return
        self._give_birth(newborns, rng)
        # Food always wins over an empty cell
        new_location = self._find_food(rng)
        if new_location is None:
            new_location = self._field.free_adjacent_location(self._location)
        if new_location is not None:
            self.move_to(new_location)
        else:
            self.set_dead(DeathCause.OVERCROWDING)

    def _increment_age(self) -> None:
        self.age += 1
        max_age = self.profile.max_age
        if max_age is not None and self.age > max_age:
            self.set_dead(DeathCause.OLD_AGE)

    def _increment_hunger(self) -> None:
        self.food_level -= 1
        if self.food_level <= 0:
            self.set_dead(DeathCause.STARVATION)

    def _find_food(self, rng: Randomizer) -> Optional[Location]:
        """
        Scan neighbours in random order and eat the first prey that is
        successfully killed. Each live prey gets one kill roll.
        """
        for where in self._field.adjacent_locations(self._location):
            prey = self._field.get_occupant(where)
            if prey is None or not prey.alive:
                continue
            if not self.profile.preys_on(prey.species):
                continue
            if rng.random() <= self.profile.kill_probabilities[prey.species]:
                prey.set_dead(DeathCause.EATEN)
                self.food_level = self.profile.food_value
                return where
        return None

    def _give_birth(self, newborns: List["Creature"], rng: Randomizer) -> None:
        # Each free cell can take at most one newborn
        free = self._field.free_adjacent_locations(self._location)
        births = self._breed(rng)
        for _ in range(births):
            if not free:
                break
            young = Creature(self.profile, self._field, free.pop(0), rng)
            newborns.append(young)

    def _breed(self, rng: Randomizer) -> int:
        """Number of offspring this tick (may be zero)."""
        if self.age >= self.profile.breeding_age and \
                rng.random() <= self.profile.breeding_probability:
            return rng.integers(self.profile.max_litter_size) + 1
        return 0

    def __repr__(self) -> str:
        where = self._location if self._location is not None else "dead"
        return (f"Creature(id={self.id}, species={self.species}, "
                f"age={self.age}, at={where})")
