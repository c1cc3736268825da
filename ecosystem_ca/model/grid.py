"""Field management for the ecosystem simulation."""

from collections import Counter
from typing import Dict, Iterator, List, Optional, Sequence, TYPE_CHECKING
import numpy as np

from .location import Location
from .randomizer import Randomizer

if TYPE_CHECKING:
    from .agent import Creature


class Field:
    """
    Rectangular grid where each cell holds at most one creature.

    Occupancy is stored as creature ids in a dense array (0 = empty) with
    an id -> creature registry on the side. Indexing is [row, col].
    """

    # Moore neighbourhood, excluding the centre cell
    OFFSETS = [
        (-1, -1), (-1, 0), (-1, 1),
        (0, -1),           (0, 1),
        (1, -1),  (1, 0),  (1, 1)
    ]

    def __init__(self, depth: int, width: int, rng: Randomizer):
        self.depth = depth
        self.width = width
        self.rng = rng

        # Occupancy: 0 = empty, positive int = creature id
        self.occupancy = np.zeros((depth, width), dtype=np.int32)
        self._occupants: Dict[int, "Creature"] = {}
        self._next_id = 1

    def new_creature_id(self) -> int:
        """Hand out a fresh, never reused creature id."""
        creature_id = self._next_id
        self._next_id += 1
        return creature_id

    def in_bounds(self, location: Location) -> bool:
        return 0 <= location.row < self.depth and 0 <= location.col < self.width

    def _check_bounds(self, location: Location) -> None:
        if not self.in_bounds(location):
            raise ValueError(
                f"{location} is outside the {self.depth}x{self.width} field"
            )

    def place(self, creature: "Creature", location: Location) -> None:
        """
        Put a creature at location, overwriting whatever was recorded there.

        Callers clear the previous occupant first; an overwritten id is
        dropped from the registry so the cell maps to one creature only.
        """
        self._check_bounds(location)
        previous = int(self.occupancy[location.row, location.col])
        if previous:
            self._occupants.pop(previous, None)
        self.occupancy[location.row, location.col] = creature.id
        self._occupants[creature.id] = creature

    def clear(self, location: Location) -> None:
        """Empty a single cell. Clearing an empty cell does nothing."""
        self._check_bounds(location)
        creature_id = int(self.occupancy[location.row, location.col])
        if creature_id:
            self.occupancy[location.row, location.col] = 0
            self._occupants.pop(creature_id, None)

    def clear_all(self) -> None:
        """Empty the whole field."""
        self.occupancy.fill(0)
        self._occupants.clear()

    def get_occupant(self, location: Location) -> Optional["Creature"]:
        """Return the creature at location, or None."""
        self._check_bounds(location)
        creature_id = int(self.occupancy[location.row, location.col])
        if not creature_id:
            return None
        return self._occupants.get(creature_id)

    def adjacent_locations(self, location: Location) -> List[Location]:
        """In-bounds neighbours of location, in a fresh random order each call."""
        neighbors = []
        for dr, dc in self.OFFSETS:
            candidate = Location(location.row + dr, location.col + dc)
            if self.in_bounds(candidate):
                neighbors.append(candidate)
        return self.rng.shuffled(neighbors)

    def free_adjacent_locations(self, location: Location) -> List[Location]:
        """Empty neighbours in random order. The list is the caller's to consume."""
        return [
            loc for loc in self.adjacent_locations(location)
            if not self.occupancy[loc.row, loc.col]
        ]

    def free_adjacent_location(self, location: Location) -> Optional[Location]:
        """One empty neighbour, or None when every neighbour is taken."""
        for loc in self.adjacent_locations(location):
            if not self.occupancy[loc.row, loc.col]:
                return loc
        return None

    def occupants(self) -> Iterator["Creature"]:
        """Iterate over every creature currently on the field."""
        return iter(list(self._occupants.values()))

    def species_counts(self) -> Dict[str, int]:
        """Population of each species present on the field."""
        return dict(Counter(c.species for c in self._occupants.values()))

    def species_grid(self, species_order: Sequence[str]) -> np.ndarray:
        """
        Map each cell to a species code for rendering.

        0 = empty, i + 1 = species_order[i], -1 = species not in the order.
        """
        codes = {name: i + 1 for i, name in enumerate(species_order)}
        grid = np.zeros((self.depth, self.width), dtype=np.int8)
        rows, cols = np.nonzero(self.occupancy)
        for r, c in zip(rows, cols):
            creature = self._occupants[int(self.occupancy[r, c])]
            grid[r, c] = codes.get(creature.species, -1)
        return grid

    def __len__(self) -> int:
        return len(self._occupants)
