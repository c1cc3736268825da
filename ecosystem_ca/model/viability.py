"""Continuation check for the simulation loop."""

from .grid import Field


class PopulationViability:
    """
    A run is viable while at least min_species species each have at
    least min_count members on the field.
    """

    def __init__(self, min_species: int = 2, min_count: int = 1):
        self.min_species = min_species
        self.min_count = min_count

    def __call__(self, field: Field) -> bool:
        counts = field.species_counts()
        surviving = sum(1 for n in counts.values() if n >= self.min_count)
        return surviving >= self.min_species

    def __repr__(self) -> str:
        return (f"PopulationViability(min_species={self.min_species}, "
                f"min_count={self.min_count})")
