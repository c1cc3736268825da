"""Configuration dataclasses and YAML loader for the ecosystem simulation."""

from dataclasses import dataclass, field, fields, replace
from typing import List, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.engine import DEFAULT_DEPTH, DEFAULT_WIDTH, LONG_RUN_STEPS
from .model.species import (
    Behavior,
    SpeciesProfile,
    DEFAULT_SPECIES,
    DEFAULT_ACT_ORDER,
    DEFAULT_POPULATE_ORDER,
)


@dataclass
class GridConfig:
    depth: int = DEFAULT_DEPTH
    width: int = DEFAULT_WIDTH


@dataclass
class ViabilityConfig:
    min_species: int = 2  # species that must survive for the run to go on
    min_count: int = 1    # members a species needs to count as surviving


@dataclass
class SimulationConfig:
    grid: GridConfig = field(default_factory=GridConfig)
    max_steps: int = LONG_RUN_STEPS
    species: Dict[str, SpeciesProfile] = field(
        default_factory=lambda: dict(DEFAULT_SPECIES))
    act_order: List[str] = field(default_factory=lambda: list(DEFAULT_ACT_ORDER))
    populate_order: List[str] = field(
        default_factory=lambda: list(DEFAULT_POPULATE_ORDER))
    viability: ViabilityConfig = field(default_factory=ViabilityConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    gif_every: int = 5
    quiet: bool = False
    seed: Optional[int] = None
    delay_ms: int = 0
    out_dir: Path = field(default_factory=lambda: Path("./output"))


_PROFILE_KEYS = {f.name for f in fields(SpeciesProfile)}


def _parse_species_profile(name: str, raw: Dict[str, Any]) -> SpeciesProfile:
    """Build one profile, starting from the built-in species of that name."""
    raw = dict(raw or {})
    unknown = set(raw) - _PROFILE_KEYS
    if unknown:
        raise ValueError(
            f"Unknown keys for species '{name}': {', '.join(sorted(unknown))}"
        )

    if 'behavior' in raw:
        try:
            raw['behavior'] = Behavior(raw['behavior'])
        except ValueError:
            raise ValueError(
                f"Unknown behavior for species '{name}': {raw['behavior']}"
            ) from None
    if 'kill_probabilities' in raw:
        raw['kill_probabilities'] = dict(raw['kill_probabilities'] or {})

    base = DEFAULT_SPECIES.get(name)
    if base is not None:
        return replace(base, **{k: v for k, v in raw.items() if k != 'name'})

    required = ('behavior', 'breeding_age', 'breeding_probability',
                'max_litter_size', 'creation_probability')
    missing = [k for k in required if k not in raw]
    if missing:
        raise ValueError(
            f"New species '{name}' is missing: {', '.join(missing)}"
        )
    raw['name'] = name
    return SpeciesProfile(**raw)


def _parse_species(species_raw: Dict[str, Dict]) -> Dict[str, SpeciesProfile]:
    """Merge YAML species overrides onto the built-in species."""
    species = dict(DEFAULT_SPECIES)
    for name, raw in (species_raw or {}).items():
        species[name] = _parse_species_profile(name, raw)
    return species


def validate_config(config: SimulationConfig) -> None:
    """Reject configurations the engine cannot run."""
    for order_name in ('act_order', 'populate_order'):
        for name in getattr(config, order_name):
            if name not in config.species:
                raise ValueError(f"{order_name} names unknown species: {name}")

    for profile in config.species.values():
        for prob_name in ('breeding_probability', 'creation_probability'):
            value = getattr(profile, prob_name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(
                    f"{profile.name}.{prob_name} must be in [0, 1], got {value}"
                )
        if profile.max_litter_size < 1:
            raise ValueError(f"{profile.name}.max_litter_size must be >= 1")
        for prey, prob in profile.kill_probabilities.items():
            if prey not in config.species:
                raise ValueError(f"{profile.name} preys on unknown species: {prey}")
            if not 0.0 <= prob <= 1.0:
                raise ValueError(
                    f"{profile.name} kill probability for {prey} must be in [0, 1]"
                )


def default_config() -> SimulationConfig:
    """Built-in parameters, no file needed."""
    return SimulationConfig()


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    grid_raw = raw.get('grid', {})
    grid = GridConfig(
        depth=grid_raw.get('depth', DEFAULT_DEPTH),
        width=grid_raw.get('width', DEFAULT_WIDTH)
    )

    sim_raw = raw.get('simulation', {})
    viability_raw = raw.get('viability', {})
    viability = ViabilityConfig(
        min_species=viability_raw.get('min_species', 2),
        min_count=viability_raw.get('min_count', 1)
    )

    # Parse export config (optional)
    export_raw = raw.get('export', {})

    config = SimulationConfig(
        grid=grid,
        max_steps=sim_raw.get('max_steps', LONG_RUN_STEPS),
        species=_parse_species(raw.get('species', {})),
        act_order=list(sim_raw.get('act_order', DEFAULT_ACT_ORDER)),
        populate_order=list(sim_raw.get('populate_order', DEFAULT_POPULATE_ORDER)),
        viability=viability,
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False),
        gif_every=export_raw.get('gif_every', 5),
        seed=sim_raw.get('seed'),
        delay_ms=sim_raw.get('delay_ms', 0)
    )
    validate_config(config)
    return config
