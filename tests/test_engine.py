import logging
from dataclasses import replace

import numpy as np

from ecosystem_ca.model.agent import Creature, DeathCause
from ecosystem_ca.model.engine import (
    DEFAULT_DEPTH, DEFAULT_WIDTH, LONG_RUN_STEPS, SimulationEngine,
)
from ecosystem_ca.model.grid import Field
from ecosystem_ca.model.location import Location
from ecosystem_ca.model.randomizer import Randomizer
from ecosystem_ca.model.species import DEER, FIRE, GRASS, TREE
from ecosystem_ca.model.viability import PopulationViability

from conftest import make_config, put


def assert_field_consistent(engine):
    field = engine.field
    ids = field.occupancy[field.occupancy != 0]
    assert len(ids) == len(set(ids.tolist())) == len(field)
    for population in engine.populations.values():
        for creature in population:
            if creature.alive:
                assert field.get_occupant(creature.location) is creature
            else:
                assert not creature.is_placed
                assert creature.field is None


def test_field_stays_consistent_every_tick():
    engine = SimulationEngine(make_config(depth=15, width=15, seed=7),
                              viability=lambda field: True)
    assert_field_consistent(engine)
    for _ in range(40):
        engine.step()
        assert_field_consistent(engine)


def test_reset_is_reproducible_for_a_seed():
    first = SimulationEngine(make_config(seed=42))
    second = SimulationEngine(make_config(seed=42))
    np.testing.assert_array_equal(first.snapshot().species_grid,
                                  second.snapshot().species_grid)
    assert first.population_counts() == second.population_counts()

    first.step()
    second.step()
    np.testing.assert_array_equal(first.field.occupancy, second.field.occupancy)


def test_reset_repopulates_from_scratch():
    engine = SimulationEngine(make_config(seed=3), viability=lambda f: True)
    engine.run(5)
    state = engine.reset()
    assert engine.current_step == 0
    assert state.step == 0
    assert engine.births == {} and engine.deaths == {}
    assert all(c.alive for pop in engine.populations.values() for c in pop)
    assert sum(len(p) for p in engine.populations.values()) == len(engine.field)


def test_invalid_dimensions_fall_back_to_defaults(caplog):
    config = make_config(depth=0, width=-4)
    with caplog.at_level(logging.WARNING, logger='ecosystem_ca.model.engine'):
        engine = SimulationEngine(config)
    assert (engine.field.depth, engine.field.width) == (DEFAULT_DEPTH, DEFAULT_WIDTH)
    assert "greater than zero" in caplog.text


def test_populate_tries_species_in_order():
    all_trees = make_config(depth=4, width=4,
                            species={'tree': replace(TREE, creation_probability=1.0)})
    engine = SimulationEngine(all_trees)
    assert engine.population_counts()['tree'] == 16

    only_grass = make_config(depth=4, width=4, species={
        'tree': replace(TREE, creation_probability=0.0),
        'grass': replace(GRASS, creation_probability=1.0),
    })
    engine = SimulationEngine(only_grass)
    assert engine.population_counts() == {'grass': 16, 'tree': 0, 'fire': 0, 'deer': 0}


def test_populate_founders_are_marked_as_founders():
    config = make_config(depth=8, width=8, seed=11, species={
        'tree': replace(TREE, creation_probability=0.0),
        'grass': replace(GRASS, creation_probability=0.0),
        'deer': replace(DEER, creation_probability=1.0),
    })
    engine = SimulationEngine(config)
    ages = [d.age for d in engine.populations['deer']]
    assert len(ages) == 64
    assert max(ages) > 0


def test_empty_field_when_nothing_is_created():
    config = make_config(species={
        name: replace(p, creation_probability=0.0)
        for name, p in make_config().species.items()
    })
    engine = SimulationEngine(config)
    assert len(engine.field) == 0
    assert not engine.is_viable()


def grass_only_config(seed=5):
    return make_config(depth=10, width=10, seed=seed,
                       species={'grass': replace(GRASS, creation_probability=0.3)},
                       act_order=['grass'], populate_order=['grass'])


def test_newborns_do_not_act_in_their_birth_tick():
    engine = SimulationEngine(grass_only_config(), viability=lambda f: True)
    before = len(engine.populations['grass'])
    engine.step()

    grasses = engine.populations['grass']
    born = engine.births['grass']
    died = engine.deaths[('grass', DeathCause.OVERCROWDING)]
    assert born > 0
    assert len(grasses) == before - died + born
    # Every creature that acted aged to at least 1
    assert sum(1 for g in grasses if g.age == 0) == born
    assert all(g.alive for g in grasses)


def test_run_checks_viability_before_each_tick():
    calls = []

    def viable_three_times(field):
        calls.append(field)
        return len(calls) <= 3

    engine = SimulationEngine(make_config(seed=1), viability=viable_three_times)
    assert engine.run(10) == 3
    assert engine.current_step == 3
    assert len(calls) == 4


def test_run_does_nothing_when_not_viable():
    engine = SimulationEngine(make_config(seed=1), viability=lambda f: False)
    assert engine.run(10) == 0
    assert engine.current_step == 0


def test_run_honours_step_count():
    engine = SimulationEngine(make_config(seed=2), viability=lambda f: True)
    assert engine.run(6) == 6
    assert engine.current_step == 6


def test_observers_receive_step_and_field():
    engine = SimulationEngine(make_config(seed=9), viability=lambda f: True)
    seen = []
    engine.add_observer(lambda step, field: seen.append((step, field)))
    engine.run(3)
    engine.reset()
    assert [s for s, _ in seen] == [1, 2, 3, 0]
    assert all(f is engine.field for _, f in seen)


def test_snapshot_reports_every_species():
    engine = SimulationEngine(make_config(seed=4))
    state = engine.step()
    assert list(state.populations) == ['grass', 'tree', 'fire', 'deer']
    assert state.total_population == len(engine.field)
    assert len(state.creatures) == len(engine.field)
    assert state.species_grid.shape == (10, 10)
    assert state.metrics['total_population'] == len(engine.field)
    rows = state.to_csv_rows()
    assert {r['species'] for r in rows} == set(state.populations)


def test_eaten_prey_dropped_on_next_pass():
    # Fire acts after grass, so grass it eats leaves the list a tick later
    rng = Randomizer(0)
    config = make_config(depth=3, width=3, species={
        'fire': replace(FIRE, breeding_age=10 ** 6, kill_probabilities={'grass': 1.0}),
        'grass': replace(GRASS, breeding_age=10 ** 6),
    })
    for name in ('tree', 'deer', 'grass', 'fire'):
        config.species[name] = replace(config.species[name], creation_probability=0.0)
    engine = SimulationEngine(config, rng=rng, viability=lambda f: True)

    grass = Creature(config.species['grass'], engine.field, Location(0, 0), rng)
    fire = Creature(config.species['fire'], engine.field, Location(2, 2), rng)
    fire.food_level = 1000
    engine.populations['grass'].append(grass)
    engine.populations['fire'].append(fire)

    # Both move every tick; the fire eats the grass once they are adjacent
    for _ in range(20):
        engine.step()
        if not grass.alive:
            break
    assert not grass.alive
    assert grass in engine.populations['grass']
    engine.step()
    assert grass not in engine.populations['grass']
    assert engine.deaths[('grass', DeathCause.EATEN)] == 1


def test_summary_groups_deaths_by_cause():
    engine = SimulationEngine(make_config(seed=8), viability=lambda f: True)
    engine.run(20)
    summary = engine.get_summary()
    assert summary['total_steps'] == 20
    assert set(summary['deaths']) == {'grass', 'tree', 'fire', 'deer'}
    total = sum(n for causes in summary['deaths'].values() for n in causes.values())
    assert total == sum(engine.deaths.values())
    assert set(summary['births']) == {'grass', 'tree', 'fire', 'deer'}


def test_is_finished_at_max_steps():
    config = make_config(seed=6, max_steps=2)
    engine = SimulationEngine(config, viability=lambda f: True)
    assert not engine.is_finished()
    engine.step()
    engine.step()
    assert engine.is_finished()


def test_population_viability_counts_species(rng):
    field = Field(3, 3, rng)
    viability = PopulationViability(min_species=2)
    put(GRASS, field, 0, 0, rng)
    assert not viability(field)
    put(TREE, field, 2, 2, rng)
    assert viability(field)
    assert not PopulationViability(min_species=2, min_count=2)(field)


def empty_config():
    config = make_config(depth=3, width=3)
    for name, profile in config.species.items():
        config.species[name] = replace(profile, creation_probability=0.0)
    return config


def test_long_simulation_runs_full_length_while_viable():
    engine = SimulationEngine(empty_config(), viability=lambda f: True)
    assert engine.run_long_simulation() == LONG_RUN_STEPS
    assert engine.current_step == LONG_RUN_STEPS


def test_long_simulation_stops_when_viability_fails():
    checks = []

    def viable_until_tick_seven(field):
        checks.append(field)
        return len(checks) <= 7

    engine = SimulationEngine(empty_config(), viability=viable_until_tick_seven)
    assert engine.run_long_simulation() == 7
    assert engine.current_step == 7
