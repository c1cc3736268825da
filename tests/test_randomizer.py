from ecosystem_ca.model.randomizer import Randomizer


def draw_sequence(rng):
    return ([rng.random() for _ in range(5)],
            [rng.integers(10) for _ in range(5)],
            rng.shuffled(list(range(8))))


def test_reset_replays_the_same_sequence():
    rng = Randomizer(1111)
    first = draw_sequence(rng)
    rng.reset()
    assert draw_sequence(rng) == first


def test_same_seed_gives_same_sequence():
    assert draw_sequence(Randomizer(7)) == draw_sequence(Randomizer(7))


def test_draws_stay_in_range():
    rng = Randomizer(3)
    assert all(0.0 <= rng.random() < 1.0 for _ in range(100))
    assert all(0 <= rng.integers(4) < 4 for _ in range(100))
    items = ['a', 'b', 'c', 'd']
    shuffled = rng.shuffled(items)
    assert sorted(shuffled) == items
    assert items == ['a', 'b', 'c', 'd']
