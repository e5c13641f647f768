from __future__ import annotations

import random

import pytest

from microgames.catalog import Catalog
from microgames.errors import ConfigurationError
from microgames.sequencer import ShuffleSequencer


@pytest.mark.parametrize("n", [1, 2, 3, 7])
def test_full_cycle_yields_each_microgame_once(make_catalog, n: int) -> None:
    catalog = make_catalog(*[(f"g{i}", 3.0) for i in range(n)])
    seq = ShuffleSequencer(catalog, rng=random.Random(n))
    seq.reshuffle()
    assert seq.cycle == 1

    picked = [seq.next().id for _ in range(n)]
    assert sorted(picked) == sorted(d.id for d in catalog)

    # Exhausting the cycle draws a new permutation before the next pick.
    assert seq.cycle == 2
    assert seq.cursor == 0
    nxt = seq.next()
    assert nxt in catalog.microgames


def test_cursor_stays_in_range(make_catalog) -> None:
    catalog = make_catalog(("a", 3.0), ("b", 3.0), ("c", 3.0))
    seq = ShuffleSequencer(catalog, seed=3)
    seq.reshuffle()
    for _ in range(20):
        seq.advance()
        assert 0 <= seq.cursor < len(catalog)
        assert sorted(seq.order) == [0, 1, 2]


def test_seeded_sequencers_agree(make_catalog) -> None:
    catalog = make_catalog(*[(f"g{i}", 3.0) for i in range(6)])
    a = ShuffleSequencer(catalog, seed=99)
    b = ShuffleSequencer(catalog, rng=random.Random(99))
    a.reshuffle()
    b.reshuffle()
    assert [a.next().id for _ in range(12)] == [b.next().id for _ in range(12)]


def test_fisher_yates_order_matches_reference_swaps(make_catalog) -> None:
    catalog = make_catalog(*[(f"g{i}", 3.0) for i in range(5)])
    seq = ShuffleSequencer(catalog, rng=random.Random(42))
    seq.reshuffle()

    ref_rng = random.Random(42)
    expected = list(range(5))
    for i in range(5):
        j = ref_rng.randint(i, 4)
        expected[i], expected[j] = expected[j], expected[i]

    assert seq.order == tuple(expected)


def test_shuffle_is_roughly_uniform(make_catalog) -> None:
    catalog = make_catalog(("a", 3.0), ("b", 3.0), ("c", 3.0))
    seq = ShuffleSequencer(catalog, seed=2024)
    counts: dict[tuple[int, ...], int] = {}
    for _ in range(6000):
        seq.reshuffle()
        counts[seq.order] = counts.get(seq.order, 0) + 1

    assert len(counts) == 6
    for c in counts.values():
        assert 800 < c < 1200


def test_advance_returns_new_current(make_catalog) -> None:
    catalog = make_catalog(("a", 3.0), ("b", 3.0))
    seq = ShuffleSequencer(catalog, seed=5)
    seq.reshuffle()
    first = seq.current()
    second = seq.advance()
    assert {first.id, second.id} == {"a", "b"}
    assert seq.current() == second


def test_empty_catalog_cannot_be_shuffled() -> None:
    seq = ShuffleSequencer(Catalog.from_descriptors([]))
    with pytest.raises(ConfigurationError):
        seq.reshuffle()
    with pytest.raises(ConfigurationError):
        seq.next()


def test_rng_and_seed_are_exclusive(make_catalog) -> None:
    with pytest.raises(ValueError):
        ShuffleSequencer(make_catalog(("a", 3.0)), rng=random.Random(1), seed=1)
