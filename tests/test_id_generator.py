import random

import pytest

from jcontainers.id_generator import IdExhaustedError, IdGenerator, Range


def test_range_hands_out_ids_in_order():
    rng = Range(3, 4)
    assert rng.new_id() == 3
    assert rng.new_id() == 4
    assert rng.empty()
    with pytest.raises(ValueError):
        rng.new_id()


def test_first_id_is_minimum():
    gen = IdGenerator(1, 200)
    assert gen.new_id() == 1
    assert gen.is_valid()


def test_random_allocation_and_reuse_has_no_duplicates():
    rnd = random.Random(1234)
    gen = IdGenerator(1, 200)
    ids = []
    for _ in range(100):
        for _ in range(50):
            new = gen.new_id()
            assert new not in ids
            assert 1 <= new <= 200
            ids.append(new)
            assert gen.is_valid()
        for _ in range(49):
            victim = ids.pop(rnd.randrange(len(ids)))
            gen.reuse_id(victim)
            assert gen.is_valid()
            assert gen.is_free_id(victim)


def test_exhaustion_raises():
    gen = IdGenerator(1, 3)
    taken = {gen.new_id() for _ in range(3)}
    assert taken == {1, 2, 3}
    with pytest.raises(IdExhaustedError):
        gen.new_id()


def test_reuse_after_exhaustion():
    gen = IdGenerator(1, 3)
    for _ in range(3):
        gen.new_id()
    gen.reuse_id(2)
    assert gen.is_valid()
    assert gen.new_id() == 2


def test_is_free_id():
    gen = IdGenerator(1, 5)
    taken = [gen.new_id() for _ in range(3)]
    for value in taken:
        assert not gen.is_free_id(value)
    assert gen.is_free_id(5)
    gen.reuse_id(taken[1])
    assert gen.is_free_id(taken[1])
    assert not gen.is_free_id(taken[0])


def test_reuse_merges_ranges():
    gen = IdGenerator(1, 5)
    taken = [gen.new_id() for _ in range(5)]
    for value in (1, 3, 2, 5, 4):
        gen.reuse_id(value)
        assert gen.is_valid()
    assert all(gen.is_free_id(v) for v in taken)
    again = {gen.new_id() for _ in range(5)}
    assert again == set(taken)


def test_clear_frees_everything():
    gen = IdGenerator(1, 10)
    values = [gen.new_id() for _ in range(4)]
    gen.clear()
    assert all(gen.is_free_id(v) for v in values)
    assert gen.new_id() == 1


def test_invalid_bounds():
    with pytest.raises(ValueError):
        IdGenerator(5, 1)