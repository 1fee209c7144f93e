import time

from jcontainers.autorelease_queue import (
    OBJ_LIFE_IN_TICKS,
    TIME_MAX,
    AutoreleaseQueue,
    time_add,
    time_subtract,
)
from jcontainers.object_base import CollectionType, ObjectBase
from jcontainers.object_registry import ObjectRegistry

HOUR = 3600


class Item(ObjectBase):
    def __init__(self):
        super().__init__(CollectionType.ARRAY)

    def clear(self):
        pass

    def count(self):
        return 0

    def nullify_objects(self):
        pass


class Context:
    def __init__(self, registry, aqueue):
        self.registry = registry
        self.aqueue = aqueue


def quiet(registry, aqueue):
    aqueue.stop()
    return Context(registry, aqueue)


def make_item(context):
    obj = Item()
    obj.set_context(context)
    obj.register_self()
    return obj


def test_time_wrapping():
    assert time_add(TIME_MAX, 1) == 1
    assert time_add(TIME_MAX, 0) == 0
    assert time_add(TIME_MAX, TIME_MAX) == TIME_MAX
    assert time_add(TIME_MAX, 10) == 10
    assert time_subtract(0, 1) == TIME_MAX - 1
    assert time_subtract(10, 20) == TIME_MAX - 10


def test_time_inversivity():
    a, b = 40, 20
    c = time_subtract(b, a)
    assert time_add(a, c) == b
    assert time_subtract(b, c) == a

    a, b = 8, 9
    c = time_add(a, b)
    assert time_subtract(c, b) == a
    assert time_subtract(c, a) == b


def test_private_object_released_on_first_tick():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    ctx = quiet(registry, aqueue)
    obj = make_item(ctx)
    aqueue.prolong_lifetime(obj, False)
    assert aqueue.count() == 1
    assert obj.is_in_aqueue()

    assert aqueue.tick() == 1
    assert aqueue.count() == 0
    assert registry.object_count() == 0


def test_public_object_lives_full_lifetime():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    ctx = quiet(registry, aqueue)
    obj = make_item(ctx)
    aqueue.prolong_lifetime(obj, True)
    for _ in range(OBJ_LIFE_IN_TICKS - 1):
        assert aqueue.tick() == 0
    assert registry.object_count() == 1
    assert aqueue.tick() == 1
    assert registry.object_count() == 0


def test_owned_object_survives_release():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    ctx = quiet(registry, aqueue)
    obj = make_item(ctx)
    obj.retain()
    aqueue.prolong_lifetime(obj, False)
    aqueue.tick()
    assert not obj.is_in_aqueue()
    assert obj in registry.all_objects()
    assert obj.ref_count() == 1


def test_not_prolong_lifetime_expires_object():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    ctx = quiet(registry, aqueue)
    obj = make_item(ctx)
    aqueue.prolong_lifetime(obj, True)
    aqueue.not_prolong_lifetime(obj)
    assert aqueue.tick() == 1
    assert registry.object_count() == 0


def test_prolong_twice_does_not_duplicate():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    ctx = quiet(registry, aqueue)
    obj = make_item(ctx)
    aqueue.prolong_lifetime(obj, True)
    aqueue.prolong_lifetime(obj, True)
    assert aqueue.count() == 1
    assert aqueue.queue == (obj,)


def test_lifetime_diff_counts_ticks():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    quiet(registry, aqueue)
    ticks = 3
    for _ in range(ticks):
        aqueue.tick()
    assert aqueue.tick_counter == ticks
    assert aqueue.lifetime_diff(0) == ticks


def test_clear_releases_and_resets():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    ctx = quiet(registry, aqueue)
    obj = make_item(ctx)
    aqueue.prolong_lifetime(obj, True)
    aqueue.tick()
    aqueue.clear()
    assert aqueue.count() == 0
    assert aqueue.tick_counter == 0
    assert registry.object_count() == 0


def test_nullify_then_clear_does_not_release():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    ctx = quiet(registry, aqueue)
    obj = make_item(ctx)
    aqueue.prolong_lifetime(obj, False)
    aqueue.nullify()
    aqueue.clear()
    assert aqueue.count() == 0
    assert obj in registry.all_objects()
    assert obj.is_in_aqueue()


def test_stop_and_start_toggle_running():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, HOUR)
    try:
        aqueue.stop()
        assert aqueue.running is False
        aqueue.start()
        assert aqueue.running is True
        aqueue.stop()
        assert aqueue.running is False
    finally:
        aqueue.stop()


def test_timer_releases_objects():
    registry = ObjectRegistry()
    aqueue = AutoreleaseQueue(registry, 0.01)
    try:
        obj = make_item(Context(registry, aqueue))
        aqueue.prolong_lifetime(obj, False)
        deadline = time.monotonic() + 5
        while aqueue.count() and time.monotonic() < deadline:
            time.sleep(0.01)
        assert aqueue.count() == 0
        assert registry.object_count() == 0
    finally:
        aqueue.stop()