# jcontainers

The runtime machinery behind reference-counted container objects handed out
to a scripting host: owner counting, public handles, a queue that keeps new
objects alive for a short while, a garbage collector, descriptions of script
classes with generation of `.psc` script source, and a batch JSON validator.

## Modules

- `jcontainers.istring` — `IString`, a `str` that compares, orders and hashes
  without regard to letter case. Class and function names use it.
- `jcontainers.id_generator` — `IdGenerator(min_id, max_id)` hands out integer
  identifiers (by default `1` to `0x7FFFFFFE`) with `new_id()`, takes them back
  with `reuse_id(value)` (merging adjacent free ranges), and answers
  `is_free_id(value)` and `is_valid()`. `IdExhaustedError` is raised when no
  identifier is left.
- `jcontainers.object_base` — `ObjectBase`, the abstract base of every
  container. It keeps separate owner counts for other objects (`retain` /
  `release`), the user (`tes_retain` / `tes_release`), the call stack
  (`stack_retain` / `stack_release`, or the `stack_ref()` context manager) and
  the autorelease queue. `uid()` gives the object a public handle and, if no
  other object owns it, hands it to the queue; `public_id()` does the same
  without touching its lifetime. Subclasses implement `clear()`, `count()` and
  `nullify_objects()`, and may override `referenced_objects()` so the garbage
  collector can follow references. `CollectionType` names the container kinds.
- `jcontainers.object_registry` — `ObjectRegistry` tracks every live object and
  maps public handles to objects (`get_object`, `filter_objects`,
  `object_count`, `public_object_count`).
- `jcontainers.autorelease_queue` — `AutoreleaseQueue` owns objects for about
  ten seconds (five ticks of two seconds) and then releases them. While
  started, a background timer calls `tick()`; `tick()` may also be called
  directly and returns how many objects were released. `time_add` and
  `time_subtract` do the wrapping 32-bit tick arithmetic.
- `jcontainers.garbage_collector` — `collect(registry, aqueue)` finds objects
  not reachable from user-retained or queued roots, deletes unowned ones and
  clears those still owned by other garbage. It returns a `CollectionResult`
  with `garbage_total`, `part_of_graphs` and `root_count`.
- `jcontainers.object_context` — `ObjectContext` ties registry and queue
  together. `activity_stopped()` is a context manager that pauses the queue;
  `collect_garbage()` runs the collector; `clear_state()` forgets every object
  and resets registered `DependentContext`s; `post_load_initializations()`,
  `post_load_maintenance()` and `print_stats()` support loading and logging.
- `jcontainers.reflection` — `FunctionInfo`, `ClassInfo`, `PapyrusTextBlock`
  and `MetaRegistry` describe script classes and their native functions.
  `FunctionInfo.from_function` reads a function's annotations; `type_info`
  maps `None` to `void`, `bool` to `Bool`, `str` to `String`, `float` to
  `Float`, `int` to `Int`, `ObjectHandle` to `Int` (argument `object`), `Form`
  and `FormList`, and `list[T]` to `T[]` (argument `values`).
  `amalgamate_classes` gathers the stateful functions of many classes into one.
- `jcontainers.code_producer` — `function_to_string`, `produce_class_code`,
  `produce_class_to_file` and `produce_amalgamated_code_to_file` write script
  source from those descriptions.
- `jcontainers.skse_api` — a switchable host interface. `set_fake_api()`
  selects `FakeApi` (mods named `A` to `Z`, handle calls recorded);
  `set_silent_api()` selects `SilentApi`, which answers every call with an
  empty result. The module-level functions forward to the selected one.
- `jcontainers.json_validator` — the batch JSON validator described below.

## Installing

```
pip install .
```

## Example: objects

```python
from jcontainers.object_context import ObjectContext
from jcontainers.object_base import ObjectBase, CollectionType

class Bag(ObjectBase):
    def __init__(self):
        super().__init__(CollectionType.ARRAY)
        self.items = []

    def clear(self):
        self.items.clear()

    def count(self):
        return len(self.items)

    def nullify_objects(self):
        self.items.clear()

ctx = ObjectContext()
bag = Bag()
bag.set_context(ctx)
bag.register_self()
handle = bag.uid()            # exposes the object, queueing it briefly
assert ctx.get_object(handle) is bag
bag.tes_retain()              # the user now owns it
print(ctx.collect_garbage())  # 0 — it is still reachable
```

## Example: script source

```python
from jcontainers.reflection import ClassInfo, FunctionInfo, ObjectHandle
from jcontainers.code_producer import produce_class_code

def count(state, obj: ObjectHandle) -> int:
    return 0

cls = ClassInfo("JArray", comment="arrays")
cls.add_function(FunctionInfo.from_function(count, stateless=False,
                                            comment="number of items"))
print(produce_class_code(cls))
# ;/  arrays
# /;
# ScriptName JArray
#
# ;/  number of items
# /;
# Int function count(Int object) global native
```

## Validating JSON files

The package installs a command that checks JSON files, or every file under
the given directories, and reports each failure with its line and column:

```
jcontainers-validate path/to/file.json path/to/folder
```

Duplicate keys in an object, `NaN` and `Infinity`, and a top level that is
neither an array nor an object count as errors. A failing file that starts
with a UTF-8 byte-order mark gets a hint to re-save it without one. Files
that cannot be opened are skipped and not counted. The command ends with a
summary such as `1 errors found. 4 files total`; run without arguments, it
prints a short description of itself. The same checks are available as
`validate_file`, `validate_paths` and `iter_files`.

## What this package does not do

- It provides no concrete containers (arrays, maps, form maps): `ObjectBase`
  is abstract and is meant to be subclassed.
- It does not save or load object state; `post_load_initializations()` and
  `post_load_maintenance()` only act on objects already placed in the
  registry.
- It has no connection to a real game host: `skse_api` offers only the fake
  and silent implementations, and the reflection module describes functions
  without registering them with any script engine.

## Running the tests

```
pip install .[test]
pytest
```