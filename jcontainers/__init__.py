"""Reference-counted container objects with an autorelease queue, garbage collection, script reflection and a batch JSON validator."""

__version__ = "0.1.0"

__all__ = [
    "istring",
    "id_generator",
    "skse_api",
    "object_base",
    "object_registry",
    "autorelease_queue",
    "garbage_collector",
    "object_context",
    "json_validator",
    "reflection",
    "code_producer",
]