"""Minimal dependency injection with constructor autowiring.

This package pairs a keyed service container with an injector that builds
objects by inspecting their constructor signatures. Parameters are filled from
the container (by parameter name, then by type name), from caller-supplied
values, or by recursively constructing a fresh instance.

Exports:
- `Container`: String-keyed service registry holding instances, eager or lazy
  factories and autowired types. First registration of a key wins.
- `Injector` / `inject`: Constructor injection against anything offering
  `in` and `[]` lookups (a `Container` or a plain `dict`).
- `Instance`, `Factory`, `Autowired`: Explicit registration variants, for when
  a value's kind should not be inferred (e.g. storing a literal string).
- `ResolutionError`, `TypeNotFound`, `ConstructionFailed`: Error taxonomy.
"""

from ._container import Container
from ._entries import Autowired, Factory, Instance
from ._errors import ConstructionFailed, ResolutionError, TypeNotFound
from ._injector import Injector, ServiceLocator, inject, locate_type


__all__ = [
    "Autowired",
    "ConstructionFailed",
    "Container",
    "Factory",
    "Injector",
    "Instance",
    "ResolutionError",
    "ServiceLocator",
    "TypeNotFound",
    "inject",
    "locate_type",
]
