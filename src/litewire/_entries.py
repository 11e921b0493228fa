from __future__ import annotations

import dataclasses
import functools
import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@dataclass(frozen=True)
class Instance:
    """An already-constructed service, stored and returned as-is."""

    value: object


@dataclass(frozen=True)
class Factory:
    """A callable receiving the container.

    Eager factories run once at registration and are replaced by their result.
    Lazy factories are kept and invoked on every lookup.
    """

    func: Callable[[Any], object]
    lazy: bool = False


@dataclass(frozen=True)
class Autowired:
    """Construction instructions handed to the injector at registration time."""

    target: type | str
    extra_params: Mapping[str, Any] = field(default_factory=dict)


Entry = Union[Instance, Factory, Autowired]


def _is_factory(value: object) -> bool:
    return (
        inspect.isfunction(value)
        or inspect.ismethod(value)
        or inspect.isbuiltin(value)
        or isinstance(value, functools.partial)
    )


def classify(value: object, extra_params: Mapping[str, Any] | None = None, *, lazy: bool = False) -> Entry:
    """Turn a registration value into a tagged entry.

    - explicit `Instance` / `Factory` / `Autowired` are kept (`lazy` and
      `extra_params` only widen them)
    - classes and strings are autowired
    - functions, methods, builtins and partials are factories
    - anything else is an instance
    """
    if isinstance(value, Instance):
        return value

    if isinstance(value, Factory):
        return dataclasses.replace(value, lazy=True) if lazy and not value.lazy else value

    if isinstance(value, Autowired):
        if extra_params:
            return dataclasses.replace(value, extra_params={**extra_params, **value.extra_params})
        return value

    if inspect.isclass(value) or isinstance(value, str):
        return Autowired(value, dict(extra_params or {}))

    if _is_factory(value):
        return Factory(value, lazy=lazy)  # type: ignore[arg-type]

    return Instance(value)
