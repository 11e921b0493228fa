from __future__ import annotations

import builtins
import importlib
import inspect
import logging
import types
import typing
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, get_type_hints, overload

from ._errors import ConstructionFailed, TypeNotFound


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Mapping

    T = TypeVar("T")

_UNSET: Any = inspect.Parameter.empty

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


class ServiceLocator(Protocol):
    """Read side of a container, all the injector needs.

    A `Container` satisfies it, and so does a plain `dict`.
    """

    def __contains__(self, key: object, /) -> bool: ...

    def __getitem__(self, key: str, /) -> Any: ...


class Injector:
    """Constructor injection by signature inspection.

    Each constructor parameter is resolved, in declaration order, from:
    1. `extra_params` by name, when the parameter has no declared type
    2. the container entry named like the parameter, if it is an instance of the declared type
    3. the container entry named like the declared type (unchecked)
    4. a fresh, unregistered instance of the declared type, built recursively
    Anything left unresolved falls back to the parameter default.
    """

    @overload
    def inject(
        self, container: ServiceLocator, target: type[T], extra_params: Mapping[str, Any] | None = ...
    ) -> T: ...

    @overload
    def inject(
        self, container: ServiceLocator, target: str, extra_params: Mapping[str, Any] | None = ...
    ) -> object: ...

    def inject(
        self,
        container: ServiceLocator,
        target: type[T] | str,
        extra_params: Mapping[str, Any] | None = None,
    ) -> object:
        cls = locate_type(target) if isinstance(target, str) else target
        if not inspect.isclass(cls):
            raise TypeNotFound(repr(target), "not a class")

        try:
            sig = inspect.signature(cls)
        except (TypeError, ValueError) as e:
            # constructor inherited from a builtin that exposes no signature
            if "__init__" in cls.__dict__:
                raise TypeNotFound(cls.__qualname__, f"constructor cannot be introspected ({e})") from e
            sig = None

        params = [] if sig is None else [p for p in sig.parameters.values() if p.kind not in _VARIADIC]
        if not params:
            return self._instantiate(cls, [], {})

        extra_params = extra_params or {}
        hints = _get_init_type_hints(cls)

        resolved: dict[str, Any] = {}
        for p in params:
            value = self._resolve_param(container, cls, p, hints, extra_params)
            if value is not _UNSET:
                resolved[p.name] = value
            elif p.default is _UNSET:
                raise ConstructionFailed(cls.__qualname__, "no value could be resolved and no default", p.name)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for p in params:
            if p.kind is p.POSITIONAL_ONLY:
                # cannot skip a positional slot, so spell out the default
                args.append(resolved.get(p.name, p.default))
            elif p.name in resolved:
                kwargs[p.name] = resolved[p.name]

        return self._instantiate(cls, args, kwargs)

    def _resolve_param(
        self,
        container: ServiceLocator,
        cls: type,
        p: inspect.Parameter,
        hints: dict[str, Any],
        extra_params: Mapping[str, Any],
    ) -> Any:
        declared = _declared_type(hints.get(p.name, p.annotation))

        if declared is None:
            return extra_params.get(p.name, _UNSET)

        if p.name in container:
            value = container[p.name]
            if value is not None and isinstance(value, declared):
                logger.debug("%s.%s: using service %r", cls.__qualname__, p.name, p.name)
                return value
            logger.debug(
                "%s.%s: service %r is %s, not %s; trying by type",
                cls.__qualname__,
                p.name,
                p.name,
                type(value).__name__,
                declared.__name__,
            )

        type_key = declared.__name__
        if type_key in container:
            value = container[type_key]
            if value is not None:
                logger.debug("%s.%s: using service %r", cls.__qualname__, p.name, type_key)
                return value

        logger.debug("%s.%s: autowiring a new %s", cls.__qualname__, p.name, declared.__qualname__)
        return self.inject(container, declared)

    def _instantiate(self, cls: type[T], args: list[Any], kwargs: dict[str, Any]) -> T:
        try:
            return cls(*args, **kwargs)
        except RecursionError:
            raise
        except Exception as e:
            msg = f"constructor raised {type(e).__name__}: {e}"
            raise ConstructionFailed(cls.__qualname__, msg) from e


_default_injector = Injector()


def inject(
    container: ServiceLocator,
    target: type[T] | str,
    extra_params: Mapping[str, Any] | None = None,
) -> Any:
    """Build `target` with dependencies pulled from `container`. See `Injector`."""
    return _default_injector.inject(container, target, extra_params)


def locate_type(type_name: str) -> type:
    """Find a class by import path.

    Accepts `"package.module.Class"`, `"package.module:Outer.Inner"` or a bare
    builtin name such as `"dict"`.
    """
    if not type_name:
        raise TypeNotFound(type_name, "empty name")

    module_name, sep, attr_path = type_name.partition(":")
    if sep:
        module = _import_module(type_name, module_name)
        if module is None:
            raise TypeNotFound(type_name, f"no module named {module_name!r}")
        obj = _get_attr_path(type_name, module, attr_path.split("."))
    else:
        parts = type_name.split(".")
        if len(parts) == 1:
            obj = _get_attr_path(type_name, builtins, parts)
        else:
            obj = None
            for i in range(len(parts) - 1, 0, -1):
                module = _import_module(type_name, ".".join(parts[:i]))
                if module is not None:
                    obj = _get_attr_path(type_name, module, parts[i:])
                    break
            if obj is None:
                raise TypeNotFound(type_name, "no importable module prefix")

    if not inspect.isclass(obj):
        raise TypeNotFound(type_name, f"{type(obj).__name__} is not a class")
    return obj


def _import_module(type_name: str, module_name: str) -> types.ModuleType | None:
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        # only the module we asked for (or a parent of it) may be missing
        if e.name and (module_name == e.name or module_name.startswith(f"{e.name}.")):
            return None
        raise TypeNotFound(type_name, f"importing {module_name!r} failed ({e})") from e
    except ImportError as e:
        raise TypeNotFound(type_name, f"importing {module_name!r} failed ({e})") from e


def _get_attr_path(type_name: str, obj: object, attrs: list[str]) -> object:
    for attr in attrs:
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise TypeNotFound(type_name, f"no attribute {attr!r}") from e
    return obj


def _declared_type(annotation: object) -> type | None:
    """Return the injectable class an annotation names, if any.

    Builtin scalars, generics and multi-member unions are not injectable.
    `X | None` counts as `X`.
    """
    if annotation is _UNSET:
        return None

    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(members) != 1:
            return None
        annotation = members[0]
        origin = typing.get_origin(annotation)

    if origin is not None or not inspect.isclass(annotation):
        return None
    if getattr(annotation, "__module__", "") == "builtins":
        return None
    return annotation


def _get_init_type_hints(cls: type) -> dict[str, Any]:
    try:
        init = inspect.getattr_static(cls, "__init__")
        hints = get_type_hints(init)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s (%s) type hints", exc.name, cls.__name__, cls.__qualname__)
        hints = {}

    return hints
