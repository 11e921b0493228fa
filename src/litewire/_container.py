from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, ClassVar

from ._entries import Autowired, Factory, Instance, classify
from ._injector import Injector


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class Container:
    """Minimal service container.

    - register instances, factories (eager or lazy) or autowired types under string keys
    - first registration of a key wins, later ones are ignored
    - lookups of unknown keys return None
    - map-style sugar: `c[key]`, `c[key] = value`, `key in c`, `del c[key]`

    The most recently constructed container is published process-wide and
    returned by `Container.instance()`.
    """

    _instance: ClassVar[Container | None] = None

    def __init__(self, initial: Mapping[str, Any] | None = None, *, injector: Injector | None = None) -> None:
        self._services: dict[str, Instance | Factory] = {}
        self._lock = threading.RLock()
        self._injector = injector or Injector()

        Container._instance = self

        for key, value in (initial or {}).items():
            self.set(key, value)

    @classmethod
    def instance(cls) -> Container | None:
        """Return the most recently constructed container (last writer wins)."""
        return Container._instance

    def set(
        self,
        key: str,
        value: object,
        extra_params: Mapping[str, Any] | None = None,
        *,
        lazy: bool = False,
    ) -> None:
        """Register a service under `key` unless the key is already taken.

        Example:
          container.set("config", Config())
          container.set("redis", lambda c: connect(c["config"].redis_url))
          container.set("validator", "myapp.auth.Validator", {"strict": True})
          container.set("replica", lambda c: connect(...), lazy=True)

        Classes and type-name strings are autowired right away, `extra_params`
        feeding their untyped constructor parameters. Factories get the
        container as their only argument; eager ones run now and their result
        is stored. Wrap a value in `Instance` to store it verbatim.
        """
        with self._lock:
            if key in self._services:
                logger.debug("Service %r is already registered; ignoring new registration", key)
                return

            entry = classify(value, extra_params, lazy=lazy)

            if isinstance(entry, Autowired):
                logger.debug("Autowiring service %r from %r", key, entry.target)
                entry = Instance(self._injector.inject(self, entry.target, entry.extra_params))
            elif isinstance(entry, Factory) and not entry.lazy:
                logger.debug("Evaluating factory for service %r", key)
                entry = Instance(entry.func(self))

            self._services[key] = entry

    def set_lazy(self, key: str, value: object, extra_params: Mapping[str, Any] | None = None) -> None:
        """Same as `set(..., lazy=True)`: a factory is evaluated on every lookup."""
        self.set(key, value, extra_params, lazy=True)

    def resolve(self, key: str) -> Any:
        """Return the service under `key`, or None when nothing is registered.

        Lazy factories are called with the container on each lookup; their
        results are not cached.
        """
        with self._lock:
            entry = self._services.get(key)
            if entry is None:
                return None
            if isinstance(entry, Factory):
                return entry.func(self)
            return entry.value

    def has(self, key: object) -> bool:
        with self._lock:
            return key in self._services

    def unset(self, key: str) -> None:
        """Remove `key` if registered; unknown keys are ignored."""
        with self._lock:
            self._services.pop(key, None)

    def is_lazy(self, key: str) -> bool:
        with self._lock:
            return isinstance(self._services.get(key), Factory)

    def __getitem__(self, key: str) -> Any:
        return self.resolve(key)

    def __setitem__(self, key: str, value: object) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __delitem__(self, key: str) -> None:
        self.unset(key)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._services))

    def __bool__(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)
