"""Lazily loaded, deduplicated asynchronous values (e.g. code-split views)."""

import asyncio
import importlib
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ResourceState(Enum):
    """Lifecycle of a Resource. Transitions only move forward."""

    UNREQUESTED = "UNREQUESTED"
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"

    def __repr__(self) -> str:
        return str(self.value)


class NotReady(Exception):  # noqa: N818  - it's a signal, not a failure
    """Raised by Resource.get() before the value has resolved.

    `future` is the in-flight load to await, or None if load() was never called.
    """

    def __init__(self, resource: Resource[Any], future: asyncio.Future[Any] | None):
        self.resource = resource
        self.future = future
        super().__init__(f"{resource.name} is {resource.state.value.lower()}")


class Resource[T]:
    """Memoized handle to a value produced by a single asynchronous fetch.

    load() starts the fetch on the running event loop the first time it is
    called and returns the same future on every later call, so concurrent
    requests share one fetch. get() never waits: it returns the value, re-raises
    the fetch's failure, or raises NotReady.
    """

    __slots__ = ("_future", "_loader", "_state", "_value", "name")

    def __init__(
        self, loader: Callable[[], Awaitable[T]], *, name: str | None = None
    ) -> None:
        self._loader = loader
        self._future: asyncio.Future[T] | None = None
        self._state = ResourceState.UNREQUESTED
        self._value: T | None = None
        self.name = name if name is not None else _qualname(loader)

    @classmethod
    def lazy_import(cls, module: str, attr: str | None = None) -> Resource[Any]:
        """Resource that imports `module` (and optionally reads `attr`) off-loop."""

        async def loader() -> Any:  # noqa: ANN401
            loaded = await asyncio.to_thread(importlib.import_module, module)
            return loaded if attr is None else getattr(loaded, attr)

        return cls(loader, name=module if attr is None else f"{module}:{attr}")

    def __repr__(self) -> str:
        return f"Resource({self.name!r}, state={self._state!r})"

    @property
    def state(self) -> ResourceState:
        return self._state

    def load(self) -> asyncio.Future[T]:
        if self._future is None:
            self._future = asyncio.ensure_future(self._loader())
            self._state = ResourceState.PENDING
            self._future.add_done_callback(self._on_done)
            logger.debug("resource.load: %s", self.name)
        return self._future

    def get(self) -> T:
        if self._state is ResourceState.RESOLVED:
            return self._value  # ty: ignore[invalid-return-type]
        if self._future is not None and self._future.done():
            return self._future.result()
        raise NotReady(self, self._future)

    def _on_done(self, future: asyncio.Future[T]) -> None:
        if future.cancelled():
            logger.debug("resource.cancelled: %s", self.name)
            return
        exc = future.exception()
        if exc is not None:
            # stays PENDING, the failure is re-raised by get() and the future
            logger.debug("resource.failed: %s", self.name, exc_info=exc)
            return
        self._value = future.result()
        self._state = ResourceState.RESOLVED
        logger.debug("resource.resolved: %s", self.name)


def _qualname(obj: object) -> str:
    return str(obj.__qualname__) if hasattr(obj, "__qualname__") else repr(obj)
