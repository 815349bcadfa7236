"""Router that prepares code and data for a location before it is rendered.

The router watches the history for location changes, matches the new
location against the route tree, starts loading every matched element and
calls each route's prepare() with its params, and only then publishes the
new snapshot to subscribers. Loading therefore happens outside of, and
before, rendering.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from preroute.cache import PatternCache
from preroute.history import History, Location, MemoryHistory, Update
from preroute.matching import Branch, Match, match_one, match_routes
from preroute.resource import Resource, ResourceState
from preroute.routes import Route

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Entry:
    """A matched route with its element requested and its data prepared.

    `element` may still be loading and `prepared` may be a pending task.
    """

    element: Resource[Any] | None
    prepared: Any
    route_data: Match


@dataclass(frozen=True, slots=True)
class Snapshot:
    location: Location
    entries: tuple[Entry, ...]


type Subscriber = Callable[[Snapshot], None]


class Router:
    """Owns the current snapshot and the subscribers to it.

    All methods must be called from the thread running the event loop that
    element loads and prepare() coroutines are scheduled on.
    """

    __slots__ = (
        "_cache",
        "_current",
        "_next_id",
        "_routes",
        "_subscribers",
        "_tasks",
        "_unlisten",
        "history",
    )
    _current: Snapshot
    _subscribers: dict[int, Subscriber]
    _tasks: set[asyncio.Future[Any]]
    _unlisten: Callable[[], None] | None

    def __init__(
        self,
        routes: Sequence[Route],
        history: History,
        *,
        cache: PatternCache | None = None,
    ) -> None:
        self._routes = tuple(routes)
        self._cache = cache if cache is not None else PatternCache()
        self._subscribers = {}
        self._next_id = 0
        self._tasks = set()
        self.history = history

        location = history.location
        self._current = Snapshot(
            location=location,
            entries=self._prepare_matches(
                match_one(self._routes, location.pathname, cache=self._cache)
            ),
        )
        self._unlisten = history.listen(self._on_location_changed)

    @property
    def pending(self) -> frozenset[asyncio.Future[Any]]:
        """prepare() tasks that have not finished yet."""
        return frozenset(self._tasks)

    def get(self) -> Snapshot:
        """Returns the current snapshot. Do not mutate it."""
        return self._current

    def preload(self, pathname: str) -> None:
        """Starts loading the code and data for pathname without navigating."""
        branches = match_routes(self._routes, pathname, cache=self._cache)
        logger.debug("router.preload: %s (%d branches)", pathname, len(branches))
        self._prepare_matches(branches)

    def preload_code(self, pathname: str) -> None:
        """Starts loading only the elements for pathname, skipping prepare()."""
        branches = match_routes(self._routes, pathname, cache=self._cache)
        logger.debug("router.preload_code: %s (%d branches)", pathname, len(branches))
        for branch in branches:
            if branch.route.element is not None:
                branch.route.element.load()

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Registers subscriber for new snapshots. Returns an idempotent disposer."""
        subscriber_id = self._next_id
        self._next_id += 1
        self._subscribers[subscriber_id] = subscriber

        def dispose() -> None:
            self._subscribers.pop(subscriber_id, None)

        return dispose

    def close(self) -> None:
        """Stops listening to the history. get() keeps returning the last snapshot."""
        if self._unlisten is not None:
            self._unlisten()
            self._unlisten = None

    def _on_location_changed(self, update: Update) -> None:
        location = update.location
        # query string and hash changes don't rematch
        if location.pathname == self._current.location.pathname:
            return

        branches = match_one(self._routes, location.pathname, cache=self._cache)
        snapshot = Snapshot(location=location, entries=self._prepare_matches(branches))
        self._current = snapshot
        logger.debug(
            "router.navigate: %s %s (%d entries)",
            update.action.value,
            location.pathname,
            len(snapshot.entries),
        )
        for subscriber in list(self._subscribers.values()):
            subscriber(snapshot)

    def _prepare_matches(self, branches: Sequence[Branch]) -> tuple[Entry, ...]:
        entries: list[Entry] = []
        for branch in branches:
            route = branch.route
            prepared = None
            if route.prepare is not None:
                prepared = self._track(route.prepare(branch.match.params))
            element = route.element
            if element is not None and element.state is ResourceState.UNREQUESTED:
                element.load()  # eagerly load
            entries.append(
                Entry(element=element, prepared=prepared, route_data=branch.match)
            )
        return tuple(entries)

    def _track(self, prepared: Any) -> Any:  # noqa: ANN401
        """Schedules coroutines from prepare() without awaiting them.

        Tasks are never cancelled; ones started for a location that has since
        been left still run to completion.
        """
        if not inspect.iscoroutine(prepared):
            return prepared
        task = asyncio.ensure_future(prepared)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task


def create_router(
    routes: Sequence[Route],
    history: History | None = None,
    *,
    cache: PatternCache | None = None,
) -> tuple[Router, Callable[[], None]]:
    """Creates a router and the function that stops it listening to history.

    Raises NoMatchError if the history's current location matches no route.
    """
    router = Router(
        routes,
        history if history is not None else MemoryHistory(),
        cache=cache,
    )
    return router, router.close
