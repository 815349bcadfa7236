"""Navigation history interface and an in-memory implementation."""

import logging
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol
from urllib.parse import urljoin, urlsplit

logger = logging.getLogger(__name__)


class Action(Enum):
    POP = "POP"  # Moved through the stack (back/forward/go).
    PUSH = "PUSH"  # Added a new entry.
    REPLACE = "REPLACE"  # Replaced the current entry.

    def __repr__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Location:
    pathname: str = "/"
    search: str = ""  # including leading "?"
    hash: str = ""  # including leading "#"
    state: Any = None
    key: str = "default"

    @classmethod
    def from_path(
        cls,
        path: str,
        state: Any = None,  # noqa: ANN401
        key: str = "default",
    ) -> Location:
        parts = urlsplit(path)
        return cls(
            pathname=parts.path or "/",
            search=f"?{parts.query}" if parts.query else "",
            hash=f"#{parts.fragment}" if parts.fragment else "",
            state=state,
            key=key,
        )

    @property
    def path(self) -> str:
        return self.pathname + self.search + self.hash


@dataclass(frozen=True, slots=True)
class Update:
    action: Action
    location: Location


type Listener = Callable[[Update], None]


class History(Protocol):
    """What the router needs from a navigation history service."""

    @property
    def location(self) -> Location: ...

    def listen(self, listener: Listener) -> Callable[[], None]: ...

    def push(self, path: str, state: Any = None) -> None: ...  # noqa: ANN401


class MemoryHistory:
    """History kept in a list, for tests and non-browser hosts.

    Listeners are called synchronously, in registration order, after the
    location has changed.
    """

    __slots__ = ("_entries", "_index", "_listeners", "_next_id")

    def __init__(
        self,
        initial_entries: Sequence[str] = ("/",),
        initial_index: int | None = None,
    ) -> None:
        if not initial_entries:
            msg = "initial_entries must not be empty"
            raise ValueError(msg)
        self._entries = [
            Location.from_path(path, key=_create_key()) for path in initial_entries
        ]
        last = len(self._entries) - 1
        self._index = (
            last if initial_index is None else max(0, min(initial_index, last))
        )
        self._listeners: dict[int, Listener] = {}
        self._next_id = 0

    @property
    def location(self) -> Location:
        return self._entries[self._index]

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._entries)

    def listen(self, listener: Listener) -> Callable[[], None]:
        listener_id = self._next_id
        self._next_id += 1
        self._listeners[listener_id] = listener

        def unlisten() -> None:
            self._listeners.pop(listener_id, None)

        return unlisten

    def push(self, path: str, state: Any = None) -> None:  # noqa: ANN401
        """Add a new entry after the current one, dropping any forward entries."""
        self._index += 1
        del self._entries[self._index :]
        self._entries.append(self._create_location(path, state))
        self._notify(Action.PUSH)

    def replace(self, path: str, state: Any = None) -> None:  # noqa: ANN401
        self._entries[self._index] = self._create_location(path, state)
        self._notify(Action.REPLACE)

    def go(self, delta: int) -> None:
        """Move delta entries through the stack, clamped to its ends."""
        index = max(0, min(self._index + delta, len(self._entries) - 1))
        if index == self._index:
            return
        self._index = index
        self._notify(Action.POP)

    def back(self) -> None:
        self.go(-1)

    def forward(self) -> None:
        self.go(1)

    def _create_location(self, path: str, state: Any) -> Location:  # noqa: ANN401
        # relative paths resolve against the current location, like a browser
        return Location.from_path(
            urljoin(self.location.pathname, path), state=state, key=_create_key()
        )

    def _notify(self, action: Action) -> None:
        update = Update(action=action, location=self.location)
        logger.debug("history.%s: %s", action.value.lower(), update.location.path)
        for listener in list(self._listeners.values()):
            listener(update)


def _create_key() -> str:
    return uuid.uuid4().hex[:8]
