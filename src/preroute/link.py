"""Navigation trigger for anchors rendered by view code."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from preroute.context import current_router

if TYPE_CHECKING:
    from preroute.router import Router


@dataclass(frozen=True, slots=True)
class Link:
    """A link to `to`, bound to the given router or the one in context.

    Hosts call pre_activate() on the earliest strong signal that the user will
    follow the link (e.g. pointer-down) and activate() on the click itself.
    """

    to: str

    @property
    def href(self) -> str:
        return self.to

    def activate(self, router: Router | None = None) -> None:
        (router or current_router()).history.push(self.to)

    def pre_activate(self, router: Router | None = None) -> None:
        (router or current_router()).preload(self.to)
