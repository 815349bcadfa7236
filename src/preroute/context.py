"""Hands the router to view code without threading it through every call."""

from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from preroute.router import Router

routing_context: ContextVar[Router] = ContextVar("routing_context")


def current_router() -> Router:
    try:
        return routing_context.get()
    except LookupError as e:
        msg = "No router in context, set one with `with routing_context.set(router):`"
        raise LookupError(msg) from e
