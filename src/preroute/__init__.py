from importlib.metadata import version

from .cache import CompiledPattern, PatternCache
from .context import current_router, routing_context
from .history import Action, History, Location, MemoryHistory, Update
from .link import Link
from .matching import Branch, Match, NoMatchError, match_one, match_path, match_routes
from .pattern import PatternError, compile_pattern
from .resource import NotReady, Resource, ResourceState
from .router import Entry, Router, Snapshot, create_router
from .routes import Route, format_routes

__all__ = [
    "Action",
    "Branch",
    "CompiledPattern",
    "Entry",
    "History",
    "Link",
    "Location",
    "Match",
    "MemoryHistory",
    "NoMatchError",
    "NotReady",
    "PatternCache",
    "PatternError",
    "Resource",
    "ResourceState",
    "Route",
    "Router",
    "Snapshot",
    "Update",
    "__version__",
    "compile_pattern",
    "create_router",
    "current_router",
    "format_routes",
    "match_one",
    "match_path",
    "match_routes",
    "routing_context",
]

__version__ = version("preroute")
