"""Route declarations and route table formatting."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from preroute.resource import Resource

type Prepare = Callable[[Mapping[str, str]], Any]


@dataclass(frozen=True, slots=True)
class Route:
    """A node in the route tree.

    `path` is a pattern, a sequence of patterns tried in order, or None for a
    layout route that inherits its parent's match. Patterns not starting with
    "/" are relative to the pattern matched by the parent.
    """

    path: str | Sequence[str] | None = None
    exact: bool = False
    strict: bool = False
    sensitive: bool = False
    children: Sequence[Route] = field(default=())
    element: Resource[Any] | None = None
    prepare: Prepare | None = None

    def __post_init__(self) -> None:
        if self.path is not None and not isinstance(self.path, str):
            object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "children", tuple(self.children))

    def patterns(self, base: str = "/") -> tuple[str, ...]:
        """Absolute patterns for this route, resolving relative ones against base."""
        if not self.path:
            return ()
        paths = (self.path,) if isinstance(self.path, str) else self.path
        return tuple(join_paths(base, p) for p in paths)


def join_paths(base: str, path: str) -> str:
    if path.startswith("/"):
        return path
    return base.rstrip("/") + "/" + path


def format_routes(routes: Sequence[Route], *, tree: bool = False) -> str:
    """Format route declarations as a human-readable string.

    By default produces a column-aligned list in match priority order, with
    layout routes shown in parentheses under their inherited pattern:

        /              -                -
        /users/:id     user_view        fetch_user
        (/users/:id)   user_tabs_view   -
        /*             not_found_view   -

    With `tree=True`, produces a visual tree of the declarations as written:

        routes
        ├── / [home_view]
        │   └── users/:id [user_view] prepare=fetch_user
        └── * [not_found_view]
    """
    if tree:
        lines = ["routes"]
        _render_tree(routes, "", lines=lines)
        return "\n".join(lines)
    return _format_route_list(routes)


type _Row = tuple[str, str, str]


def _format_route_list(routes: Sequence[Route]) -> str:
    rows = _collect_rows(routes, "/")
    if not rows:
        return ""

    path_w = max(len(r[0]) for r in rows)
    element_w = max(len(r[1]) for r in rows)
    return "\n".join(
        f"{path:<{path_w}}   {element:<{element_w}}   {prepare}"
        for path, element, prepare in rows
    )


def _collect_rows(routes: Sequence[Route], base: str) -> list[_Row]:
    rows: list[_Row] = []
    for route in routes:
        patterns = route.patterns(base)
        path = " | ".join(patterns) if patterns else f"({base})"
        rows.append(
            (
                path,
                route.element.name if route.element is not None else "-",
                _qualname(route.prepare) if route.prepare is not None else "-",
            )
        )
        rows.extend(_collect_rows(route.children, patterns[0] if patterns else base))
    return rows


def _render_tree(routes: Sequence[Route], prefix: str, *, lines: list[str]) -> None:
    """Recursively render routes with tree-drawing prefixes."""
    for i, route in enumerate(routes):
        is_last = i == len(routes) - 1
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{_route_label(route)}")
        if route.children:
            extension = "    " if is_last else "│   "
            _render_tree(route.children, prefix + extension, lines=lines)


def _route_label(route: Route) -> str:
    if not route.path:
        label = "(layout)"
    elif isinstance(route.path, str):
        label = route.path
    else:
        label = " | ".join(route.path)
    flags = [f for f in ("exact", "strict", "sensitive") if getattr(route, f)]
    if flags:
        label += " {" + ", ".join(flags) + "}"
    if route.element is not None:
        label += f" [{route.element.name}]"
    if route.prepare is not None:
        label += f" prepare={_qualname(route.prepare)}"
    return label


def _qualname(obj: object) -> str:
    """Extract __qualname__ from a callable, falling back to repr."""
    return str(obj.__qualname__) if hasattr(obj, "__qualname__") else repr(obj)
