"""Route tree matching with path param extraction.

Inspired by react-router-config's matchRoutes
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Never

from preroute.cache import PatternCache, default_cache
from preroute.routes import Route


class FrozenDict[K, V](dict[K, V]):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._hash: int | None = None

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self.items()))
        return self._hash

    def _immutable(self, *args, **kwargs) -> Never:
        msg = "FrozenDict is immutable"
        raise TypeError(msg)

    __setitem__ = __delitem__ = clear = pop = popitem = setdefault = update = _immutable
    __ior__ = _immutable


@dataclass(frozen=True, slots=True)
class Match:
    """Result of matching one pattern against a pathname."""

    path: str  # pattern that matched
    url: str  # matched portion of the pathname
    is_exact: bool
    params: FrozenDict[str, str] = field(default_factory=FrozenDict)


@dataclass(frozen=True, slots=True)
class Branch:
    route: Route
    match: Match


class NoMatchError(LookupError):
    """No route in the tree matches the pathname."""

    def __init__(self, pathname: str) -> None:
        self.pathname = pathname
        super().__init__(f"No route for {pathname}")


def match_path(
    pathname: str,
    path: str | Sequence[str],
    *,
    exact: bool = False,
    strict: bool = False,
    sensitive: bool = False,
    cache: PatternCache | None = None,
) -> Match | None:
    """Match pathname against one pattern or the first matching of several.

    Params without a captured value are left out of the result.
    """
    cache = cache if cache is not None else default_cache
    for pattern in (path,) if isinstance(path, str) else path:
        compiled = cache.compile(pattern, end=exact, strict=strict, sensitive=sensitive)
        found = compiled.regex.match(pathname)
        if found is None:
            continue

        url = found.group(0)
        is_exact = pathname == url
        if exact and not is_exact:
            continue

        return Match(
            path=pattern,
            url="/" if pattern == "/" and url == "" else url,
            is_exact=is_exact,
            params=FrozenDict(
                (name, value)
                for name, value in zip(
                    compiled.param_names, found.groups(), strict=True
                )
                if value is not None
            ),
        )
    return None


def match_routes(
    routes: Sequence[Route], pathname: str, *, cache: PatternCache | None = None
) -> list[Branch]:
    """Find the branches of the route tree matching pathname, root to leaf.

    Siblings are tried in declaration order and the first match wins. A route
    without a path reuses its parent's match, or a root match at the top level.
    Returns an empty list if nothing matches.
    """
    branches: list[Branch] = []
    _match_into(routes, pathname, cache, branches)
    return branches


def match_one(
    routes: Sequence[Route], pathname: str, *, cache: PatternCache | None = None
) -> list[Branch]:
    """Like match_routes, but raises NoMatchError instead of returning []."""
    branches = match_routes(routes, pathname, cache=cache)
    if not branches:
        raise NoMatchError(pathname)
    return branches


def _match_into(
    routes: Sequence[Route],
    pathname: str,
    cache: PatternCache | None,
    branches: list[Branch],
) -> None:
    parent = branches[-1] if branches else None
    for route in routes:
        if route.path:
            match = match_path(
                pathname,
                route.patterns(parent.match.path if parent is not None else "/"),
                exact=route.exact,
                strict=route.strict,
                sensitive=route.sensitive,
                cache=cache,
            )
        elif parent is not None:
            match = parent.match
        else:
            match = _root_match(pathname)

        if match is None:
            continue

        branches.append(Branch(route=route, match=match))
        if route.children:
            _match_into(route.children, pathname, cache, branches)
        return


def _root_match(pathname: str) -> Match:
    return Match(path="/", url="/", is_exact=pathname == "/")
