"""Memoizing layer in front of the pattern compiler."""

import logging
import re
from dataclasses import dataclass

from preroute.pattern import CompileFn, compile_pattern

logger = logging.getLogger(__name__)

DEFAULT_CACHE_LIMIT = 10_000

type _OptionsKey = tuple[bool, bool, bool]


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    regex: re.Pattern[str]
    param_names: tuple[str, ...]


class PatternCache:
    """Bounded cache of compiled patterns keyed by (options, pattern).

    Once `limit` entries are stored, patterns not yet seen are compiled on
    every use and never stored. Nothing is evicted.
    """

    __slots__ = ("_compile_fn", "_entries", "_limit", "_size", "_warned")
    _entries: dict[_OptionsKey, dict[str, CompiledPattern]]

    def __init__(
        self,
        *,
        limit: int = DEFAULT_CACHE_LIMIT,
        compile_fn: CompileFn = compile_pattern,
    ) -> None:
        if limit < 0:
            msg = f"cache limit must not be negative, provided {limit=}"
            raise ValueError(msg)
        self._compile_fn = compile_fn
        self._entries = {}
        self._limit = limit
        self._size = 0
        self._warned = False

    def __len__(self) -> int:
        return self._size

    @property
    def limit(self) -> int:
        return self._limit

    def compile(
        self, pattern: str, *, end: bool, strict: bool, sensitive: bool
    ) -> CompiledPattern:
        pattern_cache = self._entries.setdefault((end, strict, sensitive), {})
        cached = pattern_cache.get(pattern)
        if cached is not None:
            return cached

        regex, param_names = self._compile_fn(
            pattern, end=end, strict=strict, sensitive=sensitive
        )
        compiled = CompiledPattern(regex=regex, param_names=tuple(param_names))

        if self._size < self._limit:
            pattern_cache[pattern] = compiled
            self._size += 1
        elif not self._warned:
            # TODO: decide between LRU eviction and this stop-caching policy
            logger.warning(
                "pattern_cache: limit of %d reached, %r and later new patterns "
                "will be recompiled on every use",
                self._limit,
                pattern,
            )
            self._warned = True
        return compiled


default_cache = PatternCache()
