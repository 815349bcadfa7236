"""Path pattern to regular expression compiler.

Implements the path-to-regexp 1.x syntax:

    /users/:id            named segment
    /users/:id?           optional segment
    /files/:path*         zero or more segments
    /files/:path+         one or more segments
    /users/:id(\\d+)      named segment with an inline sub-pattern
    /icons/(\\d+).png     unnamed group, keyed "0", "1", ...
    /static/*             anything
"""

import re
from dataclasses import dataclass
from typing import Protocol

DEFAULT_DELIMITER = "/"

_TOKEN_RE = re.compile(
    r"(\\.)"  # escaped character
    r"|([/.])?"  # prefix
    r"(?:(?:\:(\w+)(?:\(((?:\\.|[^\\()])+)\))?"  # :name with optional (sub-pattern)
    r"|\(((?:\\.|[^\\()])+)\))"  # unnamed (group)
    r"([+*?])?"  # modifier
    r"|(\*))"  # asterisk
)
_GROUP_ESCAPE_RE = re.compile(r"([=!:$/()])")


class PatternError(ValueError):
    """Raised when a path pattern cannot be compiled."""


class CompileFn(Protocol):
    def __call__(
        self, pattern: str, *, end: bool, strict: bool, sensitive: bool
    ) -> tuple[re.Pattern[str], tuple[str, ...]]: ...


@dataclass(frozen=True, slots=True)
class Key:
    """A parameter token parsed out of a pattern."""

    name: str
    prefix: str
    delimiter: str
    optional: bool
    repeat: bool
    partial: bool
    pattern: str


def parse(pattern: str) -> list[str | Key]:
    """Split a pattern into literal strings and parameter keys."""
    tokens: list[str | Key] = []
    unnamed = 0
    index = 0
    literal = ""

    for res in _TOKEN_RE.finditer(pattern):
        literal += pattern[index : res.start()]
        index = res.end()

        escaped = res.group(1)
        if escaped:
            literal += escaped[1]
            continue

        if literal:
            tokens.append(literal)
            literal = ""

        prefix, name, capture, group, modifier, asterisk = res.group(2, 3, 4, 5, 6, 7)
        following = pattern[index] if index < len(pattern) else None
        delimiter = prefix or DEFAULT_DELIMITER
        if name is None:
            name = str(unnamed)
            unnamed += 1

        sub_pattern = capture or group
        if sub_pattern:
            sub_pattern = _GROUP_ESCAPE_RE.sub(r"\\\1", sub_pattern)
        elif asterisk:
            sub_pattern = ".*"
        else:
            sub_pattern = f"[^{re.escape(delimiter)}]+?"

        tokens.append(
            Key(
                name=name,
                prefix=prefix or "",
                delimiter=delimiter,
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prefix is not None
                and following is not None
                and following != prefix,
                pattern=sub_pattern,
            )
        )

    literal += pattern[index:]
    if literal:
        tokens.append(literal)
    return tokens


def compile_pattern(
    pattern: str, *, end: bool = True, strict: bool = False, sensitive: bool = False
) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile pattern to an anchored regex and its ordered parameter names.

    end=False matches a prefix ending at a delimiter boundary, strict=False
    tolerates an optional trailing delimiter and sensitive=False ignores case.
    Raises PatternError when the resulting expression is invalid.
    """
    delimiter = re.escape(DEFAULT_DELIMITER)
    route = ""
    names: list[str] = []

    for token in parse(pattern):
        if isinstance(token, str):
            route += re.escape(token)
            continue

        prefix = re.escape(token.prefix)
        capture = f"(?:{token.pattern})"
        names.append(token.name)

        if token.repeat:
            capture += f"(?:{prefix}{capture})*"

        if not token.optional:
            capture = f"{prefix}({capture})"
        elif token.partial:
            capture = f"{prefix}({capture})?"
        else:
            capture = f"(?:{prefix}({capture}))?"

        route += capture

    ends_with_delimiter = route.endswith(delimiter)

    if not strict:
        if ends_with_delimiter:
            route = route[: -len(delimiter)]
        route += f"(?:{delimiter}(?=$))?"

    if end:
        route += "$"
    elif not (strict and ends_with_delimiter):
        route += f"(?={delimiter}|$)"

    try:
        regex = re.compile(f"^{route}", 0 if sensitive else re.IGNORECASE)
    except re.error as e:
        msg = f"invalid path pattern {pattern!r}: {e}"
        raise PatternError(msg) from e
    return regex, tuple(names)
