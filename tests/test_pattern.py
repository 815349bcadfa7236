import pytest

from preroute.pattern import Key, PatternError, compile_pattern, parse


def test_parse() -> None:
    assert parse("/users/:id/posts") == [
        "/users",
        Key(
            name="id",
            prefix="/",
            delimiter="/",
            optional=False,
            repeat=False,
            partial=False,
            pattern="[^/]+?",
        ),
        "/posts",
    ]


def test_parse_escaped_character_is_literal() -> None:
    assert parse(r"/file\:name") == ["/file:name"]


@pytest.mark.parametrize(
    "pattern,pathname,expected",
    [
        ("/users/:id", "/users/42", ("42",)),
        ("/users/:id", "/users/42/", ("42",)),
        ("/users/:id?", "/users", (None,)),
        ("/users/:id?", "/users/7", ("7",)),
        ("/files/:path*", "/files", (None,)),
        ("/files/:path*", "/files/a/b/c", ("a/b/c",)),
        ("/files/:path+", "/files/a/b", ("a/b",)),
        (r"/users/:id(\d+)", "/users/42", ("42",)),
        (r"/(\d+)/edit", "/12/edit", ("12",)),
        ("/static/*", "/static/css/app.css", ("css/app.css",)),
        ("/:from-:to", "/1-2", ("1", "2")),
        ("/:file.:ext", "/report.pdf", ("report", "pdf")),
    ],
)
def test_compile_pattern_matches(
    pattern: str, pathname: str, expected: tuple[str | None, ...]
) -> None:
    regex, _ = compile_pattern(pattern)
    found = regex.match(pathname)
    assert found is not None
    assert found.groups() == expected


@pytest.mark.parametrize(
    "pattern,pathname",
    [
        ("/users/:id", "/users"),
        ("/users/:id", "/users/42/posts"),
        ("/files/:path+", "/files"),
        (r"/users/:id(\d+)", "/users/abc"),
        ("/about", "/about-us"),
    ],
)
def test_compile_pattern_does_not_match(pattern: str, pathname: str) -> None:
    regex, _ = compile_pattern(pattern)
    assert regex.match(pathname) is None


@pytest.mark.parametrize(
    "pattern,names",
    [
        ("/", ()),
        ("/users/:id/posts/:post_id", ("id", "post_id")),
        (r"/(\d+)/:slug/(\w+)", ("0", "slug", "1")),
        ("/static/*", ("0",)),
    ],
)
def test_compile_pattern_param_names(pattern: str, names: tuple[str, ...]) -> None:
    _, param_names = compile_pattern(pattern)
    assert param_names == names


def test_end_false_matches_prefix_on_segment_boundary() -> None:
    regex, _ = compile_pattern("/users", end=False)
    found = regex.match("/users/42")
    assert found is not None
    assert found.group(0) == "/users"
    assert regex.match("/usersx") is None


def test_root_pattern_prefix_match_is_empty() -> None:
    regex, _ = compile_pattern("/", end=False)
    found = regex.match("/users/42")
    assert found is not None
    assert found.group(0) == ""


def test_strict() -> None:
    loose, _ = compile_pattern("/about/")
    assert loose.match("/about") is not None
    assert loose.match("/about/") is not None

    strict, _ = compile_pattern("/about/", strict=True)
    assert strict.match("/about") is None
    assert strict.match("/about/") is not None

    strict, _ = compile_pattern("/about", strict=True)
    assert strict.match("/about/") is None


def test_sensitive() -> None:
    insensitive, _ = compile_pattern("/About")
    assert insensitive.match("/about") is not None

    sensitive, _ = compile_pattern("/About", sensitive=True)
    assert sensitive.match("/about") is None
    assert sensitive.match("/About") is not None


def test_escaped_literal() -> None:
    regex, names = compile_pattern(r"/file\:name")
    assert names == ()
    assert regex.match("/file:name") is not None


def test_invalid_sub_pattern_raises() -> None:
    with pytest.raises(PatternError, match="invalid path pattern"):
        compile_pattern("/:id([)")


def test_pattern_error_is_value_error() -> None:
    assert issubclass(PatternError, ValueError)
