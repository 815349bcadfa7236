from conftest import ControlledLoader

from preroute.resource import Resource
from preroute.routes import Route, format_routes, join_paths


def fetch_user(params: dict[str, str]) -> str:
    return params["id"]


user_view = Resource(ControlledLoader("user"), name="user_view")
user_tabs = Resource(ControlledLoader("tabs"), name="user_tabs")
not_found_view = Resource(ControlledLoader("404"), name="not_found_view")

routes = [
    Route(
        "/",
        sensitive=True,
        children=(
            Route(
                "users/:id",
                element=user_view,
                prepare=fetch_user,
                children=(Route(element=user_tabs),),
            ),
        ),
    ),
    Route("*", element=not_found_view),
]


def test_route_normalizes_sequences() -> None:
    route = Route(["/a", "/b"], children=[Route("c")])
    assert route.path == ("/a", "/b")
    assert isinstance(route.children, tuple)
    assert hash(route) == hash(Route(("/a", "/b"), children=(Route("c"),)))


def test_patterns() -> None:
    assert Route("users/:id").patterns() == ("/users/:id",)
    assert Route(["a", "/b"]).patterns("/base/") == ("/base/a", "/b")
    assert Route().patterns() == ()


def test_join_paths() -> None:
    assert join_paths("/", "users") == "/users"
    assert join_paths("/users/:id", "posts") == "/users/:id/posts"
    assert join_paths("/users", "/posts") == "/posts"


def test_format_routes() -> None:
    lines = format_routes(routes).splitlines()

    assert [line.split() for line in lines] == [
        ["/", "-", "-"],
        ["/users/:id", "user_view", "fetch_user"],
        ["(/users/:id)", "user_tabs", "-"],
        ["/*", "not_found_view", "-"],
    ]
    # columns are aligned on the widest path and element
    path_w = len("(/users/:id)")
    element_w = len("not_found_view")
    for line in lines:
        assert line[path_w : path_w + 3] == "   "
        assert line[path_w + 3] != " "
        assert line[path_w + 3 + element_w : path_w + 6 + element_w] == "   "


def test_format_routes_tree() -> None:
    assert format_routes(routes, tree=True) == "\n".join(
        [
            "routes",
            "├── / {sensitive}",
            "│   └── users/:id [user_view] prepare=fetch_user",
            "│       └── (layout) [user_tabs]",
            "└── * [not_found_view]",
        ]
    )


def test_format_empty_routes() -> None:
    assert format_routes([]) == ""
    assert format_routes([], tree=True) == "routes"
