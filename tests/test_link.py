import pytest
from conftest import RecordingPrepare

from preroute.context import current_router, routing_context
from preroute.history import MemoryHistory
from preroute.link import Link
from preroute.routes import Route
from preroute.router import create_router


def test_activate_pushes_target() -> None:
    history = MemoryHistory(["/"])
    router, _ = create_router([Route("/", exact=True), Route("/:page")], history)

    Link("/about").activate(router)

    assert history.location.pathname == "/about"
    assert router.get().location.pathname == "/about"


def test_pre_activate_preloads_without_navigating() -> None:
    prepare = RecordingPrepare()
    history = MemoryHistory(["/"])
    router, _ = create_router(
        [Route("/", exact=True), Route("/users/:id", prepare=prepare)], history
    )

    Link("/users/42").pre_activate(router)

    assert prepare.calls == [{"id": "42"}]
    assert router.get().location.pathname == "/"


def test_link_uses_router_from_context() -> None:
    history = MemoryHistory(["/"])
    router, _ = create_router([Route("/", exact=True), Route("/:page")], history)
    link = Link("/about")

    with routing_context.set(router):
        assert current_router() is router
        link.activate()

    assert link.href == "/about"
    assert router.get().location.pathname == "/about"


def test_current_router_without_context() -> None:
    with pytest.raises(LookupError, match="No router in context"):
        current_router()
    with pytest.raises(LookupError):
        Link("/about").activate()
