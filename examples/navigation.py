# /// script
# requires-python = ">=3.14"
# dependencies = [
#     "preroute @ file:///${PROJECT_ROOT}/../preroute",
# ]
# ///
"""Navigation demo.

Preloads a user page on "pointer-down", then navigates to it and renders once
the code and data are ready.
"""

import asyncio
import logging

from preroute import (
    Link,
    MemoryHistory,
    NotReady,
    Resource,
    Route,
    Snapshot,
    create_router,
    format_routes,
    routing_context,
)

USERS = {"1": "ada", "2": "grace"}


# views
async def load_home_view() -> str:
    await asyncio.sleep(0.05)  # pretend to fetch a chunk
    return "home"


async def load_user_view() -> str:
    await asyncio.sleep(0.1)
    return "user"


async def load_not_found_view() -> str:
    return "404"


home_view = Resource(load_home_view, name="home_view")
user_view = Resource(load_user_view, name="user_view")
not_found_view = Resource(load_not_found_view, name="not_found_view")


# data
async def fetch_user(params: dict[str, str]) -> str | None:
    print(f"> fetching user {params['id']}")
    await asyncio.sleep(0.1)
    return USERS.get(params["id"])


routes = [
    Route("/", exact=True, element=home_view),
    Route("/users/:id", element=user_view, prepare=fetch_user),
    Route("*", element=not_found_view),
]


async def render(snapshot: Snapshot) -> None:
    for entry in snapshot.entries:
        if entry.element is None:
            continue
        try:
            view = entry.element.get()
        except NotReady as e:
            print(f"> {snapshot.location.pathname}: waiting for {e.resource.name}")
            view = await entry.element.load()
        data = await entry.prepared if entry.prepared is not None else None
        print(f"> {snapshot.location.pathname}: {view} {data or ''}")


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    print(format_routes(routes))

    history = MemoryHistory()
    router, cleanup = create_router(routes, history)
    renders: set[asyncio.Task[None]] = set()

    def on_snapshot(snapshot: Snapshot) -> None:
        task = asyncio.create_task(render(snapshot))
        renders.add(task)
        task.add_done_callback(renders.discard)

    dispose = router.subscribe(on_snapshot)
    await render(router.get())

    with routing_context.set(router):
        link = Link("/users/1")
        link.pre_activate()  # pointer-down
        await asyncio.sleep(0.15)  # user is slow to release the button
        link.activate()  # click: code and data are already loaded
        Link("/nowhere").activate()

    await asyncio.gather(*renders)
    dispose()
    cleanup()


if __name__ == "__main__":
    asyncio.run(main())
