"""OpenTelemetry tracing and metrics subscriber.

Creates a span per navigation that stays open until the navigation's code and
data are ready.

Install with: uv add "preroute[otel]"
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from preroute.router import Snapshot

try:
    from opentelemetry import metrics, trace
    from opentelemetry.trace import (
        SpanKind,
        StatusCode,
        TracerProvider,
    )
except ImportError as e:
    msg = (
        "OpenTelemetry subscriber requires the 'otel' extra. "
        "Install with: uv add 'preroute[otel]'"
    )
    raise ImportError(msg) from e

from preroute.resource import ResourceState

_DURATION_BUCKETS = (
    0.005,
    0.01,
    0.025,
    0.05,
    0.075,
    0.1,
    0.25,
    0.5,
    0.75,
    1.0,
    2.5,
    5.0,
    10.0,
)


def otel(
    *,
    tracer_provider: TracerProvider | None = None,
    meter_provider: metrics.MeterProvider | None = None,
) -> Callable[[Snapshot], None]:
    """Create an OpenTelemetry subscriber for router snapshots.

    Each snapshot starts a ``navigate <route>`` span, where route is the
    pattern of the deepest matched route. The span ends once every element
    still loading and every prepare() future in the snapshot has settled; a
    failure marks it as an error and records the exception.

    Metrics emitted:
        - ``router.navigations`` (counter)
        - ``router.navigation.ready.duration`` (histogram, seconds)

    Args:
        tracer_provider: Optional TracerProvider. If None, uses the global provider.
        meter_provider: Optional MeterProvider. If None, uses the global provider.

    Returns:
        Subscriber to pass to ``Router.subscribe``.

    Example:
        dispose = router.subscribe(otel())
    """
    tracer = trace.get_tracer(
        "preroute",
        tracer_provider=tracer_provider,
    )
    meter = metrics.get_meter(
        "preroute",
        meter_provider=meter_provider,
    )
    navigations_counter = meter.create_counter(
        "router.navigations",
        unit="{navigation}",
        description="Number of navigations that produced a new snapshot.",
    )
    ready_histogram = meter.create_histogram(
        "router.navigation.ready.duration",
        unit="s",
        description="Time from navigation until its code and data settled.",
        explicit_bucket_boundaries_advisory=_DURATION_BUCKETS,
    )

    def subscriber(snapshot: Snapshot) -> None:
        location = snapshot.location
        route = snapshot.entries[-1].route_data.path if snapshot.entries else ""

        attributes: dict[str, str | int] = {
            "url.path": location.pathname,
            "router.entries": len(snapshot.entries),
        }
        if route:
            attributes["router.route"] = route
        if location.search:
            attributes["url.query"] = location.search.removeprefix("?")
        for entry in snapshot.entries:
            for key, value in entry.route_data.params.items():
                attributes[f"router.route.param.{key}"] = value

        metric_attrs: dict[str, str] = {"router.route": route} if route else {}
        navigations_counter.add(1, metric_attrs)

        start = time.perf_counter()
        span = tracer.start_span(
            f"navigate {route}" if route else "navigate",
            kind=SpanKind.INTERNAL,
            attributes=attributes,
        )
        pending = _pending(snapshot)

        def finish() -> None:
            ready_histogram.record(time.perf_counter() - start, metric_attrs)
            span.end()

        if not pending:
            finish()
            return

        remaining = len(pending)

        def settled(future: asyncio.Future[Any]) -> None:
            nonlocal remaining
            if future.cancelled():
                span.set_status(StatusCode.ERROR, "cancelled")
            elif (exc := future.exception()) is not None:
                span.record_exception(exc)
                span.set_status(StatusCode.ERROR, str(exc))
            remaining -= 1
            if remaining == 0:
                finish()

        for future in pending:
            future.add_done_callback(settled)

    return subscriber


def _pending(snapshot: Snapshot) -> set[asyncio.Future[Any]]:
    """Futures in the snapshot that have not settled yet."""
    pending: set[asyncio.Future[Any]] = set()
    for entry in snapshot.entries:
        element = entry.element
        if element is not None and element.state is not ResourceState.RESOLVED:
            future = element.load()  # the in-flight load, never a new one
            if not future.done():
                pending.add(future)
        prepared = entry.prepared
        if asyncio.isfuture(prepared) and not prepared.done():
            pending.add(prepared)
    return pending
