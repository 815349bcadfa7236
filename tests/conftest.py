import asyncio
import re

from preroute.pattern import compile_pattern


class ControlledLoader[T]:
    """Loader whose fetches only complete once released."""

    def __init__(self, value: T) -> None:
        self.value = value
        self.calls = 0
        self._released = asyncio.Event()

    async def __call__(self) -> T:
        self.calls += 1
        await self._released.wait()
        return self.value

    def release(self) -> None:
        self._released.set()


class FailingLoader:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    async def __call__(self) -> object:
        self.calls += 1
        raise self.exc


class RecordingCompile:
    """Pattern compiler that records every pattern it is asked to compile."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(
        self, pattern: str, *, end: bool, strict: bool, sensitive: bool
    ) -> tuple[re.Pattern[str], tuple[str, ...]]:
        self.calls.append(pattern)
        return compile_pattern(pattern, end=end, strict=strict, sensitive=sensitive)


class RecordingPrepare:
    def __init__(self) -> None:
        self.calls: list[dict[str, str]] = []

    def __call__(self, params: dict[str, str]) -> dict[str, str]:
        self.calls.append(dict(params))
        return {"prepared": params.get("id", "")}
