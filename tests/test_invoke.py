"""Tests for perch._internal.invoke — uniform sync/async calls."""

from perch._internal.invoke import invoke


class TestInvoke:
    async def test_sync(self) -> None:
        assert await invoke(lambda a, b=0: a + b, 1, b=2) == 3

    async def test_async(self) -> None:
        async def double(x: int) -> int:
            return x * 2

        assert await invoke(double, 4) == 8

    async def test_returned_awaitable_is_awaited(self) -> None:
        async def inner() -> str:
            return "done"

        assert await invoke(lambda: inner()) == "done"
