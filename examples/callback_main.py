from __future__ import annotations

import asyncio
from logging import basicConfig, DEBUG

from antiquefy import antiquefy


async def fetch_user(user_id: int) -> dict:
    await asyncio.sleep(0.05)
    return {"id": user_id, "name": f"user{user_id}"}


def fetch_pair(a: int, b: int):
    first = yield fetch_user(a)
    second = yield fetch_user(b)
    return [first, second]


class Greeter:
    def __init__(self, greeting: str) -> None:
        self.greeting = greeting

    async def _greet(self, name: str) -> str:
        return f"{self.greeting}, {name}"

    greet = antiquefy(_greet)


def legacy_caller(done: asyncio.Event) -> None:
    """
    callback-last しか知らない古いコード側。
    """
    pending = 4

    def finish() -> None:
        nonlocal pending
        pending -= 1
        if pending == 0:
            done.set()

    def on_user(error, user=None):
        print("fetch_user:", error, user)
        finish()

    def on_pair(error, first=None, second=None):
        print("fetch_pair:", error, first, second)
        finish()

    def on_greet(error, text=None):
        print("greet:", error, text)
        finish()

    def on_fail(error):
        print("fail:", repr(error))
        finish()

    antiquefy(fetch_user)(1, on_user)
    antiquefy(fetch_pair, spread=True)(2, 3, on_pair)
    Greeter("hello").greet("world", on_greet)
    antiquefy(lambda: 1 / 0)(on_fail)


async def main() -> None:
    done = asyncio.Event()
    legacy_caller(done)
    await done.wait()


if __name__ == "__main__":
    basicConfig(level=DEBUG)
    asyncio.run(main())
