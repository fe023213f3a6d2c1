from __future__ import annotations
import asyncio
import concurrent.futures
import functools
import inspect
from typing import Any, Callable, Coroutine, Generator, Optional
from logging import getLogger


logger = getLogger(__name__)


def is_generator(fn: Any) -> bool:
    """
    True if `fn` is a generator function (bound methods and partials included).
    @types.coroutine functions already return awaitables and are not counted.
    Never calls `fn`, never raises.
    """
    try:
        if not inspect.isgeneratorfunction(fn):
            return False
        return not _code_flags(fn) & inspect.CO_ITERABLE_COROUTINE
    except Exception:
        # 壊れた __getattr__ を持つオブジェクトなど
        return False


def _code_flags(fn: Any) -> int:
    while True:
        if inspect.ismethod(fn):
            fn = fn.__func__
        elif isinstance(fn, functools.partial):
            fn = fn.func
        else:
            break
    code = getattr(fn, "__code__", None)
    return getattr(code, "co_flags", 0)


def drive(
    fn: Callable[..., Generator[Any, Any, Any]],
) -> Callable[..., Coroutine[Any, Any, Any]]:
    """
    Turn a generator function into a coroutine function.

    Every value the generator yields must be awaitable. It is awaited and the
    outcome is sent back in (or thrown back in on failure). The generator's
    return value becomes the coroutine's value.
    """

    @functools.wraps(fn)
    async def driven(*args: Any, **kwargs: Any) -> Any:
        gen = fn(*args, **kwargs)
        logger.debug("driving generator %s", getattr(fn, "__qualname__", fn))
        try:
            return await _run_steps(gen)
        finally:
            gen.close()

    return driven


async def _run_steps(gen: Generator[Any, Any, Any]) -> Any:
    value: Any = None
    error: Optional[Exception] = None
    while True:
        try:
            if error is not None:
                yielded = gen.throw(error)
            else:
                yielded = gen.send(value)
        except StopIteration as stop:
            return stop.value

        value, error = None, None
        if isinstance(yielded, concurrent.futures.Future):
            yielded = asyncio.wrap_future(yielded)
        if not inspect.isawaitable(yielded):
            error = TypeError(
                f"generator yielded a non-awaitable value: {type(yielded).__name__!r}"
            )
            continue
        try:
            value = await yielded
        except Exception as e:
            error = e
