from __future__ import annotations
import asyncio
import concurrent.futures
import functools
import inspect
from typing import Any, Callable, List, Optional, Sequence, Tuple
from logging import getLogger

from antiquefy.core.errors import (
    MissingContinuationError,
    NoEventLoopError,
    NotCallableError,
)
from antiquefy.core.kinds import drive, is_generator
from antiquefy.core.types import Continuation, Options, OptionsLike, make_options


logger = getLogger(__name__)


class _NoReceiver:
    def __repr__(self) -> str:
        return "NO_RECEIVER"


NO_RECEIVER: Any = _NoReceiver()


def split_args(args: Sequence[Any]) -> Tuple[List[Any], Continuation]:
    """
    (arg1, ..., argN, callback) -> ([arg1, ..., argN], callback)

    The positional part is always a fresh list.
    """
    if not args:
        raise MissingContinuationError("adapted function called without a callback")
    callback = args[-1]
    if not callable(callback):
        raise MissingContinuationError(
            f"last argument must be a callback, {type(callback).__name__!r} given"
        )
    return list(args[:-1]), callback


def execute(
    fn: Callable[..., Any],
    positional: List[Any],
    receiver: Any = NO_RECEIVER,
    *,
    loop: asyncio.AbstractEventLoop,
) -> asyncio.Future:
    """
    Call `fn` and fold every outcome into a future on `loop`.

    Plain values become a fulfilled future, awaitables are scheduled on `loop`,
    and a synchronous exception becomes a failed future instead of propagating.
    """
    try:
        if receiver is NO_RECEIVER:
            out = fn(*positional)
        else:
            out = fn(receiver, *positional)
        if isinstance(out, concurrent.futures.Future):
            return asyncio.wrap_future(out, loop=loop)
        if inspect.isawaitable(out):
            # 別 loop の Future はここで ValueError になる
            return asyncio.ensure_future(out, loop=loop)
    except Exception as e:
        fut = loop.create_future()
        fut.set_exception(e)
        return fut

    fut = loop.create_future()
    fut.set_result(out)
    return fut


def dispatch(future: asyncio.Future, callback: Continuation, options: Options) -> None:
    """
    callback(error) on failure, callback(None, value) on success.
    With options.spread a list/tuple value is passed as callback(None, *value).
    The callback always runs from a later loop turn (done callbacks go
    through call_soon).
    """

    def _settled(fut: asyncio.Future) -> None:
        if fut.cancelled():
            logger.debug("future cancelled; reporting CancelledError")
            callback(asyncio.CancelledError())
            return

        err = fut.exception()
        if err is not None:
            logger.debug("reporting failure: %s: %s", type(err).__name__, err)
            callback(err)
            return

        value = fut.result()
        if options.spread and isinstance(value, (list, tuple)):
            callback(None, *value)
        else:
            callback(None, value)

    future.add_done_callback(_settled)


class AdaptedFunction:
    """
    callback-last の関数。

        adapted(a, b, callback)                -> fn(a, b)
        adapted.call(receiver, a, b, callback) -> fn(receiver, a, b)

    クラス属性として使うとインスタンスが receiver になる。
    """

    def __init__(self, fn: Callable[..., Any], options: Options) -> None:
        functools.update_wrapper(self, fn, updated=())
        # signature は callback-last の (*args) のままにする
        del self.__wrapped__
        self._fn = fn
        self._options = options
        self._driven: Optional[Callable[..., Any]] = None

    @property
    def options(self) -> Options:
        return self._options

    @property
    def wrapped(self) -> Callable[..., Any]:
        return self._fn

    def __call__(self, *args: Any) -> None:
        self._invoke(NO_RECEIVER, args)

    def call(self, receiver: Any, *args: Any) -> None:
        self._invoke(receiver, args)

    def __get__(self, instance: Any, owner: Any = None) -> Any:
        if instance is None:
            return self
        return BoundAdaptedFunction(self, instance)

    def __repr__(self) -> str:
        return f"<AdaptedFunction {getattr(self._fn, '__qualname__', self._fn)!r}>"

    # ---------- internal ----------
    def _invoke(self, receiver: Any, args: Tuple[Any, ...]) -> None:
        positional, callback = split_args(args)
        loop = self._resolve_loop()

        if _running_loop() is loop:
            loop.call_soon(self._start, loop, receiver, positional, callback)
        else:
            # 別スレッドからの呼び出し
            loop.call_soon_threadsafe(self._start, loop, receiver, positional, callback)

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._options.loop is not None:
            return self._options.loop
        loop = _running_loop()
        if loop is None:
            raise NoEventLoopError(
                "no running event loop; call from a coroutine or pass Options(loop=...)"
            )
        return loop

    def _target(self) -> Callable[..., Any]:
        if not is_generator(self._fn):
            return self._fn
        if self._driven is None:
            self._driven = drive(self._fn)
        return self._driven

    def _start(
        self,
        loop: asyncio.AbstractEventLoop,
        receiver: Any,
        positional: List[Any],
        callback: Continuation,
    ) -> None:
        fut = execute(self._target(), positional, receiver, loop=loop)
        dispatch(fut, callback, self._options)


class BoundAdaptedFunction:
    """
    AdaptedFunction bound to a receiver (instance attribute access).
    """

    def __init__(self, adapted: AdaptedFunction, receiver: Any) -> None:
        self.__func__ = adapted
        self.__self__ = receiver

    @property
    def options(self) -> Options:
        return self.__func__.options

    @property
    def wrapped(self) -> Callable[..., Any]:
        return self.__func__.wrapped

    def __call__(self, *args: Any) -> None:
        self.__func__.call(self.__self__, *args)

    def __repr__(self) -> str:
        return f"<bound {self.__func__!r} of {self.__self__!r}>"


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def antiquefy(
    fn: Callable[..., Any], options: OptionsLike = None, **overrides: Any
) -> AdaptedFunction:
    """
    Create a callback-last function from a function returning a value or an
    awaitable, or from a generator function yielding awaitables.

    Args:
        fn: plain function, `async def` function or generator function.
        options: Options, or a mapping such as {"spread": True}.
        **overrides: individual option fields, applied on top of `options`.

    Raises:
        NotCallableError: `fn` is not callable.
    """
    if not callable(fn):
        raise NotCallableError(
            "The input to antiquefy is expected to be either a function or a "
            f"generator function, {type(fn).__name__!r} given."
        )
    opts = make_options(options, **overrides)
    logger.debug(
        "antiquefy %s (generator=%s, spread=%s)",
        getattr(fn, "__qualname__", fn),
        is_generator(fn),
        opts.spread,
    )
    return AdaptedFunction(fn, opts)
