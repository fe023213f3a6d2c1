from __future__ import annotations
import asyncio
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Mapping, Optional, Union


# callback(error, *values)
Continuation = Callable[..., None]


@dataclass(frozen=True)
class Options:
    """
    spread: 成功値が list / tuple のとき要素を個別の引数として callback に渡す
    loop:   実行に使う event loop（None なら呼び出し元で実行中の loop）
    """

    spread: bool = False
    loop: Optional[asyncio.AbstractEventLoop] = None


OptionsLike = Union[Options, Mapping[str, Any], None]


def make_options(options: OptionsLike = None, **overrides: Any) -> Options:
    if options is None:
        base = Options()
    elif isinstance(options, Options):
        base = options
    elif isinstance(options, Mapping):
        base = _from_mapping(options)
    else:
        raise TypeError(
            f"options must be Options or a mapping, {type(options).__name__!r} given"
        )
    if overrides:
        _check_names(overrides)
        base = replace(base, **overrides)
    return base


def _from_mapping(m: Mapping[str, Any]) -> Options:
    _check_names(m)
    return Options(**m)


def _check_names(m: Mapping[str, Any]) -> None:
    known = {f.name for f in fields(Options)}
    unknown = sorted(set(m) - known)
    if unknown:
        raise TypeError(f"unknown option(s): {', '.join(unknown)}")
