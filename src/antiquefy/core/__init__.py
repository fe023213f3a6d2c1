from .adapter import (
    NO_RECEIVER,
    AdaptedFunction,
    BoundAdaptedFunction,
    antiquefy,
    dispatch,
    execute,
    split_args,
)
from .errors import (
    AntiquefyError,
    MissingContinuationError,
    NoEventLoopError,
    NotCallableError,
)
from .kinds import drive, is_generator
from .types import Continuation, Options, make_options

__all__ = [
    "NO_RECEIVER",
    "AdaptedFunction",
    "BoundAdaptedFunction",
    "antiquefy",
    "dispatch",
    "execute",
    "split_args",
    "AntiquefyError",
    "MissingContinuationError",
    "NoEventLoopError",
    "NotCallableError",
    "drive",
    "is_generator",
    "Continuation",
    "Options",
    "make_options",
]
