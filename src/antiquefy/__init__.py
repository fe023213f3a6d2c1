from .core import (
    AdaptedFunction,
    AntiquefyError,
    MissingContinuationError,
    NoEventLoopError,
    NotCallableError,
    Options,
    antiquefy,
    drive,
    is_generator,
)

__all__ = [
    "AdaptedFunction",
    "AntiquefyError",
    "MissingContinuationError",
    "NoEventLoopError",
    "NotCallableError",
    "Options",
    "antiquefy",
    "drive",
    "is_generator",
]
