from __future__ import annotations


class AntiquefyError(Exception):
    pass


class NotCallableError(AntiquefyError, TypeError):
    """
    antiquefy() に callable 以外が渡された。
    """


class MissingContinuationError(AntiquefyError, TypeError):
    """
    adapted function の最後の引数が callback ではない（引数ゼロを含む）。
    """


class NoEventLoopError(AntiquefyError, RuntimeError):
    """
    Options.loop 未指定かつ実行中の event loop も無い。
    """
