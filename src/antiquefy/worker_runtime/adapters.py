from __future__ import annotations
from typing import Protocol, Dict, Any, Generator, TypeVar, Mapping

T = TypeVar("T", bound=Mapping[str, Any], contravariant=True)


class TaskAdapter(Protocol[T]):
    kind: str

    def run(self, payload: T) -> Dict[str, Any]:
        """
        Must return JSON-serializable dict.
        The shape is defined by the library user and passed through as-is.
        Non-dict values are sent as {"value": ...}.
        """
        ...


class AsyncTaskAdapter(Protocol[T]):
    kind: str

    async def run(self, payload: T) -> Dict[str, Any]:
        """
        Async variant of TaskAdapter.run.
        """
        ...


class GeneratorTaskAdapter(Protocol[T]):
    kind: str

    def run(self, payload: T) -> Generator[Any, Any, Dict[str, Any]]:
        """
        Generator variant: yield awaitables, return the result dict.
        """
        ...
