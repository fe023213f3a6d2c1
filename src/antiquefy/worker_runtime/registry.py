from __future__ import annotations
from typing import Dict, List, Union

from antiquefy.core import AdaptedFunction, antiquefy
from .adapters import TaskAdapter, AsyncTaskAdapter, GeneratorTaskAdapter

AnyTaskAdapter = Union[TaskAdapter, AsyncTaskAdapter, GeneratorTaskAdapter]


class AdapterRegistry:
    """
    kind -> callback-last handler。

    adapter.run は sync / async / generator のどれでもよい。
    登録時に antiquefy して handler(payload, callback) の形で保持する。
    """

    def __init__(self) -> None:
        self._m: Dict[str, AdaptedFunction] = {}

    def register(self, adapter: AnyTaskAdapter) -> None:
        self._m[adapter.kind] = antiquefy(adapter.run)

    def get(self, kind: str) -> AdaptedFunction:
        if kind not in self._m:
            raise KeyError(f"adapter not found for kind={kind}")
        return self._m[kind]

    def kinds(self) -> List[str]:
        return sorted(self._m)
