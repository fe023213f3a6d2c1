from .adapters import TaskAdapter, AsyncTaskAdapter, GeneratorTaskAdapter
from .zmq_worker import ZmqWorker
from .registry import AdapterRegistry

__all__ = [
    "TaskAdapter",
    "AsyncTaskAdapter",
    "GeneratorTaskAdapter",
    "ZmqWorker",
    "AdapterRegistry",
]
