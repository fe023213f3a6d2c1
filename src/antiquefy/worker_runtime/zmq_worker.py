from __future__ import annotations
import asyncio
import json
from typing import Any, Callable, Dict, Optional, Set

import zmq
import zmq.asyncio
from logging import getLogger


logger = getLogger(__name__)


from antiquefy.worker_runtime.registry import AdapterRegistry


Reply = Callable[[Dict[str, Any]], None]


def _j(obj) -> bytes:
    return json.dumps(obj, ensure_ascii=False).encode("utf-8")


def _uj(b: bytes):
    return json.loads(b.decode("utf-8"))


class ZmqWorker:
    """
    DEALER worker.
    controller(ROUTER)から task.run を受け取り、callback-last の handler を実行して
    task.result を返す。handler は registry が antiquefy したもの。
    """

    def __init__(
        self,
        *,
        worker_name: str,
        connect_addr: str,
        registry: AdapterRegistry,
        ctx: Optional[zmq.asyncio.Context] = None,
    ) -> None:
        self.worker_name = worker_name
        self.connect_addr = connect_addr
        self.registry = registry

        self._ctx = ctx or zmq.asyncio.Context.instance()
        self._sock = self._ctx.socket(zmq.DEALER)
        self._sock.setsockopt(zmq.IDENTITY, worker_name.encode("utf-8"))
        self._sock.setsockopt(zmq.LINGER, 0)
        self._sock.connect(connect_addr)

        # 送信中の send_multipart future
        self._sending: Set[asyncio.Future] = set()

    def run(self) -> None:
        asyncio.run(self.serve_forever())

    async def serve_forever(self) -> None:
        logger.info("worker start: name=%s connect=%s", self.worker_name, self.connect_addr)
        try:
            while True:
                # DEALER: [empty][payload] が来る（ROUTER側が empty を挟むため）
                parts = await self._sock.recv_multipart()
                data = _uj(parts[-1])

                if data.get("type") != "task.run":
                    continue

                self.handle_task(data, self._send)
        finally:
            logger.info("worker stop: name=%s", self.worker_name)

    def close(self) -> None:
        self._sock.close(0)

    def handle_task(self, data: Dict[str, Any], reply: Reply) -> None:
        """
        Run one task.run message; `reply` gets exactly one task.result message.
        Must be called from a running event loop.
        """
        task_id = data["task_id"]
        kind = data["kind"]
        turn_id = data["turn_id"]
        payload = data.get("payload") or {}

        def on_done(error: Optional[BaseException], out: Any = None) -> None:
            if error is not None:
                msg = self._failed(task_id, kind, turn_id, error)
            else:
                try:
                    msg = self._done(task_id, kind, turn_id, out)
                    _j(msg)  # JSON にできない結果は FAILED で返す
                except Exception as e:
                    msg = self._failed(task_id, kind, turn_id, e)
            reply(msg)

        try:
            handler = self.registry.get(kind)
        except KeyError as e:
            asyncio.get_running_loop().call_soon(on_done, e)
            return

        handler(payload, on_done)  # 外部agent invoke は adapter 内でやる

    def _send(self, msg: Dict[str, Any]) -> None:
        fut = self._sock.send_multipart([b"", _j(msg)])
        self._sending.add(fut)
        fut.add_done_callback(self._sent)

    def _sent(self, fut: asyncio.Future) -> None:
        self._sending.discard(fut)
        if fut.cancelled():
            return
        e = fut.exception()
        if e is not None:
            logger.error("send failed: name=%s: %r", self.worker_name, e)

    def _done(self, task_id: str, kind: str, turn_id: str, out: Any) -> Dict[str, Any]:
        out = out or {}
        if not isinstance(out, dict):
            out = {"value": out}
        out.setdefault("schema_version", 1)

        return {
            "type": "task.result",
            "worker": self.worker_name,
            "task_id": task_id,
            "kind": kind,
            "turn_id": turn_id,
            "status": "DONE",
            "payload": out,
        }

    def _failed(
        self, task_id: str, kind: str, turn_id: str, e: BaseException
    ) -> Dict[str, Any]:
        logger.warning("task failed: task_id=%s kind=%s: %r", task_id, kind, e)
        return {
            "type": "task.result",
            "worker": self.worker_name,
            "task_id": task_id,
            "kind": kind,
            "turn_id": turn_id,
            "status": "FAILED",
            "payload": {
                "schema_version": 1,
                "error": {
                    "code": "worker_error",
                    "message": f"{type(e).__name__}: {e}",
                },
            },
        }
