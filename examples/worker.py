from __future__ import annotations

import argparse
import asyncio
from logging import basicConfig, INFO

from antiquefy.worker_runtime import (
    AsyncTaskAdapter,
    GeneratorTaskAdapter,
    AdapterRegistry,
    ZmqWorker,
)


class SampleAgentAdapter(AsyncTaskAdapter):
    kind = "sample_agent"

    async def run(self, payload):
        message = payload.get("message", "")

        print(f"[adapter] message from agent :{message}")

        ## ダミー
        await asyncio.sleep(0.1)
        result = {"final_text": f"sample_agent completed research on '{message}'"}

        return {
            "message": result,
        }


class SampleStepsAdapter(GeneratorTaskAdapter):
    kind = "sample_steps"

    def run(self, payload):
        first = yield asyncio.sleep(0.05, result="outline")
        second = yield asyncio.sleep(0.05, result="draft")
        return {"steps": [first, second], "topic": payload.get("message", "")}


def main():
    parser = argparse.ArgumentParser()

    parser.add_argument(
        "--name",
        required=True,
        help="worker name (worker1, worker2, etc)",
    )

    parser.add_argument(
        "--connect",
        default="tcp://127.0.0.1:5555",
        help="controller address",
    )

    args = parser.parse_args()

    basicConfig(level=INFO)

    registry = AdapterRegistry()

    registry.register(SampleAgentAdapter())
    registry.register(SampleStepsAdapter())

    worker = ZmqWorker(
        worker_name=args.name,
        connect_addr=args.connect,
        registry=registry,
    )
    print("start sample worker")
    try:
        worker.run()
    except KeyboardInterrupt:
        pass
    finally:
        worker.close()


if __name__ == "__main__":
    main()
