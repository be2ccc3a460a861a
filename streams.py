import asyncio, json
from typing import AsyncGenerator, Dict, List, Tuple

class StreamHub:
    """Per-request SSE fan-out. Emitting to a request nobody watches is a no-op."""

    def __init__(self, heartbeat_s: float = 2.0):
        self.heartbeat_s = heartbeat_s
        self._subs: Dict[str, List[Tuple[asyncio.Queue, asyncio.Task]]] = {}

    async def subscribe(self, request_id: str) -> AsyncGenerator[str, None]:
        q: asyncio.Queue = asyncio.Queue()
        # keep proxies from buffering an idle stream
        async def _heartbeat():
            try:
                while True:
                    await asyncio.sleep(self.heartbeat_s)
                    q.put_nowait({"type": "ping", "t": asyncio.get_running_loop().time()})
            except asyncio.CancelledError:
                pass

        task = asyncio.create_task(_heartbeat())
        self._subs.setdefault(request_id, []).append((q, task))
        try:
            yield f"data: {json.dumps({'type': 'connected', 'requestId': request_id})}\n\n"
            while True:
                event = await q.get()
                yield f"data: {json.dumps(event)}\n\n"
        finally:
            task.cancel()
            subs = self._subs.get(request_id) or []
            for i, (qq, _tt) in enumerate(subs):
                if qq is q:
                    subs.pop(i)
                    break
            if not subs:
                self._subs.pop(request_id, None)

    def subscribers(self, request_id: str) -> int:
        return len(self._subs.get(request_id, []))

    async def emit(self, request_id: str, event: dict):
        for q, _task in self._subs.get(request_id, []):
            q.put_nowait(event)

hub = StreamHub()
