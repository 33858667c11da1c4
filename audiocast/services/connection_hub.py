"""WebSocket transport: per-connection ordered outbound delivery."""

import asyncio
from typing import Any

import orjson
from fastapi import WebSocket
from loguru import logger
from pydantic import BaseModel

from audiocast.schemas import ConnectionId


def encode_frame(event: str, data: Any = None) -> str:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json", by_alias=True)
    return orjson.dumps({"event": str(event), "data": data}).decode()


class ConnectionHub:
    """Maps connection ids to sockets and delivers frames in send order.

    Each attached socket gets an unbounded queue drained by its own writer task,
    so `send` and `broadcast` never block the caller. Frames left in a queue when
    the socket detaches are discarded. A socket whose write fails stops receiving
    at once: later sends to it return False.
    """

    def __init__(self):
        self._queues: dict[ConnectionId, asyncio.Queue[str]] = {}
        self._writers: dict[ConnectionId, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._queues)

    def is_attached(self, connection_id: ConnectionId) -> bool:
        return connection_id in self._queues

    def attach(self, websocket: WebSocket) -> ConnectionId:
        """Start delivering to an accepted socket and return its new id."""
        connection_id = ConnectionId.new()
        queue: asyncio.Queue[str] = asyncio.Queue()
        self._queues[connection_id] = queue
        self._writers[connection_id] = asyncio.create_task(
            self._write_loop(connection_id, websocket, queue),
            name=f"ws-writer-{connection_id}",
        )
        logger.info("Socket connected {} ({} open)", connection_id, len(self._queues))
        return connection_id

    def detach(self, connection_id: ConnectionId) -> None:
        """Stop delivering to a socket. Synchronous so it is safe in cancelled scopes."""
        self._queues.pop(connection_id, None)
        writer = self._writers.pop(connection_id, None)
        if writer is not None and not writer.done():
            writer.cancel()
        logger.info("Socket disconnected {} ({} open)", connection_id, len(self._queues))

    def send(self, connection_id: ConnectionId, event: str, data: Any = None) -> bool:
        queue = self._queues.get(connection_id)
        if queue is None:
            return False
        queue.put_nowait(encode_frame(event, data))
        return True

    def broadcast(self, event: str, data: Any = None) -> int:
        frame = encode_frame(event, data)
        for queue in self._queues.values():
            queue.put_nowait(frame)
        return len(self._queues)

    async def close_all(self) -> None:
        writers = list(self._writers.values())
        for connection_id in list(self._queues):
            self.detach(connection_id)
        if writers:
            await asyncio.gather(*writers, return_exceptions=True)

    async def _write_loop(self, connection_id: ConnectionId, websocket: WebSocket, queue: asyncio.Queue[str]):
        while True:
            frame = await queue.get()
            try:
                await websocket.send_text(frame)
            except Exception as exc:
                # Socket is gone; stop queueing for it. The receive side still runs the disconnect path.
                logger.debug("Write to {} failed: {}: {}", connection_id, type(exc).__name__, exc)
                if self._queues.get(connection_id) is queue:
                    del self._queues[connection_id]
                    self._writers.pop(connection_id, None)
                return
