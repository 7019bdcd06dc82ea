"""Streaming channel: one batch at a time per connection."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import WebSocket

from allergen_lens.batch import BatchOrchestrator, EventSink, parse_batch
from allergen_lens.exceptions import InvalidBatchError
from allergen_lens.schema import BatchEvent, ErrorEvent, Recipe

logger = logging.getLogger(__name__)

PROCESS_RECIPES = "PROCESS_RECIPES"


class WebSocketEventSink:
    """Serializes events onto a websocket, one send at a time."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self._lock = asyncio.Lock()

    async def emit(self, event: BatchEvent) -> None:
        async with self._lock:
            await self.websocket.send_json(event.model_dump(mode="json"))


class ChannelSession:
    """State of one connection: a command queue drained by a single worker."""

    def __init__(self, orchestrator: BatchOrchestrator, sink: EventSink, busy_policy: str):
        self.orchestrator = orchestrator
        self.sink = sink
        self.busy_policy = busy_policy
        self.pending: asyncio.Queue[list[Recipe]] = asyncio.Queue()
        self.in_flight = 0

    async def handle_text(self, raw: str) -> None:
        try:
            message = json.loads(raw)
        except ValueError:
            logger.warning("ignoring malformed channel message")
            return
        if not isinstance(message, dict):
            logger.warning("ignoring non-object channel message")
            return

        kind = message.get("type")
        if kind != PROCESS_RECIPES:
            logger.info("ignoring channel message type %r", kind)
            return

        try:
            recipes = parse_batch(message)
        except InvalidBatchError as exc:
            await self.sink.emit(ErrorEvent(detail=str(exc)))
            return

        if self.busy_policy == "reject" and self.in_flight:
            await self.sink.emit(ErrorEvent(detail="batch already in progress"))
            return

        self.in_flight += 1
        self.pending.put_nowait(recipes)

    async def drain(self) -> None:
        while True:
            recipes = await self.pending.get()
            try:
                await self.orchestrator.process_batch(recipes, self.sink)
            except Exception as exc:
                logger.warning("abandoning batch, channel send failed: %s", exc)
                return
            finally:
                self.in_flight -= 1


class BatchChannel:
    """Serves the PROCESS_RECIPES protocol over a websocket."""

    def __init__(self, orchestrator: BatchOrchestrator, busy_policy: str = "queue"):
        if busy_policy not in {"queue", "reject"}:
            raise ValueError(f"Unsupported busy policy: {busy_policy}")
        self.orchestrator = orchestrator
        self.busy_policy = busy_policy

    async def serve(self, websocket: WebSocket) -> None:
        await websocket.accept()
        session = ChannelSession(self.orchestrator, WebSocketEventSink(websocket), self.busy_policy)
        worker = asyncio.create_task(session.drain())
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    logger.info("channel closed by client")
                    break
                raw = message.get("text")
                if raw is None and message.get("bytes") is not None:
                    raw = message["bytes"].decode("utf-8", errors="replace")
                if raw is None:
                    continue
                await session.handle_text(raw)
        finally:
            worker.cancel()
            await asyncio.gather(worker, return_exceptions=True)
