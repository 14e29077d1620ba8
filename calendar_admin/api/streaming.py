"""Push transports for registry snapshots: Server-Sent Events and WebSocket."""
import asyncio
import json
from typing import AsyncGenerator, List

from starlette.requests import Request
from starlette.websockets import WebSocket

from calendar_admin.config import UPDATE_EVENT
from calendar_admin.notifications import NotificationChannel
from calendar_admin.registry import DateRegistry

# Seconds between disconnect checks / keep-alive comments on SSE streams
HEARTBEAT_SECONDS = 15.0


def format_sse_event(dates: List[str]) -> str:
    """Format a snapshot as an SSE updateDates event."""
    return f"event: {UPDATE_EVENT}\ndata: {json.dumps(dates)}\n\n"


def update_message(dates: List[str]) -> dict:
    """WebSocket frame for a snapshot."""
    return {"event": UPDATE_EVENT, "dates": dates}


async def stream_snapshots(
    request: Request,
    registry: DateRegistry,
    channel: NotificationChannel,
    heartbeat: float = HEARTBEAT_SECONDS,
) -> AsyncGenerator[str, None]:
    """
    Stream registry snapshots as Server-Sent Events.

    The first event is the current snapshot for this observer only; after
    that every published snapshot is forwarded until the client disconnects.

    Args:
        request: Incoming request (used for disconnect detection)
        registry: Registry to read the initial snapshot from
        channel: Channel to subscribe to
        heartbeat: Idle interval before a keep-alive comment is sent

    Yields:
        SSE-formatted strings
    """
    subscription = channel.subscribe()
    try:
        yield format_sse_event(registry.list())

        while not await request.is_disconnected():
            snapshot = await subscription.next_snapshot(timeout=heartbeat)
            if snapshot is None:
                yield ": keep-alive\n\n"
                continue
            yield format_sse_event(snapshot)
    finally:
        channel.unsubscribe(subscription)


async def _forward_snapshots(websocket: WebSocket, subscription):
    while True:
        snapshot = await subscription.next_snapshot()
        await websocket.send_json(update_message(snapshot))


async def serve_websocket(
    websocket: WebSocket,
    registry: DateRegistry,
    channel: NotificationChannel,
):
    """
    Serve one WebSocket observer until it disconnects.

    Sends the current snapshot on connect, then forwards published ones.
    Incoming frames are read only to notice the disconnect.
    """
    await websocket.accept()
    subscription = channel.subscribe()
    forwarder = None
    try:
        await websocket.send_json(update_message(registry.list()))
        forwarder = asyncio.create_task(_forward_snapshots(websocket, subscription))

        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        # Unsubscribe before any await: a cancelled scope interrupts the rest
        channel.unsubscribe(subscription)
        if forwarder is not None:
            forwarder.cancel()
            await asyncio.gather(forwarder, return_exceptions=True)
