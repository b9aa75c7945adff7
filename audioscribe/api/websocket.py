"""WebSocket endpoint for live captions.

Every session event (state changes, interim transcripts, committed
captions, the finalized recording, recognizer errors) is pushed to the
client as a JSON ``WebSocketMessage``.

The client may drive the session with JSON commands::

    {"action": "start"}   # open the microphone and begin captioning
    {"action": "stop"}    # stop; a no-op while idle
    {"action": "state"}   # request a full snapshot, history included

Disconnecting does not stop the session; it keeps running for REST clients.
"""

import asyncio
import contextlib
import logging
from functools import partial

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from audioscribe.api.dependencies import get_caption_session
from audioscribe.core.exceptions import AudioScribeError
from audioscribe.core.models import WebSocketMessage, WebSocketMessageType
from audioscribe.services.captioning import CaptionSession

logger = logging.getLogger(__name__)

router = APIRouter()

# Events buffered per client before new ones are dropped.
MAX_PENDING_EVENTS = 256


async def _send(websocket: WebSocket, message: WebSocketMessage) -> None:
    await websocket.send_json(message.model_dump(mode="json"))


async def _send_error(websocket: WebSocket, detail: str, code: str) -> None:
    await _send(
        websocket,
        WebSocketMessage(type=WebSocketMessageType.error, data={"detail": detail, "code": code}),
    )


async def _forward(websocket: WebSocket, queue: asyncio.Queue[WebSocketMessage]) -> None:
    """Relay session events to the client until cancelled."""
    while True:
        await _send(websocket, await queue.get())


def _enqueue(queue: asyncio.Queue[WebSocketMessage], message: WebSocketMessage) -> None:
    try:
        queue.put_nowait(message)
    except asyncio.QueueFull:
        logger.warning("Caption client is not keeping up; dropped %s event", message.type)


async def _stop_forwarder(forwarder: asyncio.Task) -> None:
    """Cancel the relay task and collect its outcome."""
    forwarder.cancel()
    try:
        with contextlib.suppress(asyncio.CancelledError):
            await forwarder
    except Exception as exc:
        logger.debug("Caption event relay ended with %r", exc)


async def _handle_command(websocket: WebSocket, session: CaptionSession, payload) -> None:
    action = payload.get("action") if isinstance(payload, dict) else None
    if action == "start":
        try:
            await session.start()
        except AudioScribeError as exc:
            await _send_error(websocket, exc.detail, exc.code)
    elif action == "stop":
        session.stop()
    elif action == "state":
        await _send(
            websocket,
            WebSocketMessage(
                type=WebSocketMessageType.state,
                data=session.snapshot().model_dump(mode="json"),
            ),
        )
    else:
        await _send_error(websocket, f"Unknown action: {action}", "UNKNOWN_ACTION")


@router.websocket("/ws/captions")
async def captions_ws(
    websocket: WebSocket,
    session: CaptionSession = Depends(get_caption_session),
) -> None:
    """Stream caption session events and accept start/stop commands."""
    await websocket.accept()
    logger.info("Caption WebSocket connected")

    queue: asyncio.Queue[WebSocketMessage] = asyncio.Queue(maxsize=MAX_PENDING_EVENTS)
    listener = partial(_enqueue, queue)
    session.add_listener(listener)

    await _send(
        websocket,
        WebSocketMessage(
            type=WebSocketMessageType.connected,
            data=session.snapshot().model_dump(mode="json"),
        ),
    )
    forwarder = asyncio.create_task(_forward(websocket, queue))

    try:
        while True:
            try:
                payload = await websocket.receive_json()
            except ValueError:
                await _send_error(websocket, "Messages must be JSON objects", "INVALID_MESSAGE")
                continue
            await _handle_command(websocket, session, payload)
    except WebSocketDisconnect:
        logger.info("Caption WebSocket disconnected")
    finally:
        session.remove_listener(listener)
        await _stop_forwarder(forwarder)
