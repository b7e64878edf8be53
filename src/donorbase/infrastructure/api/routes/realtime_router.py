"""Realtime API routes.

Streams full snapshots of an event's documents (the event, its schema and
its donation list) over WebSocket or SSE. The current snapshot is sent as
soon as a topic is subscribed; later snapshots follow every committed write.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sse_starlette.sse import EventSourceResponse

from donorbase.core.config import get_settings
from donorbase.core.logging import get_logger
from donorbase.domain.entities import AccessContext
from donorbase.domain.exceptions import EventNotFoundError, InvalidEventPasswordError
from donorbase.domain.services.event_service import EventService
from donorbase.infrastructure.api.dependencies import Hub, SessionScope
from donorbase.infrastructure.realtime.snapshot_hub import (
    TOPIC_KINDS,
    SnapshotHub,
    SnapshotSubscription,
    topic_for,
)
from donorbase.infrastructure.realtime.snapshot_publisher import SnapshotPublisher

logger = get_logger(__name__)

router = APIRouter()


def get_hub_from_websocket(websocket: WebSocket) -> SnapshotHub:
    """Dependency to get the snapshot hub from websocket app state."""
    return websocket.app.state.snapshot_hub


async def _resolve_access(
    session_scope: SessionScope, event_id: str, password: str | None
) -> AccessContext:
    async with session_scope() as session:
        return await EventService(session).resolve_access(event_id, password)


async def _current_snapshot(
    session_scope: SessionScope, hub: SnapshotHub, event_id: str, kind: str
) -> dict[str, Any]:
    async with session_scope() as session:
        return await SnapshotPublisher(hub).build_snapshot(session, event_id, kind)


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    session_scope: SessionScope,
    event_id: str = Query(...),
    password: str | None = Query(default=None),
    hub: SnapshotHub = Depends(get_hub_from_websocket),
):
    """WebSocket endpoint for snapshot subscriptions on one event.

    Client messages:
        {"action": "subscribe", "topic": "event" | "schema" | "donations"}
        {"action": "unsubscribe", "topic": ...}
        {"action": "ping"}
    """
    await websocket.accept()

    try:
        access = await _resolve_access(session_scope, event_id, password)
    except (EventNotFoundError, InvalidEventPasswordError) as e:
        logger.info("Realtime access denied", event_id=event_id, reason=str(e))
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Access denied")
        return

    settings = get_settings()
    subscriptions: dict[str, tuple[SnapshotSubscription, asyncio.Task]] = {}

    async def forward(kind: str, subscription: SnapshotSubscription) -> None:
        async for snapshot in subscription:
            await websocket.send_json({"topic": kind, **snapshot})

    async def heartbeat() -> None:
        while True:
            await asyncio.sleep(settings.realtime_heartbeat_seconds)
            await websocket.send_json(
                {"type": "heartbeat", "timestamp": datetime.now(timezone.utc).isoformat()}
            )

    def cancel(kind: str) -> None:
        subscription, task = subscriptions.pop(kind)
        subscription.cancel()
        task.cancel()

    logger.info("WebSocket connected", event_id=event_id, role=access.role.value)
    heartbeat_task = asyncio.create_task(heartbeat())

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await websocket.send_json({"error": "Invalid JSON"})
                continue

            action = message.get("action")
            kind = message.get("topic")

            if action == "subscribe":
                if kind not in TOPIC_KINDS:
                    await websocket.send_json(
                        {"error": f"Unknown topic. Valid topics: {', '.join(TOPIC_KINDS)}"}
                    )
                    continue
                if kind in subscriptions:
                    await websocket.send_json({"status": "subscribed", "topic": kind})
                    continue
                if len(subscriptions) >= settings.realtime_max_subscriptions:
                    await websocket.send_json({"error": "Max subscriptions reached"})
                    continue

                subscription = hub.subscribe(topic_for(event_id, kind))
                subscriptions[kind] = (
                    subscription,
                    asyncio.create_task(forward(kind, subscription)),
                )
                await websocket.send_json({"status": "subscribed", "topic": kind})
                # Full current state first, unless a write already published a newer one
                snapshot = await _current_snapshot(session_scope, hub, event_id, kind)
                subscription.deliver_initial(snapshot)

            elif action == "unsubscribe":
                if kind in subscriptions:
                    cancel(kind)
                await websocket.send_json({"status": "unsubscribed", "topic": kind})

            elif action == "ping":
                await websocket.send_json({"type": "pong"})

            else:
                await websocket.send_json({"error": f"Unknown action '{action}'"})

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected", event_id=event_id)
    except Exception as e:
        logger.error("WebSocket error", event_id=event_id, error=str(e))
    finally:
        heartbeat_task.cancel()
        for kind in list(subscriptions):
            cancel(kind)


@router.get(
    "/events/{event_id}/{topic}",
    responses={
        400: {"description": "Unknown topic"},
        401: {"description": "Missing or invalid password"},
        404: {"description": "Event not found"},
    },
)
async def sse_endpoint(
    request: Request,
    event_id: str,
    topic: str,
    hub: Hub,
    session_scope: SessionScope,
    x_event_password: str | None = Header(default=None),
    password: str | None = Query(default=None),
):
    """SSE stream of full snapshots for one topic of an event.

    The password is read from the ``X-Event-Password`` header or, for
    browser EventSource clients, from the ``password`` query parameter.
    """
    if topic not in TOPIC_KINDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown topic. Valid topics: {', '.join(TOPIC_KINDS)}",
        )

    try:
        await _resolve_access(session_scope, event_id, x_event_password or password)
    except InvalidEventPasswordError:
        raise HTTPException(status_code=401, detail="Invalid event password")

    heartbeat_seconds = get_settings().realtime_heartbeat_seconds
    subscription = hub.subscribe(topic_for(event_id, topic))
    subscription.deliver_initial(await _current_snapshot(session_scope, hub, event_id, topic))

    async def event_generator():
        try:
            while not subscription.cancelled:
                if await request.is_disconnected():
                    break
                try:
                    snapshot = await subscription.next(timeout=heartbeat_seconds)
                except asyncio.TimeoutError:
                    yield {
                        "event": "heartbeat",
                        "data": json.dumps({"timestamp": datetime.now(timezone.utc).isoformat()}),
                    }
                    continue
                if snapshot is None:
                    break
                yield {"event": "snapshot", "data": json.dumps(snapshot)}
        finally:
            subscription.cancel()

    return EventSourceResponse(event_generator())
