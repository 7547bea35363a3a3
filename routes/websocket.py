import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

websocket_router = APIRouter(
    tags=["websocket"])

# WebSocket-Verbindungen
active_connections: list[WebSocket] = []

@websocket_router.websocket("/ws/events")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for reservation, order and table events.

    Accepts a WebSocket connection and keeps it open until the client disconnects.
    Messages received from the client are ignored.

    Args:
        websocket (WebSocket): The incoming WebSocket connection.
    """
    await websocket.accept()
    active_connections.append(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        active_connections.remove(websocket)

async def broadcast_event(event_type: str, data: dict):
    """
    Broadcasts an event to all active WebSocket connections.

    Args:
        event_type (str): The type of event (e.g., "RESERVATION_CREATED").
        data (dict): JSON-serialisable payload sent to clients.
    """
    message = json.dumps({
        "event": event_type,
        "data": data
    })
    for connection in list(active_connections):
        try:
            await connection.send_text(message)
        except Exception:
            logger.warning("Dropping websocket connection after failed send", exc_info=True)
            if connection in active_connections:
                active_connections.remove(connection)
