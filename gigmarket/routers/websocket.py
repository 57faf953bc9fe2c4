"""
WebSocket router for real-time notifications.

Provides a WebSocket endpoint that:
1. Authenticates the bearer token once, at handshake
2. Registers the session under the user in the presence registry
3. Receives pushed notifications until the transport drops
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from gigmarket.core.deps import get_db, resolve_principal
from gigmarket.core.security import extract_bearer_token
from gigmarket.core.structured_logging import build_log_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])

CLOSE_AUTH_FAILED = 4001


@router.websocket("/notifications")
async def websocket_notifications(
    websocket: WebSocket,
    token: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    WebSocket endpoint for real-time notifications.

    Authenticates via:
    1. Bearer token in query parameter (?token=...)
    2. Or Authorization header (non-browser clients)

    Once connected, the server pushes:
    - new notifications (type: 'notification')
    - read-state changes (type: 'notification_updated')
    """
    if not token:
        token = extract_bearer_token(websocket.headers.get("authorization"))

    try:
        principal = resolve_principal(db, token)
    except HTTPException as exc:
        await websocket.close(code=CLOSE_AUTH_FAILED, reason=str(exc.detail))
        return
    finally:
        # Release the connection; the session is idle for the socket's lifetime
        db.rollback()

    presence = websocket.app.state.presence
    session_id = await presence.connect(websocket, principal.user_id)
    log_context = build_log_context(user_id=str(principal.user_id))
    logger.info("WebSocket session %s opened", session_id, extra=log_context)

    try:
        # Keep connection alive, handle incoming messages (heartbeat/pings)
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        pass
    finally:
        await presence.disconnect(principal.user_id, session_id)
        logger.info("WebSocket session %s closed", session_id, extra=log_context)
