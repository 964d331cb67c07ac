"""
Real-time route — WebSocket endpoint for dashboard subscribers.

Connect with ws://host/ws?token=<access token>. The server pushes
{"event", "data"} messages; a client may send "ping" and gets a pong back.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from app.container import get_notifier
from app.core.auth import authenticate_token
from app.core.constants.events import PONG
from app.services.notifier import WebSocketNotifier

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    notifier: WebSocketNotifier = Depends(get_notifier),
):
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    try:
        user = await authenticate_token(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await notifier.connect(websocket)
    logger.info(f"Subscriber {user['user_id']} joined")
    try:
        while True:
            message = await websocket.receive_text()
            if message.strip() == "ping":
                await notifier.send_to(websocket, PONG)
    except WebSocketDisconnect:
        pass
    finally:
        notifier.disconnect(websocket)
