"""Live connection endpoint: push task change events over a WebSocket."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket

from core.container import Container, get_container
from core.services.connection_bridge import ConnectionBridge

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Live"])


def _handshake_token(websocket: WebSocket, jwt: Optional[str]) -> Optional[str]:
    if jwt and jwt.strip():
        return jwt.strip()
    authorization = websocket.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


@router.websocket("/live")
@router.websocket("/websocket")
async def live_connection(
    websocket: WebSocket,
    jwt: Optional[str] = Query(default=None),
    container: Container = Depends(get_container),
):
    bridge = ConnectionBridge(
        websocket,
        authenticate_use_case=container.authenticate_use_case(),
        notification_bus=container.notification_bus(),
    )
    final_state = await bridge.run(_handshake_token(websocket, jwt))
    logger.debug("Live connection finished | username=%s | state=%s", bridge.username, final_state.value)
