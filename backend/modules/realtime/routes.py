"""
WebSocket endpoint for live channels.

Clients connect with ``/api/ws?token=<access token>`` (or an
``Authorization: Bearer`` header) and send
``{"action": "subscribe" | "unsubscribe", "channel": "..."}``.
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from api.dependencies import get_event_broadcaster, get_token_service, get_workspace_authorizer
from modules.sessions.exceptions import UnauthenticatedError
from modules.sessions.interfaces import ITokenService
from modules.workspaces.exceptions import NotAMemberError
from modules.workspaces.interfaces import IWorkspaceAuthorizer

from .broadcaster import EventBroadcaster
from .exceptions import ChannelForbiddenError, InvalidChannelError
from .models import SubscriptionMessage, parse_channel

logger = logging.getLogger(__name__)

router = APIRouter()

WS_UNAUTHORIZED = 4401


def _extract_token(websocket: WebSocket) -> Optional[str]:
    token = websocket.query_params.get("token")
    if token:
        return token
    auth = websocket.headers.get("authorization")
    if auth and auth.lower().startswith("bearer "):
        return auth.split(" ", 1)[1]
    return None


def check_channel_access(
    channel: str,
    user_id: str,
    authorizer: IWorkspaceAuthorizer,
) -> None:
    """Workspace channels need membership; user channels only the caller's own id."""
    ref = parse_channel(channel)
    if ref.kind == "user":
        if ref.id != user_id:
            raise ChannelForbiddenError(channel)
        return
    try:
        authorizer.require_member(ref.id, user_id)
    except NotAMemberError:
        raise ChannelForbiddenError(channel)


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    tokens: ITokenService = Depends(get_token_service),
    authorizer: IWorkspaceAuthorizer = Depends(get_workspace_authorizer),
    broadcaster: EventBroadcaster = Depends(get_event_broadcaster),
) -> None:
    try:
        user_id = tokens.verify_access(_extract_token(websocket))
    except UnauthenticatedError:
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    registry = broadcaster.registry
    await websocket.accept()
    logger.debug("WebSocket connected for user %s", user_id)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = SubscriptionMessage.model_validate(json.loads(raw))
            except (ValueError, PydanticValidationError):
                await websocket.send_json({"error": "invalid_message"})
                continue

            if message.action == "unsubscribe":
                registry.unsubscribe(message.channel, websocket)
                await websocket.send_json({"status": "unsubscribed", "channel": message.channel})
                continue

            try:
                check_channel_access(message.channel, user_id, authorizer)
            except (InvalidChannelError, ChannelForbiddenError) as e:
                await websocket.send_json({"error": e.message, "channel": message.channel})
                continue

            registry.subscribe(message.channel, websocket)
            await websocket.send_json({"status": "subscribed", "channel": message.channel})
    except WebSocketDisconnect:
        logger.debug("WebSocket disconnected for user %s", user_id)
    finally:
        registry.disconnect(websocket)
