"""Signaling socket shared by the host page and the listener page.

Every frame in either direction is a JSON object `{"event": name, "data": payload}`.
"""

from collections.abc import Callable
from typing import Any

import orjson
from fastapi import APIRouter, WebSocket
from loguru import logger
from pydantic import ValidationError

from audiocast.domain.broadcast.broadcast_domain import BroadcastService
from audiocast.domain.broadcast.broadcast_models import (
    AnswerIn,
    DisconnectViewerIn,
    ErrorOut,
    IceCandidateIn,
    ListenerStatsPayload,
    OfferIn,
    SignalEvent,
    SignalFrame,
)
from audiocast.schemas import ConnectionId
from audiocast.services.connection_hub import ConnectionHub
from audiocast.utils.app_errors import AppError, AppErrorCode

router = APIRouter()


def _on_register_host(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    service.register_host(sender)


def _on_announce_streaming(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    service.announce_streaming(sender)


def _on_host_stopped_streaming(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    service.host_stopped_streaming(sender)


def _on_viewer_join(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    service.viewer_join(sender)


def _on_viewer_leave(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    service.viewer_leave(sender)


def _on_offer(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    offer = OfferIn.model_validate(data)
    service.relay_offer(ConnectionId(offer.viewer_id), offer.sdp, sender)


def _on_answer(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    answer = AnswerIn.model_validate(data)
    service.relay_answer(ConnectionId(answer.host_id), answer.sdp, sender)


def _on_ice_candidate(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    ice = IceCandidateIn.model_validate(data or {})
    target_id = ConnectionId(ice.target_id) if ice.target_id else None
    service.relay_ice_candidate(target_id, ice.candidate, sender)


def _on_listener_stats(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    service.relay_listener_stats(sender, ListenerStatsPayload.validate_python(data or {}))


def _on_disconnect_viewer(service: BroadcastService, sender: ConnectionId, data: Any) -> None:
    request = DisconnectViewerIn.model_validate(data)
    service.request_viewer_disconnect(sender, ConnectionId(request.viewer_id))


EVENT_HANDLERS: dict[str, Callable[[BroadcastService, ConnectionId, Any], None]] = {
    SignalEvent.REGISTER_HOST.value: _on_register_host,
    SignalEvent.ANNOUNCE_STREAMING.value: _on_announce_streaming,
    SignalEvent.HOST_STOPPED_STREAMING.value: _on_host_stopped_streaming,
    SignalEvent.VIEWER_JOIN.value: _on_viewer_join,
    SignalEvent.VIEWER_LEAVE.value: _on_viewer_leave,
    SignalEvent.WEBRTC_OFFER.value: _on_offer,
    SignalEvent.WEBRTC_ANSWER.value: _on_answer,
    SignalEvent.WEBRTC_ICE_CANDIDATE.value: _on_ice_candidate,
    SignalEvent.LISTENER_STATS.value: _on_listener_stats,
    SignalEvent.DISCONNECT_VIEWER.value: _on_disconnect_viewer,
}


def _reply_error(hub: ConnectionHub, connection_id: ConnectionId, errcode: str, errmesg: str) -> None:
    logger.warning("{} for {}: {}", errcode, connection_id, errmesg)
    hub.send(connection_id, SignalEvent.ERROR, ErrorOut(errcode=errcode, errmesg=errmesg))


def dispatch_frame(
    service: BroadcastService,
    hub: ConnectionHub,
    connection_id: ConnectionId,
    raw: str | bytes,
) -> None:
    """Handle one inbound frame. Bad frames get an `error` reply; the socket stays open."""
    try:
        frame = SignalFrame.model_validate(orjson.loads(raw))
    except (orjson.JSONDecodeError, ValidationError) as exc:
        _reply_error(hub, connection_id, AppErrorCode.E_INVALID_PARAMS.value, f"Malformed frame: {exc}")
        return

    handler = EVENT_HANDLERS.get(frame.event)
    if handler is None:
        _reply_error(hub, connection_id, AppErrorCode.E_UNKNOWN_EVENT.value, f"Unknown event: {frame.event}")
        return

    try:
        handler(service, connection_id, frame.data)
    except ValidationError as exc:
        _reply_error(
            hub,
            connection_id,
            AppErrorCode.E_INVALID_PARAMS.value,
            f"Invalid {frame.event} payload: {exc.errors(include_url=False)}",
        )
    except AppError as exc:
        _reply_error(hub, connection_id, exc.errcode, exc.errmesg)


@router.websocket("/ws")
async def signaling_socket(websocket: WebSocket):
    hub: ConnectionHub = websocket.app.state.hub
    service: BroadcastService = websocket.app.state.broadcast_service

    await websocket.accept()
    connection_id = hub.attach(websocket)
    service.connect(connection_id)
    hub.send(connection_id, SignalEvent.CONNECTED, {"id": str(connection_id)})

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            dispatch_frame(service, hub, connection_id, raw)
    finally:
        service.disconnect(connection_id)
        hub.detach(connection_id)
