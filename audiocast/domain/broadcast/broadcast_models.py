"""Wire payloads exchanged over the signaling socket."""

import math
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from audiocast.schemas import QualityReport


class SignalEvent(str, Enum):
    # client -> server
    REGISTER_HOST = "register-host"
    ANNOUNCE_STREAMING = "announce-streaming"
    HOST_STOPPED_STREAMING = "host-stopped-streaming"
    VIEWER_JOIN = "viewer-join"
    VIEWER_LEAVE = "viewer-leave"
    DISCONNECT_VIEWER = "disconnect-viewer"

    # relayed in both directions
    WEBRTC_OFFER = "webrtc-offer"
    WEBRTC_ANSWER = "webrtc-answer"
    WEBRTC_ICE_CANDIDATE = "webrtc-ice-candidate"
    LISTENER_STATS = "listener-stats"

    # server -> client
    CONNECTED = "connected"
    HOST_CONFIRMED = "host-confirmed"
    NO_HOST = "no-host"
    VIEWER_JOINED = "viewer-joined"
    VIEWER_LEFT = "viewer-left"
    HOST_LEFT = "host-left"
    HOST_STREAMING = "host-streaming"
    HOST_STOPPED = "host-stopped"
    DISCONNECT_REQUEST = "disconnect-request"
    STATS = "stats"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignalFrame(BaseModel):
    """Envelope of every frame on the socket: `{"event": ..., "data": ...}`."""

    event: str
    data: Any = None


class OfferIn(WireModel):
    viewer_id: str
    sdp: Any


class AnswerIn(WireModel):
    host_id: str
    sdp: Any


class IceCandidateIn(WireModel):
    target_id: str | None = None
    candidate: Any = None


class DisconnectViewerIn(WireModel):
    viewer_id: str


def _parse_metric(value: Any) -> float | None:
    """Read a metric the way listener pages send it: number, numeric string, "1.5%" or "-"."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class ListenerStatsIn(WireModel):
    """Quality metrics sampled by a listener's peer connection.

    Listener pages send `toFixed()` strings, `"-"` before the first sample and
    `fractionLoss` as a percentage such as `"1.5%"`. Anything that does not
    parse reads as missing; parsing never rejects a sample.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    rtt_ms: float | None = None
    jitter_ms: float | None = None
    bitrate_kbps: float | None = None
    fraction_loss: float | None = None
    packets_lost: int | None = None
    packets_recv: int | None = None

    @field_validator("rtt_ms", "jitter_ms", "bitrate_kbps", "fraction_loss", mode="before")
    @classmethod
    def _lenient_number(cls, value: Any) -> float | None:
        return _parse_metric(value)

    @field_validator("packets_lost", "packets_recv", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> int | None:
        number = _parse_metric(value)
        return int(number) if number is not None else None

    def to_quality_report(self) -> QualityReport:
        return QualityReport(
            rtt_ms=self.rtt_ms,
            jitter_ms=self.jitter_ms,
            bitrate_kbps=self.bitrate_kbps,
            loss_pct=self.fraction_loss,
        )


# Raw listener-stats payload; any JSON object is relayed as is.
ListenerStatsPayload = TypeAdapter(dict[str, Any])


class StatsSnapshot(WireModel):
    viewer_count: int
    host_present: bool
    viewer_ids: list[str]


class ErrorOut(BaseModel):
    errcode: str
    errmesg: str
