"""Out-of-band creation of host-page sessions.

Only callable from the host machine itself. The returned session id (also set
as a cookie) lets another device on the LAN open the host page until it expires.
"""

from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from audiocast.api.dependency import SessionStoreDep, require_loopback
from audiocast.schemas import SessionRole
from audiocast.shared.api.utils import ApiSuccess

router = APIRouter(prefix="/api/host-sessions", dependencies=[Depends(require_loopback)])


class HostSessionOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    role: SessionRole
    created_at: datetime
    expires_at: datetime


class HostSessionApiOut(ApiSuccess):
    results: HostSessionOut


@router.post("", response_model_by_alias=True)
async def create_host_session(
    request: Request,
    response: Response,
    store: SessionStoreDep,
) -> HostSessionApiOut:
    session = store.create(SessionRole.HOST)
    expires_at = store.expires_at(session)

    response.set_cookie(
        key=request.app.state.settings.SESSION_COOKIE_NAME,
        value=session.session_id,
        max_age=int(store.max_age / timedelta(seconds=1)),
        httponly=True,
        samesite="lax",
    )

    return HostSessionApiOut(
        results=HostSessionOut(
            session_id=session.session_id,
            role=session.role,
            created_at=session.created_at,
            expires_at=expires_at,
        )
    )
