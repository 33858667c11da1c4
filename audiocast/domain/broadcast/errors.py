from audiocast.schemas import ConnectionId, ConnectionRole
from audiocast.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class NoHostError(AppError):
    """Raised when a viewer tries to join while no host is registered."""

    def __init__(self, connection_id: ConnectionId):
        super().__init__(
            errcode=AppErrorCode.E_NO_HOST,
            errmesg=f"No host registered, viewer {connection_id} cannot join",
            status_code=HttpStatusCode.CONFLICT,
        )
        self.connection_id = connection_id


class InvalidRoleTransitionError(AppError):
    def __init__(self, connection_id: ConnectionId, current: ConnectionRole, new: ConnectionRole):
        super().__init__(
            errcode=AppErrorCode.E_INVALID_ROLE,
            errmesg=f"Invalid role transition for {connection_id}: {current} -> {new}",
            status_code=HttpStatusCode.BAD_REQUEST,
        )
        self.connection_id = connection_id
        self.current = current
        self.new = new
