"""Application error types shared by the HTTP and WebSocket surfaces."""

import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_UNKNOWN_EVENT = "E_UNKNOWN_EVENT"
    E_NO_HOST = "E_NO_HOST"
    E_INVALID_ROLE = "E_INVALID_ROLE"
    E_NOT_LOOPBACK = "E_NOT_LOOPBACK"

    def __str__(self) -> str:
        return self.value


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500


class AppError(Exception):
    """Error carrying an error code, a message and the HTTP status to report.

    The caller location is captured when the error is created so the handler can
    log where it originated rather than where it was caught.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str,
        errmesg: str,
        status_code: int = HttpStatusCode.BAD_REQUEST,
    ):
        super().__init__(errmesg)
        self.errcode = str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]
        self.caller_info = self._capture_caller()

    @staticmethod
    def _capture_caller() -> str:
        frame = inspect.currentframe()
        # Skip this helper, __init__ and any subclass __init__ frames.
        while frame is not None and frame.f_code.co_name in {"_capture_caller", "__init__"}:
            frame = frame.f_back
        if frame is None:
            return "unknown"
        module = frame.f_globals.get("__name__", frame.f_code.co_filename)
        return f"{module}:{frame.f_code.co_name}:{frame.f_lineno}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(errcode={self.errcode!r}, errmesg={self.errmesg!r})"
