from ulid import ULID


def new_ulid(prefix: str | None = None) -> str:
    value = str(ULID()).lower()
    return f"{prefix}{value}" if prefix else value


def new_connection_id() -> str:
    return new_ulid("cn_")


def new_host_session_id() -> str:
    return new_ulid("hs_")
