from pydantic import BaseModel

from audiocast.shared.config import config


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class AppEnvironConfig(BaseModel):
    # Server binding
    HOST: str = (config.get("HOST") or "").strip() or "0.0.0.0"
    PORT: int = config.get_int("PORT", 3000)

    DEBUG: bool = config.get_bool("DEBUG", False)

    API_CORS_ORIGINS: list[str] = _split_csv(config.get("API_CORS_ORIGINS") or "*")

    # Host-page sessions
    SESSION_MAX_AGE_SECONDS: int = config.get_int("SESSION_MAX_AGE_SECONDS", 24 * 60 * 60)
    SESSION_SWEEP_INTERVAL_SECONDS: int = config.get_int("SESSION_SWEEP_INTERVAL_SECONDS", 60 * 60)
    SESSION_COOKIE_NAME: str = (
        config.get("SESSION_COOKIE_NAME") or ""
    ).strip() or "audiocast_session"


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
