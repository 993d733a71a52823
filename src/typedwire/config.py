from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import dotenv


_TRUTHY = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read from the environment (and `.env` when present)."""

    log_level: str = "INFO"
    log_dir: Optional[str] = None
    strict_validation: bool = True
    api_prefix: str = "/api/"
    ws_path: str = "/ws"
    client_timeout: float = 10.0
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        dotenv.load_dotenv(".env")
        prefix = os.environ.get("TYPEDWIRE_API_PREFIX", cls.api_prefix)
        # method names are appended directly to the prefix
        if not prefix.endswith("/"):
            prefix += "/"
        return cls(
            log_level=os.environ.get("TYPEDWIRE_LOG_LEVEL", cls.log_level).upper(),
            log_dir=os.environ.get("TYPEDWIRE_LOG_DIR") or None,
            strict_validation=_env_flag("TYPEDWIRE_STRICT_VALIDATION", cls.strict_validation),
            api_prefix=prefix,
            ws_path=os.environ.get("TYPEDWIRE_WS_PATH", cls.ws_path),
            client_timeout=float(os.environ.get("TYPEDWIRE_CLIENT_TIMEOUT", cls.client_timeout)),
            host=os.environ.get("TYPEDWIRE_HOST", cls.host),
            port=int(os.environ.get("TYPEDWIRE_PORT", cls.port)),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reload_settings() -> Settings:
    """Drop the cached settings and read the environment again."""
    global _settings
    _settings = Settings.from_env()
    return _settings
