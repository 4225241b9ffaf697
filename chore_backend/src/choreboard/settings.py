from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'json'
    - DATA_DIR: directory holding tasks.json and users.json. Default './data'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: console log level (default INFO)
    - LOG_FILE: optional path of a debug log file
    - DEVICE_ENABLED: 'true' to run the joystick/display loop inside the server
    - DISPLAY_WIDTH: characters per display line (default 16)
    - POLL_INTERVAL_MS: delay between device loop iterations (default 20)
    - SWEEP_INTERVAL_S: seconds between completion sweeps (default 60)
    - CLOCK_SYNC_INTERVAL_S: seconds between clock resyncs (default 3600)
    - CONNECTIVITY_HOST / CONNECTIVITY_PORT: endpoint probed for the offline signal
    """

    persistence_backend: str
    data_dir: str
    cors_allow_origins: List[str]
    log_level: str
    log_file: Optional[str]
    device_enabled: bool
    display_width: int
    poll_interval_ms: int
    sweep_interval_s: int
    clock_sync_interval_s: int
    connectivity_host: str
    connectivity_port: int


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int, minimum: int = 1) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "json"}:
        # Fallback to memory if unsupported
        backend = "memory"

    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    log_file = os.getenv("LOG_FILE") or None

    return Settings(
        persistence_backend=backend,
        data_dir=_get_env("DATA_DIR", "./data").strip(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=log_level,
        log_file=log_file,
        device_enabled=_parse_bool(_get_env("DEVICE_ENABLED", "false"), False),
        display_width=_parse_int(_get_env("DISPLAY_WIDTH", "16"), 16, minimum=8),
        poll_interval_ms=_parse_int(_get_env("POLL_INTERVAL_MS", "20"), 20),
        sweep_interval_s=_parse_int(_get_env("SWEEP_INTERVAL_S", "60"), 60),
        clock_sync_interval_s=_parse_int(_get_env("CLOCK_SYNC_INTERVAL_S", "3600"), 3600),
        connectivity_host=_get_env("CONNECTIVITY_HOST", "1.1.1.1").strip(),
        connectivity_port=_parse_int(_get_env("CONNECTIVITY_PORT", "53"), 53),
    )
