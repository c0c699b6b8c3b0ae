from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

_BACKENDS = {"memory", "sqlite"}
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
_SQLITE_SCHEME = "sqlite:///"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - SERVER_HOST: interface uvicorn binds to. Default '0.0.0.0'
    - SERVER_PORT: HTTP bind port. Default 8080
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - DATASOURCE_URL: 'sqlite:///<path>' or a bare file path. Default 'sqlite:///./data/todos.db'
    - DATASOURCE_USERNAME / DATASOURCE_PASSWORD: datasource credentials (unused by sqlite)
    - CORS_ALLOWED_ORIGIN: origin allowed on the /api/todos routes. Default 'http://localhost:5173'
    - LOG_LEVEL: root logging level. Default 'INFO'
    """

    server_host: str = "0.0.0.0"
    server_port: int = 8080
    persistence_backend: str = "memory"
    datasource_url: str = "sqlite:///./data/todos.db"
    datasource_username: Optional[str] = None
    datasource_password: Optional[str] = None
    cors_allowed_origin: str = "http://localhost:5173"
    log_level: str = "INFO"

    @property
    def sqlite_db_path(self) -> str:
        """Filesystem path of the sqlite database named by datasource_url."""
        return parse_sqlite_path(self.datasource_url)


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ValueError(f"SERVER_PORT must be an integer, got {value!r}") from None
    if not (0 < port < 65536):
        raise ValueError(f"SERVER_PORT out of range: {port}")
    return port


# PUBLIC_INTERFACE
def parse_sqlite_path(url: str) -> str:
    """
    Resolve a datasource URL to a sqlite file path.

    Accepts 'sqlite:///relative/or/absolute.db' or a bare path. In-memory
    databases are rejected since connections are opened per call.
    """
    path = url[len(_SQLITE_SCHEME):] if url.startswith(_SQLITE_SCHEME) else url
    if "://" in path:
        raise ValueError(f"Unsupported datasource URL: {url!r}")
    if not path or path == ":memory:":
        raise ValueError("In-memory sqlite is not supported; use PERSISTENCE_BACKEND=memory")
    return path


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    defaults = Settings()

    backend = _get_env("PERSISTENCE_BACKEND", defaults.persistence_backend).lower()
    if backend not in _BACKENDS:
        raise ValueError(f"PERSISTENCE_BACKEND must be one of {sorted(_BACKENDS)}, got {backend!r}")

    log_level = _get_env("LOG_LEVEL", defaults.log_level).upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")

    return Settings(
        server_host=_get_env("SERVER_HOST", defaults.server_host),
        server_port=_parse_port(_get_env("SERVER_PORT", str(defaults.server_port))),
        persistence_backend=backend,
        datasource_url=_get_env("DATASOURCE_URL", defaults.datasource_url),
        datasource_username=os.getenv("DATASOURCE_USERNAME") or None,
        datasource_password=os.getenv("DATASOURCE_PASSWORD") or None,
        cors_allowed_origin=_get_env("CORS_ALLOWED_ORIGIN", defaults.cors_allowed_origin),
        log_level=log_level,
    )
