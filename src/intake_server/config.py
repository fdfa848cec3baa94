"""Server configuration: reads settings from environment variables.

Defaults suit local development; deployments override them through the
environment.
"""

import os
from dataclasses import dataclass, field

# Read at import time: FastAPI ``Query()`` defaults are fixed when the route
# decorators run.
DEFAULT_PAGE_LIMIT = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT = int(os.getenv("MAX_PAGE_LIMIT", "100"))


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS: comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    # "development" turns on payload integrity assertions
    environment: str = "production"

    # Shared secret for the staff endpoints (None = staff API disabled)
    admin_api_key: str | None = None

    # When set, X-User-ID is only trusted if X-Proxy-Secret matches
    trusted_proxy_secret: str | None = None


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` and related environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        environment=os.getenv("INTAKE_ENV", "production").strip().lower(),
        admin_api_key=os.getenv("ADMIN_API_KEY") or None,
        trusted_proxy_secret=os.getenv("TRUSTED_PROXY_SECRET") or None,
    )
