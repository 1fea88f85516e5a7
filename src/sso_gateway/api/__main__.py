"""
sso_gateway.api.__main__

Entrypoint for running the gateway via `python -m sso_gateway.api`.

Responsibilities:
- Load settings.
- Create the app.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from sso_gateway.api.app import create_app
from sso_gateway.settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings=settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Run a single worker with the memory session backend; switch to
# SSO_GATEWAY_SESSION_BACKEND=database before scaling out.
