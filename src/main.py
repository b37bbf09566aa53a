# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Process entry point.

Run with ``python -m src.main`` or ``shopstack-auth``. The ASGI
application is also importable as ``src.main:app`` for uvicorn.
"""

import uvicorn

from src.api import create_app
from src.core.config import get_settings

app = create_app()


def main() -> None:
    """Serve the API on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
