"""
app/server.py

Process entry point: serve the API with uvicorn.
"""

from __future__ import annotations

import uvicorn

from app.config import get_api_settings


def main() -> None:
    settings = get_api_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
