"""Entry point for the Marquee HTTP API server.

Usage:
    # Development (with auto-reload):
    API_RELOAD=true python api_main.py

    # Or directly with uvicorn:
    uvicorn src.api.app:app --reload --host 0.0.0.0 --port 8000
"""

import os

import uvicorn

from src.core.logging import configure_logging

configure_logging()

if __name__ == "__main__":
    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("API_RELOAD", "false").lower() == "true"
    workers = int(os.getenv("API_WORKERS", "1"))

    uvicorn.run(
        "src.api.app:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1,  # reload is single-process
    )
