#!/usr/bin/env python3
"""
TaskTrack -- per-user task lists behind bearer-token authentication.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables (or .env):
  SECRET_KEY            Required. JWT signing secret, at least 32 characters.
  TOKEN_EXPIRE_SECONDS  Token lifetime in seconds (default 3600).
  DATABASE_URL          SQLAlchemy URL for the document store.
  FRONTEND_URL          Allowed CORS origin (default "*").
  API_NAME              Name shown by the liveness endpoint.
  HOST / PORT           Listen address (default 127.0.0.1:3000).
  DEBUG                 true for debug logging and auto-reload.
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="tasktrack",
        description="Run the TaskTrack API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Listen port (default: {settings.port})")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=settings.debug,
        help="Restart on code changes (default: on when DEBUG=true)",
    )
    args = parser.parse_args()

    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
