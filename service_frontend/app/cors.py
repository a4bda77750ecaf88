"""
CORS gate for the frontend API.
"""

from typing import Sequence

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from edge_shared.logging import get_logger

logger = get_logger("frontend.cors")


class PathScopedCORSMiddleware:
    """Apply Starlette's CORS handling to requests under ``path_prefix`` only."""

    def __init__(self, app: ASGIApp, path_prefix: str, allow_origins: Sequence[str]) -> None:
        self.app = app
        self.path_prefix = path_prefix
        self.cors = CORSMiddleware(
            app,
            allow_origins=list(allow_origins),
            allow_methods=["GET", "POST"],
            allow_headers=["Authorization", "Content-Type", "If-None-Match"],
            expose_headers=["ETag"],
            max_age=172800,
        )

    def matches(self, path: str) -> bool:
        if not self.path_prefix:
            return True
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and self.matches(scope["path"]):
            await self.cors(scope, receive, send)
            return
        await self.app(scope, receive, send)


def install_cors(app: FastAPI, path_prefix: str, allow_origins: Sequence[str]) -> bool:
    """Install the CORS gate when origins are configured; return whether it was."""
    if not allow_origins:
        logger.info("No frontend API origins configured, CORS disabled")
        return False

    app.add_middleware(PathScopedCORSMiddleware, path_prefix=path_prefix, allow_origins=list(allow_origins))
    logger.info("Frontend API CORS enabled", origins=list(allow_origins))
    return True
