"""
Request pipeline pieces that sit around the routers: CORS, one access-log
line per request, and the static frontend.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Match, Route
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send

from config import settings

_LOG = logging.getLogger(__name__)
_ACCESS = logging.getLogger("api.access")

BASE_DIR = Path(__file__).resolve().parent.parent


class StripTrailingSlash:
    """Serve `/api/recipes/` from the `/api/recipes` route.

    Only rewrites when the trimmed path hits a route; static paths pass
    through untouched.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            path = scope["path"]
            if len(path) > 1 and path.endswith("/"):
                trimmed = {**scope, "path": path.rstrip("/") or "/"}
                if any(
                    route.matches(trimmed)[0] is not Match.NONE
                    for route in scope["app"].router.routes
                    if isinstance(route, Route)
                ):
                    scope = trimmed
        await self.app(scope, receive, send)


class FrontendFiles(StaticFiles):
    """Static files that only answer GET / HEAD; anything else is a 404."""

    async def get_response(self, path: str, scope: Scope):
        if scope["method"] not in ("GET", "HEAD"):
            raise HTTPException(status_code=404)
        return await super().get_response(path, scope)


async def log_requests(request: Request, call_next):
    """`GET /api/recipes 200 4.512 ms - 1043`"""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    _ACCESS.info(
        "%s %s %d %.3f ms - %s",
        request.method,
        path,
        response.status_code,
        elapsed_ms,
        response.headers.get("content-length", "-"),
    )
    return response


def install_middleware(app: FastAPI) -> None:
    # CORS (any origin unless CORS_ORIGINS narrows it)
    origins = settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
    app.add_middleware(StripTrailingSlash)


def mount_static(app: FastAPI) -> None:
    """Serve the frontend from STATIC_DIR at `/`; must run after the routers."""
    directory = Path(settings.static_dir)
    if not directory.is_absolute():
        directory = BASE_DIR / directory
    if not directory.is_dir():
        _LOG.warning("static directory %s not found, frontend disabled", directory)
        return
    app.mount("/", FrontendFiles(directory=directory, html=True), name="static")
