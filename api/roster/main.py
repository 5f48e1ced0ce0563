from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from roster import __version__, config
from roster.routers import contributors, health

APP_NAME = "Contributor Roster API"

app = FastAPI(title=APP_NAME, version=__version__)
_root_logger = logging.getLogger("roster")
if not _root_logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    _root_logger.addHandler(handler)
_root_logger.propagate = False
_root_logger.setLevel(config.log_level())
logger = logging.getLogger("roster.api")


def _correlation_id(request: Request) -> str:
    for key in ("x-request-id", "x-amzn-trace-id", "cf-ray"):
        value = request.headers.get(key)
        if value:
            return value
    return "none"


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    route_path = str(getattr(route, "path", "") or "") if route is not None else ""
    return route_path or request.url.path


@app.middleware("http")
async def runtime_timing(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = max(0.1, (time.perf_counter() - started) * 1000.0)
    if not request.url.path.startswith("/api"):
        return response
    response.headers["x-roster-runtime-ms"] = f"{elapsed_ms:.4f}"
    if elapsed_ms >= config.slow_request_ms_threshold():
        logger.warning(
            "slow_api_request method=%s route=%s status=%s elapsed_ms=%.2f correlation=%s",
            request.method,
            _route_path(request),
            response.status_code,
            elapsed_ms,
            _correlation_id(request),
        )
    else:
        logger.debug(
            "api_request method=%s route=%s status=%s elapsed_ms=%.2f",
            request.method,
            _route_path(request),
            response.status_code,
            elapsed_ms,
        )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-roster-runtime-ms"],
)

# Outbound GitHub transport override; tests install an httpx.MockTransport here.
app.state.github_transport = None


@app.get("/")
async def root():
    """Landing info for discovery."""
    return {"name": APP_NAME, "version": __version__, "docs": "/docs", "health": "/api/health"}


app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(contributors.router, prefix="/api", tags=["contributors"])
