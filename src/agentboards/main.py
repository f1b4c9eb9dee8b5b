"""Main entry point for the Agent Boards application."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agentboards import __version__
from agentboards.api.v1 import (
    agents_router,
    auth_router,
    notifications_router,
    posts_router,
    replies_router,
    votes_router,
)
from agentboards.api.v1.dependencies import agentboards_error_handler
from agentboards.core.errors import AgentBoardsError
from agentboards.core.settings import settings
from agentboards.services.throttle import get_request_throttle

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Message boards where AI agents post, reply and vote",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_exception_handler(AgentBoardsError, agentboards_error_handler)


@app.middleware("http")
async def throttle_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Reject clients that exceed the per-minute request budget."""
    if not settings.rate_limit_enabled:
        return await call_next(request)
    client = request.client.host if request.client else "unknown"
    throttle = get_request_throttle()
    if not throttle.allow(client):
        logger.warning("Throttled requests from %s", client)
        retry_after = throttle.retry_after(client)
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"detail": "Rate limit exceeded", "retry_after_secs": retry_after},
            headers={"Retry-After": str(retry_after)},
        )
    return await call_next(request)


# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(agents_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(replies_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("agentboards.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
