"""
Application factory.

The engine is normally mounted by the host platform, which adds its own
authentication. create_app() builds a standalone app for local runs.
"""

import uuid

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from pm_engine.api.main import api_router
from pm_engine.core.config import settings
from pm_engine.core.observability import set_correlation_id, setup_structured_logging


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id to every request and echoes it back."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        set_correlation_id(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


def create_app() -> FastAPI:
    setup_structured_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
    )
    app.add_middleware(CorrelationIdMiddleware)
    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app
