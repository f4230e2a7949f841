"""
Wingman API server.

Run with:
    python -m wingman.api.server
"""
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..app import AppContext
from ..config import load_settings
from .routes import router

logger = logging.getLogger(__name__)


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI app around an AppContext.

    Without a context one is created from the loaded settings with every
    configured provider registered.
    """
    if context is None:
        context = AppContext(load_settings())
        context.register_providers()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await context.initialize()
        logger.info(f"Wingman ready (active provider: {context.registry.active_provider_id})")
        yield
        await context.aclose()

    app = FastAPI(
        title="Wingman API",
        description="Local API for the Wingman meeting assistant - multi-provider chat, meeting summaries and live coaching",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # Local desktop UI talks to us from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_timing_header(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration_ms = int((time.time() - start_time) * 1000)
        response.headers["X-Duration-Ms"] = str(duration_ms)
        return response

    app.include_router(router)
    return app


def main():
    log_level = os.getenv("WINGMAN_LOG_LEVEL", "info").lower()
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    import uvicorn

    settings = load_settings()
    context = AppContext(settings)
    context.register_providers()
    uvicorn.run(create_app(context), host=settings.host, port=settings.port, log_level=log_level)


if __name__ == "__main__":
    main()
