"""FastAPI application for Brain Relay.

Clients (Assistants HTTP client, Firestore) live for the lifetime of the
application and are handed to request handlers through app.state.

Run with:
    uvicorn brainrelay.api.app:app --port 5000
or:
    brainrelay serve
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from brainrelay import __version__
from brainrelay.api.routes import router
from brainrelay.config import ServerSettings, Settings, get_settings
from brainrelay.identity import StaticUserResolver
from brainrelay.pipeline.orchestrator import open_orchestrator

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Configuration to use. Loaded from the environment at
            startup when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or get_settings()
        if not hasattr(app.state, "user_resolver"):
            app.state.user_resolver = StaticUserResolver(cfg.default_user_id)
        async with open_orchestrator(cfg) as orchestrator:
            app.state.orchestrator = orchestrator
            logger.info("Brain Relay ready (user=%s)", cfg.default_user_id)
            yield

    server = settings or ServerSettings()

    app = FastAPI(
        title="Brain Relay",
        description="Sequences OpenAI assistants over a brain dump and stores each stage",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=server.cors_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected request body: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "ok"}, status_code=200)

    app.include_router(router, prefix="/api")
    return app


app = create_app()
