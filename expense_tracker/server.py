"""FastAPI application exposing expense tracking endpoints."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import database
from .config import Settings, get_settings
from .errors import register_exception_handlers
from .log import setup_logger
from .routers import auth, categories, expenses, summaries, users
from .security import TokenService

API_PREFIX = "/api"

LOG = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database.init_db(app.state.engine)
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logger("expense_tracker", json_format=settings.json_logs, level=settings.log_level)

    app = FastAPI(title="Expense Tracker Backend", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = database.build_engine(settings)
    app.state.sessionmaker = database.build_sessionmaker(app.state.engine)
    app.state.tokens = TokenService.from_settings(settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        LOG.info(
            "%s %s -> %s (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response

    register_exception_handlers(app)
    for module in (auth, users, categories, expenses, summaries):
        app.include_router(module.router, prefix=API_PREFIX)

    @app.get("/health", tags=["system"])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


def main() -> None:
    """Entrypoint for running the API server."""
    settings = app.state.settings
    LOG.info("Serving on %s", settings.server_address)
    uvicorn.run(app, host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()
