from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_directory.app.core.config import settings
from user_directory.app.core.errors import register_exception_handlers
from user_directory.app.core.request_id import RequestIdMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from user_directory.app.dependencies import create_dependencies

    if getattr(app.state, "deps", None) is None:
        app.state.deps = create_dependencies()
    logger.info("Dependencies initialized (users db: %s)", app.state.deps.record_store.db_path)

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="User registration, login, profile and admin management",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.deps = None

    app.add_middleware(RequestIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    from user_directory.app.modules.admin import router as admin
    from user_directory.app.modules.auth import router as auth
    from user_directory.app.modules.upload import router as upload

    app.include_router(upload.router, prefix="/api", tags=["Upload"])
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "user-directory"}

    return app


app = create_app()
