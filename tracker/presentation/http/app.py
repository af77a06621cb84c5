from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tracker.config import Settings, load_settings
from tracker.infrastructure.db.postgres import PostgresDatabase, load_config_from_env
from tracker.presentation.context import TrackerContext, build_postgres_context
from tracker.presentation.http.diary_router import router as diary_router
from tracker.presentation.http.errors import install_error_handlers
from tracker.presentation.http.tasks_router import router as tasks_router
from tracker.presentation.http.teams_router import router as teams_router
from tracker.presentation.http.timer_router import router as timer_router
from tracker.presentation.http.users_router import router as users_router

logger = logging.getLogger(__name__)


def create_app(
    context: Optional[TrackerContext] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Builds the HTTP application.

    Without a context the lifespan opens the Postgres pool and wires the
    repositories; a given context is used as is and never closed here.
    """
    settings = settings or (context.settings if context is not None else load_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is not None:
            app.state.context = context
            yield
            return

        db = PostgresDatabase(load_config_from_env())
        await db.connect()
        app.state.context = build_postgres_context(settings, db)
        logger.info("Tracker API ready")
        try:
            yield
        finally:
            await db.close()
            logger.info("Tracker API stopped")

    app = FastAPI(title="Tracker", lifespan=lifespan)
    if context is not None:
        app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(tasks_router)
    app.include_router(timer_router)
    app.include_router(teams_router)
    app.include_router(users_router)
    app.include_router(diary_router)
    return app
