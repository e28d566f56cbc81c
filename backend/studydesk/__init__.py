from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studydesk.config import Settings, settings
from studydesk.services.workspace import Workspace


def create_app(
    app_settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.workspace = Workspace(app_settings, transport=transport)
        yield
        await app.state.workspace.aclose()

    application = FastAPI(
        title="StudyDesk Sidecar", version="0.1.0", lifespan=lifespan
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from studydesk.routers import (
        ai,
        auth,
        chat,
        dashboard,
        documents,
        flashcards,
        health,
        notifications,
        quiz,
        upload,
    )

    application.include_router(health.router)
    application.include_router(auth.router, prefix="/auth", tags=["auth"])
    application.include_router(
        upload.router, prefix="/documents", tags=["documents"]
    )
    application.include_router(
        documents.router, prefix="/documents", tags=["documents"]
    )
    application.include_router(
        flashcards.router,
        prefix="/documents/{document_id}/flashcards",
        tags=["flashcards"],
    )
    application.include_router(
        quiz.router, prefix="/documents/{document_id}/quizzes", tags=["quizzes"]
    )
    application.include_router(
        quiz.take_router, prefix="/quizzes", tags=["quizzes"]
    )
    application.include_router(
        chat.router, prefix="/documents/{document_id}/chat", tags=["chat"]
    )
    application.include_router(
        ai.router, prefix="/documents/{document_id}/ai", tags=["ai"]
    )
    application.include_router(
        dashboard.router, prefix="/dashboard", tags=["dashboard"]
    )
    application.include_router(
        notifications.router, prefix="/notifications", tags=["notifications"]
    )

    return application


app = create_app()
