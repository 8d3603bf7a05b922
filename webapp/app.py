"""
Submission API: FastAPI application factory
"""
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from infrastructure.constants import DEFAULT_BUSINESS_NAME, DEFAULT_FRONTEND_URL
from reservations.services import AdmissionController
from reservations.store import RecordStore
from webapp import routes


def create_app(
    admission: AdmissionController,
    *,
    store: Optional[RecordStore] = None,
    frontend_url: str = DEFAULT_FRONTEND_URL,
    business_name: str = DEFAULT_BUSINESS_NAME,
) -> FastAPI:
    app = FastAPI(
        title=f"{business_name} submissions",
        description="Reservation and pickup order intake; decisions happen in the operator chat.",
        docs_url=None,
        redoc_url=None,
    )
    app.state.admission = admission
    app.state.frontend_url = frontend_url.rstrip("/")
    app.state.store = store or admission.workflow.store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes.router)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return f"{business_name} submission server is running."

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "collections": app.state.store.sizes()}

    return app
