# initiative_prioritizer/prioritizer/main.py

from __future__ import annotations

import logging

from fastapi import FastAPI

from prioritizer.config import setup_json_logging, settings
from prioritizer.api.routes.initiatives import router as initiatives_router
from prioritizer.api.routes.intake import router as intake_router


def create_app() -> FastAPI:
    setup_json_logging(log_level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))

    app = FastAPI(
        title="INITIATIVE PRIORITIZER - API",
        version="0.1.0",
    )

    app.include_router(intake_router)
    app.include_router(initiatives_router)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
