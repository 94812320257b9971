"""
Rail Connect API

Run with: uvicorn --factory app.main:create_app
"""
import logging
import random
from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, get_settings
from app.core.firebase import FirebaseClient
from app.api.v1.api import api_router
from app.services.catalog import TrainCatalog

logger = logging.getLogger(__name__)

_default_origins = [
    "http://127.0.0.1:3000", "http://localhost:3000",
    "http://127.0.0.1:9002", "http://localhost:9002",
]


def create_app(
    settings: Optional[Settings] = None,
    rng: Optional[random.Random] = None,
    prompt_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app = FastAPI(title=settings.APP_NAME)
    app.state.settings = settings
    app.state.firebase = FirebaseClient(settings)
    app.state.catalog = TrainCatalog()
    app.state.rng = rng or random.Random()
    app.state.prompt_transport = prompt_transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or _default_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "environment": settings.ENVIRONMENT}

    logger.info(f"{settings.APP_NAME} ready ({settings.ENVIRONMENT})")
    return app

