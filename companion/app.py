from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from companion.api.deps import get_settings_bridge
from companion.api.health import health as _health_handler
from companion.api.routers.configuration import router as configuration_router
from companion.api.routers.watch_messages import router as watch_messages_router
from companion.config import get_settings
from companion.metrics import MetricsMiddleware, metrics_app

_LOG = logging.getLogger("companion")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    _LOG.setLevel(settings.log_level)
    bridge = get_settings_bridge()
    _LOG.info(
        "companion started; config page %s, options %s",
        bridge.config_base_url,
        "stored" if bridge.stored_options() is not None else "absent",
    )
    yield


app = FastAPI(lifespan=lifespan)

allow = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost,http://127.0.0.1").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in allow if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)

app.include_router(watch_messages_router)
app.include_router(configuration_router)

app.add_api_route(
    "/health",
    _health_handler,
    methods=["GET"],
    response_model=None,
    tags=["health"],
)


_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)
