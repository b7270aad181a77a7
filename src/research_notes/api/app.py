from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers.content import router as content_router
from .routers.filters import router as filters_router
from .routers.search import router as search_router
from .routers.sources import router as sources_router


# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Store, embedder and analyzer are created lazily by the dependency getters
    logger.info("Research notes API starting (root_path=%r)", app.root_path)
    yield


# Optional base path for deployments under a subpath, used as the ASGI root_path
_env_base_path = os.getenv("API_BASE_PATH", "").strip()
if _env_base_path and not _env_base_path.startswith("/"):
    _env_base_path = "/" + _env_base_path
if _env_base_path.endswith("/") and _env_base_path != "/":
    _env_base_path = _env_base_path.rstrip("/")

app = FastAPI(
    title="Research Notes",
    lifespan=lifespan,
    root_path=_env_base_path or "",
)


# CORS: the web frontend is served from another origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Mount routers
for _router in (sources_router, content_router, search_router, filters_router):
    app.include_router(_router, prefix="/api")


@app.get("/health", tags=["ops"], summary="Health check")
async def health():
    return {"status": "ok"}
