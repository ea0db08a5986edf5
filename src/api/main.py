from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.actions.config import router as config_router
from api.actions.health import router as health_router
from api.actions.rerank import router as rerank_router
from core.config import get_settings
from core.errors import RerankError
from core.logging import configure_logging
from reranking.contracts import RunningMode


@asynccontextmanager
async def lifespan(_: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.reranker_preload and RunningMode(settings.running_mode).supports_reranking:
        from services.reranker import load_default_registry

        load_default_registry(settings)
    yield


app = FastAPI(title="rerankd", lifespan=lifespan)
app.include_router(health_router)
app.include_router(config_router)
app.include_router(rerank_router)


@app.exception_handler(RerankError)
async def rerank_error_handler(_: Request, exc: RerankError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.to_payload())
