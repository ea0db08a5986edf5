from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from schemas.requests import RerankRequest
from schemas.responses import RerankResponse
from services.reranker import run_rerank

router = APIRouter()


@router.post("/v1/rerank", response_model=RerankResponse, tags=["Rerank"])
async def rerank_documents(request: RerankRequest):
    """
    Rank documents by relevance to the query.
    """
    # Graph compute blocks, and the registry lock is held for the whole batch.
    return await run_in_threadpool(run_rerank, request)
