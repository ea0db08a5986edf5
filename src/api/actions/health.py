from fastapi import APIRouter
from pydantic import BaseModel

from rerankd import __version__
from reranking.registry import get_reranker_graphs

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    models: list[str]


@router.get("/health", response_model=HealthResponse, tags=["System"])
def health_check():
    """Check the health of the API."""
    registry = get_reranker_graphs()
    models = registry.names() if registry is not None else []
    return HealthResponse(status="ok", version=__version__, models=models)
