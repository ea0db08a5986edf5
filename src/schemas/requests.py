"""External request schemas for rerank calls."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RerankRequest(BaseModel):
    """Score `documents` against `query` with the named model."""

    model: str
    query: str
    documents: List[str]
    top_n: Optional[int] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


__all__ = ["RerankRequest"]
