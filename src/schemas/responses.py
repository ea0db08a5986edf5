"""External response schemas for rerank calls."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RerankedDocument(BaseModel):
    """A scored document; `index` points back into the request's documents."""

    index: int = Field(ge=0)
    relevance_score: float

    model_config = ConfigDict(extra="forbid")


class Usage(BaseModel):
    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _validate_total(self) -> "Usage":
        if self.total_tokens != self.prompt_tokens + self.completion_tokens:
            raise ValueError("total_tokens must equal prompt_tokens + completion_tokens.")
        return self


class RerankResponse(BaseModel):
    object: Literal["list"] = "list"
    results: List[RerankedDocument]
    model: str
    usage: Usage

    model_config = ConfigDict(extra="forbid")


__all__ = ["RerankResponse", "RerankedDocument", "Usage"]
