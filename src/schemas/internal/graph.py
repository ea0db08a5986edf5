"""Execution graph metadata contracts."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SEPARATOR = "</s></s>"


class InputStyle(str, Enum):
    """How a (query, document) pair is packed into the input tensor."""

    # Degraded: the query never reaches the model.
    DOCUMENT_ONLY = "document_only"
    QUERY_AND_DOCUMENT = "query_and_document"


class OutputStyle(str, Enum):
    """How the output tensor is turned into a relevance score."""

    # Degraded: every document gets the same constant score.
    PLACEHOLDER = "placeholder"
    STRUCTURED_JSON = "structured_json"


class GraphMetadata(BaseModel):
    """Per-model configuration, fixed when the graph is loaded."""

    reranking: bool = False
    input_style: InputStyle = InputStyle.QUERY_AND_DOCUMENT
    output_style: OutputStyle = OutputStyle.STRUCTURED_JSON
    separator: str = DEFAULT_SEPARATOR
    max_length: int = Field(default=512, ge=1)

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class TokenCounts(BaseModel):
    """Token counters reported by a graph for its last compute call."""

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


__all__ = [
    "DEFAULT_SEPARATOR",
    "GraphMetadata",
    "InputStyle",
    "OutputStyle",
    "TokenCounts",
]
