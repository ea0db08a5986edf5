"""Shared contracts for reranking execution graphs.

An execution graph is a named, stateful handle to a loaded model with exactly
one input/output tensor slot. Callers must hold the registry lock while they
drive a set_input -> compute -> get_output cycle.
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence

from schemas.internal.graph import GraphMetadata, TokenCounts

INPUT_TENSOR = 0
OUTPUT_TENSOR = 0


class RunningMode(str, Enum):
    """Inference capabilities enabled for the process."""

    CHAT = "chat"
    EMBEDDINGS = "embeddings"
    RERANKER = "reranker"
    CHAT_EMBEDDING = "chat_embedding"
    CHAT_EMBEDDING_RERANKER = "chat_embedding_reranker"

    @property
    def supports_reranking(self) -> bool:
        return self in (RunningMode.RERANKER, RunningMode.CHAT_EMBEDDING_RERANKER)


class TensorType(str, Enum):
    U8 = "u8"
    F32 = "f32"


class ExecutionGraph(Protocol):
    """Graph interface consumed by the reranking engine."""

    metadata: GraphMetadata

    @property
    def name(self) -> str: ...

    def set_input(
        self,
        index: int,
        tensor_type: TensorType,
        dimensions: Sequence[int],
        data: bytes,
    ) -> None: ...

    def compute(self) -> None: ...

    def get_output(self, index: int) -> bytes: ...

    def update_metadata(self) -> None: ...

    def last_call_token_counts(self) -> TokenCounts: ...


__all__ = [
    "ExecutionGraph",
    "INPUT_TENSOR",
    "OUTPUT_TENSOR",
    "RunningMode",
    "TensorType",
]
