"""Reranking core: graph registry, tensor codec, usage accounting and engine."""

from reranking.codec import PLACEHOLDER_SCORE, TensorCodec
from reranking.contracts import ExecutionGraph, RunningMode, TensorType
from reranking.engine import compute_reranking, rerank
from reranking.registry import GraphRegistry, get_reranker_graphs, set_reranker_graphs
from reranking.usage import UsageAccumulator

__all__ = [
    "ExecutionGraph",
    "GraphRegistry",
    "PLACEHOLDER_SCORE",
    "RunningMode",
    "TensorCodec",
    "TensorType",
    "UsageAccumulator",
    "compute_reranking",
    "get_reranker_graphs",
    "rerank",
    "set_reranker_graphs",
]
