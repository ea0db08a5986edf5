"""Reranker service shared by the CLI and the API."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from core.config import Settings, get_settings
from reranking.engine import rerank
from reranking.registry import GraphRegistry, get_reranker_graphs, set_reranker_graphs
from schemas.internal.graph import InputStyle, OutputStyle
from schemas.requests import RerankRequest
from schemas.responses import RerankResponse

logger = logging.getLogger(__name__)


def load_default_registry(settings: Settings | None = None) -> GraphRegistry:
    """Load the configured cross-encoder and install it as the process registry."""
    settings = settings or get_settings()

    # torch/transformers are only needed once a real model is loaded.
    from reranking.cross_encoder import load_cross_encoder_graph

    graph = load_cross_encoder_graph(
        model_id=settings.reranker_model_id,
        name=settings.resolved_model_name,
        device=settings.reranker_device,
        hf_token=settings.hf_token,
        separator=settings.reranker_separator,
        max_length=settings.reranker_max_length,
        input_style=InputStyle(settings.reranker_input_style),
        output_style=OutputStyle(settings.reranker_output_style),
    )

    registry = get_reranker_graphs()
    if registry is None:
        registry = GraphRegistry()
        set_reranker_graphs(registry)
    registry.register(graph)
    logger.info("Registered reranker graph %s", graph.name)
    return registry


def run_rerank(
    request: RerankRequest | Mapping[str, Any],
    *,
    registry: GraphRegistry | None = None,
    settings: Settings | None = None,
) -> RerankResponse:
    """Validate the request and rerank it under the configured running mode."""
    settings = settings or get_settings()
    request_obj = (
        request if isinstance(request, RerankRequest) else RerankRequest.model_validate(request)
    )
    return rerank(
        request_obj,
        registry=registry,
        running_mode=settings.running_mode,
        lock_timeout=settings.reranker_lock_timeout,
    )


__all__ = ["load_default_registry", "run_rerank"]
