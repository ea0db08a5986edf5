"""Rerank documents against a query with a registered execution graph."""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple, Union

from core.config import get_settings
from core.errors import (
    ComputeError,
    MetadataUpdateError,
    NoModelAvailableError,
    NoRerankerModelError,
    RerankError,
    SetInputError,
    UnsupportedModeError,
)
from reranking.codec import TensorCodec
from reranking.contracts import (
    INPUT_TENSOR,
    OUTPUT_TENSOR,
    ExecutionGraph,
    RunningMode,
    TensorType,
)
from reranking.registry import GraphRegistry, get_reranker_graphs
from reranking.usage import UsageAccumulator
from schemas.requests import RerankRequest
from schemas.responses import RerankedDocument, RerankResponse, Usage

logger = logging.getLogger(__name__)


def rerank(
    request: RerankRequest,
    *,
    registry: Optional[GraphRegistry] = None,
    running_mode: Union[RunningMode, str, None] = None,
    lock_timeout: Optional[float] = None,
) -> RerankResponse:
    """Score and order `request.documents` with the requested (or first) graph.

    `registry` and `running_mode` default to the process-wide registry and the
    configured running mode, read at call time. The registry lock is held from
    graph selection until the last document has been computed.
    """
    logger.info("Reranking documents")

    check_running_mode(running_mode or get_settings().running_mode)

    graphs = registry if registry is not None else get_reranker_graphs()
    if graphs is None:
        message = "No reranker model is available."
        logger.error(message)
        raise NoRerankerModelError(message)

    with graphs.acquire(timeout=lock_timeout) as entries:
        graph = select_graph(entries, request.model)
        ensure_reranking_enabled(graph)
        results, usage = compute_reranking(
            graph, request.query, request.documents, request.top_n
        )
        model_name = graph.name

    logger.info("Reranking documents for query %s completed.", request.query)
    return RerankResponse(results=results, model=model_name, usage=usage)


def check_running_mode(running_mode: Union[RunningMode, str]) -> RunningMode:
    mode = RunningMode(running_mode)
    if not mode.supports_reranking:
        message = f"Reranking is not supported in the {mode.value} mode."
        logger.error(message)
        raise UnsupportedModeError(message, context={"running_mode": mode.value})
    return mode


def select_graph(graphs: Dict[str, ExecutionGraph], model_name: str) -> ExecutionGraph:
    """Exact name match, else the first registered graph."""
    graph = graphs.get(model_name)
    if graph is not None:
        return graph

    fallback = next(iter(graphs.values()), None)
    if fallback is None:
        message = "There is no model available in the reranker graphs."
        logger.error(message)
        raise NoModelAvailableError(message, context={"model": model_name})

    logger.info(
        "Reranker model %s not found, falling back to %s", model_name, fallback.name
    )
    return fallback


def ensure_reranking_enabled(graph: ExecutionGraph) -> None:
    if graph.metadata.reranking:
        return
    graph.metadata.reranking = True
    try:
        graph.update_metadata()
    except RerankError:
        graph.metadata.reranking = False
        raise
    except Exception as exc:
        graph.metadata.reranking = False
        message = f"Failed to enable reranking on graph {graph.name}: {exc}"
        logger.error(message)
        raise MetadataUpdateError(message, context={"model": graph.name}) from exc


def compute_reranking(
    graph: ExecutionGraph,
    query: str,
    documents: Sequence[str],
    top_n: Optional[int] = None,
    *,
    codec: Optional[TensorCodec] = None,
) -> Tuple[List[RerankedDocument], Usage]:
    """Run one compute per document, then sort best-first and truncate.

    Any failure aborts the whole batch; partial results are never returned.
    """
    logger.info("Reranking %d documents for query %s", len(documents), query)

    codec = codec or TensorCodec.for_metadata(graph.metadata)
    usage = UsageAccumulator()
    reranked: List[RerankedDocument] = []

    for idx, document in enumerate(documents):
        try:
            tensor_data = codec.encode(query, document)
            graph.set_input(INPUT_TENSOR, TensorType.U8, [1], tensor_data)
        except RerankError:
            raise
        except Exception as exc:
            message = str(exc)
            logger.error("Set input failed for document %d: %s", idx, message)
            raise SetInputError(message, context={"index": idx}) from exc

        logger.debug("Reranking document %d", idx + 1)

        try:
            graph.compute()
            output = graph.get_output(OUTPUT_TENSOR)
            counts = graph.last_call_token_counts()
        except RerankError:
            raise
        except Exception as exc:
            message = str(exc)
            logger.error("Compute failed for document %d: %s", idx, message)
            raise ComputeError(message, context={"index": idx}) from exc

        score = codec.decode(output, index=idx)
        usage.add_counts(counts)
        reranked.append(RerankedDocument(index=idx, relevance_score=score))

    ranked = sort_by_relevance(reranked)
    if top_n is not None:
        ranked = ranked[:top_n]
    return ranked, usage.snapshot()


def rank_key(document: RerankedDocument) -> Tuple[bool, float]:
    """Descending by score, NaN last."""
    score = document.relevance_score
    if math.isnan(score):
        return (True, 0.0)
    return (False, -score)


def sort_by_relevance(documents: Sequence[RerankedDocument]) -> List[RerankedDocument]:
    # sorted() is stable: equal scores keep their original order.
    return sorted(documents, key=rank_key)


__all__ = [
    "check_running_mode",
    "compute_reranking",
    "ensure_reranking_enabled",
    "rank_key",
    "rerank",
    "select_graph",
    "sort_by_relevance",
]
