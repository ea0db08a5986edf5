"""Process-wide registry of reranker execution graphs.

One lock guards the whole mapping, so requests against different models are
serialised as well as requests against the same model. An unexpected exception
raised while the lock is held poisons the registry: graph state may be
half-written, and every later acquisition fails until an operator calls
``clear_poison``.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from core.errors import LockAcquisitionError, RerankError
from reranking.contracts import ExecutionGraph

logger = logging.getLogger(__name__)


class GraphRegistry:
    def __init__(self, graphs: Iterable[ExecutionGraph] = ()) -> None:
        self._lock = threading.Lock()
        self._graphs: Dict[str, ExecutionGraph] = {}
        self._poisoned = False
        for graph in graphs:
            self._graphs[graph.name] = graph

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def register(self, graph: ExecutionGraph) -> None:
        with self._lock:
            if graph.name in self._graphs:
                logger.info("Replacing reranker graph %s", graph.name)
            self._graphs[graph.name] = graph

    def unregister(self, name: str) -> Optional[ExecutionGraph]:
        with self._lock:
            return self._graphs.pop(name, None)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._graphs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._graphs)

    def clear_poison(self) -> None:
        with self._lock:
            if self._poisoned:
                logger.warning("Clearing poisoned reranker registry")
            self._poisoned = False

    @contextmanager
    def acquire(self, *, timeout: Optional[float] = None) -> Iterator[Dict[str, ExecutionGraph]]:
        """Hold the registry lock and yield the ordered name -> graph mapping."""
        acquired = self._lock.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            message = f"Timed out after {timeout}s acquiring the reranker graphs lock."
            logger.error(message)
            raise LockAcquisitionError(message, context={"timeout": timeout})
        try:
            if self._poisoned:
                message = (
                    "Fail to acquire the lock of the reranker graphs: "
                    "a previous holder failed while using it."
                )
                logger.error(message)
                raise LockAcquisitionError(message)
            try:
                yield self._graphs
            except RerankError:
                raise
            except Exception:
                self._poisoned = True
                logger.exception("Reranker registry poisoned by an unexpected error")
                raise
        finally:
            self._lock.release()


_RERANKER_GRAPHS: Optional[GraphRegistry] = None


def get_reranker_graphs() -> Optional[GraphRegistry]:
    """Return the process-wide registry, or None before any model is loaded."""
    return _RERANKER_GRAPHS


def set_reranker_graphs(registry: Optional[GraphRegistry]) -> None:
    global _RERANKER_GRAPHS
    _RERANKER_GRAPHS = registry


__all__ = ["GraphRegistry", "get_reranker_graphs", "set_reranker_graphs"]
