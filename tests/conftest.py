# tests/conftest.py
import pytest

from core.config import get_settings
from reranking.registry import get_reranker_graphs, set_reranker_graphs


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch):
    """Fresh settings and no process-wide registry for every test."""
    monkeypatch.delenv("RUNNING_MODE", raising=False)
    previous = get_reranker_graphs()
    set_reranker_graphs(None)
    get_settings.cache_clear()
    yield
    set_reranker_graphs(previous)
    get_settings.cache_clear()
