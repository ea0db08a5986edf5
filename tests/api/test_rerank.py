from fastapi.testclient import TestClient

from api.main import app
from core.config import get_settings
from fakes import FakeGraph
from reranking.registry import GraphRegistry, set_reranker_graphs

client = TestClient(app)

FRUIT_SCORES = {"apple": 0.2, "banana": 0.9, "cherry": 0.5}


def _payload(**overrides):
    payload = {
        "model": "bge",
        "query": "which fruit is yellow?",
        "documents": ["apple", "banana", "cherry"],
    }
    payload.update(overrides)
    return payload


def test_rerank_endpoint_returns_ranked_list():
    set_reranker_graphs(GraphRegistry([FakeGraph("bge", FRUIT_SCORES)]))

    response = client.post("/v1/rerank", json=_payload(top_n=2))

    assert response.status_code == 200
    assert response.json() == {
        "object": "list",
        "results": [
            {"index": 1, "relevance_score": 0.9},
            {"index": 2, "relevance_score": 0.5},
        ],
        "model": "bge",
        "usage": {"prompt_tokens": 15, "completion_tokens": 3, "total_tokens": 18},
    }


def test_rerank_endpoint_reports_fallback_model():
    set_reranker_graphs(GraphRegistry([FakeGraph("bge", FRUIT_SCORES)]))

    response = client.post("/v1/rerank", json=_payload(model="unknown"))

    assert response.status_code == 200
    assert response.json()["model"] == "bge"


def test_rerank_endpoint_without_models():
    response = client.post("/v1/rerank", json=_payload())

    assert response.status_code == 404
    assert response.json()["code"] == "no_reranker_model"


def test_rerank_endpoint_rejects_unsupported_mode(monkeypatch):
    monkeypatch.setenv("RUNNING_MODE", "chat")
    get_settings.cache_clear()
    set_reranker_graphs(GraphRegistry([FakeGraph("bge", FRUIT_SCORES)]))

    response = client.post("/v1/rerank", json=_payload())

    assert response.status_code == 400
    assert response.json()["code"] == "unsupported_mode"
    assert "chat" in response.json()["detail"]


def test_rerank_endpoint_backend_failure_returns_no_results():
    set_reranker_graphs(GraphRegistry([FakeGraph("bge", FRUIT_SCORES, fail_compute_at=1)]))

    response = client.post("/v1/rerank", json=_payload())

    assert response.status_code == 502
    data = response.json()
    assert data["code"] == "compute_failed"
    assert data["context"] == {"index": 1}
    assert "results" not in data


def test_rerank_endpoint_validates_body():
    response = client.post("/v1/rerank", json=_payload(top_n=-1))
    assert response.status_code == 422

    response = client.post("/v1/rerank", json={"query": "q", "documents": []})
    assert response.status_code == 422
