from fastapi.testclient import TestClient

from api.main import app

client = TestClient(app)


def test_config():
    response = client.get("/config")
    assert response.status_code == 200
    data = response.json()
    assert data["running_mode"] == "reranker"
    assert "reranker_model_id" in data


def test_config_hides_secrets(monkeypatch):
    from core.config import get_settings

    monkeypatch.setenv("HF_TOKEN", "hf_secret")
    get_settings.cache_clear()

    response = client.get("/config")

    assert "hf_token" not in response.json()
    assert "hf_secret" not in response.text
