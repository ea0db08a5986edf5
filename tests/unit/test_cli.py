from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from cli.app import app
from fakes import FakeGraph
from reranking.registry import GraphRegistry
from services import reranker as reranker_service

runner = CliRunner()

FRUIT_SCORES = {"apple": 0.2, "banana": 0.9, "cherry": 0.5}


def _use_fake_registry(monkeypatch, graph: FakeGraph) -> None:
    registry = GraphRegistry([graph])
    monkeypatch.setattr(reranker_service, "load_default_registry", lambda *_a, **_k: registry)


def test_rerank_command_prints_ranking(monkeypatch) -> None:
    _use_fake_registry(monkeypatch, FakeGraph("bge-reranker-base", FRUIT_SCORES))

    result = runner.invoke(app, ["rerank", "yellow fruit", "apple", "banana", "cherry"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("1. [1] 0.9000")
    assert lines[0].endswith("banana")
    assert lines[2].startswith("3. [0] 0.2000")
    assert "total_tokens=18" in lines[-1]


def test_rerank_command_json_and_documents_file(monkeypatch, tmp_path: Path) -> None:
    _use_fake_registry(monkeypatch, FakeGraph("bge-reranker-base", FRUIT_SCORES))
    docs = tmp_path / "docs.txt"
    docs.write_text("apple\n\nbanana\ncherry\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "--log-level",
            "WARNING",
            "rerank",
            "yellow fruit",
            "--documents-file",
            str(docs),
            "--top-n",
            "1",
            "--json",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["results"] == [{"index": 1, "relevance_score": 0.9}]
    assert payload["model"] == "bge-reranker-base"


def test_rerank_command_reports_errors(monkeypatch) -> None:
    _use_fake_registry(monkeypatch, FakeGraph("bge", FRUIT_SCORES, fail_compute_at=0))

    result = runner.invoke(app, ["rerank", "q", "apple"])

    assert result.exit_code == 1
    assert "compute_failed" in result.output


def test_rerank_command_requires_documents() -> None:
    result = runner.invoke(app, ["rerank", "q"])

    assert result.exit_code != 0


def test_config_show_hides_secrets(monkeypatch) -> None:
    from core.config import get_settings

    monkeypatch.setenv("HF_TOKEN", "hf_secret")
    get_settings.cache_clear()

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["running_mode"] == "reranker"
    assert "hf_token" not in payload


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip()


def test_rerank_command_mode_override_skips_model_loading(monkeypatch) -> None:
    loads = []
    monkeypatch.setattr(
        reranker_service, "load_default_registry", lambda *args, **_k: loads.append(args)
    )

    result = runner.invoke(app, ["rerank", "q", "apple", "--mode", "chat"])

    assert result.exit_code == 1
    assert "unsupported_mode" in result.output
    assert loads == []
