"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from schemas.requests import RerankRequest


def load_documents(documents: list[str] | None, documents_file: Path | None) -> list[str]:
    """Collect documents from arguments, then one per non-empty line of a file."""
    collected = list(documents or [])
    if documents_file is not None:
        text = documents_file.read_text(encoding="utf-8")
        collected.extend(line for line in text.splitlines() if line.strip())
    if not collected:
        raise typer.BadParameter("Provide at least one document.")
    return collected


def build_request(payload: dict[str, Any]) -> RerankRequest:
    try:
        return RerankRequest.model_validate(payload)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def json_dumps(payload: object) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def emit_json(data: Any) -> None:
    typer.echo(json_dumps(data))


__all__ = ["build_request", "emit_json", "json_dumps", "load_documents"]
