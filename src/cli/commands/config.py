"""Configuration inspection commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from core.config import Settings, get_settings
from cli.common import emit_json, json_dumps

_SECRET_FIELDS = {"hf_token"}

app = typer.Typer(
    help="Inspect and export configuration",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


@app.command("show", help="Show the effective configuration")
def show_config(
    json_out: bool = typer.Option(True, "--json/--no-json", help="Emit JSON"),
) -> None:
    payload = _public_settings()
    if json_out:
        emit_json(payload)
        return
    for key, value in payload.items():
        typer.echo(f"{key}={value}")


@app.command("export", help="Export the configuration as JSON")
def export_config(
    output: Path | None = typer.Option(
        None,
        "--output",
        help="JSON file to write (stdout by default)",
    ),
) -> None:
    payload = _public_settings()
    if output is None:
        emit_json(payload)
        return
    output.write_text(json_dumps(payload), encoding="utf-8")
    typer.echo(f"Wrote: {output}")


@app.command("diff", help="Show values that differ from the defaults")
def diff_config() -> None:
    defaults = _settings_defaults()
    diff: dict[str, dict[str, Any]] = {}
    for key, value in _public_settings().items():
        default = defaults.get(key)
        if value != default:
            diff[key] = {"value": value, "default": default}
    emit_json(diff)


def _public_settings() -> dict[str, Any]:
    return get_settings().model_dump(exclude=_SECRET_FIELDS)


def _settings_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for name, field in Settings.model_fields.items():
        if name in _SECRET_FIELDS:
            continue
        defaults[name] = field.default
    return defaults


__all__ = ["app"]
