"""Typer CLI entrypoint for reranking."""

from __future__ import annotations

from pathlib import Path

import typer

from cli.commands import config as config_commands
from core.config import get_settings
from core.errors import RerankError
from core.logging import configure_logging
from rerankd import __version__
from reranking.contracts import RunningMode

app = typer.Typer(
    help="Rerank documents by relevance to a query with a local cross-encoder.",
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=False,
)
app.add_typer(config_commands.app, name="config")


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print the version and exit",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: LOG_LEVEL setting)",
    ),
) -> None:
    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()
    configure_logging(log_level or get_settings().log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command(help="Rerank documents against a query")
def rerank(
    query: str = typer.Argument(..., metavar="QUERY"),
    documents: list[str] | None = typer.Argument(None, metavar="DOCUMENT..."),
    documents_file: Path | None = typer.Option(
        None,
        "--documents-file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="File with one document per line",
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        help="Registered model name (default: configured reranker)",
    ),
    top_n: int | None = typer.Option(None, "--top-n", min=0, help="Keep the N best results"),
    mode: RunningMode | None = typer.Option(
        None,
        "--mode",
        case_sensitive=False,
        help="Running mode override (default: RUNNING_MODE setting)",
    ),
    json_out: bool = typer.Option(False, "--json", help="Emit the full JSON response"),
) -> None:
    from cli.common import build_request, emit_json, load_documents
    from reranking.engine import check_running_mode
    from services.reranker import load_default_registry, run_rerank

    settings = get_settings()
    if mode is not None:
        settings = settings.model_copy(update={"running_mode": mode.value})
    docs = load_documents(documents, documents_file)
    request = build_request(
        {
            "model": model or settings.resolved_model_name,
            "query": query,
            "documents": docs,
            "top_n": top_n,
        }
    )

    try:
        check_running_mode(settings.running_mode)
        registry = load_default_registry(settings)
        response = run_rerank(request, registry=registry, settings=settings)
    except RerankError as exc:
        typer.echo(f"Error [{exc.code}]: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc

    if json_out:
        emit_json(response.model_dump())
        return

    for rank, item in enumerate(response.results, start=1):
        typer.echo(f"{rank}. [{item.index}] {item.relevance_score:.4f}  {docs[item.index]}")
    typer.echo(
        f"model={response.model} prompt_tokens={response.usage.prompt_tokens} "
        f"total_tokens={response.usage.total_tokens}"
    )


@app.command(help="Serve the HTTP API")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8080, "--port", help="Bind port"),
) -> None:
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port, log_config=None)


def main() -> None:
    app()


__all__ = ["app", "main"]
