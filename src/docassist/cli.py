"""CLI entrypoint for docassist."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

import httpx
from loguru import logger
import typer

from docassist.client import (
    EMBEDDING_MODEL,
    UPLOAD_CONTENT_TYPE,
    UPLOAD_PURPOSE,
    AssistantClient,
    build_chat_body,
    build_embeddings_body,
)
from docassist.config import MOCK_API_KEY, AppConfig, ConfigError
from docassist.env import load_dotenv
from docassist.errors import ClientError
from docassist.logs import LogLevel, setup_logging
from docassist.mock import MockAPI, build_mock_transport
from docassist.ui.progress import status_spinner
from docassist.ui.render import (
    render_banner,
    render_error,
    render_info,
    render_json,
    render_result,
    render_step_header,
    render_summary_table,
)

T = TypeVar("T")

app = typer.Typer(add_completion=False, help="Ask questions about a document through an OpenAI-compatible API.")


@dataclass
class CliState:
    config: AppConfig
    mock: bool = False


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    api_key: str = typer.Option(None, "--api-key", help="API credential (default: $OPENAI_API_KEY)."),
    base_url: str = typer.Option(None, "--base-url", help="API base URL (default: $OPENAI_BASE_URL)."),
    mock: bool = typer.Option(False, "--mock", help="Answer every request offline with deterministic data."),
    log_level: LogLevel = typer.Option(LogLevel.WARNING, "--log-level", case_sensitive=False, help="Log level."),
    log_file: str = typer.Option(None, "--log-file", help="Also write logs to this file."),
) -> None:
    """docassist: upload, embed and query documents."""
    setup_logging(log_level, log_file=log_file)
    load_dotenv()
    config = AppConfig.from_env().merged(api_key=api_key, base_url=base_url)
    ctx.obj = CliState(config=config, mock=mock)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)


@app.command("ask")
def ask(
    ctx: typer.Context,
    file: str = typer.Option(None, "--file", "-f", help="Document to upload and answer from."),
    query: str = typer.Option(None, "--query", "-q", help="Question to ask about the document."),
) -> None:
    """Upload a document, then answer a query grounded in its content."""
    state: CliState = ctx.obj
    config = state.config.merged(file_path=file, query=query)

    async def flow(client: AssistantClient) -> None:
        file_path = config.require_file_path()
        question = config.require_query()
        file_content = AssistantClient.read_file_content(file_path)
        with status_spinner("Uploading document"):
            file_id = await client.upload_document(file_path)
        render_result("File uploaded with ID", file_id)
        with status_spinner("Waiting for the assistant"):
            answer = await client.query_assistant_with_content(question, file_content)
        render_result("Assistant Response", answer)

    _run(state, config, flow)


@app.command("upload")
def upload(
    ctx: typer.Context,
    file: str = typer.Option(None, "--file", "-f", help="Document to upload."),
) -> None:
    """Upload a document and print its file ID."""
    state: CliState = ctx.obj
    config = state.config.merged(file_path=file)

    async def flow(client: AssistantClient) -> None:
        file_path = config.require_file_path()
        with status_spinner("Uploading document"):
            file_id = await client.upload_document(file_path)
        render_result("File uploaded with ID", file_id)

    _run(state, config, flow)


@app.command("embed")
def embed(
    ctx: typer.Context,
    text: str = typer.Option(..., "--text", "-t", help="Text to embed."),
    as_json: bool = typer.Option(False, "--json", help="Print the full vector as JSON."),
) -> None:
    """Fetch the embedding vector for a piece of text."""
    state: CliState = ctx.obj

    async def flow(client: AssistantClient) -> None:
        with status_spinner("Fetching embedding"):
            vector = await client.get_embeddings(text)
        if as_json:
            render_json(vector)
            return
        preview = ", ".join(f"{value:.6f}" for value in vector[:5])
        render_summary_table(
            {
                "Model": EMBEDDING_MODEL,
                "Dimensions": str(len(vector)),
                "Preview": f"[{preview}{', ...' if len(vector) > 5 else ''}]",
            },
            title="Embedding",
        )

    _run(state, state.config, flow)


@app.command("dry-run")
def dry_run(
    ctx: typer.Context,
    file: str = typer.Option(None, "--file", "-f", help="Document whose content grounds the query."),
    query: str = typer.Option(None, "--query", "-q", help="Question to ask about the document."),
) -> None:
    """Show the request bodies for a document and query without network access."""
    state: CliState = ctx.obj
    config = state.config.merged(file_path=file, query=query)
    try:
        file_path = config.require_file_path()
        question = config.require_query()
        file_content = AssistantClient.read_file_content(file_path)
    except (ConfigError, ClientError) as exc:
        render_error(str(exc))
        raise typer.Exit(code=1) from exc

    render_banner("docassist", "Request preview (no network access)")
    render_step_header(1, 3, "Upload", f"POST {config.base_url}/files (multipart)")
    render_summary_table(
        {
            "purpose": UPLOAD_PURPOSE,
            "file": Path(file_path).name,
            "content type": UPLOAD_CONTENT_TYPE,
            "bytes": str(len(file_content.encode("utf-8"))),
        },
        title="Form fields",
    )
    render_step_header(2, 3, "Chat completion", f"POST {config.base_url}/chat/completions")
    render_json(build_chat_body(question, file_content))
    render_step_header(3, 3, "Embeddings", f"POST {config.base_url}/embeddings")
    render_json(build_embeddings_body(question))
    render_info("No requests were sent.")


def _run(state: CliState, config: AppConfig, flow: Callable[[AssistantClient], Awaitable[T]]) -> T:
    try:
        return asyncio.run(_with_client(state, config, flow))
    except (ConfigError, ClientError) as exc:
        logger.debug("Command failed: {!r}", exc)
        render_error(str(exc))
        raise typer.Exit(code=1) from exc


async def _with_client(state: CliState, config: AppConfig, flow: Callable[[AssistantClient], Awaitable[T]]) -> T:
    async with _build_client(state, config) as client:
        return await flow(client)


def _build_client(state: CliState, config: AppConfig) -> AssistantClient:
    if state.mock:
        transport = build_mock_transport(MockAPI(prefix=httpx.URL(config.base_url).path))
        return AssistantClient(config.api_key or MOCK_API_KEY, base_url=config.base_url, transport=transport)
    return AssistantClient(config.require_api_key(), base_url=config.base_url)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
