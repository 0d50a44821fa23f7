"""
CLI for the Hashub Vector client.

Exposes each API operation as a command for quick manual checks.
"""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .client import HashubVector, create_client
from .config import VERSION, get_default
from .errors import HashubVectorError

T = TypeVar("T")

console = Console()

app = typer.Typer(
    name="hashub-vector",
    help="Hashub Vector - multilingual text embeddings from the command line",
    add_completion=False,
)


def _format_vector(vector: list[float], limit: int = 5) -> str:
    head = ", ".join(f"{v:.4f}" for v in vector[:limit])
    return f"[{head}, ...]" if len(vector) > limit else f"[{head}]"


def _run(ctx: typer.Context, operation: Callable[[HashubVector], Awaitable[T]]) -> T:
    """Build a client from the global options, run one operation, close it."""
    options = ctx.obj or {}
    try:
        client = create_client(
            api_key=options.get("api_key"),
            config_path=options.get("config_path"),
            base_url=options.get("base_url"),
        )
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    async def run() -> T:
        async with client:
            return await operation(client)

    try:
        return asyncio.run(run())
    except HashubVectorError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(f'[{e.code}] {e.message}')}")
        if e.retry_after is not None:
            console.print(f"[yellow]Retry after {e.retry_after}s[/yellow]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON config file"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="API key (defaults to HASHUB_API_KEY)"
    ),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="API base URL"),
    log_level: str = typer.Option(
        get_default("logging", "level", "WARNING"), "--log-level", help="Logging level"
    ),
):
    """Hashub Vector embedding API client."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format=get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ),
    )
    ctx.obj = {"config_path": config_path, "api_key": api_key, "base_url": base_url}


@app.command()
def version():
    """Show the client version."""
    console.print(f"hashub-vector {VERSION}")


@app.command()
def vectorize(
    ctx: typer.Context,
    text: str = typer.Argument(..., help="Text to vectorize"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model alias"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Maximum chunk size"),
    chunk_overlap: Optional[float] = typer.Option(
        None, "--chunk-overlap", help="Overlap ratio between chunks (0-1)"
    ),
):
    """Generate an embedding for a single text."""
    result = _run(
        ctx,
        lambda client: client.vectorize(
            text, model=model, chunk_size=chunk_size, chunk_overlap=chunk_overlap
        ),
    )

    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Model:", result.model)
    summary.add_row("Dimension:", str(result.dimension))
    summary.add_row("Tokens:", str(result.tokens))
    if result.chunk_count is not None:
        summary.add_row("Chunks:", str(result.chunk_count))
    summary.add_row("Vector:", _format_vector(result.vector))

    console.print(
        Panel(summary, title="[bold green]Embedding[/bold green]", border_style="green", expand=False)
    )


@app.command()
def batch(
    ctx: typer.Context,
    texts: list[str] = typer.Argument(..., help="Texts to vectorize"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model alias"),
):
    """Generate embeddings for several texts in one request."""
    result = _run(ctx, lambda client: client.vectorize_batch(texts, model=model))

    console.print(
        f"Processed [bold]{result.count}[/bold] texts with [bold]{result.model}[/bold] "
        f"({result.dimension}D, {result.total_tokens} tokens)"
    )
    for i, vector in enumerate(result.vectors):
        console.print(f"  {i}: {_format_vector(vector)}")


@app.command()
def similarity(
    ctx: typer.Context,
    text1: str = typer.Argument(..., help="First text"),
    text2: str = typer.Argument(..., help="Second text"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model alias"),
):
    """Calculate cosine similarity between two texts."""
    result = _run(ctx, lambda client: client.similarity(text1, text2, model=model))
    console.print(f"Similarity: [yellow]{result.similarity:.4f}[/yellow] ({result.model})")


@app.command()
def models(ctx: typer.Context):
    """List available models."""
    result = _run(ctx, lambda client: client.get_models())

    table = Table(title="Available Models")
    table.add_column("Alias", style="cyan")
    table.add_column("Dimension", justify="right")
    table.add_column("Max Tokens", justify="right")
    table.add_column("Price / 1M", justify="right")
    table.add_column("Turkish", justify="center")
    table.add_column("Description")
    for info in result:
        table.add_row(
            info.alias,
            str(info.dimension),
            f"{info.max_tokens:,}",
            f"${info.price_per_m_tokens:.4f}",
            f"{info.turkish_support}/5",
            info.description,
        )
    console.print(table)


@app.command()
def usage(
    ctx: typer.Context,
    from_date: Optional[str] = typer.Option(None, "--from", help="Start date (YYYY-MM-DD)"),
    to_date: Optional[str] = typer.Option(None, "--to", help="End date (YYYY-MM-DD)"),
):
    """Show token usage, with a daily breakdown."""
    result = _run(ctx, lambda client: client.get_detailed_usage(from_date, to_date))
    stats = result.usage

    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Tokens Used:", f"{stats.tokens_used:,}")
    summary.add_row("Token Limit:", f"{stats.tokens_limit:,}")
    summary.add_row("Usage:", f"{stats.tokens_percentage_used:.1f}%")
    summary.add_row("Remaining:", f"{stats.tokens_remaining:,}")
    if result.period is not None:
        summary.add_row("Period:", f"{result.period.from_date} to {result.period.to_date}")
    console.print(
        Panel(summary, title="[bold blue]Usage[/bold blue]", border_style="blue", expand=False)
    )

    if result.daily_usage:
        table = Table(title="Daily Usage")
        table.add_column("Date")
        table.add_column("Tokens", justify="right")
        table.add_column("Requests", justify="right")
        for day in result.daily_usage:
            table.add_row(day.date, f"{day.tokens_used:,}", str(day.request_count))
        console.print(table)


@app.command()
def embed(
    ctx: typer.Context,
    texts: list[str] = typer.Argument(..., help="Input text(s)"),
    model: str = typer.Option("e5_base", "--model", "-m", help="Model alias"),
    user: Optional[str] = typer.Option(None, "--user", help="End-user identifier"),
):
    """Call the OpenAI-compatible embeddings endpoint."""
    payload = texts[0] if len(texts) == 1 else texts
    result = _run(ctx, lambda client: client.create_embedding(payload, model=model, user=user))

    console.print(
        f"Model [bold]{result.model}[/bold]: {len(result.data)} embedding(s), "
        f"{result.usage.total_tokens} tokens"
    )
    for item in result.data:
        console.print(f"  {item.index}: {_format_vector(item.embedding)}")


if __name__ == "__main__":
    app()
