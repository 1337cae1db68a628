"""
codegraph-rca CLI

Developer commands for inspecting chunking output and infrastructure state.
"""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from codegraph_rca.cache import EmbeddingCache, RedisConnection
from codegraph_rca.chunking import ChunkOptions, chunk_files, should_index_file
from codegraph_rca.common.exceptions import DatabaseError
from codegraph_rca.common.logging_config import configure_logging
from codegraph_rca.config import get_settings
from codegraph_rca.storage import PgVectorStore, PostgresStore

app = typer.Typer(
    name="codegraph-rca",
    help="codegraph-rca - code chunking, embedding cache and change correlation",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default: settings)"),
):
    settings = get_settings()
    configure_logging(
        level=log_level or settings.observability.log_level,
        json_format=settings.observability.log_json,
    )


def collect_files(root: Path) -> list[tuple[str, str]]:
    """Walk ``root`` and return (relative path, content) for indexable files."""
    if root.is_file():
        return [(root.name, root.read_text(encoding="utf-8", errors="replace"))]

    files = []
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(root).as_posix()
        if should_index_file(relative):
            files.append((relative, path.read_text(encoding="utf-8", errors="replace")))
    return files


@app.command()
def chunk(
    path: Path = typer.Argument(..., exists=True, help="File or directory to chunk"),
    max_lines: int | None = typer.Option(None, "--max-lines", help="Max lines per chunk"),
    max_bytes: int | None = typer.Option(None, "--max-bytes", help="Max bytes per chunk"),
    min_lines: int | None = typer.Option(None, "--min-lines", help="Merge threshold"),
    workers: int | None = typer.Option(None, "--workers", "-w", help="Parallel workers"),
    as_json: bool = typer.Option(False, "--json", help="Print chunks as JSON"),
):
    """
    Chunk source files and print a per-file summary.
    """
    config = get_settings().chunking
    try:
        options = ChunkOptions(
            max_lines=max_lines or config.max_lines,
            max_bytes=max_bytes or config.max_bytes,
            min_lines=min_lines if min_lines is not None else config.min_lines,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    results = chunk_files(collect_files(path), options, max_workers=workers or config.max_workers)

    if as_json:
        payload = {file_path: [c.model_dump() for c in chunks] for file_path, chunks in results.items()}
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"Chunks ({len(results)} files)")
    table.add_column("File")
    table.add_column("Language")
    table.add_column("Chunks", justify="right")
    table.add_column("Types")

    for file_path, chunks in results.items():
        types: dict[str, int] = {}
        for c in chunks:
            types[c.chunk_type] = types.get(c.chunk_type, 0) + 1
        table.add_row(
            file_path,
            (chunks[0].language or "-") if chunks else "-",
            str(len(chunks)),
            ", ".join(f"{name}={count}" for name, count in sorted(types.items())),
        )

    console.print(table)


@app.command("cache-stats")
def cache_stats():
    """
    Show embedding cache connectivity and size.
    """

    async def _run() -> tuple[bool, int]:
        config = get_settings().cache
        connection = RedisConnection.from_config(config)
        try:
            if not await connection.ping():
                return False, 0
            cache = EmbeddingCache(await connection.get_client(), ttl_seconds=config.embedding_ttl_seconds)
            return True, await cache.get_size()
        finally:
            await connection.close()

    reachable, size = asyncio.run(_run())
    if not reachable:
        console.print("[bold red]Redis unreachable[/bold red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]Cached embeddings:[/bold] {size}")


@app.command("init-db")
def init_db():
    """
    Create the pgvector extension, code_chunks table and indexes.
    """

    async def _run() -> None:
        store = PostgresStore.from_config(get_settings().db)
        try:
            await PgVectorStore(store).ensure_schema()
        finally:
            await store.close()

    try:
        asyncio.run(_run())
    except DatabaseError as e:
        console.print(f"[bold red]Schema setup failed:[/bold red] {e}")
        raise typer.Exit(code=1)

    console.print("[green]Schema ready[/green]")


if __name__ == "__main__":
    app()
