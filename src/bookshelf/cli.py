"""Command-line interface: run the gateway, bootstrap tables, exercise a server."""

import asyncio
from datetime import UTC, datetime

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.bookshelf.client import BookClient
from src.bookshelf.core.errors import ServiceError
from src.bookshelf.entities.book.entity import Book, Timestamp
from src.bookshelf.runtime.context import get_config

console = Console()

app = typer.Typer(
    name="bookshelf",
    help="Bookshelf service commands",
    rich_markup_mode="rich",
)


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Host to bind (defaults to config app.host)"),
    port: int | None = typer.Option(None, help="Port to bind (defaults to config app.port)"),
) -> None:
    """Start the HTTP gateway."""
    import uvicorn

    config = get_config()
    bind_host = host or config.app.host
    bind_port = port or config.app.port
    console.print(
        Panel.fit(
            f"[bold green]Serving bookshelf on {bind_host}:{bind_port}[/bold green]",
            border_style="green",
        )
    )
    # Request logging middleware handles access logs
    uvicorn.run(
        "src.bookshelf.api.http.app:app",
        host=bind_host,
        port=bind_port,
        access_log=False,
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create the book table in the configured database."""
    from src.bookshelf.runtime.init_db import init_db

    asyncio.run(init_db())
    console.print("[green]Database tables created[/green]")


def _book_table(books: list[Book]) -> Table:
    table = Table(title="Books")
    for column in ("id", "title", "author", "publisher", "publish_date", "rating", "status"):
        table.add_column(column)
    for book in books:
        published = "-"
        if book.publish_date is not None:
            published = datetime.fromtimestamp(book.publish_date.seconds, UTC).isoformat()
        table.add_row(
            str(book.id),
            book.title,
            book.author,
            book.publisher,
            published,
            f"{book.rating:g}",
            str(book.status),
        )
    return table


def run_demo(client: BookClient) -> None:
    """Create, read, update, list and delete one uniquely named book."""
    now = datetime.now(UTC)
    marker = now.isoformat()
    delta = now - datetime(1970, 1, 1, tzinfo=UTC)
    book = Book(
        title=f"title ({marker})",
        author=f"author ({marker})",
        publisher=f"publisher ({marker})",
        publish_date=Timestamp(
            seconds=delta.days * 86400 + delta.seconds,
            nanos=delta.microseconds * 1000,
        ),
        rating=2.0,
        status=1,
    )

    created = client.create(book)
    console.print(f"Create result: {created.model_dump()}")

    read = client.read(created.id)
    console.print(f"Read result: {read.model_dump()}")

    changed = read.book.model_copy(update={"author": read.book.author + " + updated"})
    updated = client.update(changed)
    console.print(f"Update result: {updated.model_dump()}")

    listed = client.read_all()
    console.print(_book_table(listed.books))

    deleted = client.delete(created.id)
    console.print(f"Delete result: {deleted.model_dump()}")


@app.command()
def demo(
    server: str = typer.Option("http://localhost:8000", help="Gateway base URL"),
    timeout: float = typer.Option(3.0, help="Per-request timeout in seconds"),
) -> None:
    """Run every operation once against a running server."""
    with BookClient.connect(server, timeout=timeout) as client:
        try:
            run_demo(client)
        except ServiceError as exc:
            console.print(f"[red]{exc.kind.value}: {escape(exc.message)}[/red]")
            raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
