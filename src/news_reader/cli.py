"""Command-line entry points: run the proxy or read the feed in a terminal."""

from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.prompt import Prompt

from .client import ProxyClient, ProxyRequestError, ProxyUnavailable
from .config import configure_logging, get_client_settings
from .detail import DetailController
from .feed import FeedController
from .views import RichDetailView, RichFeedView

app = typer.Typer(help="Personal news reader backed by a key-hiding proxy.")


@app.command("serve")
def serve_command(
    host: Optional[str] = typer.Option(None, help="Bind address (defaults to PROXY_HOST)."),
    port: Optional[int] = typer.Option(None, help="Bind port (defaults to PROXY_PORT)."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
):
    """Validate settings and run the proxy under uvicorn."""
    from .server import run

    try:
        run(host=host, port=port, reload=reload)
    except ValueError as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)


def _detail_loop(detail: DetailController) -> None:
    while detail.state.is_open:
        question = Prompt.ask("[cyan]Ask a follow-up[/cyan] ('back' to return)", default="")
        if question.strip().lower() == "back":
            detail.close()
            return
        detail.ask(question)


@app.command("read")
def read_command(
    proxy_url: Optional[str] = typer.Option(
        None, "--proxy-url", help="Proxy base URL (defaults to NEWS_PROXY_URL)."
    ),
    topic: Optional[str] = typer.Option(
        None, "--topic", "-t", help="GNews topic (defaults to NEWS_TOPIC)."
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Client log level."),
):
    """
    Interactive reader. Type a card number to open it, 'more' to load the
    next page (the terminal's scroll-to-bottom), or 'quit'.
    """
    configure_logging(log_level)
    settings = get_client_settings()
    console = Console()
    client = ProxyClient(proxy_url or settings.proxy_url)
    feed = FeedController(
        client,
        RichFeedView(console),
        topic=topic or settings.topic,
        page_size=settings.page_size,
    )
    detail = DetailController(client, RichDetailView(console))

    feed.load()
    while True:
        choice = Prompt.ask("Card number, 'more', or 'quit'", default="more").strip().lower()
        if choice in {"quit", "q", "exit"}:
            break
        if choice == "more":
            if not feed.load_more():
                rprint("[dim]No more headlines.[/dim]")
            continue
        if choice.isdigit() and 1 <= int(choice) <= len(feed.cards):
            detail.open(feed.cards[int(choice) - 1])
            _detail_loop(detail)
            continue
        rprint(f"[yellow]Unknown choice: {choice}[/yellow]")


@app.command("scrape")
def scrape_command(
    url: str = typer.Argument(..., help="Article URL to extract."),
    proxy_url: Optional[str] = typer.Option(None, "--proxy-url"),
):
    """Ask the proxy for a best-effort extraction of an article page."""
    settings = get_client_settings()
    client = ProxyClient(proxy_url or settings.proxy_url)
    try:
        result = client.scrape_article(url)
    except ProxyRequestError as exc:
        rprint(f"[red]Scrape failed ({exc.status_code}): {exc.message}[/red]")
        raise typer.Exit(code=1)
    except ProxyUnavailable as exc:
        rprint(f"[red]Proxy unreachable: {exc}[/red]")
        raise typer.Exit(code=1)

    console = Console()
    console.print(result.full_title or "(untitled)", style="bold", markup=False)
    if result.full_image_url:
        console.print(f"Image: {result.full_image_url}", style="dim", markup=False)
    console.print(result.full_content, markup=False)


def main():
    app()


if __name__ == "__main__":
    main()
