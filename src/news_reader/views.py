"""Rich terminal rendering for the feed and the article detail view."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.status import Status
from rich.text import Text

from .detail import Paragraph
from .feed import NewsCard

_PARAGRAPH_STYLES = {"body": "", "error": "red", "note": "dim italic"}


class RichFeedView:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self._status: Optional[Status] = None

    def clear(self) -> None:
        self.console.clear()

    def show_loading(self, active: bool) -> None:
        if active and self._status is None:
            self._status = self.console.status("Loading headlines...")
            self._status.start()
        elif not active and self._status is not None:
            self._status.stop()
            self._status = None

    def append_card(self, card: NewsCard, index: int) -> None:
        body = Text()
        body.append(card.title, style="bold")
        if card.description:
            body.append(f"\n{card.description}")
        self.console.print(
            Panel(
                body,
                title=f"[cyan]{index + 1}[/cyan] · {escape(card.source_name)}",
                title_align="left",
                subtitle=escape(card.url),
                subtitle_align="left",
            )
        )

    def show_empty(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]", justify="center")

    def alert(self, message: str) -> None:
        self.console.print(f"[bold red]{escape(message)}[/bold red]")


class RichDetailView:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.input_enabled = True
        self._status: Optional[Status] = None

    def _stop_status(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def show_headline(self, card: NewsCard) -> None:
        self.console.print(Rule(escape(card.source_name)))
        self.console.print(Text(card.title, style="bold"))
        attribution = f"{card.source_name} / Original Source"
        self.console.print(f"[dim]Image: {escape(card.image_url)} ({escape(attribution)})[/dim]")
        self.console.print(f"[blue]Read more: {escape(card.url)}[/blue]")

    def show_body_loading(self, message: str) -> None:
        self._stop_status()
        self._status = self.console.status(message)
        self._status.start()

    def set_body(self, paragraphs: List[Paragraph]) -> None:
        self._stop_status()
        for paragraph in paragraphs:
            style = _PARAGRAPH_STYLES.get(paragraph.style, "")
            self.console.print(Text(paragraph.text, style=style))
            self.console.print()

    def set_input_enabled(self, enabled: bool) -> None:
        self.input_enabled = enabled
        self._stop_status()
        if not enabled:
            self._status = self.console.status("Thinking...")
            self._status.start()

    def clear_input(self) -> None:
        """Rich's Prompt consumes the submitted line, so there is nothing left to clear."""

    def show_answer(self, question: str, answer: str) -> None:
        self.console.print(Panel(Text(answer), title=f"Q: {escape(question)}", title_align="left"))

    def show_answer_error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def prompt_validation(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def alert(self, message: str) -> None:
        self._stop_status()
        self.console.print(f"[bold red]{escape(message)}[/bold red]")

    def close(self) -> None:
        self._stop_status()
        self.console.print(Rule())
