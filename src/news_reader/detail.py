"""Article detail view: AI-generated body plus the follow-up question loop."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from .client import ProxyClient, ProxyRequestError, ProxyUnavailable
from .feed import NewsCard
from .models import Headline, context_prefix

logger = logging.getLogger(__name__)

GENERATING_MESSAGE = "Generating article..."
EMPTY_GENERATION = "AI could not generate content."
GENERATION_UNREACHABLE = "Network error or backend not reachable for AI generation."
FALLBACK_NOTE = "(Displayed initial description as fallback)"
EMPTY_QUESTION_PROMPT = "Please type a question first."
ANSWER_UNREACHABLE = "Network error or backend not reachable for AI answers."


@dataclass(frozen=True)
class Paragraph:
    text: str
    style: str = "body"  # "body" | "error" | "note"


class DetailView(Protocol):
    def show_headline(self, card: NewsCard) -> None: ...

    def show_body_loading(self, message: str) -> None: ...

    def set_body(self, paragraphs: List[Paragraph]) -> None: ...

    def set_input_enabled(self, enabled: bool) -> None: ...

    def clear_input(self) -> None: ...

    def show_answer(self, question: str, answer: str) -> None: ...

    def show_answer_error(self, message: str) -> None: ...

    def prompt_validation(self, message: str) -> None: ...

    def alert(self, message: str) -> None: ...

    def close(self) -> None: ...


@dataclass
class DetailState:
    """
    view_id increases every time a view opens or closes; responses that come
    back for an older view_id are dropped instead of overwriting the display.
    """

    view_id: int = 0
    headline: Optional[Headline] = None
    generated_text: Optional[str] = None
    is_open: bool = False
    asking: bool = False


@dataclass
class DetailController:
    client: ProxyClient
    view: DetailView
    state: DetailState = field(default_factory=DetailState)

    def _is_current(self, view_id: int) -> bool:
        return self.state.is_open and self.state.view_id == view_id

    def open(self, card: NewsCard) -> None:
        self.state.view_id += 1
        view_id = self.state.view_id
        self.state.headline = card.headline
        self.state.generated_text = None
        self.state.is_open = True
        self.state.asking = False

        self.view.show_headline(card)
        self.view.show_body_loading(GENERATING_MESSAGE)

        try:
            text = self.client.generate_article(card.headline)
        except ProxyRequestError as exc:
            logger.error("Article generation failed: %s", exc)
            message = exc.message.rstrip(".")
            self._show_fallback(view_id, f"Failed to generate article: {message}.")
            return
        except ProxyUnavailable as exc:
            logger.error("Article generation failed: %s", exc)
            self.view.alert(GENERATION_UNREACHABLE)
            self._show_fallback(view_id, GENERATION_UNREACHABLE)
            return

        if not self._is_current(view_id):
            logger.debug("Dropping generated article for stale view %s", view_id)
            return
        self.state.generated_text = text
        self.view.set_body([Paragraph(text or EMPTY_GENERATION)])

    def _show_fallback(self, view_id: int, message: str) -> None:
        if not self._is_current(view_id):
            return
        paragraphs = [Paragraph(message, style="error")]
        fallback = self.state.headline.fallback_text if self.state.headline else None
        if fallback:
            paragraphs.append(Paragraph(fallback))
            paragraphs.append(Paragraph(FALLBACK_NOTE, style="note"))
            self.state.generated_text = fallback
        self.view.set_body(paragraphs)

    def ask(self, question: Optional[str]) -> Optional[str]:
        """Send a follow-up question grounded on the stored article text."""
        if not self.state.is_open or self.state.asking:
            return None
        if not question or not question.strip():
            self.view.prompt_validation(EMPTY_QUESTION_PROMPT)
            return None

        view_id = self.state.view_id
        self.state.asking = True
        self.view.set_input_enabled(False)
        try:
            answer = self.client.ask(
                question.strip(), context_prefix(self.state.generated_text)
            )
        except ProxyRequestError as exc:
            logger.error("Follow-up question failed: %s", exc)
            if self._is_current(view_id):
                message = exc.message.rstrip(".")
                self.view.show_answer_error(f"Failed to get an answer: {message}.")
            return None
        except ProxyUnavailable as exc:
            logger.error("Follow-up question failed: %s", exc)
            self.view.alert(ANSWER_UNREACHABLE)
            return None
        finally:
            self.state.asking = False
            self.view.set_input_enabled(True)
            self.view.clear_input()

        if not self._is_current(view_id):
            logger.debug("Dropping answer for stale view %s", view_id)
            return None
        self.view.show_answer(question.strip(), answer)
        return answer

    def close(self) -> None:
        self.state.view_id += 1
        self.state.headline = None
        self.state.generated_text = None
        self.state.is_open = False
        self.state.asking = False
        self.view.close()
