"""Hand-rolled doubles for HTTP sessions, generators, the proxy client, and views."""

from typing import Any, Callable, Dict, List, Optional

from news_reader.client import ProxyRequestError, ProxyUnavailable
from news_reader.errors import GenerationError
from news_reader.models import Headline, HeadlinesPage


class FakeResponse:
    def __init__(self, status_code=200, json_body=None, text="", reason="OK", headers=None):
        self.status_code = status_code
        self.headers = headers or {}
        self._json = json_body
        self.text = text
        self.reason = reason

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


class FakeSession:
    """Stands in for requests.Session; replays queued responses or raises `error`."""

    def __init__(self, responses=None, error: Optional[Exception] = None):
        self.responses = list(responses or [])
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, **kwargs):
        self.calls.append({"url": url, "params": dict(params or {}), **kwargs})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


class FakeGenerator:
    def __init__(self, text: str = "Generated body.", error: Optional[str] = None):
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise GenerationError(self.error)
        return self.text


def make_headline(index: int = 0, **overrides) -> Headline:
    data = {
        "title": f"Headline {index}",
        "description": f"Description {index}",
        "content": None,
        "url": f"https://news.example.com/story-{index}",
        "image": f"https://img.example.com/story-{index}.jpg",
        "publishedAt": "2025-01-15T08:00:00Z",
        "source": {"name": "Example Wire", "url": "https://news.example.com"},
    }
    data.update(overrides)
    return Headline.model_validate(data)


class FakeProxyClient:
    """Feed/detail double. `pages` maps page number to a HeadlinesPage or exception."""

    def __init__(
        self,
        pages: Optional[Dict[int, Any]] = None,
        generated: Any = "Generated article text.",
        answer: Any = "An answer.",
    ):
        self.pages = pages or {}
        self.generated = generated
        self.answer = answer
        self.headline_calls: List[Dict[str, Any]] = []
        self.generate_calls: List[Headline] = []
        self.ask_calls: List[Dict[str, str]] = []
        self.on_headlines: Optional[Callable[[int], None]] = None
        self.on_generate: Optional[Callable[[Headline], Any]] = None

    def headlines(self, topic, page, page_size) -> HeadlinesPage:
        self.headline_calls.append({"topic": topic, "page": page, "page_size": page_size})
        if self.on_headlines:
            self.on_headlines(page)
        result = self.pages.get(page, HeadlinesPage())
        if isinstance(result, Exception):
            raise result
        return result

    def generate_article(self, headline: Headline) -> str:
        self.generate_calls.append(headline)
        if self.on_generate:
            return self.on_generate(headline)
        if isinstance(self.generated, Exception):
            raise self.generated
        return self.generated

    def ask(self, question: str, context: str) -> str:
        self.ask_calls.append({"question": question, "context": context})
        if isinstance(self.answer, Exception):
            raise self.answer
        return self.answer


def request_error(status_code=500, message="Failed to generate article content with AI."):
    return ProxyRequestError(status_code, message)


def unavailable():
    return ProxyUnavailable("Connection refused")


class RecordingFeedView:
    def __init__(self):
        self.events: List[tuple] = []
        self.cards: List[Any] = []
        self.alerts: List[str] = []

    def clear(self):
        self.events.append(("clear",))
        self.cards.clear()

    def show_loading(self, active):
        self.events.append(("loading", active))

    def append_card(self, card, index):
        self.events.append(("card", index, card.title))
        self.cards.append(card)

    def show_empty(self, message):
        self.events.append(("empty", message))

    def alert(self, message):
        self.events.append(("alert", message))
        self.alerts.append(message)


class RecordingDetailView:
    def __init__(self):
        self.headline = None
        self.body: List[Any] = []
        self.loading_message: Optional[str] = None
        self.input_enabled = True
        self.input_history: List[bool] = []
        self.input_cleared = 0
        self.answers: List[tuple] = []
        self.answer_errors: List[str] = []
        self.validations: List[str] = []
        self.alerts: List[str] = []
        self.closed = 0

    def show_headline(self, card):
        self.headline = card

    def show_body_loading(self, message):
        self.loading_message = message
        self.body = []

    def set_body(self, paragraphs):
        self.loading_message = None
        self.body = list(paragraphs)

    @property
    def body_text(self) -> str:
        return "\n".join(p.text for p in self.body)

    def set_input_enabled(self, enabled):
        self.input_enabled = enabled
        self.input_history.append(enabled)

    def clear_input(self):
        self.input_cleared += 1

    def show_answer(self, question, answer):
        self.answers.append((question, answer))

    def show_answer_error(self, message):
        self.answer_errors.append(message)

    def prompt_validation(self, message):
        self.validations.append(message)

    def alert(self, message):
        self.alerts.append(message)

    def close(self):
        self.closed += 1
        self.headline = None
        self.body = []
