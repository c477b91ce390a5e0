"""Feed loading and pagination for the reader.

FeedController owns the pagination cursor and the Idle/Loading flag. Only one
headlines request may be in flight; a load requested while Loading is ignored
and yields nothing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol
from urllib.parse import urlparse

from .client import ProxyClient, ProxyRequestError, ProxyUnavailable
from .models import Headline, HeadlinesPage

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "breaking-news"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/600x300?text=No+Image+Available"
NO_NEWS_MESSAGE = "No news found from proxy. Check your backend console for errors."
UNREACHABLE_MESSAGE = (
    "Could not fetch headlines from proxy. "
    "Check if backend server is running and reachable."
)
_IMAGE_PATH = re.compile(r"\.(jpeg|jpg|gif|png|webp|svg)$", re.IGNORECASE)


def is_valid_image_url(url: Optional[str]) -> bool:
    """Absolute http(s) URL whose path ends in a known image extension."""
    if not url:
        return False
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    return bool(_IMAGE_PATH.search(url.split("?")[0]))


@dataclass(frozen=True)
class NewsCard:
    title: str
    description: str
    source_name: str
    image_url: str
    url: str
    headline: Headline


def create_news_card(headline: Headline) -> Optional[NewsCard]:
    """Return None for headlines missing a title, URL, or image."""
    if not headline.title or not headline.url or not headline.image:
        return None
    return NewsCard(
        title=headline.title,
        description=headline.description or "",
        source_name=headline.source_name or "Unknown Source",
        image_url=headline.image if is_valid_image_url(headline.image) else PLACEHOLDER_IMAGE,
        url=headline.url,
        headline=headline,
    )


@dataclass
class PaginationCursor:
    page_size: int
    page: int = 1
    total_results: int = 0

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1.")

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total_results

    def reset(self) -> None:
        self.page = 1

    def advance(self) -> None:
        self.page += 1


@dataclass(frozen=True)
class ScrollPosition:
    top: float
    visible_height: float
    total_height: float

    @property
    def at_bottom(self) -> bool:
        # One pixel of slack for fractional scroll offsets.
        return self.top + self.visible_height >= self.total_height - 1


class LoadState(Enum):
    IDLE = "idle"
    LOADING = "loading"


class FeedView(Protocol):
    def clear(self) -> None: ...

    def show_loading(self, active: bool) -> None: ...

    def append_card(self, card: NewsCard, index: int) -> None: ...

    def show_empty(self, message: str) -> None: ...

    def alert(self, message: str) -> None: ...


@dataclass
class FeedController:
    client: ProxyClient
    view: FeedView
    topic: str = DEFAULT_TOPIC
    page_size: int = 10
    state: LoadState = field(default=LoadState.IDLE, init=False)
    cards: List[NewsCard] = field(default_factory=list, init=False)
    cursor: PaginationCursor = field(init=False)

    def __post_init__(self) -> None:
        self.cursor = PaginationCursor(page_size=self.page_size)

    @property
    def is_loading(self) -> bool:
        return self.state is LoadState.LOADING

    @property
    def can_load_more(self) -> bool:
        return not self.is_loading and self.cursor.has_more

    def fetch_page(self, page: int) -> HeadlinesPage:
        """Request one page; errors are reported to the view and yield an empty page."""
        if self.is_loading:
            return HeadlinesPage()
        self.state = LoadState.LOADING
        self.view.show_loading(True)
        try:
            result = self.client.headlines(self.topic, page, self.page_size)
            self.cursor.total_results = result.total_articles
            return result
        except ProxyRequestError as exc:
            logger.error("Headlines request failed: %s", exc)
            self.view.alert(
                f"Error from Proxy (Headlines): {exc.message}. Status: {exc.status_code}"
            )
            return HeadlinesPage()
        except ProxyUnavailable as exc:
            logger.error("Headlines request failed: %s", exc)
            self.view.alert(UNREACHABLE_MESSAGE)
            return HeadlinesPage()
        finally:
            self.state = LoadState.IDLE
            self.view.show_loading(False)

    def load(self, append: bool = False) -> List[NewsCard]:
        """
        Load the cursor's current page. An initial load (append=False) resets
        the cursor to page 1 and clears the view before the request fires.
        """
        if self.is_loading:
            return []
        if not append:
            self.view.clear()
            self.cards.clear()
            self.cursor.reset()

        page = self.fetch_page(self.cursor.page)
        added: List[NewsCard] = []
        for headline in page.articles:
            card = create_news_card(headline)
            if card is None:
                continue
            self.view.append_card(card, len(self.cards))
            self.cards.append(card)
            added.append(card)

        if not page.articles and not append:
            self.view.show_empty(NO_NEWS_MESSAGE)
        return added

    def load_more(self) -> List[NewsCard]:
        if not self.can_load_more:
            return []
        self.cursor.advance()
        return self.load(append=True)

    def on_scroll(self, position: ScrollPosition) -> List[NewsCard]:
        if not position.at_bottom:
            return []
        return self.load_more()
