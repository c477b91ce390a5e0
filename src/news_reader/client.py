"""HTTP client the feed reader uses to talk to the proxy."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from .models import Headline, HeadlinesPage, ScrapeResult

logger = logging.getLogger(__name__)


class ProxyUnavailable(Exception):
    """The proxy could not be reached or answered with something other than JSON."""


class ProxyRequestError(Exception):
    """The proxy answered with a non-success status."""

    def __init__(
        self, status_code: int, message: str, details: Optional[str] = None
    ) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details


class ProxyClient:
    """Thin wrapper over the proxy's JSON endpoints. No retries, no client timeout."""

    def __init__(
        self,
        base_url: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("Proxy unreachable at %s: %s", url, exc)
            raise ProxyUnavailable(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = body.get("error") if isinstance(body, dict) else None
            details = body.get("details") if isinstance(body, dict) else None
            logger.error("Proxy %s returned %s: %s", path, response.status_code, body)
            raise ProxyRequestError(
                response.status_code, message or response.reason or "Unknown error", details
            )
        if not isinstance(body, dict):
            raise ProxyUnavailable(f"Proxy {path} returned a non-JSON body.")
        return body

    def headlines(self, topic: str, page: int, page_size: int) -> HeadlinesPage:
        body = self._get("/headlines", {"topic": topic, "page": page, "max": page_size})
        try:
            return HeadlinesPage.model_validate(body)
        except ValidationError as exc:
            raise ProxyUnavailable(f"Malformed headlines payload: {exc}") from exc

    def generate_article(self, headline: Headline) -> str:
        body = self._get(
            "/generate-article",
            {
                "title": headline.title or "",
                "description": headline.description or "",
                "sourceName": headline.source_name or "",
            },
        )
        return body.get("generatedContent") or ""

    def ask(self, question: str, context: str) -> str:
        body = self._get("/ask", {"question": question, "context": context})
        return body.get("answer") or ""

    def scrape_article(self, url: str) -> ScrapeResult:
        return ScrapeResult.model_validate(self._get("/scrape-article", {"url": url}))
