"""GNews top-headlines client used by the proxy."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .errors import UpstreamError

logger = logging.getLogger(__name__)

HEADLINES_ERROR = "Failed to fetch news from GNews API"


class HeadlinesProvider:
    """Attach the GNews token to a top-headlines query and return the raw JSON."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()

    def top_headlines(self, topic: str, page: int, max_results: int) -> Dict[str, Any]:
        params = {
            "topic": topic,
            "lang": "en",
            "max": max_results,
            "page": page,
            "token": self._api_key,
        }
        logger.info("Fetching headlines topic=%s page=%s max=%s", topic, page, max_results)
        try:
            response = self._session.get(self._base_url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            # Exception text can embed the request URL, which carries the token.
            logger.error("GNews request failed: %s", type(exc).__name__)
            raise UpstreamError(HEADLINES_ERROR) from exc

        if not response.ok:
            logger.error("GNews returned HTTP %s", response.status_code)
            raise UpstreamError(HEADLINES_ERROR)
        try:
            return response.json()
        except ValueError as exc:
            logger.error("GNews returned a non-JSON body")
            raise UpstreamError(HEADLINES_ERROR) from exc
