"""Fetch an article page and pull out its main text, title, and lead image.

Extraction is heuristic: the first selector in ARTICLE_SELECTORS with any text
wins, and pages with none of them degrade to a prefix of the body text.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from .errors import BlockedURL, UpstreamError
from .models import ScrapeResult

logger = logging.getLogger(__name__)

ARTICLE_SELECTORS = (
    "article",
    "div.entry-content",
    "div.article-body",
    "div.post-content",
    'div[itemprop="articleBody"]',
    "div.story-content",
    "div.main-content",
    "div.content-main",
)
IMAGE_SELECTORS = (
    ('meta[property="og:image"]', "content"),
    ('meta[name="twitter:image"]', "content"),
    ('img[itemprop="image"]', "src"),
)
NON_CONTENT_TAGS = ["script", "style", "noscript", "template"]
FALLBACK_CHARS = 1000
FALLBACK_NOTICE = "... (Could not find specific article content)"
USER_AGENT = "Mozilla/5.0 (compatible; NewsReaderProxy/1.0)"

_WHITESPACE_RUN = re.compile(r"\s{2,}")

MAX_REDIRECTS = 5
REDIRECT_STATUSES = (301, 302, 303, 307, 308)


def _is_private_ip(hostname: str) -> bool:
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    if getattr(ip, "ipv4_mapped", None) is not None:
        ip = ip.ipv4_mapped
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_unspecified
        or ip.is_reserved
        or ip.is_multicast
    )


def validate_fetch_url(url: str) -> Optional[str]:
    """Return a reason string if the URL should not be fetched, else None."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return "invalid_url"
    if parsed.scheme not in ("http", "https"):
        return "bad_scheme"
    host = (parsed.hostname or "").strip().lower()
    if not host:
        return "missing_host"
    if host in ("localhost", "localhost.localdomain"):
        return "blocked_host"
    if _is_private_ip(host):
        return "blocked_private_ip"
    return None


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def _main_content(soup: BeautifulSoup) -> str:
    for selector in ARTICLE_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = collapse_whitespace(element.get_text(" "))
        if text:
            return text

    root = soup.body or soup
    body_text = collapse_whitespace(root.get_text(" "))
    return body_text[:FALLBACK_CHARS] + FALLBACK_NOTICE


def _image_url(soup: BeautifulSoup, page_url: str) -> Optional[str]:
    image = None
    for selector, attr in IMAGE_SELECTORS:
        element = soup.select_one(selector)
        value = element.get(attr) if element is not None else None
        if value and value.strip():
            image = value.strip()
            break
    if image and not image.startswith("http"):
        image = urljoin(page_url, image)
    return image


def _title(soup: BeautifulSoup) -> Optional[str]:
    og_title = soup.select_one('meta[property="og:title"]')
    if og_title is not None and (og_title.get("content") or "").strip():
        return og_title["content"].strip()
    heading = soup.find("h1")
    if heading is not None and heading.get_text(strip=True):
        return heading.get_text(" ", strip=True)
    if soup.title is not None and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    return None


def extract_article(html: str, page_url: str) -> ScrapeResult:
    """Parse fetched HTML into a ScrapeResult; never raises on odd markup."""
    soup = BeautifulSoup(html, "html.parser")
    # Metadata lives in <head>, so read it before stripping non-content tags.
    image = _image_url(soup, page_url)
    title = _title(soup)
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()
    return ScrapeResult(
        full_content=_main_content(soup),
        full_title=title,
        full_image_url=image,
    )


class ArticleScraper:
    def __init__(
        self, *, timeout: float = 10.0, session: Optional[requests.Session] = None
    ) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    def _refuse(self, url: str, reason: str) -> BlockedURL:
        logger.warning("Refusing to scrape %s (%s)", url, reason)
        return BlockedURL("Article URL is not allowed", details=reason)

    def _fetch(self, url: str) -> tuple[requests.Response, str]:
        """
        Follow redirects by hand so every hop is screened before it is requested.
        Returns the final response and the URL it was served from.
        """
        current = url
        for _ in range(MAX_REDIRECTS + 1):
            reason = validate_fetch_url(current)
            if reason:
                raise self._refuse(current, reason)
            try:
                response = self._session.get(
                    current,
                    headers={"User-Agent": USER_AGENT},
                    timeout=self._timeout,
                    allow_redirects=False,
                )
            except requests.RequestException as exc:
                logger.error("Scrape of %s failed: %s", current, exc)
                raise UpstreamError(
                    "Failed to scrape article content", details=str(exc)
                ) from exc

            location = response.headers.get("Location")
            if response.status_code not in REDIRECT_STATUSES or not location:
                return response, current
            current = urljoin(current, location)
            logger.info("Following redirect to %s", current)

        logger.error("Scrape of %s exceeded %s redirects", url, MAX_REDIRECTS)
        raise UpstreamError(
            "Failed to scrape article content", details="too_many_redirects"
        )

    def scrape(self, url: str) -> ScrapeResult:
        logger.info("Scraping %s", url)
        response, final_url = self._fetch(url)
        if not response.ok:
            logger.error("Scrape of %s returned HTTP %s", final_url, response.status_code)
            raise UpstreamError(
                f"Failed to fetch article from source: {response.reason}",
                status_code=response.status_code,
            )
        return extract_article(response.text, final_url)
