import pytest
import requests

from fakes import FakeResponse, FakeSession, make_headline
from news_reader.client import ProxyClient, ProxyRequestError, ProxyUnavailable


def test_headlines_parses_page_and_sends_pagination():
    session = FakeSession(
        [
            FakeResponse(
                200,
                {
                    "totalArticles": 57,
                    "articles": [
                        {
                            "title": "A",
                            "url": "https://x.example.com/a",
                            "image": "https://x.example.com/a.jpg",
                            "source": {"name": "Wire", "url": "https://x.example.com"},
                            "publishedAt": "2025-01-15T08:00:00Z",
                        }
                    ],
                },
            )
        ]
    )
    client = ProxyClient("http://localhost:3001/", session=session)
    page = client.headlines("breaking-news", 3, 10)

    assert page.total_articles == 57
    assert page.articles[0].source_name == "Wire"
    assert page.articles[0].published_at == "2025-01-15T08:00:00Z"
    assert session.calls[0]["url"] == "http://localhost:3001/headlines"
    assert session.calls[0]["params"] == {"topic": "breaking-news", "page": 3, "max": 10}


def test_headlines_tolerates_null_fields():
    session = FakeSession([FakeResponse(200, {"articles": None, "totalArticles": None})])
    page = ProxyClient("http://proxy", session=session).headlines("world", 1, 10)
    assert page.articles == []
    assert page.total_articles == 0


def test_malformed_headlines_payload_is_unavailable():
    session = FakeSession([FakeResponse(200, {"articles": "nope", "totalArticles": 1})])
    with pytest.raises(ProxyUnavailable):
        ProxyClient("http://proxy", session=session).headlines("world", 1, 10)


def test_generate_article_sends_headline_fields():
    session = FakeSession([FakeResponse(200, {"generatedContent": "Body"})])
    client = ProxyClient("http://proxy", session=session)
    text = client.generate_article(make_headline(1, description=None))

    assert text == "Body"
    assert session.calls[0]["params"] == {
        "title": "Headline 1",
        "description": "",
        "sourceName": "Example Wire",
    }


def test_error_body_becomes_request_error():
    session = FakeSession(
        [
            FakeResponse(
                500,
                {"error": "Failed to get AI answer.", "details": "quota"},
                reason="Internal Server Error",
            )
        ]
    )
    with pytest.raises(ProxyRequestError) as excinfo:
        ProxyClient("http://proxy", session=session).ask("Why?", "ctx")
    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "Failed to get AI answer."
    assert excinfo.value.details == "quota"


def test_non_json_error_uses_status_reason():
    session = FakeSession([FakeResponse(502, None, text="<html>", reason="Bad Gateway")])
    with pytest.raises(ProxyRequestError) as excinfo:
        ProxyClient("http://proxy", session=session).ask("Why?", "")
    assert excinfo.value.message == "Bad Gateway"


def test_connection_error_is_unavailable():
    session = FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(ProxyUnavailable):
        ProxyClient("http://proxy", session=session).headlines("world", 1, 10)


def test_scrape_article_maps_fields():
    session = FakeSession(
        [
            FakeResponse(
                200,
                {"fullContent": "Text", "fullTitle": "Title", "fullImageUrl": None},
            )
        ]
    )
    result = ProxyClient("http://proxy", session=session).scrape_article("https://a.example.com")
    assert result.full_content == "Text"
    assert result.full_title == "Title"
    assert result.full_image_url is None
