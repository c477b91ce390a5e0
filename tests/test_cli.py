from typer.testing import CliRunner

from fakes import FakeProxyClient, make_headline, request_error
from news_reader import cli
from news_reader.models import HeadlinesPage, ScrapeResult

runner = CliRunner()


def _install_client(monkeypatch, client):
    created = []

    def factory(base_url, **kwargs):
        created.append(base_url)
        return client

    monkeypatch.setattr(cli, "ProxyClient", factory)
    return created


def test_read_opens_card_and_asks_follow_up(monkeypatch):
    page = HeadlinesPage(articles=[make_headline(0), make_headline(1)], total_articles=2)
    client = FakeProxyClient(pages={1: page}, generated="Generated story.", answer="Short answer.")
    created = _install_client(monkeypatch, client)

    result = runner.invoke(
        cli.app,
        ["read", "--proxy-url", "http://proxy.test", "--topic", "world"],
        input="2\nWhat happened?\nback\nmore\nquit\n",
    )

    assert result.exit_code == 0, result.output
    assert created == ["http://proxy.test"]
    assert client.headline_calls == [{"topic": "world", "page": 1, "page_size": 10}]
    assert client.generate_calls[0].title == "Headline 1"
    assert client.ask_calls == [{"question": "What happened?", "context": "Generated story."}]
    assert "Short answer." in result.output
    assert "No more headlines." in result.output


def test_scrape_prints_extraction(monkeypatch):
    class ScrapeClient:
        def scrape_article(self, url):
            return ScrapeResult(
                full_content="Body [with brackets]",
                full_title="Title",
                full_image_url="https://img.example.com/a.jpg",
            )

    _install_client(monkeypatch, ScrapeClient())
    result = runner.invoke(cli.app, ["scrape", "https://news.example.com/a"])
    assert result.exit_code == 0, result.output
    assert "Body [with brackets]" in result.output
    assert "Image: https://img.example.com/a.jpg" in result.output


def test_scrape_failure_exits_nonzero(monkeypatch):
    class FailingClient:
        def scrape_article(self, url):
            raise request_error(404, "Failed to fetch article from source: Not Found")

    _install_client(monkeypatch, FailingClient())
    result = runner.invoke(cli.app, ["scrape", "https://news.example.com/missing"])
    assert result.exit_code == 1
    assert "Not Found" in result.output


def test_serve_reports_missing_settings(monkeypatch):
    def fake_run(**kwargs):
        raise ValueError("Missing required settings: GNEWS_API_KEY.")

    monkeypatch.setattr("news_reader.server.run", fake_run)
    result = runner.invoke(cli.app, ["serve"])
    assert result.exit_code == 1
    assert "GNEWS_API_KEY" in result.output
