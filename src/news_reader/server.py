"""FastAPI proxy that hides provider keys from the browser and terminal clients."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, configure_logging, get_settings
from .errors import GenerationError, ProxyError, UpstreamError, ValidationFailed
from .generation import (
    TextGenerator,
    build_article_prompt,
    build_generator,
    build_question_prompt,
)
from .headlines import HeadlinesProvider
from .scraper import ArticleScraper

logger = logging.getLogger(__name__)

router = APIRouter()


def _add_cors(app: FastAPI, settings: Settings) -> None:
    """Only the configured frontend origins may call the proxy from a browser."""
    origins = settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Starlette/FastAPI disallow wildcard origins when credentials are enabled.
        allow_credentials="*" not in origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(piece) for piece in err.get("loc", ()) if piece != "query")
        parts.append(f"{location or '<root>'}: {err.get('msg')}")
    return "; ".join(parts)


async def _proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    body = ValidationFailed(
        "Invalid request parameters", details=_format_validation_errors(exc)
    ).to_body()
    return JSONResponse(status_code=400, content=body)


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/headlines")
def headlines(
    request: Request,
    topic: str = "breaking-news",
    page: int = Query(1, ge=1),
    max_results: int = Query(10, ge=1, alias="max"),
) -> JSONResponse:
    """Relay one page of GNews top headlines unchanged."""
    data = request.app.state.headlines.top_headlines(topic, page, max_results)
    return JSONResponse(content=data)


@router.get("/generate-article")
def generate_article(
    request: Request,
    title: Optional[str] = None,
    description: Optional[str] = None,
    source_name: Optional[str] = Query(None, alias="sourceName"),
) -> Dict[str, Any]:
    if not title or not title.strip():
        raise ValidationFailed("Title is required to generate article content.")

    generator: TextGenerator = request.app.state.generator
    logger.info("Generating article for: %s", title[:50])
    try:
        text = generator.generate(build_article_prompt(title, description, source_name))
    except GenerationError as exc:
        logger.error("Article generation failed: %s", exc)
        raise UpstreamError(
            "Failed to generate article content with AI.", details=str(exc)
        ) from exc
    return {"generatedContent": text}


@router.get("/ask")
def ask(
    request: Request,
    question: Optional[str] = None,
    context: str = "",
) -> Dict[str, Any]:
    """Answer a follow-up question; the article context is background only."""
    if not question or not question.strip():
        raise ValidationFailed("Question is required.")

    generator: TextGenerator = request.app.state.generator
    logger.info("Answering question: %s", question[:50])
    try:
        answer = generator.generate(build_question_prompt(question, context))
    except GenerationError as exc:
        logger.error("Follow-up answer failed: %s", exc)
        raise UpstreamError("Failed to get AI answer.", details=str(exc)) from exc
    return {"answer": answer}


@router.get("/scrape-article")
def scrape_article(request: Request, url: Optional[str] = None) -> Dict[str, Any]:
    if not url or not url.strip():
        raise ValidationFailed("Article URL is required")
    result = request.app.state.scraper.scrape(url.strip())
    return result.model_dump(by_alias=True)


def create_app(
    settings: Optional[Settings] = None,
    *,
    generator: Optional[TextGenerator] = None,
    headlines_provider: Optional[HeadlinesProvider] = None,
    scraper: Optional[ArticleScraper] = None,
) -> FastAPI:
    """
    Build the proxy app. Settings are validated here so a misconfigured
    deployment fails at startup instead of on the first request.
    """
    settings = settings or get_settings()
    settings.require_credentials()

    app = FastAPI(title="News Reader Proxy")
    _add_cors(app, settings)
    app.add_exception_handler(ProxyError, _proxy_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.state.settings = settings
    app.state.headlines = headlines_provider or HeadlinesProvider(
        settings.gnews_api_key.get_secret_value(),
        settings.gnews_base_url,
        timeout=settings.upstream_timeout,
    )
    app.state.generator = generator or build_generator(settings)
    app.state.scraper = scraper or ArticleScraper(timeout=settings.scrape_timeout)
    app.include_router(router)
    return app


def run(
    host: Optional[str] = None, port: Optional[int] = None, reload: bool = False
) -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    settings.require_credentials()
    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info("Proxy listening on http://%s:%s", bind_host, bind_port)
    logger.info("Allowed origins: %s", ", ".join(settings.allowed_origins) or "<none>")
    uvicorn.run(
        "news_reader.server:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
