"""Prompt construction and text-generation backends.

Gemini is the default backend and is called with every harm category set to
BLOCK_NONE so that hard news (violence, crime, politics) is not refused. An
OpenAI backend is available through `GENERATION_PROVIDER=openai`.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import google.generativeai as genai
from google.generativeai.types import HarmBlockThreshold, HarmCategory
from openai import OpenAI

from .config import Settings
from .errors import GenerationError
from .models import context_prefix

logger = logging.getLogger(__name__)

SAFETY_SETTINGS = {
    HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
    HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
}

ARTICLE_PROMPT = (
    "Based on the following news headline and brief description, generate a concise "
    "yet comprehensive news article (around 200-300 words) that provides context, key "
    "details, and potential implications. Focus on factual reporting. Do not include a "
    'conversational intro like "Here\'s an article..." or "This article details...". '
    "Just provide the news content.\n\n"
    'Headline: "{title}"\n'
    'Description: "{description}"\n'
    "Source (for context, if available): {source}\n\n"
    "Generated Article:\n"
)

QUESTION_PROMPT = (
    "Answer the following question. Use your general knowledge to provide a "
    "comprehensive and helpful response. If the question is ambiguous, provide a "
    "balanced answer.\n\n"
    'Question: "{question}"\n\n'
    "(Context related to the current news article, if helpful: {context}...)\n\n"
    "Answer:\n"
)


def build_article_prompt(
    title: str, description: Optional[str] = None, source_name: Optional[str] = None
) -> str:
    return ARTICLE_PROMPT.format(
        title=title,
        description=description or "No specific description provided, infer from headline.",
        source=source_name or "Unknown",
    )


def build_question_prompt(question: str, context: Optional[str] = None) -> str:
    return QUESTION_PROMPT.format(question=question, context=context_prefix(context))


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:  # pragma: no cover - interface
        ...


class GeminiGenerator:
    def __init__(self, *, api_key: str, model: str, timeout: float) -> None:
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model)
        self._timeout = timeout

    def generate(self, prompt: str) -> str:
        try:
            response = self._model.generate_content(
                prompt,
                safety_settings=SAFETY_SETTINGS,
                request_options={"timeout": self._timeout},
            )
            # `.text` raises ValueError when the candidate was blocked or empty.
            text = response.text
        except Exception as exc:
            raise GenerationError(str(exc) or type(exc).__name__) from exc
        if not text or not text.strip():
            raise GenerationError("Gemini returned an empty response.")
        return text


def build_client(api_key: Optional[str] = None, timeout: Optional[float] = None) -> OpenAI:
    """Create an OpenAI client; separated for easier testing."""
    return OpenAI(api_key=api_key, timeout=timeout)


class OpenAIGenerator:
    def __init__(self, *, client: OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    def generate(self, prompt: str) -> str:
        try:
            response = self._client.responses.create(
                model=self._model,
                input=[{"role": "user", "content": prompt}],
            )
        except Exception as exc:
            raise GenerationError(str(exc) or type(exc).__name__) from exc
        return _response_text_or_raise(response)


def _response_text_or_raise(response: object) -> str:
    """Extract response text or raise a clear error when output is missing."""
    text = getattr(response, "output_text", None)
    if isinstance(text, str) and text.strip():
        return text

    status = getattr(response, "status", None)
    if status == "incomplete":
        details = getattr(response, "incomplete_details", None)
        reason = getattr(details, "reason", None) if details else None
        raise GenerationError(f"OpenAI response incomplete (reason={reason}).")

    err = getattr(response, "error", None)
    if err:
        raise GenerationError(f"OpenAI response error: {err}")
    raise GenerationError("OpenAI returned an empty response.")


def build_generator(settings: Settings) -> TextGenerator:
    """Instantiate the backend named by GENERATION_PROVIDER."""
    provider = settings.provider
    logger.info("Using %s text generation with model %s", provider, settings.model_name)
    if provider == "gemini":
        return GeminiGenerator(
            api_key=settings.gemini_api_key.get_secret_value(),
            model=settings.model_name,
            timeout=settings.upstream_timeout,
        )
    if provider == "openai":
        client = build_client(
            settings.openai_api_key.get_secret_value(), timeout=settings.upstream_timeout
        )
        return OpenAIGenerator(client=client, model=settings.model_name)
    raise ValueError(f"Unknown generation provider: {settings.generation_provider!r}")
